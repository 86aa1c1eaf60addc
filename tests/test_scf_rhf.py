"""RHF 自洽场端到端测试

参考值：Szabo & Ostlund (1996)，H2 与 HeH⁺ 的 STO-3G 计算；
水分子使用 Crawford 编程项目的 STO-3G 几何与能量。
"""

import numpy as np
import pytest

from molscf import Molecule, RHFConfig, SCFConvergenceError, SCFDriver, run_rhf, sto3g_basis
from molscf.energy import nuclear_repulsion
from molscf.guess import initial_fock
from molscf.integrals import core_hamiltonian, eri_tensor, overlap_matrix
from molscf.scf import SCFStatus


def _h2() -> Molecule:
    return Molecule.from_atoms([("H", (0.0, 0.0, 0.0)), ("H", (0.0, 0.0, 1.4))])


def _heh_cfg(**kw) -> RHFConfig:
    mol = Molecule.from_atoms([("He", (0.0, 0.0, 0.0)), ("H", (0.0, 0.0, 1.4632))], charge=1)
    basis = sto3g_basis(mol, zeta={2: (2.0925, None)})
    return RHFConfig(molecule=mol, basis=basis, **kw)


def _driver(mol: Molecule, **kw) -> SCFDriver:
    basis = sto3g_basis(mol)
    S = overlap_matrix(basis)
    H = core_hamiltonian(basis, mol)
    return SCFDriver(
        h_core=H,
        overlap=S,
        eri=eri_tensor(basis),
        n_electrons=mol.n_electrons,
        guess_fock=initial_fock("core", H),
        nuclear_repulsion=nuclear_repulsion(mol),
        **kw,
    )


@pytest.mark.scf
@pytest.mark.quick
def test_h2_sto3g_energy():
    res = run_rhf(RHFConfig(molecule=_h2()))
    assert res.converged
    assert np.isclose(res.nuclear_repulsion, 1.0 / 1.4)
    assert np.isclose(res.energy, -1.1167, atol=2e-4)
    # 成键轨道能 ε1 ≈ -0.578，反键 ε2 ≈ 0.670
    assert np.isclose(res.orbital_energies[0], -0.578, atol=2e-3)
    assert np.isclose(res.orbital_energies[1], 0.670, atol=2e-3)


@pytest.mark.scf
@pytest.mark.quick
def test_heh_cation_energy():
    res = run_rhf(_heh_cfg())
    assert res.converged
    assert np.isclose(res.energy, -2.860662, atol=1e-4)


@pytest.mark.scf
def test_guess_and_diis_do_not_change_converged_energy():
    energies = [
        run_rhf(_heh_cfg(guess=guess, use_diis=use_diis)).energy
        for guess in ("core", "huckel")
        for use_diis in (True, False)
    ]
    assert np.allclose(energies, energies[0], atol=1e-6)


@pytest.mark.scf
def test_density_integrates_to_electron_count():
    mol = Molecule.from_atoms([("Li", (0.0, 0.0, 0.0)), ("H", (0.0, 0.0, 3.015))])
    res = run_rhf(RHFConfig(molecule=mol))
    S = overlap_matrix(sto3g_basis(mol))
    assert np.isclose(np.trace(res.density @ S), 4.0, atol=1e-8)
    assert np.isclose(res.energy, res.electronic_energy + res.nuclear_repulsion)
    # 轨道能升序
    assert np.all(np.diff(res.orbital_energies) >= 0.0)


@pytest.mark.scf
@pytest.mark.quick
def test_maxiter_exhausted_raises():
    driver = _driver(_h2(), maxiter=1)
    with pytest.raises(SCFConvergenceError) as exc:
        driver.run()
    assert exc.value.iterations == 1
    assert exc.value.last_rms > driver.tol
    assert driver.state.status is SCFStatus.FAILED
    assert not driver.state.converged


@pytest.mark.scf
@pytest.mark.quick
def test_repeated_runs_start_fresh():
    driver = _driver(_h2())
    st1 = driver.run()
    it1, E1, hist1 = st1.iteration, driver.energy, list(driver.history)
    st2 = driver.run()
    assert st2 is not st1
    assert st2.iteration == it1
    assert driver.energy == E1
    assert driver.history == hist1
    assert st2.status is SCFStatus.CONVERGED


@pytest.mark.scf
@pytest.mark.diis
def test_diis_activation_is_recorded():
    res = run_rhf(_heh_cfg(use_diis=True))
    assert res.diis_iteration is not None
    assert res.diis_iteration >= 2
    assert res.diis_iteration <= res.iterations
    res_plain = run_rhf(_heh_cfg(use_diis=False))
    assert res_plain.diis_iteration is None


@pytest.mark.scf
@pytest.mark.quick
def test_driver_validation():
    mol = _h2()
    basis = sto3g_basis(mol)
    S = overlap_matrix(basis)
    H = core_hamiltonian(basis, mol)
    eri = eri_tensor(basis)
    with pytest.raises(ValueError):
        SCFDriver(H, S, eri, 3, H)
    with pytest.raises(ValueError):
        SCFDriver(H, S, eri, 6, H)
    with pytest.raises(ValueError):
        SCFDriver(H, S, eri[:1], 2, H)
    with pytest.raises(ValueError):
        SCFDriver(H, S, eri, 2, H, maxiter=0)


@pytest.mark.scf
def test_verbose_progress_output(capsys):
    run_rhf(RHFConfig(molecule=_h2()), verbose=True)
    out = capsys.readouterr().out
    assert "[RHF] iter=1" in out
    assert "收敛" in out


@pytest.mark.scf
@pytest.mark.slow
def test_water_sto3g_energy():
    mol = Molecule.from_atoms(
        [
            ("O", (0.0, -0.143225816552, 0.0)),
            ("H", (1.638036840407, 1.136548822547, 0.0)),
            ("H", (-1.638036840407, 1.136548822547, 0.0)),
        ]
    )
    res = run_rhf(RHFConfig(molecule=mol))
    assert res.converged
    assert np.isclose(res.nuclear_repulsion, 8.002367061810450, atol=1e-8)
    assert np.isclose(res.energy, -74.942079928, atol=1e-4)


@pytest.mark.scf
@pytest.mark.diis
def test_density_change_non_increasing_after_diis():
    """HeH⁺（两基函数）：DIIS 激活后密度 RMS 变化逐步不增。"""
    res = run_rhf(_heh_cfg())
    assert res.diis_iteration is not None
    tail = res.history[res.diis_iteration - 1 :]
    assert len(tail) >= 2
    for a, b in zip(tail, tail[1:]):
        assert b <= a, f"DIIS 激活后 RMS 上升: {tail}"


@pytest.mark.scf
@pytest.mark.diis
def test_default_diis_capacity_matches_error_dimension():
    """两基函数体系误差只有一个独立分量，默认历史容量为 2。"""
    driver = _driver(_h2())
    assert driver.diis.max_vectors == 2
    res_default = run_rhf(_heh_cfg())
    res_plain = run_rhf(_heh_cfg(use_diis=False))
    assert res_default.iterations <= res_plain.iterations


@pytest.mark.scf
@pytest.mark.quick
def test_printed_energy_matches_converged_energy(capsys):
    """收敛步打印的 E 与 E_total 一致（均由 P_old 与 F 计算）。"""
    res = run_rhf(_heh_cfg(), verbose=True)
    lines = [ln for ln in capsys.readouterr().out.splitlines() if " dP_rms=" in ln]
    last = lines[-1]
    assert last.startswith(f"[RHF] iter={res.iterations} ")
    assert last.endswith(f"E={res.energy:.10f}")
