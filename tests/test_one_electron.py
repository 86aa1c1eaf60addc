"""单电子积分单元测试：重叠、动能、核心哈密顿"""

import numpy as np
import pytest

from molscf.basis import GaussianPrimitive, Molecule, sto3g_basis
from molscf.integrals import core_hamiltonian, kinetic_matrix, overlap_matrix
from molscf.integrals.one_electron import kinetic_primitive, overlap_primitive


@pytest.fixture
def h2_basis():
    mol = Molecule.from_atoms([("H", (0.0, 0.0, 0.0)), ("H", (0.0, 0.0, 1.4))])
    return mol, sto3g_basis(mol)


@pytest.mark.integrals
@pytest.mark.quick
@pytest.mark.parametrize("lmn", [(0, 0, 0), (0, 0, 1), (1, 1, 0), (2, 0, 0), (1, 0, 2)])
def test_primitive_self_overlap_is_one(lmn):
    g = GaussianPrimitive(0.73, (0.1, -0.2, 0.3), lmn)
    assert np.isclose(overlap_primitive(g, g), 1.0, rtol=1e-12)


@pytest.mark.integrals
@pytest.mark.quick
def test_kinetic_closed_forms():
    """同中心同指数：s 函数 T = 3α/2，p 函数 T = 5α/2。"""
    alpha = 1.3
    s = GaussianPrimitive(alpha, (0.0, 0.0, 0.0), (0, 0, 0))
    pz = GaussianPrimitive(alpha, (0.0, 0.0, 0.0), (0, 0, 1))
    assert np.isclose(kinetic_primitive(s, s), 1.5 * alpha, rtol=1e-12)
    assert np.isclose(kinetic_primitive(pz, pz), 2.5 * alpha, rtol=1e-12)


@pytest.mark.integrals
def test_kinetic_hermitian_off_center():
    """升降阶只作用在右矢，结果仍须满足 T_ab = T_ba。"""
    a = GaussianPrimitive(0.6, (0.0, 0.3, -0.2), (2, 0, 1))
    b = GaussianPrimitive(1.4, (0.5, -0.4, 0.8), (0, 1, 1))
    assert np.isclose(kinetic_primitive(a, b), kinetic_primitive(b, a), rtol=1e-10)


@pytest.mark.integrals
@pytest.mark.quick
def test_h2_szabo_reference_values(h2_basis):
    """H2 (R=1.4, STO-3G)，与 Szabo–Ostlund 第 3.5.2 节的矩阵元比较。"""
    mol, basis = h2_basis
    S = overlap_matrix(basis)
    T = kinetic_matrix(basis)
    H = core_hamiltonian(basis, mol)

    assert np.isclose(S[0, 0], 1.0, atol=1e-4)
    assert np.isclose(S[0, 1], 0.6593, atol=1e-4)
    assert np.isclose(T[0, 0], 0.7600, atol=1e-4)
    assert np.isclose(T[0, 1], 0.2365, atol=1e-4)
    assert np.isclose(H[0, 0], -1.1204, atol=1e-4)
    assert np.isclose(H[0, 1], -0.9584, atol=1e-4)
    assert np.allclose(H, H.T)


@pytest.mark.integrals
def test_sto3g_contracted_functions_nearly_normalized():
    """STO-3G 收缩系数作用于归一化原函数，收缩函数近似归一。"""
    mol = Molecule.from_atoms([("N", (0.0, 0.0, 0.0))], charge=1)
    S = overlap_matrix(sto3g_basis(mol))
    assert S.shape == (5, 5)
    assert np.allclose(np.diag(S), 1.0, atol=1e-3)
    # 同中心 s 与 p 正交，p 分量之间正交
    assert np.allclose(S[:2, 2:], 0.0, atol=1e-14)
    assert np.allclose(S[2:, 2:], np.eye(3), atol=1e-3)


@pytest.mark.integrals
def test_overlap_positive_definite_for_water():
    mol = Molecule.from_atoms(
        [("O", (0.0, -0.143225816552, 0.0)), ("H", (1.638036840407, 1.136548822547, 0.0)),
         ("H", (-1.638036840407, 1.136548822547, 0.0))]
    )
    S = overlap_matrix(sto3g_basis(mol))
    assert np.allclose(S, S.T)
    assert np.linalg.eigvalsh(S).min() > 0.0
