r"""限制性 Hartree-Fock（RHF）自洽场

求解 Roothaan 方程 :math:`FC = SC\varepsilon` 的不动点迭代。

单步流程
========

1. 非首步：由上一步密度 :math:`P_{old}` 与电子排斥张量构造
   :math:`G`，:math:`F = H^{core} + G`（首步使用初始猜测）
2. 若 DIIS 已激活：以外推 Fock 矩阵替换 :math:`F`
3. 正交基变换 :math:`F' = X^\mathsf{T} F X`
4. 对角化 :math:`F' C' = C' \varepsilon`
5. 回到原基 :math:`C = X C'`
6. 由最低 :math:`N_e/2` 个轨道构造 :math:`P_{new}`
7. 收敛判据：:math:`\mathrm{rms}(P_{new} - P_{old}) < \mathrm{tol}`

DIIS 激活规则：未激活时，每次构造 Fock 矩阵后计算对易子误差的最大元素，
低于阈值（默认 0.1）后永久激活。

状态机
======

``INITIALIZING → ITERATING → CONVERGED``，或达到最大迭代数后
``ITERATING → FAILED``（抛出 :class:`SCFConvergenceError`，不返回部分结果）。

References
----------
.. [SzaboOstlund] Szabo & Ostlund (1996)
   "Modern Quantum Chemistry"
   Dover, Chapter 3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .basis import BasisSet, Molecule, sto3g_basis
from .diis import DIIS
from .energy import electronic_energy, nuclear_repulsion
from .guess import HUCKEL_K, initial_fock
from .integrals import core_hamiltonian, eri_tensor, overlap_matrix, two_electron_matrix
from .io import format_matrix
from .linalg import density_matrix, density_rms, diagonalize, orthogonalizer

__all__ = [
    "SCFStatus",
    "SCFState",
    "SCFConvergenceError",
    "SCFDriver",
    "RHFConfig",
    "RHFResult",
    "run_rhf",
]


class SCFStatus(Enum):
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    CONVERGED = "converged"
    FAILED = "failed"


class SCFConvergenceError(RuntimeError):
    """SCF 在最大迭代数内未收敛。

    与积分指标错误（:class:`~molscf.integrals.IntegralIndexError`）及 DIIS
    奇异方程组（``scipy.linalg.LinAlgError``）相区分，便于调用方决定是否
    更换初始猜测或开启 DIIS 后重试。
    """

    def __init__(self, iterations: int, last_rms: float) -> None:
        super().__init__(f"SCF 未收敛：{iterations} 次迭代后密度 RMS 变化 {last_rms:.3e}")
        self.iterations = iterations
        self.last_rms = last_rms


@dataclass
class SCFState:
    r"""一次 SCF 运行的可变状态（每次运行重新创建）。

    Attributes
    ----------
    density : numpy.ndarray
        当前密度矩阵 :math:`P`。
    fock : numpy.ndarray
        当前 Fock 矩阵（首步前为初始猜测）。
    orbital_energies : numpy.ndarray
        轨道能 :math:`\varepsilon`（长度 :math:`K_f`）。
    coefficients : numpy.ndarray
        原基下的轨道系数 :math:`C`。
    iteration : int
        已完成的迭代数（单调递增）。
    converged : bool
        是否已收敛（至多由 False 变为 True 一次）。
    diis_active : bool
        DIIS 是否已激活（单向）。
    status : SCFStatus
        状态机当前状态。
    """

    density: np.ndarray
    fock: np.ndarray
    orbital_energies: np.ndarray
    coefficients: np.ndarray
    iteration: int = 0
    converged: bool = False
    diis_active: bool = False
    status: SCFStatus = SCFStatus.INITIALIZING


class SCFDriver:
    r"""RHF 不动点迭代驱动器。

    驱动器只依赖已构造好的矩阵，与基组/几何无关。每次 :meth:`run` 都会
    新建 :class:`SCFState` 与 DIIS 历史，不保留上一次运行的状态。

    Parameters
    ----------
    h_core : numpy.ndarray
        核心哈密顿。
    overlap : numpy.ndarray
        重叠矩阵 :math:`S`。
    eri : numpy.ndarray
        电子排斥张量 :math:`(ij|kl)`。
    n_electrons : int
        电子数（偶数）。
    guess_fock : numpy.ndarray
        初始 Fock 矩阵。
    nuclear_repulsion : float
        核排斥能（仅用于报告总能量）。
    use_diis : bool
        是否允许 DIIS。
    diis_threshold : float
        DIIS 激活阈值（误差最大元素）。
    diis_max_vectors : int | None
        DIIS 历史容量；``None`` 取 :func:`~molscf.diis.default_capacity`。
    tol : float
        密度 RMS 收敛阈值。
    maxiter : int
        最大迭代数。
    verbose : bool | int
        ``True``/1 打印进度；2 额外打印中间矩阵。
    progress_every : int
        进度打印间隔。
    labels : list[str] | None
        基函数标签（打印矩阵用）。
    """

    def __init__(
        self,
        h_core: np.ndarray,
        overlap: np.ndarray,
        eri: np.ndarray,
        n_electrons: int,
        guess_fock: np.ndarray,
        nuclear_repulsion: float = 0.0,
        use_diis: bool = True,
        diis_threshold: float = 0.1,
        diis_max_vectors: int | None = None,
        tol: float = 1e-6,
        maxiter: int = 1000,
        verbose: bool | int = False,
        progress_every: int = 10,
        labels: list[str] | None = None,
    ) -> None:
        Kf = h_core.shape[0]
        if h_core.shape != (Kf, Kf) or overlap.shape != (Kf, Kf) or guess_fock.shape != (Kf, Kf):
            raise ValueError("H_core、S 与初始 Fock 矩阵必须为相同形状的方阵")
        if eri.shape != (Kf, Kf, Kf, Kf):
            raise ValueError(f"ERI 张量形状 {eri.shape} 与基组大小 {Kf} 不匹配")
        if n_electrons % 2 != 0:
            raise ValueError(f"RHF 仅支持闭壳层（偶数电子），当前电子数: {n_electrons}")
        if n_electrons // 2 > Kf:
            raise ValueError(f"占据轨道数 {n_electrons // 2} 超过基函数数 {Kf}")
        if tol <= 0.0:
            raise ValueError(f"收敛阈值必须为正，当前值: {tol}")
        if maxiter < 1:
            raise ValueError(f"最大迭代数必须 >= 1，当前值: {maxiter}")

        self.H = h_core
        self.S = overlap
        self.X = orthogonalizer(overlap)
        self.eri = eri
        self.n_electrons = n_electrons
        self.guess_fock = guess_fock
        self.e_nuc = nuclear_repulsion
        self.use_diis = use_diis
        self.diis_threshold = diis_threshold
        self.diis_max_vectors = diis_max_vectors
        self.tol = tol
        self.maxiter = maxiter
        self.verbose = int(verbose)
        self.progress_every = progress_every
        self.labels = labels

        self._reset()

    def _reset(self) -> None:
        Kf = self.H.shape[0]
        self.state = SCFState(
            density=np.zeros((Kf, Kf)),
            fock=np.array(self.guess_fock, dtype=float, copy=True),
            orbital_energies=np.zeros(Kf),
            coefficients=np.zeros((Kf, Kf)),
        )
        self.diis = DIIS(self.S, self.X, self.diis_max_vectors)
        self.history: list[float] = []
        self.energy_history: list[float] = []
        self.diis_iteration: int | None = None
        self.energy: float | None = None
        self.electronic_energy: float | None = None

    def _show(self, title: str, m: np.ndarray) -> None:
        if self.verbose >= 2:
            print(f"[RHF] {title}:")
            print(format_matrix(m, self.labels))

    def step(self) -> float:
        """执行一步 SCF，返回密度 RMS 变化。"""
        st = self.state
        st.status = SCFStatus.ITERATING
        st.iteration += 1
        P_old = st.density

        if st.iteration > 1:
            self._show("密度矩阵 P", P_old)
            G = two_electron_matrix(P_old, self.eri)
            self._show("双电子矩阵 G", G)
            F = self.H + G
            if self.use_diis and not st.diis_active:
                err = self.diis.max_error(F, P_old)
                if err < self.diis_threshold:
                    st.diis_active = True
                    self.diis_iteration = st.iteration
                    if self.verbose:
                        print(f"[RHF] iter={st.iteration} 启用 DIIS（max|e|={err:.3e}）")
        else:
            F = st.fock

        if st.diis_active:
            F = self.diis.update(F, P_old)
        self._show("Fock 矩阵 F", F)

        Fx = self.X.T @ F @ self.X
        Cx, eps = diagonalize(Fx)
        C = self.X @ Cx
        self._show("轨道系数 C", C)
        P_new = density_matrix(C, self.n_electrons)

        rms = density_rms(P_old, P_new)
        self.history.append(rms)
        # F 由 P_old 构造，能量按二者配对
        E_el = electronic_energy(P_old, F, self.H)
        self.energy_history.append(E_el + self.e_nuc)
        st.fock = F
        st.orbital_energies = eps
        st.coefficients = C

        if rms < self.tol:
            st.converged = True
            st.status = SCFStatus.CONVERGED
            self.electronic_energy = E_el
            self.energy = self.energy_history[-1]

        st.density = P_new
        return rms

    def run(self) -> SCFState:
        """迭代至收敛；超出最大迭代数时抛出 :class:`SCFConvergenceError`。"""
        self._reset()
        st = self.state
        st.status = SCFStatus.ITERATING
        rms = float("inf")
        while st.iteration < self.maxiter:
            rms = self.step()
            if self.verbose and (st.iteration == 1 or st.iteration % self.progress_every == 0 or st.converged):
                print(f"[RHF] iter={st.iteration} dP_rms={rms:.3e} E={self.energy_history[-1]:.10f}")
            if st.converged:
                if self.verbose:
                    print(f"[RHF] 收敛：{st.iteration} 次迭代，E_total={self.energy:.10f} Ha")
                return st
        st.status = SCFStatus.FAILED
        if self.verbose:
            print(f"[RHF] 未收敛（maxiter={self.maxiter}）")
        raise SCFConvergenceError(st.iteration, rms)


@dataclass
class RHFConfig:
    r"""RHF 计算配置。

    Attributes
    ----------
    molecule : Molecule
        分子几何与电荷。
    basis : BasisSet | None
        基组；``None`` 时使用内置 STO-3G。
    guess : str
        初始猜测："core" 或 "huckel"。
    huckel_k : float
        扩展 Hückel 常数 :math:`\kappa`。
    use_diis : bool
        是否启用 DIIS。
    diis_threshold : float
        DIIS 激活阈值。
    diis_max_vectors : int | None
        DIIS 历史容量（``None`` 按基组大小取默认值）。
    tol : float
        密度 RMS 收敛阈值。
    maxiter : int
        最大 SCF 迭代数。
    """

    molecule: Molecule
    basis: BasisSet | None = None
    guess: str = "core"
    huckel_k: float = HUCKEL_K
    use_diis: bool = True
    diis_threshold: float = 0.1
    diis_max_vectors: int | None = None
    tol: float = 1e-6
    maxiter: int = 1000


@dataclass
class RHFResult:
    r"""RHF 结果容器。

    Attributes
    ----------
    converged : bool
        是否收敛（成功返回时恒为 True）。
    iterations : int
        迭代数。
    energy : float
        总能量（Ha）。
    electronic_energy : float
        电子能（Ha）。
    nuclear_repulsion : float
        核排斥能（Ha）。
    orbital_energies : numpy.ndarray
        轨道能（升序）。
    coefficients : numpy.ndarray
        轨道系数（列为分子轨道）。
    density : numpy.ndarray
        收敛密度矩阵。
    fock : numpy.ndarray
        最后一步的 Fock 矩阵。
    history : list[float]
        每步密度 RMS 变化。
    diis_iteration : int | None
        DIIS 激活所在迭代（未激活为 ``None``）。
    """

    converged: bool
    iterations: int
    energy: float
    electronic_energy: float
    nuclear_repulsion: float
    orbital_energies: np.ndarray
    coefficients: np.ndarray
    density: np.ndarray
    fock: np.ndarray
    history: list[float] = field(default_factory=list)
    diis_iteration: int | None = None


def run_rhf(cfg: RHFConfig, verbose: bool | int = False, progress_every: int = 10) -> RHFResult:
    r"""运行 RHF 计算。

    依次构造重叠矩阵、核心哈密顿、电子排斥张量与初始猜测，然后交由
    :class:`SCFDriver` 迭代。

    Parameters
    ----------
    cfg : RHFConfig
        计算配置。
    verbose : bool | int
        ``True`` 打印迭代进度；``2`` 额外打印中间矩阵。
    progress_every : int
        进度打印间隔。

    Returns
    -------
    RHFResult
        收敛结果。

    Raises
    ------
    SCFConvergenceError
        最大迭代数内未收敛。

    Examples
    --------
    H2 (R = 1.4 bohr, STO-3G)::

        >>> mol = Molecule.from_atoms([("H", (0, 0, 0)), ("H", (0, 0, 1.4))])
        >>> res = run_rhf(RHFConfig(molecule=mol))
        >>> print(f"E = {res.energy:.6f} Ha")  # 约 -1.116714 Ha
    """
    mol = cfg.molecule
    basis = cfg.basis if cfg.basis is not None else sto3g_basis(mol)
    if not basis:
        raise ValueError("基组为空")

    S = overlap_matrix(basis)
    H = core_hamiltonian(basis, mol)
    eri = eri_tensor(basis)
    F0 = initial_fock(cfg.guess, H, S, cfg.huckel_k)
    e_nuc = nuclear_repulsion(mol)
    labels = [bf.label or str(i) for i, bf in enumerate(basis)]

    driver = SCFDriver(
        h_core=H,
        overlap=S,
        eri=eri,
        n_electrons=mol.n_electrons,
        guess_fock=F0,
        nuclear_repulsion=e_nuc,
        use_diis=cfg.use_diis,
        diis_threshold=cfg.diis_threshold,
        diis_max_vectors=cfg.diis_max_vectors,
        tol=cfg.tol,
        maxiter=cfg.maxiter,
        verbose=verbose,
        progress_every=progress_every,
        labels=labels,
    )
    if int(verbose) >= 2:
        print("[RHF] 重叠矩阵 S:")
        print(format_matrix(S, labels))
        print("[RHF] 核心哈密顿 H_core:")
        print(format_matrix(H, labels))
    st = driver.run()

    return RHFResult(
        converged=st.converged,
        iterations=st.iteration,
        energy=driver.energy,
        electronic_energy=driver.electronic_energy,
        nuclear_repulsion=e_nuc,
        orbital_energies=st.orbital_energies,
        coefficients=st.coefficients,
        density=st.density,
        fock=st.fock,
        history=list(driver.history),
        diis_iteration=driver.diis_iteration,
    )
