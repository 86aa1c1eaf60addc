r"""DIIS 收敛加速

Pulay 的 DIIS（Direct Inversion in the Iterative Subspace）将历史 Fock 矩阵
线性组合为外推 Fock 矩阵，使组合误差的二范数最小：

.. math::

    F^{*} = \sum_p c_p F_p,\qquad \sum_p c_p = 1

误差向量取正交基下的对易子

.. math::

    e = X^\mathsf{T}\left(F P S - S P F\right) X

收敛时 :math:`e \to 0`。系数由加边线性方程组

.. math::

    \begin{pmatrix} B & -\mathbf{1} \\ -\mathbf{1}^\mathsf{T} & 0 \end{pmatrix}
    \begin{pmatrix} \mathbf{c} \\ \lambda \end{pmatrix}
    =
    \begin{pmatrix} \mathbf{0} \\ -1 \end{pmatrix},
    \qquad B_{pq} = e_p \cdot e_q

求得。求解前 :math:`B` 按其最大对角元缩放（不改变 :math:`c_p`）。
方程组奇异或数值奇异（倒条件数低于 :data:`DIIS_RCOND_MIN`）时直接抛出
``scipy.linalg.LinAlgError``，不做回退；条件数偏大但仍可解时发出
``RuntimeWarning``。

误差向量是正交基下的反对称矩阵，只有 :math:`K_f(K_f-1)/2` 个独立分量，
历史长度超过该维数加一时误差向量必然仿射相关、方程组奇异。默认容量因此取
:math:`\min(8, K_f(K_f-1)/2 + 1)`。

References
----------
.. [Pulay1982] Pulay, P. (1982)
   "Improved SCF convergence acceleration"
   J. Comput. Chem. 3, 556
"""

from __future__ import annotations

from collections import deque

import numpy as np
from scipy.linalg import LinAlgError, LinAlgWarning, solve, svdvals

__all__ = ["DIIS", "DIIS_MAX_VECTORS", "DIIS_RCOND_MIN", "DIIS_RCOND_WARN", "default_capacity"]

DIIS_MAX_VECTORS = 8
DIIS_RCOND_MIN = 1e-14
DIIS_RCOND_WARN = 1e-10


def default_capacity(n_basis: int) -> int:
    """保证加边方程组良态的默认历史容量。"""
    return min(DIIS_MAX_VECTORS, n_basis * (n_basis - 1) // 2 + 1)


class DIIS:
    """DIIS 外推器，持有本次 SCF 运行的 ``(F, e)`` 历史。

    Parameters
    ----------
    overlap : numpy.ndarray
        重叠矩阵 :math:`S`。
    orthogonalizer : numpy.ndarray
        正交化矩阵 :math:`X`。
    max_vectors : int | None
        历史容量，超出时淘汰最早的一对；``None`` 取
        :func:`default_capacity`（由基组大小决定）。

    Examples
    --------
    >>> diis = DIIS(S, X)
    >>> F_star = diis.update(F, P)  # doctest: +SKIP
    """

    def __init__(self, overlap: np.ndarray, orthogonalizer: np.ndarray, max_vectors: int | None = None) -> None:
        if overlap.shape != orthogonalizer.shape:
            raise ValueError(f"S {overlap.shape} 与 X {orthogonalizer.shape} 形状不一致")
        if max_vectors is None:
            max_vectors = default_capacity(overlap.shape[0])
        if max_vectors < 1:
            raise ValueError(f"DIIS 历史容量必须 >= 1，当前值: {max_vectors}")
        self.S = overlap
        self.X = orthogonalizer
        self.max_vectors = max_vectors
        self._focks: deque[np.ndarray] = deque(maxlen=max_vectors)
        self._errors: deque[np.ndarray] = deque(maxlen=max_vectors)

    def __len__(self) -> int:
        return len(self._focks)

    def reset(self) -> None:
        self._focks.clear()
        self._errors.clear()

    def error_vector(self, fock: np.ndarray, density: np.ndarray) -> np.ndarray:
        """展平的正交基对易子误差 :math:`X^T(FPS-SPF)X`。"""
        FPS = fock @ density @ self.S
        SPF = self.S @ density @ fock
        return (self.X.T @ (FPS - SPF) @ self.X).ravel()

    def max_error(self, fock: np.ndarray, density: np.ndarray) -> float:
        """误差向量的最大绝对值元素。"""
        return float(np.max(np.abs(self.error_vector(fock, density))))

    def push(self, fock: np.ndarray, density: np.ndarray) -> np.ndarray:
        """记录一对 ``(F, e)``，返回误差向量。"""
        e = self.error_vector(fock, density)
        self._focks.append(np.array(fock, dtype=float, copy=True))
        self._errors.append(e)
        return e

    def weights(self) -> np.ndarray:
        """求解外推系数 :math:`c_p`（和为 1）。

        Raises
        ------
        scipy.linalg.LinAlgError
            加边方程组奇异或数值奇异（误差向量仿射相关）。
        """
        import warnings

        n = len(self._errors)
        if n == 0:
            raise RuntimeError("DIIS 历史为空，无法外推")
        E = np.array(self._errors)
        B = np.empty((n + 1, n + 1))
        B[:n, :n] = E @ E.T
        scale = float(np.max(np.diag(B[:n, :n])))
        if scale > 0.0:
            B[:n, :n] /= scale
        B[n, :n] = B[:n, n] = -1.0
        B[n, n] = 0.0
        rhs = np.zeros(n + 1)
        rhs[n] = -1.0

        s = svdvals(B)
        rcond = float(s[-1] / s[0])
        if rcond < DIIS_RCOND_MIN:
            raise LinAlgError(f"DIIS 方程组奇异（倒条件数 {rcond:.3e}，历史长度 {n}）")
        if rcond < DIIS_RCOND_WARN:
            warnings.warn(
                f"DIIS 方程组病态（倒条件数 {rcond:.3e}），外推系数可能不可靠",
                RuntimeWarning,
                stacklevel=2,
            )
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("error", LinAlgWarning)
                sol = solve(B, rhs)
        except LinAlgWarning as exc:
            raise LinAlgError(f"DIIS 方程组数值奇异: {exc}") from exc
        return sol[:n]

    def extrapolate(self) -> np.ndarray:
        r"""外推 Fock 矩阵 :math:`\sum_p c_p F_p`。"""
        c = self.weights()
        F = np.zeros_like(self._focks[0])
        for c_p, F_p in zip(c, self._focks):
            F += c_p * F_p
        return F

    def update(self, fock: np.ndarray, density: np.ndarray) -> np.ndarray:
        """记录当前 ``(F, P)`` 并返回外推 Fock 矩阵。"""
        self.push(fock, density)
        return self.extrapolate()
