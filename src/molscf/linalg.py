from __future__ import annotations

import numpy as np
from scipy.linalg import eigh

__all__ = [
    "orthogonalizer",
    "diagonalize",
    "density_matrix",
    "density_rms",
]


def orthogonalizer(overlap: np.ndarray) -> np.ndarray:
    r"""对称正交化矩阵 :math:`X = S^{-1/2}`。

    满足 :math:`X^\mathsf{T} S X = I`。

    Parameters
    ----------
    overlap : numpy.ndarray
        重叠矩阵 :math:`S`（对称正定）。

    Returns
    -------
    numpy.ndarray
        变换矩阵 :math:`X`。
    """
    s, U = eigh(overlap)
    if np.any(s <= 0.0):
        raise ValueError(f"重叠矩阵非正定（最小本征值 {s.min():.3e}），基组可能线性相关")
    return (U / np.sqrt(s)) @ U.T


def diagonalize(matrix: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """对称矩阵本征分解，返回 ``(本征向量矩阵, 升序本征值)``。"""
    eigvals, eigvecs = eigh(matrix)
    return eigvecs, eigvals


def density_matrix(coefficients: np.ndarray, n_electrons: int) -> np.ndarray:
    r"""闭壳层密度矩阵 :math:`P = 2\,C_{occ} C_{occ}^\mathsf{T}`。

    占据最低的 :math:`N_e/2` 个轨道；:math:`\mathrm{tr}(PS) = N_e`。
    """
    if n_electrons % 2 != 0:
        raise ValueError(f"RHF 仅支持闭壳层（偶数电子），当前电子数: {n_electrons}")
    n_occ = n_electrons // 2
    if n_occ > coefficients.shape[1]:
        raise ValueError(f"占据轨道数 {n_occ} 超过基函数数 {coefficients.shape[1]}")
    C_occ = coefficients[:, :n_occ]
    return 2.0 * C_occ @ C_occ.T


def density_rms(p_old: np.ndarray, p_new: np.ndarray) -> float:
    """密度矩阵逐元素差的均方根。"""
    return float(np.sqrt(np.mean((p_new - p_old) ** 2)))
