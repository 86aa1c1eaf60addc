r"""Fock 矩阵初始猜测

- ``"core"``：核心哈密顿猜测 :math:`F^{(0)} = H^{core}`
- ``"huckel"``：扩展 Hückel 猜测（广义 Wolfsberg–Helmholz 近似）

  .. math::

      F^{(0)}_{ij} = \kappa\, S_{ij}\,\frac{H^{core}_{ii} + H^{core}_{jj}}{2}

References
----------
.. [SzaboOstlund] Szabo & Ostlund (1996)
   "Modern Quantum Chemistry"
   Dover, Chapter 3
"""

from __future__ import annotations

import numpy as np

__all__ = ["HUCKEL_K", "core_guess", "huckel_guess", "initial_fock"]

HUCKEL_K = 1.75


def core_guess(h_core: np.ndarray) -> np.ndarray:
    return np.array(h_core, dtype=float, copy=True)


def huckel_guess(h_core: np.ndarray, overlap: np.ndarray, k: float = HUCKEL_K) -> np.ndarray:
    """扩展 Hückel 猜测，``k`` 为 Wolfsberg–Helmholz 常数。"""
    if h_core.shape != overlap.shape:
        raise ValueError(f"H_core {h_core.shape} 与 S {overlap.shape} 形状不一致")
    d = np.diag(h_core)
    return k * overlap * 0.5 * (d[:, None] + d[None, :])


def initial_fock(
    kind: str,
    h_core: np.ndarray,
    overlap: np.ndarray | None = None,
    huckel_k: float = HUCKEL_K,
) -> np.ndarray:
    """按名称选择初始猜测。"""
    if kind == "core":
        return core_guess(h_core)
    if kind == "huckel":
        if overlap is None:
            raise ValueError("Hückel 猜测需要重叠矩阵")
        return huckel_guess(h_core, overlap, huckel_k)
    raise NotImplementedError(f"初始猜测方式 '{kind}' 未实现")
