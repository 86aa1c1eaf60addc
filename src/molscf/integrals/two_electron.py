r"""双电子排斥积分（McMurchie–Davidson）

电子排斥积分（化学家记号）

.. math::

    (ab|cd) = \iint \frac{a(\mathbf{r}_1) b(\mathbf{r}_1)\,
    c(\mathbf{r}_2) d(\mathbf{r}_2)}{|\mathbf{r}_1-\mathbf{r}_2|}
    \,d\mathbf{r}_1 d\mathbf{r}_2

以 Hermite Gaussian 展开：

.. math::

    (ab|cd) = \frac{2\pi^{5/2}}{pq\sqrt{p+q}}
    \sum_{tuv} E^{ab}_{tuv} \sum_{\tau\nu\phi} (-1)^{\tau+\nu+\phi}
    E^{cd}_{\tau\nu\phi}\, R_{t+\tau,u+\nu,v+\phi}(\alpha, \mathbf{R}_{PQ})

其中 :math:`p=a+b`、:math:`q=c+d`、:math:`\alpha=pq/(p+q)`。

References
----------
.. [MD] McMurchie, L. E. & Davidson, E. R. (1978)
   "One- and two-electron integrals over Cartesian Gaussian functions"
   J. Comput. Phys. 26, 218
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

import numpy as np

from .boys import boys_array
from .gaussian import gaussian_product

if TYPE_CHECKING:
    from ..basis import BasisSet, GaussianPrimitive

__all__ = [
    "hermite_expansion",
    "eri_primitive",
    "eri_tensor",
    "two_electron_matrix",
]


def hermite_expansion(i: int, j: int, Qx: float, a: float, b: float) -> np.ndarray:
    r"""单轴 Hermite 展开系数 :math:`E^{ij}_t`，:math:`t = 0..i+j`。

    Parameters
    ----------
    i, j : int
        两原函数在该轴的角动量分量。
    Qx : float
        中心差 :math:`A_x - B_x`。
    a, b : float
        两原函数指数。
    """
    p = a + b
    q = a * b / p

    @lru_cache(maxsize=None)
    def E(i: int, j: int, t: int) -> float:
        if t < 0 or t > i + j:
            return 0.0
        if i == j == t == 0:
            return float(np.exp(-q * Qx * Qx))
        if j == 0:
            return (
                E(i - 1, j, t - 1) / (2.0 * p)
                - q * Qx / a * E(i - 1, j, t)
                + (t + 1) * E(i - 1, j, t + 1)
            )
        return (
            E(i, j - 1, t - 1) / (2.0 * p)
            + q * Qx / b * E(i, j - 1, t)
            + (t + 1) * E(i, j - 1, t + 1)
        )

    return np.array([E(i, j, t) for t in range(i + j + 1)])


def _hermite_coulomb(t_max: int, u_max: int, v_max: int, alpha: float, PC: np.ndarray) -> np.ndarray:
    r"""Hermite Coulomb 积分 :math:`R^0_{tuv}`，返回形状 ``(t_max+1, u_max+1, v_max+1)``。"""
    X, Y, Z = (float(c) for c in PC)
    F = boys_array(t_max + u_max + v_max, alpha * (X * X + Y * Y + Z * Z))

    @lru_cache(maxsize=None)
    def R(t: int, u: int, v: int, n: int) -> float:
        if t < 0 or u < 0 or v < 0:
            return 0.0
        if t == u == v == 0:
            return (-2.0 * alpha) ** n * F[n]
        if t == u == 0:
            return (v - 1) * R(t, u, v - 2, n + 1) + Z * R(t, u, v - 1, n + 1)
        if t == 0:
            return (u - 1) * R(t, u - 2, v, n + 1) + Y * R(t, u - 1, v, n + 1)
        return (t - 1) * R(t - 2, u, v, n + 1) + X * R(t - 1, u, v, n + 1)

    out = np.empty((t_max + 1, u_max + 1, v_max + 1))
    for t in range(t_max + 1):
        for u in range(u_max + 1):
            for v in range(v_max + 1):
                out[t, u, v] = R(t, u, v, 0)
    return out


def _pair_hermite(a: "GaussianPrimitive", b: "GaussianPrimitive"):
    A = np.asarray(a.center, dtype=float)
    B = np.asarray(b.center, dtype=float)
    p, P, _ = gaussian_product(a.exponent, b.exponent, A, B)
    Ex, Ey, Ez = (
        hermite_expansion(a.lmn[k], b.lmn[k], A[k] - B[k], a.exponent, b.exponent) for k in range(3)
    )
    # E_tuv = E_t E_u E_v
    E = Ex[:, None, None] * Ey[None, :, None] * Ez[None, None, :]
    return p, P, E


def eri_primitive(
    a: "GaussianPrimitive",
    b: "GaussianPrimitive",
    c: "GaussianPrimitive",
    d: "GaussianPrimitive",
) -> float:
    """四个归一化原函数的电子排斥积分 :math:`(ab|cd)`。"""
    p, P, Eab = _pair_hermite(a, b)
    q, Q, Ecd = _pair_hermite(c, d)
    alpha = p * q / (p + q)

    tm, um, vm = Eab.shape
    tn, un, vn = Ecd.shape
    R = _hermite_coulomb(tm + tn - 2, um + un - 2, vm + vn - 2, alpha, P - Q)

    # (-1)^(τ+ν+φ)
    sign = (
        (-1.0) ** np.arange(tn)[:, None, None]
        * (-1.0) ** np.arange(un)[None, :, None]
        * (-1.0) ** np.arange(vn)[None, None, :]
    )
    Ecd = Ecd * sign

    total = 0.0
    for t in range(tm):
        for u in range(um):
            for v in range(vm):
                if Eab[t, u, v] == 0.0:
                    continue
                block = R[t : t + tn, u : u + un, v : v + vn]
                total += Eab[t, u, v] * float(np.sum(Ecd * block))

    prefactor = 2.0 * np.pi**2.5 / (p * q * np.sqrt(p + q))
    return a.norm * b.norm * c.norm * d.norm * prefactor * total


def eri_tensor(basis: "BasisSet") -> np.ndarray:
    r"""电子排斥张量 :math:`(ij|kl)`，形状 :math:`K_f^4`。

    仅计算满足 :math:`i\ge j`、:math:`k\ge l`、:math:`ij \ge kl` 的四元组，
    其余由 8 重置换对称性填充。
    """
    Kf = len(basis)
    prims = [list(bf.primitives) for bf in basis]
    eri = np.zeros((Kf, Kf, Kf, Kf))
    for i in range(Kf):
        for j in range(i + 1):
            ij = i * (i + 1) // 2 + j
            for k in range(Kf):
                for l in range(k + 1):
                    kl = k * (k + 1) // 2 + l
                    if ij < kl:
                        continue
                    acc = 0.0
                    for da, ga in prims[i]:
                        for db, gb in prims[j]:
                            for dc, gc in prims[k]:
                                for dd, gd in prims[l]:
                                    acc += da * db * dc * dd * eri_primitive(ga, gb, gc, gd)
                    for (w, x, y, z) in (
                        (i, j, k, l), (j, i, k, l), (i, j, l, k), (j, i, l, k),
                        (k, l, i, j), (l, k, i, j), (k, l, j, i), (l, k, j, i),
                    ):
                        eri[w, x, y, z] = acc
    return eri


def two_electron_matrix(density: np.ndarray, eri: np.ndarray) -> np.ndarray:
    r"""双电子矩阵 :math:`G`。

    .. math::

        G_{ij} = \sum_{kl} P_{kl}\left[(ij|kl) - \tfrac{1}{2}(ik|jl)\right]
    """
    if eri.ndim != 4 or eri.shape[:2] != density.shape or eri.shape[2:] != density.shape:
        raise ValueError(f"ERI 张量形状 {eri.shape} 与密度矩阵形状 {density.shape} 不匹配")
    J = np.einsum("ijkl,kl->ij", eri, density)
    K = np.einsum("ikjl,kl->ij", eri, density)
    return J - 0.5 * K
