r"""单电子积分：重叠、动能与核心哈密顿

重叠积分按单轴二项式展开计算：

.. math::

    S_x = \sum_{i=0}^{\lfloor (l_1+l_2)/2\rfloor}
    f_{2i}(l_1, l_2, P_x-A_x, P_x-B_x)\,\frac{(2i-1)!!}{(2\gamma)^i},
    \qquad
    S_{ab} = N_a N_b c_P \left(\frac{\pi}{\gamma}\right)^{3/2} S_x S_y S_z

动能积分对右矢使用升降阶关系：

.. math::

    T_{ab} = \beta(2L_b+3) S_{ab}
    - 2\beta^2 \sum_{x} S_{a, b+2_x}
    - \tfrac{1}{2}\sum_x l_{bx}(l_{bx}-1) S_{a, b-2_x}

核心哈密顿 :math:`H^{core} = T + V^{(n)}`。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .gaussian import double_factorial, expansion_coefficient, gaussian_product
from .nuclear import nuclear_attraction_matrix

if TYPE_CHECKING:
    from ..basis import BasisSet, GaussianPrimitive, Molecule

__all__ = [
    "overlap_primitive",
    "kinetic_primitive",
    "overlap_matrix",
    "kinetic_matrix",
    "core_hamiltonian",
]


def _overlap_1d(l1: int, l2: int, PA: float, PB: float, g: float) -> float:
    total = 0.0
    for i in range((l1 + l2) // 2 + 1):
        total += expansion_coefficient(2 * i, l1, l2, PA, PB) * double_factorial(2 * i - 1) / (2.0 * g) ** i
    return total


def _overlap_unnormalized(la, lb, A, B, alpha: float, beta: float) -> float:
    if min(lb) < 0:
        return 0.0
    g, P, cp = gaussian_product(alpha, beta, A, B)
    PA = P - A
    PB = P - B
    s = (np.pi / g) ** 1.5 * cp
    for k in range(3):
        s *= _overlap_1d(la[k], lb[k], PA[k], PB[k], g)
    return float(s)


def overlap_primitive(a: "GaussianPrimitive", b: "GaussianPrimitive") -> float:
    """两个归一化原函数的重叠积分。"""
    A = np.asarray(a.center, dtype=float)
    B = np.asarray(b.center, dtype=float)
    return a.norm * b.norm * _overlap_unnormalized(a.lmn, b.lmn, A, B, a.exponent, b.exponent)


def kinetic_primitive(a: "GaussianPrimitive", b: "GaussianPrimitive") -> float:
    """两个归一化原函数的动能积分 :math:`\\langle a| -\\nabla^2/2 |b\\rangle`。"""
    A = np.asarray(a.center, dtype=float)
    B = np.asarray(b.center, dtype=float)
    alpha, beta = a.exponent, b.exponent
    lb = b.lmn

    t = beta * (2 * sum(lb) + 3) * _overlap_unnormalized(a.lmn, lb, A, B, alpha, beta)
    for k in range(3):
        up = list(lb)
        up[k] += 2
        t -= 2.0 * beta**2 * _overlap_unnormalized(a.lmn, up, A, B, alpha, beta)
        if lb[k] >= 2:
            down = list(lb)
            down[k] -= 2
            t -= 0.5 * lb[k] * (lb[k] - 1) * _overlap_unnormalized(a.lmn, down, A, B, alpha, beta)
    return a.norm * b.norm * t


def _contracted_matrix(basis: "BasisSet", kernel) -> np.ndarray:
    Kf = len(basis)
    M = np.zeros((Kf, Kf))
    prims = [list(bf.primitives) for bf in basis]
    for i in range(Kf):
        for j in range(i + 1):
            acc = 0.0
            for d_ik, g_ik in prims[i]:
                for d_jl, g_jl in prims[j]:
                    acc += d_ik * d_jl * kernel(g_ik, g_jl)
            M[i, j] = M[j, i] = acc
    return M


def overlap_matrix(basis: "BasisSet") -> np.ndarray:
    """重叠矩阵 :math:`S`。"""
    return _contracted_matrix(basis, overlap_primitive)


def kinetic_matrix(basis: "BasisSet") -> np.ndarray:
    """动能矩阵 :math:`T`。"""
    return _contracted_matrix(basis, kinetic_primitive)


def core_hamiltonian(basis: "BasisSet", molecule: "Molecule") -> np.ndarray:
    """核心哈密顿 :math:`H^{core} = T + V^{(n)}`。"""
    return kinetic_matrix(basis) + nuclear_attraction_matrix(basis, molecule)
