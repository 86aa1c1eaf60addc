r"""电子-核吸引积分

本模块按 Cook 手册中的解析公式计算两个笛卡尔 Gaussian 原函数与一个点电荷
之间的核吸引积分，并组装核吸引矩阵 :math:`V^{(n)}`。

公式
====

对原函数 :math:`a=(l_x,l_y,l_z;\alpha;\mathbf{A})`、:math:`b=(\ldots;\beta;\mathbf{B})`
与核 :math:`(Z_C, \mathbf{C})`，令 :math:`\gamma=\alpha+\beta`、
:math:`\epsilon = 1/(4\gamma)`，每个笛卡尔轴的因子

.. math::

    A_{l r i}(l_1, l_2, A_x, B_x, C_x, P_x, \epsilon) =
    (-1)^{l+i} f_l(l_1, l_2, P_x-A_x, P_x-B_x)
    \frac{l!\,(P_x-C_x)^{l-2r-2i}\,\epsilon^{r+i}}{r!\,i!\,(l-2r-2i)!}

积分为

.. math::

    V_{ab}^{(C)} = -Z_C N_a N_b c_P \frac{2\pi}{\gamma}
    \sum_{\text{x,y,z 三元组}} A_x A_y A_z\,
    F_\nu\left(\gamma |\mathbf{P}-\mathbf{C}|^2\right),\qquad
    \nu = \sum_{\text{轴}} (l - 2r - i)

指标范围：:math:`0\le l\le l_1+l_2`，:math:`0\le r\le\lfloor l/2\rfloor`，
:math:`0\le i\le\lfloor (l-2r)/2\rfloor`。

References
----------
.. [Cook] Cook, D. B. (1998)
   "Handbook of Computational Quantum Chemistry"
   Oxford University Press
"""

from __future__ import annotations

from itertools import product
from typing import TYPE_CHECKING, Sequence

import numpy as np

from .boys import boys_array
from .gaussian import expansion_coefficient, factorial, gaussian_product

if TYPE_CHECKING:
    from ..basis import BasisSet, GaussianPrimitive, Molecule, Nucleus

__all__ = [
    "nuclear_kernel",
    "axis_terms",
    "nuclear_attraction_primitive",
    "nuclear_attraction_matrix",
]


def nuclear_kernel(
    l: int,
    r: int,
    i: int,
    l1: int,
    l2: int,
    Ra: float,
    Rb: float,
    Rc: float,
    Rp: float,
    eps: float,
) -> float:
    r"""单轴因子 :math:`A_{lri}`。

    Parameters
    ----------
    l, r, i : int
        求和指标（范围由调用方保证，本函数不做校验）。
    l1, l2 : int
        两原函数在该轴的角动量分量。
    Ra, Rb, Rc, Rp : float
        两原函数中心、核位置、乘积中心在该轴的坐标。
    eps : float
        :math:`\epsilon = 1/(4\gamma)`。

    Returns
    -------
    float
        因子值。

    Raises
    ------
    IntegralIndexError
        指标越界导致负阶乘参数。
    """
    n = l - 2 * r - 2 * i
    denom = factorial(r) * factorial(i) * factorial(n)
    sign = -1.0 if (l + i) % 2 else 1.0
    fl = expansion_coefficient(l, l1, l2, Rp - Ra, Rp - Rb)
    pc = (Rp - Rc) ** n if n > 0 else 1.0
    return sign * fl * factorial(l) * pc * eps ** (r + i) / denom


def axis_terms(
    l1: int,
    l2: int,
    Ra: float,
    Rb: float,
    Rc: float,
    Rp: float,
    eps: float,
) -> list[tuple[int, float]]:
    r"""展开单轴的全部合法 :math:`(l, r, i)` 三元组。

    Returns
    -------
    list[tuple[int, float]]
        每项为 ``(l - 2r - i, A_lri)``；第一分量是该三元组对 Boys 阶数
        :math:`\nu` 的贡献。
    """
    terms = []
    for l in range(l1 + l2 + 1):
        for r in range(l // 2 + 1):
            for i in range((l - 2 * r) // 2 + 1):
                value = nuclear_kernel(l, r, i, l1, l2, Ra, Rb, Rc, Rp, eps)
                terms.append((l - 2 * r - i, value))
    return terms


def nuclear_attraction_primitive(
    a: "GaussianPrimitive",
    b: "GaussianPrimitive",
    nucleus: "Nucleus",
) -> float:
    r"""两个归一化原函数与单个原子核的核吸引积分。

    Parameters
    ----------
    a, b : GaussianPrimitive
        笛卡尔 Gaussian 原函数。
    nucleus : Nucleus
        点电荷 :math:`(Z_C, \mathbf{C})`。

    Returns
    -------
    float
        积分值；:math:`Z_C>0` 时对角项为负（吸引）。

    Notes
    -----
    三轴的三元组先各自展开（见 :func:`axis_terms`），再对三者的笛卡尔积
    求和；Boys 函数值对同一 :math:`\mathbf{P}-\mathbf{C}` 预先按阶数制表。
    """
    Ra = np.asarray(a.center, dtype=float)
    Rb = np.asarray(b.center, dtype=float)
    Rc = np.asarray(nucleus.position, dtype=float)

    g, Rp, cp = gaussian_product(a.exponent, b.exponent, Ra, Rb)
    eps = 1.0 / (4.0 * g)

    per_axis = [
        axis_terms(a.lmn[k], b.lmn[k], Ra[k], Rb[k], Rc[k], Rp[k], eps)
        for k in range(3)
    ]
    nu_max = sum(a.lmn) + sum(b.lmn)
    PC = Rp - Rc
    F = boys_array(nu_max, g * float(np.dot(PC, PC)))

    total = 0.0
    for (nu_x, Ax), (nu_y, Ay), (nu_z, Az) in product(*per_axis):
        total += Ax * Ay * Az * F[nu_x + nu_y + nu_z]

    return -nucleus.charge * a.norm * b.norm * cp * 2.0 * np.pi / g * total


def nuclear_attraction_matrix(
    basis: "BasisSet",
    molecule: "Molecule | Sequence[Nucleus]",
) -> np.ndarray:
    r"""组装核吸引矩阵。

    .. math::

        V^{(n)}_{ij} = \sum_C \sum_{k,l} D_{ik} D_{jl}\,
        V^{(C)}(g_{ik}, g_{jl})

    对全部有序对 :math:`(i, j)` 逐一计算（不利用对称性），复杂度
    :math:`O(K_f^2 c^2 N_n)` 次原函数积分。

    Parameters
    ----------
    basis : BasisSet
        收缩基函数列表，长度 :math:`K_f`。
    molecule : Molecule or sequence of Nucleus
        原子核集合。

    Returns
    -------
    numpy.ndarray
        :math:`K_f \times K_f` 核吸引矩阵。
    """
    nuclei = getattr(molecule, "nuclei", molecule)
    Kf = len(basis)
    V = np.zeros((Kf, Kf))
    prims = [list(bf.primitives) for bf in basis]
    for i in range(Kf):
        for j in range(Kf):
            acc = 0.0
            for d_ik, g_ik in prims[i]:
                for d_jl, g_jl in prims[j]:
                    for nuc in nuclei:
                        acc += d_ik * d_jl * nuclear_attraction_primitive(g_ik, g_jl, nuc)
            V[i, j] = acc
    return V
