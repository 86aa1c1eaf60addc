r"""Gaussian 积分公共工具

- 阶乘、双阶乘、二项式系数查表（按需扩展）
- Gaussian 乘积定理（两原函数合并为一个乘积 Gaussian）
- 二项式展开系数 :math:`f_j(l, m, a, b)`
- 笛卡尔 Gaussian 归一化因子

Gaussian 乘积定理
=================

.. math::

    e^{-\alpha|\mathbf{r}-\mathbf{A}|^2} e^{-\beta|\mathbf{r}-\mathbf{B}|^2}
    = c_P\, e^{-\gamma|\mathbf{r}-\mathbf{P}|^2},\qquad
    \gamma = \alpha+\beta,\quad
    \mathbf{P} = \frac{\alpha\mathbf{A}+\beta\mathbf{B}}{\gamma},\quad
    c_P = \exp\left(-\frac{\alpha\beta}{\gamma}|\mathbf{A}-\mathbf{B}|^2\right)

References
----------
.. [Cook] Cook, D. B. (1998)
   "Handbook of Computational Quantum Chemistry"
   Oxford University Press
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import sympy

__all__ = [
    "IntegralIndexError",
    "FactorialTable",
    "factorial",
    "double_factorial",
    "binomial",
    "gaussian_product",
    "expansion_coefficient",
    "cartesian_norm",
]


class IntegralIndexError(ValueError):
    """积分指标越界（如负阶乘参数）。表示调用方的指标范围存在缺陷。"""


class FactorialTable:
    r"""阶乘与双阶乘查表。

    表项由 ``sympy`` 精确整数生成后转为 ``float``，长度按最大请求参数
    按需增长，避免在积分内层循环中重复计算。

    约定：:math:`n!!` 对 :math:`n \in \{-1, 0\}` 取 1，对其余负奇数也取 1
    （与 ``sympy.factorial2`` 一致）。
    """

    def __init__(self, size: int = 16) -> None:
        self._fact: list[float] = []
        self._fact2: list[float] = []
        self._grow(size)

    def _grow(self, n: int) -> None:
        start = len(self._fact)
        for k in range(start, n + 1):
            self._fact.append(float(sympy.factorial(k)))
            self._fact2.append(float(sympy.factorial2(k)))

    def factorial(self, n: int) -> float:
        if n < 0:
            raise IntegralIndexError(f"阶乘参数必须非负，当前值: {n}")
        if n >= len(self._fact):
            self._grow(2 * n)
        return self._fact[n]

    def double_factorial(self, n: int) -> float:
        if n < 0:
            if n % 2 == 0:
                raise IntegralIndexError(f"负偶数的双阶乘无定义: {n}")
            return 1.0
        if n >= len(self._fact2):
            self._grow(2 * n)
        return self._fact2[n]

    def binomial(self, n: int, r: int) -> float:
        if r < 0 or r > n:
            return 0.0
        return self.factorial(n) / (self.factorial(r) * self.factorial(n - r))

    def __len__(self) -> int:
        return len(self._fact)


_TABLE = FactorialTable()


def factorial(n: int) -> float:
    """:math:`n!`，负参数抛出 :class:`IntegralIndexError`。"""
    return _TABLE.factorial(n)


def double_factorial(n: int) -> float:
    """:math:`n!!`，负奇数返回 1。"""
    return _TABLE.double_factorial(n)


def binomial(n: int, r: int) -> float:
    """二项式系数 :math:`C(n, r)`，:math:`r<0` 或 :math:`r>n` 时为 0。"""
    return _TABLE.binomial(n, r)


def gaussian_product(
    a: float, b: float, Ra: Sequence[float], Rb: Sequence[float]
) -> tuple[float, np.ndarray, float]:
    r"""合并两个 Gaussian 原函数。

    Parameters
    ----------
    a, b : float
        两原函数指数。
    Ra, Rb : sequence of float
        两原函数中心。

    Returns
    -------
    g : float
        乘积指数 :math:`\gamma = a + b`。
    Rp : numpy.ndarray
        乘积中心 :math:`\mathbf{P}`。
    cp : float
        乘积前因子 :math:`c_P`。
    """
    Ra = np.asarray(Ra, dtype=float)
    Rb = np.asarray(Rb, dtype=float)
    g = a + b
    Rab = Ra - Rb
    cp = float(np.exp(-a * b / g * np.dot(Rab, Rab)))
    Rp = (a * Ra + b * Rb) / g
    return g, Rp, cp


def _power(base: float, exponent: int) -> float:
    # 0^0 = 1；指数为零时与底数无关
    if exponent == 0:
        return 1.0
    return base**exponent


def expansion_coefficient(j: int, l: int, m: int, a: float, b: float) -> float:
    r"""二项式展开系数。

    .. math::

        f_j(l, m, a, b) = \sum_{k=\max(0, j-m)}^{\min(j, l)}
        \binom{l}{k}\binom{m}{j-k} a^{l-k} b^{m+k-j}

    即 :math:`(x+a)^l (x+b)^m` 展开中 :math:`x^j` 项的系数。

    Parameters
    ----------
    j, l, m : int
        非负整数。
    a, b : float
        中心坐标差（如 :math:`P_x - A_x`、:math:`P_x - B_x`）。

    Returns
    -------
    float
        展开系数。
    """
    total = 0.0
    for k in range(max(0, j - m), min(j, l) + 1):
        total += binomial(l, k) * binomial(m, j - k) * _power(a, l - k) * _power(b, m + k - j)
    return total


def cartesian_norm(lmn: Sequence[int], exponent: float) -> float:
    r"""笛卡尔 Gaussian 原函数归一化因子。

    .. math::

        N = \left(\frac{2\alpha}{\pi}\right)^{3/4}
        \frac{(4\alpha)^{(l_x+l_y+l_z)/2}}
        {\sqrt{(2l_x-1)!!\,(2l_y-1)!!\,(2l_z-1)!!}}

    其中 :math:`(-1)!! = 1`。

    Parameters
    ----------
    lmn : sequence of int
        角动量 :math:`(l_x, l_y, l_z)`。
    exponent : float
        指数 :math:`\alpha`。

    Returns
    -------
    float
        归一化因子 :math:`N`。
    """
    lx, ly, lz = lmn
    L = lx + ly + lz
    n = (2.0 * exponent / np.pi) ** 0.75 * (4.0 * exponent) ** (L / 2.0)
    denom = double_factorial(2 * lx - 1) * double_factorial(2 * ly - 1) * double_factorial(2 * lz - 1)
    return float(n / np.sqrt(denom))
