"""Gaussian 公共工具单元测试

测试阶乘查表、展开系数、Gaussian 乘积定理与归一化因子。
"""

import math

import numpy as np
import pytest

from molscf.integrals.gaussian import (
    FactorialTable,
    IntegralIndexError,
    binomial,
    cartesian_norm,
    double_factorial,
    expansion_coefficient,
    factorial,
    gaussian_product,
)


@pytest.mark.integrals
@pytest.mark.quick
def test_factorial_table_values():
    for n in range(12):
        assert factorial(n) == math.factorial(n)
    assert factorial(30) == float(math.factorial(30))


@pytest.mark.integrals
@pytest.mark.quick
def test_double_factorial_convention():
    """(-1)!! = 0!! = 1，负奇数统一为 1。"""
    assert double_factorial(-1) == 1.0
    assert double_factorial(-3) == 1.0
    assert double_factorial(0) == 1.0
    assert double_factorial(5) == 15.0
    assert double_factorial(6) == 48.0


@pytest.mark.integrals
@pytest.mark.quick
def test_negative_factorial_fails_fast():
    with pytest.raises(IntegralIndexError):
        factorial(-1)
    with pytest.raises(IntegralIndexError):
        double_factorial(-2)


@pytest.mark.integrals
def test_factorial_table_grows_on_demand():
    table = FactorialTable(size=4)
    assert len(table) == 5
    assert table.factorial(10) == math.factorial(10)
    assert len(table) >= 11


@pytest.mark.integrals
@pytest.mark.quick
def test_binomial_out_of_range_is_zero():
    assert binomial(4, 2) == 6.0
    assert binomial(3, -1) == 0.0
    assert binomial(3, 4) == 0.0


@pytest.mark.integrals
@pytest.mark.quick
def test_expansion_coefficient_polynomial_identity():
    """f_j(l, m, a, b) 是 (x+a)^l (x+b)^m 中 x^j 的系数。"""
    a, b = 0.7, -1.3
    l, m = 3, 2
    poly = np.polynomial.polynomial.polymul(
        np.polynomial.polynomial.polypow([a, 1.0], l),
        np.polynomial.polynomial.polypow([b, 1.0], m),
    )
    for j in range(l + m + 1):
        assert np.isclose(expansion_coefficient(j, l, m, a, b), poly[j], rtol=1e-13, atol=1e-14)


@pytest.mark.integrals
@pytest.mark.quick
def test_expansion_coefficient_zero_base():
    """0^0 = 1：a = b = 0 时仅 j = l + m 项非零。"""
    assert expansion_coefficient(0, 0, 0, 0.0, 0.0) == 1.0
    assert expansion_coefficient(3, 2, 1, 0.0, 0.0) == 1.0
    assert expansion_coefficient(1, 2, 1, 0.0, 0.0) == 0.0


@pytest.mark.integrals
@pytest.mark.quick
def test_gaussian_product_theorem():
    """乘积 Gaussian 在任意点与两原函数乘积一致。"""
    a, b = 0.8, 1.7
    Ra = np.array([0.1, -0.4, 0.9])
    Rb = np.array([-0.6, 0.3, 0.2])
    g, Rp, cp = gaussian_product(a, b, Ra, Rb)
    assert g == pytest.approx(2.5)
    for r in (np.zeros(3), np.array([0.3, 0.2, -0.5]), np.array([1.0, -1.0, 2.0])):
        lhs = np.exp(-a * np.sum((r - Ra) ** 2)) * np.exp(-b * np.sum((r - Rb) ** 2))
        rhs = cp * np.exp(-g * np.sum((r - Rp) ** 2))
        assert np.isclose(lhs, rhs, rtol=1e-13)


@pytest.mark.integrals
@pytest.mark.quick
def test_cartesian_norm_uses_all_three_components():
    """归一化因子对 (lx, ly, lz) 的置换不变。"""
    alpha = 0.9
    n_x = cartesian_norm((2, 0, 1), alpha)
    n_z = cartesian_norm((1, 0, 2), alpha)
    n_y = cartesian_norm((0, 1, 2), alpha)
    assert np.isclose(n_x, n_z) and np.isclose(n_z, n_y)
    # s 函数
    assert np.isclose(cartesian_norm((0, 0, 0), alpha), (2 * alpha / np.pi) ** 0.75)
