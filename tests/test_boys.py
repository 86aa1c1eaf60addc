"""Boys 函数单元测试

测试 integrals/boys.py 的两个分支与分支边界连续性。
"""

import math

import numpy as np
import pytest
import sympy

from molscf.integrals.boys import BOYS_TAYLOR_THRESHOLD, boys, boys_array


def _boys_reference(nu: int, x) -> float:
    """sympy 高精度参考值 F_ν(x) = γ(ν+1/2, x) / (2 x^(ν+1/2))。"""
    a = sympy.Rational(2 * nu + 1, 2)
    xs = sympy.nsimplify(x)
    return float((sympy.lowergamma(a, xs) / (2 * xs**a)).evalf(30))


@pytest.mark.integrals
@pytest.mark.quick
@pytest.mark.parametrize("nu", [0, 1, 2, 3, 6])
def test_boys_at_zero(nu):
    """F_ν(0) = 1/(2ν+1)。"""
    assert boys(nu, 0.0) == pytest.approx(1.0 / (2 * nu + 1), abs=1e-15)


@pytest.mark.integrals
@pytest.mark.quick
@pytest.mark.parametrize("x", [1e-3, 0.5, 2.0, 15.0, 120.0, 400.0])
def test_boys_f0_matches_erf(x):
    """F_0(x) = (1/2) sqrt(π/x) erf(sqrt(x))。"""
    expected = 0.5 * math.sqrt(math.pi / x) * math.erf(math.sqrt(x))
    assert np.isclose(boys(0, x), expected, rtol=1e-12, atol=0.0)


@pytest.mark.integrals
@pytest.mark.parametrize(
    "nu, x",
    [(1, "0.3"), (2, "2.5"), (3, "7"), (4, "30"), (6, "50"), (8, "250")],
)
def test_boys_high_precision_reference(nu, x):
    """与 sympy 不完全 Gamma 函数的高精度值比较（相对误差 < 1e-10）。"""
    ref = _boys_reference(nu, x)
    val = boys(nu, float(x))
    assert abs(val - ref) <= 1e-10 * abs(ref), f"F_{nu}({x}) = {val}，参考值 {ref}"


@pytest.mark.integrals
@pytest.mark.quick
@pytest.mark.parametrize("nu", [0, 1, 2, 3])
def test_boys_continuous_across_taylor_threshold(nu):
    """Taylor 分支与 Gamma 分支在 x = 1e-6 附近连续（差 < 1e-8）。"""
    below = boys(nu, BOYS_TAYLOR_THRESHOLD)
    above = boys(nu, BOYS_TAYLOR_THRESHOLD * (1.0 + 1e-6))
    assert abs(below - above) < 1e-8


@pytest.mark.integrals
def test_boys_monotone_decreasing_in_x_and_nu():
    """F_ν(x) 随 x 与 ν 单调递减。"""
    xs = np.linspace(0.0, 40.0, 81)
    for nu in range(4):
        vals = np.array([boys(nu, x) for x in xs])
        assert np.all(np.diff(vals) < 0)
    for x in (0.1, 1.0, 10.0):
        vals = boys_array(6, x)
        assert np.all(np.diff(vals) < 0)


@pytest.mark.integrals
def test_boys_repeated_calls_identical():
    """纯函数：相同参数重复调用结果一致。"""
    first = boys(3, 4.2)
    assert all(boys(3, 4.2) == first for _ in range(5))


@pytest.mark.integrals
@pytest.mark.quick
def test_boys_invalid_arguments():
    with pytest.raises(ValueError, match="阶数必须非负"):
        boys(-1, 1.0)
    with pytest.raises(ValueError, match="自变量必须非负"):
        boys(0, -0.1)
