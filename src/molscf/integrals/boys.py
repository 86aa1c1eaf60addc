r"""Boys 函数

.. math::

    F_\nu(x) = \int_0^1 t^{2\nu} e^{-x t^2}\,dt

所有含 :math:`1/r` 算符的 Gaussian 积分（核吸引、电子排斥）都归结为 Boys 函数。

数值策略
========

- :math:`x \le 10^{-6}`：一阶 Taylor 展开
  :math:`F_\nu(x) \approx \frac{1}{2\nu+1} - \frac{x}{2\nu+3}`，避免闭式在
  小 :math:`x` 处的相消误差。
- 其余：Tricomi 不完全 Gamma 函数
  :math:`\gamma^*(a, x) = x^{-a} P(a, x)`，

  .. math::

      F_\nu(x) = \tfrac{1}{2}\,\Gamma(\nu+\tfrac{1}{2})\,
      \gamma^*(\nu+\tfrac{1}{2}, x)

  其中 :math:`P` 为正则化下不完全 Gamma 函数（``scipy.special.gammainc``）。

References
----------
.. [Mamedov] Mamedov, B. A. (2004)
   "On the evaluation of Boys functions using downward recursion relation"
   J. Math. Chem. 36, 301
"""

from __future__ import annotations

import numpy as np
from scipy.special import gamma, gammainc

__all__ = ["BOYS_TAYLOR_THRESHOLD", "boys", "boys_array"]

BOYS_TAYLOR_THRESHOLD = 1e-6


def boys(nu: int, x: float) -> float:
    r"""计算 :math:`F_\nu(x)`。

    Parameters
    ----------
    nu : int
        阶数 :math:`\nu \ge 0`。
    x : float
        自变量 :math:`x \ge 0`。

    Returns
    -------
    float
        Boys 函数值。

    Examples
    --------
    >>> round(boys(0, 0.0), 12)
    1.0
    """
    if nu < 0:
        raise ValueError(f"Boys 函数阶数必须非负，当前值: {nu}")
    if x < 0.0:
        raise ValueError(f"Boys 函数自变量必须非负，当前值: {x}")
    if x <= BOYS_TAYLOR_THRESHOLD:
        return 1.0 / (2.0 * nu + 1.0) - x / (2.0 * nu + 3.0)
    a = nu + 0.5
    return float(0.5 * gamma(a) * gammainc(a, x) * x ** (-a))


def boys_array(nu_max: int, x: float) -> np.ndarray:
    r"""一次性返回 :math:`F_0(x), \ldots, F_{\nu_{max}}(x)`。"""
    return np.array([boys(nu, x) for nu in range(nu_max + 1)])
