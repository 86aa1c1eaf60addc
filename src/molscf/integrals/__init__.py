"""Gaussian 分子积分子包

本子包实现 RHF 所需的全部分子积分：

- **Boys 函数** (`boys.py`): :math:`F_\\nu(x)`，Taylor 分支 + 不完全 Gamma 函数
- **公共工具** (`gaussian.py`): 阶乘查表、Gaussian 乘积定理、展开系数、归一化
- **核吸引** (`nuclear.py`): Cook 解析公式与核吸引矩阵组装
- **单电子** (`one_electron.py`): 重叠、动能、核心哈密顿
- **双电子** (`two_electron.py`): McMurchie–Davidson 电子排斥积分与 G 矩阵

积分计算是整个程序的主要耗时部分；核吸引矩阵组装对
:math:`(i, j, k, l, C)` 各项相互独立，本实现按串行方式逐项计算。
"""

from .boys import boys, boys_array
from .gaussian import (
    IntegralIndexError,
    binomial,
    cartesian_norm,
    double_factorial,
    expansion_coefficient,
    factorial,
    gaussian_product,
)
from .nuclear import (
    axis_terms,
    nuclear_attraction_matrix,
    nuclear_attraction_primitive,
    nuclear_kernel,
)
from .one_electron import core_hamiltonian, kinetic_matrix, overlap_matrix
from .two_electron import eri_tensor, two_electron_matrix

__all__ = [
    # Boys 函数
    "boys",
    "boys_array",
    # 公共工具
    "IntegralIndexError",
    "factorial",
    "double_factorial",
    "binomial",
    "gaussian_product",
    "expansion_coefficient",
    "cartesian_norm",
    # 核吸引
    "nuclear_kernel",
    "axis_terms",
    "nuclear_attraction_primitive",
    "nuclear_attraction_matrix",
    # 单电子 / 双电子
    "overlap_matrix",
    "kinetic_matrix",
    "core_hamiltonian",
    "eri_tensor",
    "two_electron_matrix",
]
