"""molscf 包
=================

面向教学的分子限制性 Hartree–Fock（RHF）最小实现，使用笛卡尔 Gaussian 基组。

本包提供：

- Gaussian 分子积分：Boys 函数、核吸引（Cook 解析公式）、重叠/动能、
  电子排斥（McMurchie–Davidson）
- 初始猜测：核心哈密顿与扩展 Hückel
- DIIS 收敛加速
- RHF 自洽场驱动器（失败时抛出类型化异常而非退出进程）

注：本项目所有文档与注释均使用中文，Docstring 采用 Sphinx + NumPy 风格，公式使用 ``:math:`` 标记。
"""

from molscf.basis import (
    ContractedBasisFunction,
    GaussianPrimitive,
    Molecule,
    Nucleus,
    sto3g_basis,
)
from molscf.diis import DIIS
from molscf.integrals import (
    IntegralIndexError,
    boys,
    nuclear_attraction_matrix,
    nuclear_attraction_primitive,
)
from molscf.scf import RHFConfig, RHFResult, SCFConvergenceError, SCFDriver, run_rhf

__all__ = [
    "GaussianPrimitive",
    "ContractedBasisFunction",
    "Nucleus",
    "Molecule",
    "sto3g_basis",
    "boys",
    "nuclear_attraction_primitive",
    "nuclear_attraction_matrix",
    "IntegralIndexError",
    "DIIS",
    "SCFDriver",
    "SCFConvergenceError",
    "RHFConfig",
    "RHFResult",
    "run_rhf",
]

__version__ = "0.1.0"
