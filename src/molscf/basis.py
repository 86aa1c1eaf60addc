r"""分子与 Gaussian 基组数据模型

本模块定义 RHF 计算所需的基本数据结构：

- :class:`GaussianPrimitive`：笛卡尔 Gaussian 原函数
- :class:`ContractedBasisFunction`：收缩基函数（共享中心与角动量）
- :class:`Nucleus` / :class:`Molecule`：原子核与分子几何
- :func:`cartesian_norm`：笛卡尔 Gaussian 归一化因子
- :func:`sto3g_basis`：内置 STO-3G 最小基（H–Ne）

笛卡尔 Gaussian 原函数定义为

.. math::

    g(\mathbf{r}) = N\,(x-A_x)^{l_x}(y-A_y)^{l_y}(z-A_z)^{l_z}
    \exp\left(-\alpha |\mathbf{r}-\mathbf{A}|^2\right)

基组顺序即矩阵行列索引顺序，在一次计算中必须保持不变。

References
----------
.. [STO3G] Hehre, W. J., Stewart, R. F. & Pople, J. A. (1969)
   "Self-Consistent Molecular-Orbital Methods. I."
   J. Chem. Phys. 51, 2657
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np

from .integrals.gaussian import cartesian_norm

__all__ = [
    "ANGSTROM_TO_BOHR",
    "GaussianPrimitive",
    "ContractedBasisFunction",
    "BasisSet",
    "Nucleus",
    "Molecule",
    "cartesian_norm",
    "cartesian_components",
    "sto3g_basis",
]

ANGSTROM_TO_BOHR = 1.0 / 0.529177210903

Vec3 = tuple[float, float, float]
LMN = tuple[int, int, int]

_ELEMENTS = ("H", "He", "Li", "Be", "B", "C", "N", "O", "F", "Ne")
_AXES = "xyz"


def _as_vec3(v: Iterable[float]) -> Vec3:
    arr = tuple(float(c) for c in v)
    if len(arr) != 3:
        raise ValueError(f"坐标必须是三维向量，当前长度: {len(arr)}")
    return arr  # type: ignore[return-value]


def _as_lmn(lmn: Iterable[int]) -> LMN:
    out = tuple(int(c) for c in lmn)
    if len(out) != 3:
        raise ValueError(f"角动量必须是三元组，当前长度: {len(out)}")
    if any(c < 0 for c in out):
        raise ValueError(f"角动量分量必须非负，当前值: {out}")
    return out  # type: ignore[return-value]


@dataclass(frozen=True)
class GaussianPrimitive:
    r"""笛卡尔 Gaussian 原函数（构造后不可变）。

    Attributes
    ----------
    exponent : float
        指数 :math:`\alpha > 0`。
    center : tuple[float, float, float]
        中心坐标（Bohr）。
    lmn : tuple[int, int, int]
        笛卡尔角动量 :math:`(l_x, l_y, l_z)`。
    """

    exponent: float
    center: Vec3
    lmn: LMN

    def __post_init__(self) -> None:
        if not self.exponent > 0.0:
            raise ValueError(f"Gaussian 指数必须为正，当前值: {self.exponent}")
        object.__setattr__(self, "center", _as_vec3(self.center))
        object.__setattr__(self, "lmn", _as_lmn(self.lmn))

    @property
    def norm(self) -> float:
        """原函数归一化因子。"""
        return cartesian_norm(self.lmn, self.exponent)


@dataclass(frozen=True)
class ContractedBasisFunction:
    r"""收缩基函数：若干原函数的固定线性组合。

    .. math::

        \phi(\mathbf{r}) = \sum_k D_k\, g_k(\mathbf{r};\alpha_k)

    所有原函数共享同一中心与角动量三元组。收缩系数 :math:`D_k` 作用于
    *已归一化* 的原函数，收缩函数本身不再额外归一化。

    Attributes
    ----------
    center : tuple[float, float, float]
        中心坐标（Bohr）。
    lmn : tuple[int, int, int]
        笛卡尔角动量。
    coefficients : tuple[float, ...]
        收缩系数 :math:`D_k`。
    exponents : tuple[float, ...]
        指数 :math:`\alpha_k`。
    label : str
        可读标签（如 ``"O-2px"``），仅用于打印。
    """

    center: Vec3
    lmn: LMN
    coefficients: tuple[float, ...]
    exponents: tuple[float, ...]
    label: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vec3(self.center))
        object.__setattr__(self, "lmn", _as_lmn(self.lmn))
        coeffs = tuple(float(c) for c in self.coefficients)
        exps = tuple(float(a) for a in self.exponents)
        if len(coeffs) != len(exps):
            raise ValueError(f"收缩系数 ({len(coeffs)}) 与指数 ({len(exps)}) 数量不一致")
        if not coeffs:
            raise ValueError("收缩基函数至少需要一个原函数")
        object.__setattr__(self, "coefficients", coeffs)
        object.__setattr__(self, "exponents", exps)

    @property
    def angular_momentum(self) -> int:
        return sum(self.lmn)

    @property
    def primitives(self) -> Iterator[tuple[float, GaussianPrimitive]]:
        """依次给出 ``(D_k, g_k)``。"""
        for d, a in zip(self.coefficients, self.exponents):
            yield d, GaussianPrimitive(a, self.center, self.lmn)

    def __len__(self) -> int:
        return len(self.coefficients)


BasisSet = list[ContractedBasisFunction]


@dataclass(frozen=True)
class Nucleus:
    """点电荷原子核。"""

    charge: int
    position: Vec3

    def __post_init__(self) -> None:
        if int(self.charge) != self.charge or self.charge <= 0:
            raise ValueError(f"核电荷必须为正整数，当前值: {self.charge}")
        object.__setattr__(self, "charge", int(self.charge))
        object.__setattr__(self, "position", _as_vec3(self.position))

    @property
    def symbol(self) -> str:
        if self.charge <= len(_ELEMENTS):
            return _ELEMENTS[self.charge - 1]
        return f"Z{self.charge}"


@dataclass(frozen=True)
class Molecule:
    r"""分子：原子核序列与总电荷。

    Attributes
    ----------
    nuclei : tuple[Nucleus, ...]
        原子核（顺序固定）。
    charge : int
        分子净电荷，电子数 :math:`N_e = \sum_A Z_A - q`。
    """

    nuclei: tuple[Nucleus, ...]
    charge: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "nuclei", tuple(self.nuclei))
        if not self.nuclei:
            raise ValueError("分子至少需要一个原子核")
        if self.n_electrons < 0:
            raise ValueError(f"电子数为负: 核电荷和 {self.total_nuclear_charge}，净电荷 {self.charge}")

    @classmethod
    def from_atoms(
        cls,
        atoms: Sequence[tuple[str | int, Iterable[float]]],
        charge: int = 0,
        unit: str = "bohr",
    ) -> "Molecule":
        """由 ``[(元素符号或 Z, (x, y, z)), ...]`` 构造分子。

        ``unit`` 取 ``"bohr"`` 或 ``"angstrom"``。
        """
        if unit == "bohr":
            scale = 1.0
        elif unit == "angstrom":
            scale = ANGSTROM_TO_BOHR
        else:
            raise ValueError(f"不支持的长度单位: {unit}，仅支持 'bohr' 或 'angstrom'")
        nuclei = []
        for element, xyz in atoms:
            Z = _atomic_number(element)
            pos = tuple(scale * c for c in _as_vec3(xyz))
            nuclei.append(Nucleus(Z, pos))
        return cls(tuple(nuclei), charge=charge)

    @property
    def total_nuclear_charge(self) -> int:
        return sum(n.charge for n in self.nuclei)

    @property
    def n_electrons(self) -> int:
        return self.total_nuclear_charge - self.charge

    def __len__(self) -> int:
        return len(self.nuclei)


def _atomic_number(element: str | int) -> int:
    if isinstance(element, (int, np.integer)):
        return int(element)
    key = element.strip().capitalize()
    if key not in _ELEMENTS:
        raise ValueError(f"不支持的元素符号: {element}")
    return _ELEMENTS.index(key) + 1


def cartesian_components(l: int) -> list[LMN]:
    """角动量为 ``l`` 的壳层的笛卡尔分量（按 x > y > z 字典序）。"""
    if l < 0:
        raise ValueError(f"角动量必须非负，当前值: {l}")
    out: list[LMN] = []
    for lx in range(l, -1, -1):
        for ly in range(l - lx, -1, -1):
            out.append((lx, ly, l - lx - ly))
    return out


def _component_label(lmn: LMN) -> str:
    return "".join(_AXES[k] * lmn[k] for k in range(3))


# 通用 STO-3G 展开（ζ = 1），按 ζ² 缩放指数
_STO3G_1S_EXPONENTS = (2.227660584, 0.4057711562, 0.1098175104)
_STO3G_1S_COEFFS = (0.1543289673, 0.5353281423, 0.4446345422)
_STO3G_2SP_EXPONENTS = (0.9942027296, 0.2310313333, 0.0751385848)
_STO3G_2S_COEFFS = (-0.09996722919, 0.3995128261, 0.7001154689)
_STO3G_2P_COEFFS = (0.1559162750, 0.6076837186, 0.3919573931)

# 标准分子 Slater 指数：Z -> (ζ_1s, ζ_2sp)
_STO3G_ZETA: dict[int, tuple[float, float | None]] = {
    1: (1.24, None),
    2: (1.69, None),
    3: (2.69, 0.80),
    4: (3.68, 1.15),
    5: (4.68, 1.50),
    6: (5.67, 1.72),
    7: (6.67, 1.95),
    8: (7.66, 2.25),
    9: (8.65, 2.55),
    10: (9.64, 2.88),
}


def sto3g_basis(molecule: Molecule, zeta: dict[int, tuple[float, float | None]] | None = None) -> BasisSet:
    r"""为分子构造 STO-3G 最小基（H–Ne）。

    每个原子依次给出 1s；对 Li–Ne 另有 2s 与 2p（px, py, pz）。

    Parameters
    ----------
    molecule : Molecule
        分子几何。
    zeta : dict, optional
        覆盖默认 Slater 指数 ``{Z: (ζ_1s, ζ_2sp)}``（如 Szabo–Ostlund 中
        HeH⁺ 使用 :math:`\zeta_{He}=2.0925`）。

    Returns
    -------
    BasisSet
        收缩基函数列表。

    Examples
    --------
    >>> mol = Molecule.from_atoms([("H", (0, 0, 0)), ("H", (0, 0, 1.4))])
    >>> len(sto3g_basis(mol))
    2
    """
    table = dict(_STO3G_ZETA)
    if zeta:
        table.update(zeta)

    basis: BasisSet = []
    for nuc in molecule.nuclei:
        if nuc.charge not in table:
            raise ValueError(f"STO-3G 内置数据不支持 Z={nuc.charge}（仅支持 H–Ne）")
        z1s, z2sp = table[nuc.charge]
        exps_1s = tuple(a * z1s**2 for a in _STO3G_1S_EXPONENTS)
        basis.append(
            ContractedBasisFunction(nuc.position, (0, 0, 0), _STO3G_1S_COEFFS, exps_1s, f"{nuc.symbol}-1s")
        )
        if nuc.charge <= 2:
            continue
        if z2sp is None:
            raise ValueError(f"Z={nuc.charge} 缺少 2sp Slater 指数")
        exps_2sp = tuple(a * z2sp**2 for a in _STO3G_2SP_EXPONENTS)
        basis.append(
            ContractedBasisFunction(nuc.position, (0, 0, 0), _STO3G_2S_COEFFS, exps_2sp, f"{nuc.symbol}-2s")
        )
        for lmn in cartesian_components(1):
            basis.append(
                ContractedBasisFunction(
                    nuc.position, lmn, _STO3G_2P_COEFFS, exps_2sp, f"{nuc.symbol}-2p{_component_label(lmn)}"
                )
            )
    return basis

