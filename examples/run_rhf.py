#!/usr/bin/env python
"""分子 RHF 计算入口。

内置 H2、HeH⁺、H2O 三个 STO-3G 算例，可选择初始猜测、DIIS 开关与收敛参数，
并与参考能量对比。
"""

import argparse
import sys
import time
from pathlib import Path

# 添加 src 到路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from molscf import Molecule, RHFConfig, SCFConvergenceError, run_rhf, sto3g_basis
from molscf.io import export_result_json, format_matrix


# 预设分子：(原子列表, 净电荷, Slater 指数覆盖, 参考总能量 Ha)
PRESETS = {
    "h2": (
        [("H", (0.0, 0.0, 0.0)), ("H", (0.0, 0.0, 1.4))],
        0,
        None,
        -1.116714,  # Szabo & Ostlund
    ),
    "heh+": (
        [("He", (0.0, 0.0, 0.0)), ("H", (0.0, 0.0, 1.4632))],
        1,
        {2: (2.0925, None)},
        -2.860662,  # Szabo & Ostlund
    ),
    "h2o": (
        [
            ("O", (0.0, -0.143225816552, 0.0)),
            ("H", (1.638036840407, 1.136548822547, 0.0)),
            ("H", (-1.638036840407, 1.136548822547, 0.0)),
        ],
        0,
        None,
        -74.942079928,  # Crawford 编程项目
    ),
}


def build_config(args):
    """根据参数构建 RHFConfig。"""
    atoms, charge, zeta, _ = PRESETS[args.molecule]
    mol = Molecule.from_atoms(atoms, charge=charge)
    return RHFConfig(
        molecule=mol,
        basis=sto3g_basis(mol, zeta=zeta),
        guess=args.guess,
        use_diis=args.diis,
        diis_threshold=args.diis_threshold,
        diis_max_vectors=args.diis_max_vectors,
        tol=args.tol,
        maxiter=args.maxiter,
    )


def print_results(result, cfg, args):
    """格式化输出结果。"""
    print("\n" + "=" * 60)
    print(f"RHF/STO-3G 结果 ({args.molecule}, 电子数 {cfg.molecule.n_electrons})")
    print("=" * 60)

    print(f"\n状态: ✅ 收敛 ({result.iterations} 轮)")
    if result.diis_iteration is not None:
        print(f"DIIS 启用于第 {result.diis_iteration} 轮")

    print(f"\n总能量: {result.energy:.10f} Ha")
    print(f"  电子能: {result.electronic_energy:.10f} Ha")
    print(f"  核排斥能: {result.nuclear_repulsion:.10f} Ha")

    n_occ = cfg.molecule.n_electrons // 2
    print("\n轨道能级:")
    print(f"{'轨道':>6} {'占据':>6} {'epsilon (Ha)':>15}")
    print("-" * 32)
    for k, eps in enumerate(result.orbital_energies):
        occ = 2.0 if k < n_occ else 0.0
        print(f"{k + 1:>6} {occ:6.1f} {eps:15.6f}")

    if args.show_density:
        labels = [bf.label for bf in cfg.basis]
        print("\n密度矩阵 P:")
        print(format_matrix(result.density, labels))


def compare_with_ref(result, args):
    ref = PRESETS[args.molecule][3]
    err = result.energy - ref
    print(f"\n参考能量: {ref:.8f} Ha")
    print(f"偏差: {err:+.3e} Ha")


def main():
    parser = argparse.ArgumentParser(
        description="分子 RHF/STO-3G 计算入口",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--molecule", type=str, default="h2", choices=sorted(PRESETS), help="预设分子"
    )
    parser.add_argument(
        "--guess", type=str, default="core", choices=["core", "huckel"], help="初始猜测"
    )

    # SCF 参数
    parser.add_argument("--tol", type=float, default=1e-6, help="密度 RMS 收敛阈值")
    parser.add_argument("--maxiter", type=int, default=1000, help="最大迭代次数")
    parser.add_argument(
        "--no-diis", dest="diis", action="store_false", help="禁用 DIIS 加速"
    )
    parser.add_argument(
        "--diis-threshold", type=float, default=0.1, help="DIIS 激活阈值（误差最大元素）"
    )
    parser.add_argument(
        "--diis-max-vectors", type=int, default=None, help="DIIS 历史容量（默认不限）"
    )

    # 功能参数
    parser.add_argument("--export", type=str, default=None, help="导出结果到 JSON")
    parser.add_argument("--show-density", action="store_true", help="打印收敛密度矩阵")
    parser.add_argument(
        "--verbose", type=int, default=1, choices=[0, 1, 2], help="输出级别（2 打印中间矩阵）"
    )
    parser.add_argument("--progress-every", type=int, default=10, help="进度输出间隔")

    args = parser.parse_args()

    cfg = build_config(args)

    t_start = time.time()
    try:
        result = run_rhf(cfg, verbose=args.verbose, progress_every=args.progress_every)
    except SCFConvergenceError as e:
        print(f"\n❌ {e}")
        print("   可尝试 --guess huckel 或增大 --maxiter")
        sys.exit(1)
    t_elapsed = time.time() - t_start

    print_results(result, cfg, args)
    compare_with_ref(result, args)
    print(f"\n⏱️  总用时: {t_elapsed:.2f}s")

    if args.export:
        export_result_json(args.export, result)
        print(f"\n✅ 结果已导出到: {args.export}")


if __name__ == "__main__":
    main()
