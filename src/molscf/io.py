from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

import numpy as np

__all__ = [
    "format_matrix",
    "export_result_json",
]


def format_matrix(m: np.ndarray, labels: Sequence[str] | None = None, precision: int = 6) -> str:
    """将矩阵（或向量）格式化为对齐的文本表格，用于详细输出。

    ``labels`` 若提供则作为行标签与列标题（如基函数标签）。
    """
    a = np.atleast_2d(np.asarray(m, dtype=float))
    if a.shape[0] == 1 and np.ndim(m) == 1:
        a = a.T
    nrow, ncol = a.shape
    width = precision + 8
    if labels is not None and len(labels) != nrow:
        raise ValueError(f"标签数 ({len(labels)}) 与行数 ({nrow}) 不一致")
    row_labels = list(labels) if labels is not None else [str(i) for i in range(nrow)]
    col_labels = list(labels) if (labels is not None and ncol == nrow) else [str(j) for j in range(ncol)]
    lw = max(len(s) for s in row_labels)

    lines = [" " * lw + "".join(f"{s:>{width}}" for s in col_labels)]
    for name, row in zip(row_labels, a):
        lines.append(f"{name:<{lw}}" + "".join(f"{x:>{width}.{precision}f}" for x in row))
    return "\n".join(lines)


def export_result_json(out_path: str | Path, result) -> None:
    """导出 RHF 结果（能量、迭代信息、轨道能）为 JSON。"""
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "converged": bool(result.converged),
        "iterations": int(result.iterations),
        "E_total": float(result.energy),
        "E_electronic": float(result.electronic_energy),
        "E_nuclear_repulsion": float(result.nuclear_repulsion),
        "orbital_energies": [float(e) for e in result.orbital_energies],
        "diis_iteration": result.diis_iteration,
        "density_rms_history": [float(x) for x in result.history],
    }
    with p.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
