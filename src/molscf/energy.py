from __future__ import annotations

import numpy as np

from .basis import Molecule

__all__ = ["nuclear_repulsion", "electronic_energy", "total_energy"]


def nuclear_repulsion(molecule: Molecule) -> float:
    r"""核排斥能 :math:`\sum_{A<B} Z_A Z_B / R_{AB}`。"""
    E = 0.0
    nuclei = molecule.nuclei
    for a in range(len(nuclei)):
        Ra = np.asarray(nuclei[a].position)
        for b in range(a):
            Rab = float(np.linalg.norm(Ra - np.asarray(nuclei[b].position)))
            if Rab < 1e-12:
                raise ValueError(f"原子核 {a} 与 {b} 重合，核排斥能发散")
            E += nuclei[a].charge * nuclei[b].charge / Rab
    return E


def electronic_energy(density: np.ndarray, fock: np.ndarray, h_core: np.ndarray) -> float:
    r"""电子能 :math:`\tfrac{1}{2}\sum_{ij} P_{ji}(H_{ij} + F_{ij})`。"""
    return 0.5 * float(np.sum(density * (h_core + fock)))


def total_energy(density: np.ndarray, fock: np.ndarray, h_core: np.ndarray, molecule: Molecule) -> float:
    """总能量 = 电子能 + 核排斥能。"""
    return electronic_energy(density, fock, h_core) + nuclear_repulsion(molecule)
