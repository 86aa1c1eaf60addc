import json

import numpy as np
import pytest

from molscf import Molecule, RHFConfig, run_rhf
from molscf.io import export_result_json, format_matrix


@pytest.mark.quick
def test_format_matrix_with_labels():
    text = format_matrix(np.array([[1.0, -0.5], [-0.5, 2.0]]), ["H-1s", "H-1s"], precision=3)
    lines = text.splitlines()
    assert len(lines) == 3
    assert lines[1].startswith("H-1s")
    assert "-0.500" in lines[1]
    with pytest.raises(ValueError):
        format_matrix(np.eye(2), ["a"])


@pytest.mark.quick
def test_format_vector_as_column():
    lines = format_matrix(np.array([0.1, 0.2, 0.3])).splitlines()
    assert len(lines) == 4


@pytest.mark.scf
def test_export_result_json(tmp_path):
    mol = Molecule.from_atoms([("H", (0.0, 0.0, 0.0)), ("H", (0.0, 0.0, 1.4))])
    res = run_rhf(RHFConfig(molecule=mol))
    out = tmp_path / "sub" / "h2.json"
    export_result_json(out, res)
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["converged"] is True
    assert data["iterations"] == res.iterations
    assert np.isclose(data["E_total"], res.energy)
    assert len(data["orbital_energies"]) == 2
    assert len(data["density_rms_history"]) == res.iterations
