from __future__ import annotations

import numpy as np
import pytest
import scipy.sparse as sp
from scipy.io import savemat


def scenario_matrix() -> sp.csc_matrix:
    # 3x4 with (0,0)=-1, (1,1)=2, (2,3)=1
    return sp.csc_matrix(
        ([-1.0, 2.0, 1.0], ([0, 1, 2], [0, 1, 3])),
        shape=(3, 4),
    )


def cobra_record(S, mets, rxns, **extra) -> dict:
    record = {
        "S": S,
        "metFormulas": np.array(mets, dtype=object),
        "rxns": np.array(rxns, dtype=object),
    }
    record.update(extra)
    return record


@pytest.fixture
def write_mat(tmp_path):
    """Factory: write {name: value} to a .mat file under tmp_path, return its path."""

    def _write(variables: dict, name: str = "model.mat"):
        path = tmp_path / name
        savemat(path, variables)
        return path

    return _write


@pytest.fixture
def scenario_file(write_mat):
    record = cobra_record(
        scenario_matrix(),
        ["A", "B", "C"],
        ["r1", "r2", "r3", "r4"],
        lb=np.zeros((4, 1)),
        ub=np.full((4, 1), 1000.0),
    )
    return write_mat({"modelReg": record}, "modelReg.mat")
