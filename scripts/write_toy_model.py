#!/usr/bin/env python3
"""
Write a small COBRA-style model to a .mat file.

The record mimics the layout of a COBRA toolbox model struct (S, metFormulas,
rxns, plus a few extra fields) so the loader and demos can be tried without a
genome-scale reconstruction.

Network (toy glycolysis fragment):
  R1: GLC + ATP --> G6P + ADP
  R2: G6P --> F6P
  R3: F6P + ATP --> FBP + ADP
  EX_glc: --> GLC
  EX_fbp: FBP -->

Usage:
    python scripts/write_toy_model.py --out data/modelReg.mat --record modelReg
"""

import argparse
from pathlib import Path

import numpy as np
import scipy.sparse as sp
from scipy.io import savemat

METS = ["C6H12O6", "C10H12N5O13P3", "C6H11O9P", "C10H12N5O10P2", "C6H11O9P", "C6H10O12P2"]
MET_IDS = ["glc", "atp", "g6p", "adp", "f6p", "fbp"]
RXNS = ["R1", "R2", "R3", "EX_glc", "EX_fbp"]


def toy_stoichiometry():
    """Return the toy S as a sparse (M, R) matrix."""
    # (metabolite, reaction, coefficient)
    entries = [
        (0, 0, -1), (1, 0, -1), (2, 0, 1), (3, 0, 1),   # R1
        (2, 1, -1), (4, 1, 1),                          # R2
        (4, 2, -1), (1, 2, -1), (5, 2, 1), (3, 2, 1),   # R3
        (0, 3, 1),                                      # EX_glc
        (5, 4, -1),                                     # EX_fbp
    ]
    rows, cols, vals = zip(*entries)
    return sp.csc_matrix((vals, (rows, cols)), shape=(len(METS), len(RXNS)), dtype=float)


def main():
    parser = argparse.ArgumentParser(description="Write a toy COBRA-style .mat model")
    parser.add_argument('--out', default='data/modelReg.mat')
    parser.add_argument('--record', default='modelReg')
    args = parser.parse_args()

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)

    nR = len(RXNS)
    record = {
        "S": toy_stoichiometry(),
        "metFormulas": np.array(METS, dtype=object),
        "mets": np.array(MET_IDS, dtype=object),
        "rxns": np.array(RXNS, dtype=object),
        "lb": np.array([0.0, -1000.0, 0.0, 0.0, 0.0]).reshape(-1, 1),
        "ub": np.full((nR, 1), 1000.0),
        "c": np.zeros((nR, 1)),
    }
    savemat(out, {args.record: record}, do_compression=True)
    print(f"Saved: {out} (record {args.record!r}, {len(METS)} x {nR})")


if __name__ == '__main__':
    main()
