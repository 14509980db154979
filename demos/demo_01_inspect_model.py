#!/usr/bin/env python3
"""
Demo 1: Inspecting a stoichiometric matrix
==========================================

Loads a COBRA-style model record from a .mat file and prints what the
lecture walks through:
  - the record's field names
  - S, both sparse (stored entries) and dense
  - metabolite formulas (rows) and reaction names (columns)

Sign convention of a coefficient sigma_ij:
  > 0 produced, = 0 not connected, < 0 consumed

Usage:
    python scripts/write_toy_model.py --out data/modelReg.mat
    python demos/demo_01_inspect_model.py --file data/modelReg.mat --record modelReg
    python demos/demo_01_inspect_model.py --config model.yaml --reaction R1 --spy notes/S_spy.png
"""

import argparse
import logging
from pathlib import Path

import numpy as np

from fba_models import field_names, load_model, to_dense_matrix
from fba_models.config import load_model_from_source, load_model_source
from fba_models.connectivity import connectivity_summary, reaction_equation

# dense preview only below this many cells
DENSE_PREVIEW_LIMIT = 2_000


def plot_spy(bundle, out):
    """Sparsity pattern of S, consumed (red) vs produced (blue)."""
    import matplotlib.pyplot as plt

    S = bundle.stoichiometric_matrix.tocoo()
    fig, ax = plt.subplots(figsize=(6, 4.5))
    neg = S.data < 0
    pos = S.data > 0
    ax.scatter(S.col[neg], S.row[neg], s=8, c='red', marker='s', label='consumed')
    ax.scatter(S.col[pos], S.row[pos], s=8, c='blue', marker='s', label='produced')
    ax.set_xlim(-0.5, bundle.n_reactions - 0.5)
    ax.set_ylim(bundle.n_metabolites - 0.5, -0.5)
    ax.set_xlabel(f'Reaction $j$ (R = {bundle.n_reactions})')
    ax.set_ylabel(f'Metabolite $i$ (M = {bundle.n_metabolites})')
    ax.set_title(f'Stoichiometric matrix: {bundle.record_name}')
    ax.legend(loc='upper right', fontsize=9)
    ax.grid(True, alpha=0.25)

    plt.tight_layout()
    plt.savefig(out, dpi=150, bbox_inches='tight')
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Inspect a COBRA-style .mat model")
    parser.add_argument('--file', help='Path to the .mat model file')
    parser.add_argument('--record', default='modelReg', help='Top-level record name')
    parser.add_argument('--config', help='YAML/JSON model source config (overrides --file/--record)')
    parser.add_argument('--reaction', help='Print the equation of this reaction (name or index)')
    parser.add_argument('--spy', help='Save a sparsity plot of S to this path')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config:
        bundle = load_model_from_source(load_model_source(args.config))
    elif args.file:
        bundle = load_model(args.file, args.record)
    else:
        parser.error("one of --file or --config is required")

    print("=" * 60)
    print(f"Model record: {bundle.record_name}  ({bundle.source})")
    print("=" * 60)
    print(f"\nFields: {', '.join(sorted(field_names(bundle)))}")
    print(f"S: {bundle.n_metabolites} metabolites x {bundle.n_reactions} reactions, "
          f"{bundle.stoichiometric_matrix.nnz} stored entries")

    if bundle.n_metabolites * bundle.n_reactions <= DENSE_PREVIEW_LIMIT:
        with np.printoptions(linewidth=120, suppress=True):
            print("\nDense S:")
            print(to_dense_matrix(bundle))
    else:
        print("\n(dense S omitted: model too large for a preview)")

    print(f"\nMetabolite formulas: {list(bundle.metabolite_formulas[:20])}")
    print(f"Reaction names: {list(bundle.reaction_names[:20])}")

    summary = connectivity_summary(bundle)
    print(f"\nDensity: {summary.density:.4f}")
    print(f"Explicit zeros stored: {summary.n_explicit_zeros}")
    print(f"Dead-end metabolites: {list(summary.dead_end_metabolites)}")
    print(f"Empty reactions: {list(summary.empty_reactions)}")

    if args.reaction is not None:
        rxn = int(args.reaction) if args.reaction.isdigit() else args.reaction
        print(f"\n{args.reaction}: {reaction_equation(bundle, rxn)}")

    if args.spy:
        Path(args.spy).parent.mkdir(parents=True, exist_ok=True)
        plot_spy(bundle, args.spy)
        print(f"\nSaved: {args.spy}")


if __name__ == '__main__':
    main()
