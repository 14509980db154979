"""Sign-convention views of the stoichiometric matrix.

For a coefficient sigma_ij of S (metabolite i, reaction j):
  sigma_ij > 0  metabolite i is produced by reaction j
  sigma_ij = 0  metabolite i is not connected to reaction j
  sigma_ij < 0  metabolite i is consumed by reaction j

We provide:
- split_stoichiometry(): S = produced - consumed, both blocks >= 0
- reaction_participants() / metabolite_reactions(): per-column / per-row lookups
- reaction_equation(): "A + 2 B --> C" rendering
- connectivity_summary(): dead-end metabolites, empty reactions, stored zeros
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray

from .bundle import ModelBundle
from .errors import EntryNotFoundError
from .utils import FLOAT_TOL, count_explicit_zeros


@dataclass(frozen=True)
class ReactionParticipants:
    reaction: int
    consumed: NDArray[np.int64]             # metabolite rows with sigma < 0
    consumed_coeffs: NDArray[np.float64]    # |sigma|, aligned with consumed
    produced: NDArray[np.int64]             # metabolite rows with sigma > 0
    produced_coeffs: NDArray[np.float64]


@dataclass(frozen=True)
class MetaboliteUsage:
    metabolite: int
    consumed_by: NDArray[np.int64]  # reaction columns with sigma < 0
    produced_by: NDArray[np.int64]  # reaction columns with sigma > 0


@dataclass(frozen=True)
class ConnectivitySummary:
    n_metabolites: int
    n_reactions: int
    n_stored: int
    n_nonzero: int
    n_explicit_zeros: int
    dead_end_metabolites: tuple[int, ...]
    empty_reactions: tuple[int, ...]

    @property
    def density(self) -> float:
        cells = self.n_metabolites * self.n_reactions
        return 0.0 if cells == 0 else self.n_nonzero / cells


def _reaction_index(bundle: ModelBundle, reaction: int | str) -> int:
    if isinstance(reaction, str):
        try:
            return bundle.reaction_names.index(reaction)
        except ValueError:
            raise EntryNotFoundError(f"unknown reaction name: {reaction!r}") from None
    j = int(reaction)
    if not 0 <= j < bundle.n_reactions:
        raise EntryNotFoundError(f"reaction index {j} out of range for R={bundle.n_reactions}")
    return j


def _metabolite_index(bundle: ModelBundle, metabolite: int) -> int:
    i = int(metabolite)
    if not 0 <= i < bundle.n_metabolites:
        raise EntryNotFoundError(f"metabolite index {i} out of range for M={bundle.n_metabolites}")
    return i


def split_stoichiometry(
    bundle: ModelBundle,
    *,
    tol: float = FLOAT_TOL,
) -> tuple[sp.csc_matrix, sp.csc_matrix]:
    """Return (consumed, produced), non-negative (M, R) blocks with S = produced - consumed."""
    S = bundle.stoichiometric_matrix
    produced = S.multiply(S > tol).tocsc()
    consumed = (-S).multiply(S < -tol).tocsc()
    produced.eliminate_zeros()
    consumed.eliminate_zeros()
    return consumed, produced


def reaction_participants(
    bundle: ModelBundle,
    reaction: int | str,
    *,
    tol: float = FLOAT_TOL,
) -> ReactionParticipants:
    """Metabolites consumed and produced by one reaction (index or name)."""
    j = _reaction_index(bundle, reaction)
    S = bundle.stoichiometric_matrix
    start, stop = S.indptr[j], S.indptr[j + 1]
    rows = np.asarray(S.indices[start:stop], dtype=np.int64)
    vals = np.asarray(S.data[start:stop], dtype=np.float64)

    neg = vals < -tol
    pos = vals > tol
    return ReactionParticipants(
        reaction=j,
        consumed=rows[neg],
        consumed_coeffs=-vals[neg],
        produced=rows[pos],
        produced_coeffs=vals[pos],
    )


def metabolite_reactions(
    bundle: ModelBundle,
    metabolite: int,
    *,
    tol: float = FLOAT_TOL,
) -> MetaboliteUsage:
    """Reactions that consume / produce metabolite row i."""
    i = _metabolite_index(bundle, metabolite)
    row = bundle.stoichiometric_matrix[i, :].tocoo()
    cols = np.asarray(row.col, dtype=np.int64)
    vals = np.asarray(row.data, dtype=np.float64)
    order = np.argsort(cols, kind="stable")
    cols, vals = cols[order], vals[order]
    return MetaboliteUsage(
        metabolite=i,
        consumed_by=cols[vals < -tol],
        produced_by=cols[vals > tol],
    )


def _format_coeff(c: float) -> str:
    if abs(c - 1.0) < FLOAT_TOL:
        return ""
    if abs(c - round(c)) < FLOAT_TOL:
        return f"{int(round(c))} "
    return f"{c:g} "


def reaction_equation(
    bundle: ModelBundle,
    reaction: int | str,
    *,
    arrow: str = "-->",
    tol: float = FLOAT_TOL,
) -> str:
    """Render a reaction as 'A + 2 B --> C' using metabolite formulas as labels.

    Metabolites with an empty formula are labelled by their row index ('#3').
    """
    p = reaction_participants(bundle, reaction, tol=tol)

    def side(rows: NDArray[np.int64], coeffs: NDArray[np.float64]) -> str:
        terms = []
        for i, c in zip(rows, coeffs):
            label = bundle.metabolite_formulas[i] or f"#{i}"
            terms.append(f"{_format_coeff(float(c))}{label}")
        return " + ".join(terms)

    lhs = side(p.consumed, p.consumed_coeffs)
    rhs = side(p.produced, p.produced_coeffs)
    return f"{lhs} {arrow} {rhs}".strip()


def connectivity_summary(bundle: ModelBundle, *, tol: float = FLOAT_TOL) -> ConnectivitySummary:
    """Counts of connections plus rows/columns with no non-zero coefficient."""
    S = bundle.stoichiometric_matrix
    nonzero = abs(S) > tol
    row_deg = np.asarray(nonzero.sum(axis=1)).reshape(-1)
    col_deg = np.asarray(nonzero.sum(axis=0)).reshape(-1)

    return ConnectivitySummary(
        n_metabolites=bundle.n_metabolites,
        n_reactions=bundle.n_reactions,
        n_stored=int(S.nnz),
        n_nonzero=int(nonzero.sum()),
        n_explicit_zeros=count_explicit_zeros(S, tol=tol),
        dead_end_metabolites=tuple(int(i) for i in np.flatnonzero(row_deg == 0)),
        empty_reactions=tuple(int(j) for j in np.flatnonzero(col_deg == 0)),
    )
