from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import scipy.sparse as sp

from .errors import SchemaError


@dataclass(frozen=True, eq=False)
class ModelBundle:
    """Typed, read-only view of one metabolic reconstruction.

    Notation follows the usual constraint-based convention:
      S: (M, R)  rows = metabolites, columns = reactions

    Row i of S is aligned with metabolite_formulas[i] and column j with
    reaction_names[j]. Alignment is positional; nothing is reordered.

    Stored zeros in S are kept as ordinary (unconnected) entries.
    """

    stoichiometric_matrix: sp.csc_matrix
    metabolite_formulas: tuple[str, ...]
    reaction_names: tuple[str, ...]
    record_name: str = ""
    source: Path | None = None
    fields: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        S = self.stoichiometric_matrix
        if not sp.issparse(S):
            raise SchemaError(
                f"stoichiometric matrix must be sparse, got {type(S).__name__}",
                field="stoichiometric_matrix",
            )
        if S.ndim != 2:
            raise SchemaError(
                f"stoichiometric matrix must be 2-dimensional, got ndim={S.ndim}",
                field="stoichiometric_matrix",
            )
        S = sp.csc_matrix(S, dtype=np.float64, copy=True)
        # canonical (sorted, no duplicates) before the buffers are frozen
        S.sum_duplicates()
        for buf in (S.data, S.indices, S.indptr):
            buf.flags.writeable = False
        object.__setattr__(self, "stoichiometric_matrix", S)

        mets = tuple(self.metabolite_formulas)
        rxns = tuple(self.reaction_names)
        object.__setattr__(self, "metabolite_formulas", mets)
        object.__setattr__(self, "reaction_names", rxns)
        object.__setattr__(self, "fields", frozenset(self.fields))

        M, R = S.shape
        if M != len(mets):
            raise SchemaError(
                f"S has M={M} rows but {len(mets)} metabolite formulas",
                field="metabolite_formulas",
            )
        if R != len(rxns):
            raise SchemaError(
                f"S has R={R} columns but {len(rxns)} reaction names",
                field="reaction_names",
            )

    @property
    def n_metabolites(self) -> int:
        return int(self.stoichiometric_matrix.shape[0])

    @property
    def n_reactions(self) -> int:
        return int(self.stoichiometric_matrix.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return self.n_metabolites, self.n_reactions
