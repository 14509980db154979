"""Shared helpers for narrowing deserializer output.

scipy.io.loadmat hands back loosely typed values: numpy arrays of any rank,
object arrays holding cell contents, numpy string scalars, sparse matrices.
The helpers here coerce those into the plain shapes ModelBundle expects.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import scipy.sparse as sp

from .errors import SchemaError


# =============================================================================
# Tolerance constant for floating point comparisons
# =============================================================================
FLOAT_TOL = 1e-12


# =============================================================================
# Text sequences
# =============================================================================
def _as_text(x: Any, *, field: str, index: int) -> str:
    if isinstance(x, (str, np.str_)):
        return str(x)
    if isinstance(x, bytes):
        return x.decode("utf-8")
    if isinstance(x, np.ndarray):
        # empty MATLAB char cell -> ""
        if x.size == 0:
            return ""
        if x.dtype.kind in ("U", "S") and x.size == 1:
            return _as_text(x.reshape(-1)[0], field=field, index=index)
    raise SchemaError(
        f"{field}[{index}] must be text, got {type(x).__name__}",
        field=field,
    )


def as_text_sequence(value: Any, *, field: str) -> tuple[str, ...]:
    """Coerce a deserialized value into a 1-D tuple of strings.

    Accepts lists/tuples of text and numpy arrays of text or of cells holding
    text. A single string (what squeeze_me makes of a 1x1 cell) becomes a
    length-1 sequence. Any empty array is an empty sequence.
    """
    if isinstance(value, (str, np.str_, bytes)):
        return (_as_text(value, field=field, index=0),)

    if isinstance(value, (list, tuple)):
        return tuple(_as_text(x, field=field, index=i) for i, x in enumerate(value))

    if isinstance(value, np.ndarray):
        if value.size == 0:
            return ()
        if value.dtype.kind not in ("U", "S", "O"):
            raise SchemaError(
                f"{field} must be a sequence of text, got dtype {value.dtype}",
                field=field,
            )
        if value.ndim == 0:
            return (_as_text(value.item(), field=field, index=0),)
        # accept row/column vectors (1xN, Nx1), nothing wider
        if value.ndim > 1 and sum(d > 1 for d in value.shape) > 1:
            raise SchemaError(
                f"{field} must be 1-dimensional, got shape {value.shape}",
                field=field,
            )
        items = tuple(_as_text(x, field=field, index=i) for i, x in enumerate(value.reshape(-1)))
        # char matrix: rows are blank-padded to a common width
        if value.dtype.kind in ("U", "S") and value.size > 1:
            items = tuple(s.rstrip(" ") for s in items)
        return items

    raise SchemaError(
        f"{field} must be a sequence of text, got {type(value).__name__}",
        field=field,
    )


# =============================================================================
# Matrices
# =============================================================================
def as_sparse_matrix(value: Any, *, field: str) -> sp.csc_matrix:
    """Coerce a deserialized value into a 2-D float CSC matrix.

    Sparse input keeps its stored entries (including explicit zeros). Dense
    numeric 2-D arrays are converted.
    """
    if sp.issparse(value):
        if value.ndim != 2:
            raise SchemaError(f"{field} must be 2-dimensional, got ndim={value.ndim}", field=field)
        if value.dtype.kind not in ("b", "i", "u", "f"):
            raise SchemaError(f"{field} must be real numeric, got dtype {value.dtype}", field=field)
        return sp.csc_matrix(value, dtype=np.float64)

    if isinstance(value, np.ndarray):
        if value.ndim != 2:
            raise SchemaError(f"{field} must be 2-dimensional, got shape {value.shape}", field=field)
        if value.dtype.kind not in ("b", "i", "u", "f"):
            raise SchemaError(f"{field} must be real numeric, got dtype {value.dtype}", field=field)
        return sp.csc_matrix(value.astype(np.float64))

    raise SchemaError(
        f"{field} must be a sparse or dense numeric matrix, got {type(value).__name__}",
        field=field,
    )


def count_explicit_zeros(S: sp.spmatrix, *, tol: float = FLOAT_TOL) -> int:
    """Number of stored entries whose value is (numerically) zero."""
    return int(np.count_nonzero(np.abs(S.data) <= tol))
