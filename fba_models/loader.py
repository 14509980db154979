"""Load a COBRA-style model record from a MATLAB .mat container.

A .mat file holds named top-level records; a COBRA reconstruction is a struct
whose fields include (among many others):

  S            sparse (M, R) stoichiometric matrix
  metFormulas  (M,) cell array of metabolite formulas
  rxns         (R,) cell array of reaction identifiers

load_model() reads exactly one record and narrows the untyped mapping that
scipy.io.loadmat returns into a ModelBundle. Anything that does not conform
raises SchemaError at this boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import numpy as np
from scipy.io import loadmat, whosmat
from scipy.io.matlab import MatReadError, mat_struct

from .bundle import ModelBundle
from .config import FieldMap
from .errors import ModelFileError, RecordNotFoundError, SchemaError
from .utils import as_sparse_matrix, as_text_sequence, count_explicit_zeros

logger = logging.getLogger(__name__)


def _check_path(file_path: str | Path) -> Path:
    p = Path(file_path)
    if not p.exists():
        raise FileNotFoundError(f"Model file not found: {p}")
    if not p.is_file():
        raise FileNotFoundError(f"Model path is not a regular file: {p}")
    return p


def _list_records(fh, p: Path) -> list[str]:
    try:
        return [name for name, _shape, _cls in whosmat(fh)]
    except NotImplementedError as e:
        # v7.3 files are HDF5 underneath
        raise ModelFileError(f"Unsupported MATLAB file version (v7.3/HDF5?): {p}") from e
    except (MatReadError, ValueError, TypeError, EOFError) as e:
        raise ModelFileError(f"Not a readable MATLAB container: {p} ({e})") from e


def list_records(file_path: str | Path) -> list[str]:
    """Return the names of the top-level records stored in a .mat file."""
    p = _check_path(file_path)
    with p.open("rb") as fh:
        return _list_records(fh, p)


def _record_to_mapping(value: Any, *, record_name: str) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)

    if isinstance(value, mat_struct):
        return {name: getattr(value, name) for name in value._fieldnames}

    # struct_as_record=True: a (1, 1) structured array
    if isinstance(value, np.ndarray) and value.dtype.names is not None:
        if value.size != 1:
            raise SchemaError(
                f"record {record_name!r} is a struct array of size {value.size}, expected a single struct"
            )
        el = value.reshape(-1)[0]
        return {name: el[name] for name in value.dtype.names}

    raise SchemaError(
        f"record {record_name!r} must be a struct/mapping, got {type(value).__name__}"
    )


def parse_record(
    record: Any,
    *,
    record_name: str = "",
    field_map: FieldMap | None = None,
    source: Path | None = None,
) -> ModelBundle:
    """Narrow a deserialized record into a ModelBundle.

    Args:
        record: mapping-like record (dict, mat_struct or 1x1 struct array)
        record_name: name used in error messages and stored on the bundle
        field_map: container keys for the three required fields
        source: file the record came from (informational)

    Raises:
        SchemaError: the record is not a mapping, a required field is absent,
            or a field has an incompatible type or shape
    """
    fm = field_map if field_map is not None else FieldMap()
    data = _record_to_mapping(record, record_name=record_name)

    missing = [key for key in fm.required_keys() if key not in data]
    if missing:
        raise SchemaError(
            f"record {record_name!r} is missing required field(s): {', '.join(missing)}",
            field=missing[0],
        )

    S = as_sparse_matrix(data[fm.stoichiometric_matrix], field=fm.stoichiometric_matrix)
    mets = as_text_sequence(data[fm.metabolite_formulas], field=fm.metabolite_formulas)
    rxns = as_text_sequence(data[fm.reaction_names], field=fm.reaction_names)

    n_zero = count_explicit_zeros(S)
    if n_zero:
        logger.debug("record %r stores %d explicit zero coefficient(s)", record_name, n_zero)

    return ModelBundle(
        stoichiometric_matrix=S,
        metabolite_formulas=mets,
        reaction_names=rxns,
        record_name=record_name,
        source=source,
        fields=frozenset(str(k) for k in data),
    )


def load_model(
    file_path: str | Path,
    record_name: str,
    *,
    field_map: FieldMap | None = None,
) -> ModelBundle:
    """Load the record `record_name` from a .mat file into a ModelBundle.

    The file handle is scoped to this call and released on every exit path.
    Only the requested record is deserialized.

    Raises:
        FileNotFoundError: `file_path` does not resolve to a file
        ModelFileError: the file is not a readable MATLAB container
        RecordNotFoundError: `record_name` is not a top-level record
        SchemaError: the record does not have the expected fields/shapes
    """
    p = _check_path(file_path)
    logger.info("Loading model record %r from %s", record_name, p)

    with p.open("rb") as fh:
        available = _list_records(fh, p)
        if record_name not in available:
            raise RecordNotFoundError(record_name, available)

        fh.seek(0)
        try:
            contents = loadmat(
                fh,
                variable_names=[record_name],
                squeeze_me=False,
                struct_as_record=True,
                chars_as_strings=True,
            )
        except (MatReadError, ValueError, TypeError, EOFError) as e:
            raise ModelFileError(f"Failed to read record {record_name!r} from {p}: {e}") from e

    if record_name not in contents:
        raise RecordNotFoundError(record_name, available)

    bundle = parse_record(
        contents[record_name],
        record_name=record_name,
        field_map=field_map,
        source=p,
    )
    logger.debug("record %r fields: %s", record_name, sorted(bundle.fields))
    logger.info(
        "Loaded model %r: %d metabolites x %d reactions (nnz=%d)",
        record_name,
        bundle.n_metabolites,
        bundle.n_reactions,
        bundle.stoichiometric_matrix.nnz,
    )
    return bundle


def to_dense_matrix(bundle: ModelBundle) -> np.ndarray:
    """Materialize S as a dense (M, R) float array with explicit zeros.

    Memory is proportional to M*R; intended for inspection of small models.
    Every call returns a new array.
    """
    return bundle.stoichiometric_matrix.toarray()


def field_names(bundle: ModelBundle) -> set[str]:
    """Return the names of all top-level fields found in the bundle's record."""
    return set(bundle.fields)
