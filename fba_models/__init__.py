"""Stoichiometric model bundles for flux balance analysis (FBA) coursework.

Core contract:
- input: a MATLAB .mat container holding a COBRA-style model struct
- load_model(path, record) -> ModelBundle (S, metabolite formulas, reaction names)
- views: to_dense_matrix(), field_names(), and the sign-convention lookups in
  connectivity

No LP solver lives here; this package only loads and inspects models.
"""

from .bundle import ModelBundle
from .config import FieldMap, ModelSource
from .errors import (
    ConfigError,
    EntryNotFoundError,
    ModelFileError,
    ModelLoadError,
    RecordNotFoundError,
    SchemaError,
)
from .loader import field_names, list_records, load_model, parse_record, to_dense_matrix
