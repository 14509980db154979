"""Where a model lives and which container keys hold its fields.

A config file (YAML or JSON) looks like:

    data_dir: data
    model_file_name: modelReg.mat
    model_name: modelReg
    field_map:
      stoichiometric_matrix: S
      metabolite_formulas: metFormulas
      reaction_names: rxns

Every key is optional. A relative data_dir is resolved against the directory
holding the config file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import yaml

from .errors import ConfigError

if TYPE_CHECKING:
    from .bundle import ModelBundle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldMap:
    """Container keys of the fields a ModelBundle is built from (COBRA names)."""

    stoichiometric_matrix: str = "S"
    metabolite_formulas: str = "metFormulas"
    reaction_names: str = "rxns"

    def required_keys(self) -> tuple[str, str, str]:
        return (self.stoichiometric_matrix, self.metabolite_formulas, self.reaction_names)


@dataclass(frozen=True)
class ModelSource:
    """Location of one model record on disk."""

    data_dir: Path = Path("data")
    model_file_name: str = "modelReg.mat"
    model_name: str = "modelReg"
    field_map: FieldMap = field(default_factory=FieldMap)

    @property
    def model_path(self) -> Path:
        return self.data_dir / self.model_file_name

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base_dir: str | Path | None = None) -> "ModelSource":
        """Build a ModelSource from config keys; a null value means "use the default"."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        fm_raw = data.get("field_map") or {}
        if not isinstance(fm_raw, Mapping):
            raise ConfigError(f"field_map must be a mapping, got: {type(fm_raw).__name__}")
        fm_known = {f.name for f in fields(FieldMap)}
        fm_unknown = sorted(set(fm_raw) - fm_known)
        if fm_unknown:
            raise ConfigError(f"Unknown field_map key(s): {', '.join(fm_unknown)}")

        data_dir = Path(_text_value(data, "data_dir", "data"))
        if base_dir is not None and not data_dir.is_absolute():
            data_dir = Path(base_dir) / data_dir

        return cls(
            data_dir=data_dir,
            model_file_name=_text_value(data, "model_file_name", cls.model_file_name),
            model_name=_text_value(data, "model_name", cls.model_name),
            field_map=FieldMap(**{
                k: _text_value(fm_raw, k, getattr(FieldMap, k), prefix="field_map.")
                for k in fm_raw
            }),
        )


def _text_value(data: Mapping[str, Any], key: str, default: str, *, prefix: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, (str, Path)) or not str(value):
        raise ConfigError(f"{prefix}{key} must be a non-empty string, got: {value!r}")
    return str(value)


def _read_yaml(f) -> Any:
    return yaml.safe_load(f)


_CONFIG_READERS = {
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
    ".json": json.load,
}


def load_config(path: str | Path) -> dict[str, Any]:
    """Read the raw key/value mapping of a model source config file.

    The reader is picked by extension (.yaml/.yml or .json). An empty file
    yields {}, which ModelSource.from_mapping turns into the defaults.
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Model source config not found: {p}")

    reader = _CONFIG_READERS.get(p.suffix.lower())
    if reader is None:
        raise ConfigError(
            f"Unsupported model source config {p.name}: "
            f"expected one of {', '.join(sorted(_CONFIG_READERS))}"
        )

    with p.open("r", encoding="utf-8") as f:
        try:
            data = reader(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot parse model source config {p}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Model source config {p} must hold a mapping of model keys, got: {type(data).__name__}"
        )
    return data


def load_model_source(path: str | Path) -> ModelSource:
    """Read a config file into a ModelSource (relative paths anchored at the file)."""
    p = Path(path)
    source = ModelSource.from_mapping(load_config(p), base_dir=p.parent)
    logger.debug("Model source from %s: %s", p, source)
    return source


def load_model_from_source(source: ModelSource) -> "ModelBundle":
    """Load the record a ModelSource points at."""
    # loader imports FieldMap from this module
    from .loader import load_model

    return load_model(source.model_path, source.model_name, field_map=source.field_map)
