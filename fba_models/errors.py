"""Error taxonomy for model loading.

All loading failures are deterministic and data-dependent, so nothing here
is retried. A missing file surfaces as the built-in FileNotFoundError.
"""

from __future__ import annotations

from typing import Sequence


class ModelLoadError(Exception):
    """Base class for failures while turning a container into a ModelBundle."""


class ModelFileError(ModelLoadError, OSError):
    """The file exists but is not a readable MATLAB container."""


class RecordNotFoundError(ModelLoadError, KeyError):
    """The requested top-level record is absent from the container."""

    def __init__(self, record_name: str, available: Sequence[str] = ()):
        self.record_name = record_name
        self.available = tuple(available)
        super().__init__(record_name)

    def __str__(self) -> str:
        avail = ", ".join(self.available) if self.available else "<none>"
        return f"record {self.record_name!r} not found (available: {avail})"


class SchemaError(ModelLoadError, ValueError):
    """A required field is missing, has the wrong shape, or the wrong type."""

    def __init__(self, message: str, *, field: str | None = None):
        self.field = field
        super().__init__(message)


class EntryNotFoundError(LookupError):
    """A reaction or metabolite lookup did not match any entry of the bundle."""


class ConfigError(ValueError):
    """Raised when a config file cannot be loaded or has invalid structure."""
