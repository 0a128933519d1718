"""Exception hierarchy for fatal specgen failures."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SpecgenError(RuntimeError):
    """Base class for errors that abort generation."""


class ConfigError(SpecgenError):
    """Raised when the configuration file cannot be parsed."""


class ModelImportError(SpecgenError):
    """Raised when a ``module:Name`` model reference cannot be resolved."""


class SourceParseError(SpecgenError):
    """Raised when a source file is not valid Python."""

    def __init__(self, path: Path, message: str, line: Optional[int] = None) -> None:
        self.path = Path(path)
        self.line = line
        location = f"{self.path}:{line}" if line else str(self.path)
        super().__init__(f"Failed to parse {location}: {message}")


__all__ = ["ConfigError", "ModelImportError", "SourceParseError", "SpecgenError"]
