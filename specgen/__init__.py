"""Generate OpenAPI 3 specifications from annotated Python HTTP handlers."""

from .generator import Document, ModelRegistry, generate_spec
from .orchestrator import generate_from_directory
from .parsers import parse_directory, parse_global_metadata

__version__ = "0.1.0"

__all__ = [
    "Document",
    "ModelRegistry",
    "generate_from_directory",
    "generate_spec",
    "parse_directory",
    "parse_global_metadata",
]
