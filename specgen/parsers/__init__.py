"""Source parsing: directives, inference and global metadata."""

from .annotations import AnnotationExtractor, parse_directory
from .directives import DirectiveParser, parse_directives, parse_security
from .inference import InferenceEngine, InferenceRules
from .metadata import parse_global_metadata
from .paths import normalize_path

__all__ = [
    "AnnotationExtractor",
    "DirectiveParser",
    "InferenceEngine",
    "InferenceRules",
    "normalize_path",
    "parse_directives",
    "parse_directory",
    "parse_global_metadata",
    "parse_security",
]
