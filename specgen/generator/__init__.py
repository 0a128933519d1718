"""Document generation: model registry, schema synthesis and assembly."""

from .assembler import SpecAssembler, generate_spec
from .openapi import Diagnostic, Document
from .registry import ModelRegistry
from .schema import Schema, SchemaSynthesizer
from .writer import to_json, to_yaml, write_document

__all__ = [
    "Diagnostic",
    "Document",
    "ModelRegistry",
    "Schema",
    "SchemaSynthesizer",
    "SpecAssembler",
    "generate_spec",
    "to_json",
    "to_yaml",
    "write_document",
]
