"""Serialization of assembled documents to JSON and YAML."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from ..logging import get_logger
from .openapi import Document

_LOGGER = get_logger("generator.writer")


def to_json(document: Document, *, indent: int = 2) -> str:
    return json.dumps(document.to_dict(), indent=indent, ensure_ascii=False) + "\n"


def to_yaml(document: Document) -> str:
    return yaml.safe_dump(document.to_dict(), sort_keys=False, allow_unicode=True)


def write_document(document: Document, output: Path) -> Path:
    """Write ``document`` to ``output``; ``.yaml``/``.yml`` suffixes select YAML."""
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    if output.suffix.lower() in {".yaml", ".yml"}:
        text = to_yaml(document)
    else:
        text = to_json(document)
    output.write_text(text, encoding="utf-8")
    _LOGGER.info("Wrote %s", output)
    return output


__all__ = ["to_json", "to_yaml", "write_document"]
