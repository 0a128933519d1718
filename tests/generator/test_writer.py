"""Tests for specgen.generator.writer."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from specgen.generator.assembler import generate_spec
from specgen.generator.writer import to_json, to_yaml, write_document
from specgen.models import GlobalMetadata, RouteDoc


def _document():
    return generate_spec(
        [RouteDoc(summary="List", method="get", path="/items")],
        metadata=GlobalMetadata("Items", "2.0", ""),
    )


def test_to_json_is_indented_with_trailing_newline() -> None:
    text = to_json(_document())

    assert text.endswith("}\n")
    assert '\n  "openapi": "3.0.0"' in text
    assert json.loads(text)["paths"]["/items"]["get"]["summary"] == "List"


def test_to_yaml_preserves_key_order() -> None:
    text = to_yaml(_document())

    assert text.splitlines()[0] == "openapi: 3.0.0"
    assert yaml.safe_load(text) == _document().to_dict()


def test_write_document_picks_format_from_suffix(tmp_path: Path) -> None:
    json_path = write_document(_document(), tmp_path / "out" / "openapi.json")
    yaml_path = write_document(_document(), tmp_path / "out" / "openapi.yaml")

    assert json.loads(json_path.read_text(encoding="utf-8"))["info"] == {"title": "Items", "version": "2.0"}
    assert yaml.safe_load(yaml_path.read_text(encoding="utf-8"))["info"]["title"] == "Items"
