"""Tests for specgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from specgen.config import SpecgenConfig, load_config
from specgen.errors import ConfigError
from specgen.parsers.inference import InferenceRules


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, SpecgenConfig)
    assert config.root == tmp_path.resolve()
    assert config.source_dir == tmp_path.resolve()
    assert config.output == tmp_path.resolve() / "openapi.json"
    assert config.yaml_output is None
    assert config.entry_file is None
    assert config.models == []
    assert config.exclude_paths == []
    assert config.openapi_version == "3.0.0"
    assert config.inference.enabled is True
    assert config.inference.rules == InferenceRules()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".specgen.yml"
    config_file.write_text(
        """
source_dir: src
entry_file: src/main.py
output: build/openapi.json
yaml_output: build/openapi.yaml
exclude_paths:
  - "legacy/"
models:
  - "app.models:User"
openapi_version: "3.0.3"
inference:
  enabled: false
  path_accessors: [path_arg]
  body_binders: bind
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.source_dir == root / "src"
    assert config.entry_file == root / "src" / "main.py"
    assert config.output == root / "build" / "openapi.json"
    assert config.yaml_output == root / "build" / "openapi.yaml"
    assert config.exclude_paths == ["legacy/"]
    assert config.models == ["app.models:User"]
    assert config.openapi_version == "3.0.3"
    assert config.inference.enabled is False
    assert config.inference.rules.path_accessors == ("path_arg",)
    assert config.inference.rules.body_binders == ("bind",)
    assert config.inference.rules.query_accessors == InferenceRules().query_accessors


def test_load_config_accepts_empty_file(tmp_path: Path) -> None:
    (tmp_path / ".specgen.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.output == tmp_path.resolve() / "openapi.json"


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".specgen.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".specgen.yml").write_text("output: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse .specgen.yml"):
        load_config(tmp_path)
