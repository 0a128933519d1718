"""Configuration loading for specgen (.specgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .generator.openapi import OPENAPI_VERSION
from .parsers.inference import InferenceRules

CONFIG_FILENAME = ".specgen.yml"


@dataclass
class InferenceConfig:
    """Code-shape inference toggles and accessor names."""

    enabled: bool = True
    rules: InferenceRules = field(default_factory=InferenceRules)


@dataclass
class SpecgenConfig:
    """Represents the settings defined in .specgen.yml."""

    root: Path
    source_dir: Path
    entry_file: Optional[Path] = None
    output: Path = Path("openapi.json")
    yaml_output: Optional[Path] = None
    exclude_paths: List[str] = field(default_factory=list)
    models: List[str] = field(default_factory=list)
    openapi_version: str = OPENAPI_VERSION
    inference: InferenceConfig = field(default_factory=InferenceConfig)


def load_config(config_path: Path) -> SpecgenConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SpecgenConfig(root=root, source_dir=root, output=root / "openapi.json")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_dir = root / (_as_str(data.get("source_dir")) or ".")
    entry = _as_str(data.get("entry_file"))
    output = _as_str(data.get("output")) or "openapi.json"
    yaml_output = _as_str(data.get("yaml_output"))

    return SpecgenConfig(
        root=root,
        source_dir=source_dir.resolve(),
        entry_file=(root / entry) if entry else None,
        output=root / output,
        yaml_output=(root / yaml_output) if yaml_output else None,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        models=_as_str_list(data.get("models")),
        openapi_version=_as_str(data.get("openapi_version")) or OPENAPI_VERSION,
        inference=_inference_config(_as_dict(data.get("inference"))),
    )


def _inference_config(data: Dict[str, Any]) -> InferenceConfig:
    config = InferenceConfig()
    if not data:
        return config
    enabled = _as_bool(data.get("enabled"))
    if enabled is not None:
        config.enabled = enabled
    overrides = {}
    for item in fields(InferenceRules):
        names = _as_str_list(data.get(item.name))
        if names:
            overrides[item.name] = tuple(names)
    if overrides:
        config.rules = InferenceRules(**overrides)
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.name == CONFIG_FILENAME:
        return config_path.resolve()
    if config_path.is_file():
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return (config_path / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "InferenceConfig", "SpecgenConfig", "load_config"]
