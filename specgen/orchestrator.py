"""Pipeline orchestration: configuration, extraction, assembly and output."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import SpecgenConfig, load_config
from .generator import ModelRegistry, SpecAssembler, write_document
from .generator.openapi import Document
from .logging import get_logger
from .parsers import AnnotationExtractor, parse_global_metadata
from .parsers.inference import InferenceRules

_DEFAULT_ENTRY_FILES = ("main.py", "app.py", "__init__.py")


@dataclass
class GenerateOutcome:
    """Result of a generate run."""

    document: Document
    outputs: List[Path] = field(default_factory=list)


@contextmanager
def _importable(root: Path) -> Iterator[None]:
    """Temporarily put the project root first on the import path."""
    entry = str(root)
    sys.path.insert(0, entry)
    try:
        yield
    finally:
        if entry in sys.path:
            sys.path.remove(entry)


def generate_from_directory(
    root: str | Path,
    registry: Optional[ModelRegistry] = None,
    entry_file: str | Path | None = None,
    rules: Optional[InferenceRules] = None,
    *,
    infer: bool = True,
    exclude_paths: Sequence[str] = (),
) -> Document:
    """Run extraction and assembly for ``root`` with a caller-populated registry."""
    routes = AnnotationExtractor(rules, infer=infer, exclude_paths=exclude_paths).parse_directory(root)
    metadata = parse_global_metadata(entry_file) if entry_file else None
    return SpecAssembler(registry, metadata).assemble(routes)


class Orchestrator:
    """Coordinates the generate pipeline for the CLI and service."""

    def __init__(self, registry: Optional[ModelRegistry] = None) -> None:
        self.registry = registry or ModelRegistry()
        self.logger = get_logger("orchestrator")

    def build_document(
        self,
        path: str | Path,
        *,
        entry_file: str | Path | None = None,
        models: Sequence[str] = (),
        infer: Optional[bool] = None,
    ) -> Document:
        """Generate the document for the project at ``path`` without writing it."""
        config = load_config(Path(path).expanduser())
        return self._build(config, entry_file=entry_file, models=models, infer=infer)

    def run_generate(
        self,
        path: str | Path,
        *,
        entry_file: str | Path | None = None,
        output: str | Path | None = None,
        yaml_output: str | Path | None = None,
        models: Sequence[str] = (),
        infer: Optional[bool] = None,
    ) -> GenerateOutcome:
        """Generate the document and write the JSON (and optional YAML) outputs."""
        config = load_config(Path(path).expanduser())
        document = self._build(config, entry_file=entry_file, models=models, infer=infer)

        outcome = GenerateOutcome(document=document)
        json_target = Path(output) if output else config.output
        outcome.outputs.append(write_document(document, json_target))
        yaml_target = Path(yaml_output) if yaml_output else config.yaml_output
        if yaml_target is not None:
            outcome.outputs.append(write_document(document, yaml_target))
        return outcome

    def _build(
        self,
        config: SpecgenConfig,
        *,
        entry_file: str | Path | None,
        models: Sequence[str],
        infer: Optional[bool],
    ) -> Document:
        self.logger.info("Generating specification for %s", config.source_dir)
        references = [*config.models, *models]
        if references:
            with _importable(config.root):
                for reference in references:
                    name = self.registry.register_import(reference)
                    self.logger.debug("Registered model %s from %s", name, reference)

        enabled = config.inference.enabled if infer is None else infer
        extractor = AnnotationExtractor(
            config.inference.rules,
            infer=enabled,
            exclude_paths=config.exclude_paths,
        )
        routes = extractor.parse_directory(config.source_dir)

        entry = self._resolve_entry(config, entry_file)
        metadata = parse_global_metadata(entry) if entry is not None else None
        if entry is None:
            self.logger.debug("No entry file found; document info will be empty")

        assembler = SpecAssembler(self.registry, metadata, openapi_version=config.openapi_version)
        return assembler.assemble(routes)

    @staticmethod
    def _resolve_entry(config: SpecgenConfig, entry_file: str | Path | None) -> Optional[Path]:
        if entry_file:
            candidate = Path(entry_file)
            return candidate if candidate.is_absolute() else config.source_dir / candidate
        if config.entry_file is not None:
            return config.entry_file
        for name in _DEFAULT_ENTRY_FILES:
            candidate = config.source_dir / name
            if candidate.is_file():
                return candidate
        return None


__all__ = ["GenerateOutcome", "Orchestrator", "generate_from_directory"]
