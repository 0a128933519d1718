"""Caller-supplied model registry: model name -> representative value."""

from __future__ import annotations

import importlib
from typing import Any, Dict, Iterator, List, Optional, get_origin

from ..errors import ModelImportError
from ..logging import get_logger

_LOGGER = get_logger("generator.registry")


def model_type(model: Any) -> Any:
    """Reduce an instance to its class; classes and typing expressions pass through."""
    if isinstance(model, type) or get_origin(model) is not None:
        return model
    return type(model)


class ModelRegistry:
    """Insertion-ordered mapping of model names to representative values.

    Registering a name twice replaces the earlier value. The registry is read-only
    while a document is being generated.
    """

    def __init__(self) -> None:
        self._models: Dict[str, Any] = {}

    def register(self, name: str, model: Any) -> None:
        if name in self._models:
            _LOGGER.debug("Replacing registered model %s", name)
        self._models[name] = model

    def register_import(self, reference: str, name: Optional[str] = None) -> str:
        """Register the object named by ``package.module:Attribute``; return its name."""
        module_name, sep, attribute = reference.partition(":")
        if not sep or not module_name or not attribute:
            raise ModelImportError(f"Model reference must look like 'module:Name': {reference!r}")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise ModelImportError(f"Cannot import {module_name!r}: {exc}") from exc
        target: Any = module
        for part in attribute.split("."):
            try:
                target = getattr(target, part)
            except AttributeError as exc:
                raise ModelImportError(f"{module_name!r} has no attribute {attribute!r}") from exc
        model_name = name or attribute.rsplit(".", 1)[-1]
        self.register(model_name, target)
        return model_name

    def get(self, name: str) -> Optional[Any]:
        return self._models.get(name)

    def name_for(self, cls: Any) -> Optional[str]:
        """Return the first name registered for ``cls`` (or an instance of it)."""
        for name, model in self._models.items():
            if model_type(model) is cls:
                return name
        return None

    def names(self) -> List[str]:
        return list(self._models)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)


__all__ = ["ModelRegistry", "model_type"]
