"""Schema synthesis from the declared field types of registered models.

Models are dataclasses, pydantic models, ``TypedDict``s or plain annotated classes. Only
declared metadata is read (field lists, type hints, field metadata); model code is never
called.

Field tags follow the Go-style convention used by the directive grammar:

* naming tag: dataclass ``field(metadata={"json": "name,omitempty"})``; ``"-"`` skips the
  field. Pydantic models use ``alias`` and ``exclude=True``. Untagged fields keep their
  attribute name.
* descriptor tag: ``metadata={"openapi": "desc=Full name"}``, pydantic
  ``json_schema_extra={"openapi": ...}`` or ``description=...``, or an
  ``Annotated[str, "desc=..."]`` string.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import sys
import typing
import uuid
from dataclasses import dataclass, field
from types import UnionType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from pydantic import BaseModel

from ..logging import get_logger
from .registry import model_type

_LOGGER = get_logger("generator.schema")

SCHEMA_REF_PREFIX = "#/components/schemas/"

_NONE_TYPE = type(None)
_ARRAY_ORIGINS = {
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Iterable,
    collections.abc.Collection,
}
_OBJECT_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}


@dataclass
class Schema:
    """Recursive schema node: primitive, object, array or ``$ref``."""

    type: str = ""
    properties: Dict[str, "Schema"] = field(default_factory=dict)
    items: Optional["Schema"] = None
    ref: str = ""
    description: str = ""

    @classmethod
    def reference(cls, name: str) -> "Schema":
        return cls(ref=SCHEMA_REF_PREFIX + name)

    def to_dict(self) -> Dict[str, Any]:
        if self.ref:
            return {"$ref": self.ref}
        data: Dict[str, Any] = {}
        if self.type:
            data["type"] = self.type
        if self.description:
            data["description"] = self.description
        if self.properties:
            data["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        if self.items is not None:
            data["items"] = self.items.to_dict()
        return data


@dataclass
class FieldSpec:
    """One serializable field of a model."""

    name: str
    annotation: Any
    description: str = ""


def parse_json_name(tag: str) -> str:
    """Strip options such as ``omitempty`` from a naming tag."""
    return tag.split(",", 1)[0].strip()


def extract_description(tag: str) -> str:
    """Return the value of a ``desc=...`` descriptor tag, quote-stripped."""
    if not tag:
        return ""
    parts = tag.split("desc=")
    if len(parts) == 2:
        return parts[1].strip().strip('"')
    return ""


def is_model(tp: Any) -> bool:
    """Return True when ``tp`` is a class with declared, named fields."""
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return False
    if dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel) or typing.is_typeddict(tp):
        return True
    if tp.__module__ in {"builtins", "typing", "collections.abc"} or issubclass(tp, enum.Enum):
        return False
    return bool(_own_annotations(tp))


def _own_annotations(tp: type) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for klass in reversed(tp.__mro__):
        merged.update(klass.__dict__.get("__annotations__", {}))
    return merged


def _type_hints(tp: type) -> Dict[str, Any]:
    module = sys.modules.get(tp.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    try:
        return typing.get_type_hints(tp, globalns=globalns, localns={tp.__name__: tp}, include_extras=True)
    except (NameError, TypeError, SyntaxError) as exc:
        _LOGGER.debug("Unresolved annotations on %s: %s", tp.__name__, exc)
        return _own_annotations(tp)


def _is_classvar(annotation: Any) -> bool:
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def iter_fields(tp: type) -> Iterator[FieldSpec]:
    """Yield serializable fields of ``tp`` in declaration order."""
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        yield from _pydantic_fields(tp)
        return
    hints = _type_hints(tp)
    if dataclasses.is_dataclass(tp):
        for item in dataclasses.fields(tp):
            name = parse_json_name(str(item.metadata.get("json", "")))
            if name == "-":
                continue
            name = name or item.name
            annotation = hints.get(item.name, item.type)
            description = extract_description(str(item.metadata.get("openapi", "")))
            yield FieldSpec(name, annotation, description or _annotated_description(annotation))
        return
    for attr, annotation in hints.items():
        if attr.startswith("_") or _is_classvar(annotation):
            continue
        yield FieldSpec(attr, annotation, _annotated_description(annotation))


def _pydantic_fields(tp: type) -> Iterator[FieldSpec]:
    for attr, info in tp.model_fields.items():
        if info.exclude:
            continue
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        description = extract_description(str(extra.get("openapi", ""))) or info.description or ""
        yield FieldSpec(info.alias or attr, info.annotation, description)


def _annotated_description(annotation: Any) -> str:
    if typing.get_origin(annotation) is typing.Annotated:
        for extra in typing.get_args(annotation)[1:]:
            if isinstance(extra, str):
                description = extract_description(extra)
                if description:
                    return description
    return ""


def unwrap(tp: Any) -> Any:
    """Strip ``Optional``, ``Annotated`` and ``NewType`` indirection."""
    while True:
        origin = typing.get_origin(tp)
        if origin is typing.Annotated:
            tp = typing.get_args(tp)[0]
        elif origin in (typing.Union, UnionType):
            members = [arg for arg in typing.get_args(tp) if arg is not _NONE_TYPE]
            if len(members) != 1:
                return tp
            tp = members[0]
        elif hasattr(tp, "__supertype__"):
            tp = tp.__supertype__
        else:
            return tp


def primitive_type(tp: Any) -> str:
    """Map a class to an OpenAPI primitive; unknown kinds fall back to ``string``."""
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return "string"
    if issubclass(tp, bool):
        return "boolean"
    if issubclass(tp, int):
        return "integer"
    if issubclass(tp, (float, decimal.Decimal)):
        return "number"
    if issubclass(tp, (str, bytes, bytearray, datetime.date, datetime.time, uuid.UUID, enum.Enum)):
        return "string"
    if issubclass(tp, (list, tuple, set, frozenset)):
        return "array"
    if issubclass(tp, dict):
        return "object"
    return "string"


class SchemaSynthesizer:
    """Builds component schemas, registering nested models by class name.

    ``schemas`` is the components mapping being filled. A name already present is never
    regenerated (first registration wins); a name currently being built is referenced
    instead of recursed into, which breaks cycles.
    """

    def __init__(
        self,
        schemas: Optional[Dict[str, Schema]] = None,
        aliases: Optional[Mapping[Any, str]] = None,
    ) -> None:
        self.schemas: Dict[str, Schema] = schemas if schemas is not None else {}
        self._aliases = dict(aliases or {})
        self._in_progress: Set[str] = set()

    def register(self, name: str, model: Any) -> Schema:
        """Ensure ``name`` exists in ``schemas`` and return a reference to it."""
        if name in self.schemas or name in self._in_progress:
            return Schema.reference(name)
        self._in_progress.add(name)
        try:
            schema = self.schema_for_value(model)
        finally:
            self._in_progress.discard(name)
        self.schemas[name] = schema
        _LOGGER.debug("Registered schema %s", name)
        return Schema.reference(name)

    def schema_for_value(self, model: Any) -> Schema:
        """Schema for a representative value: a model class, instance or type expression."""
        if isinstance(model, (list, tuple, set, frozenset)):
            first = next(iter(model), None)
            item_schema = self.schema_for_type(model_type(first)) if first is not None else Schema(type="string")
            return Schema(type="array", items=item_schema)
        model = model_type(model)
        if is_model(model):
            return self.schema_for_model(model)
        return self.schema_for_type(model)

    def schema_for_model(self, tp: type) -> Schema:
        schema = Schema(type="object")
        for spec in iter_fields(tp):
            prop = self.schema_for_type(spec.annotation)
            if spec.description and not prop.ref:
                prop.description = spec.description
            schema.properties[spec.name] = prop
        return schema

    def schema_for_type(self, annotation: Any) -> Schema:
        tp = unwrap(annotation)
        origin = typing.get_origin(tp)
        if origin in _ARRAY_ORIGINS:
            return Schema(type="array", items=self._item_schema(typing.get_args(tp)))
        if origin in _OBJECT_ORIGINS:
            return Schema(type="object")
        if origin is typing.Literal:
            values = typing.get_args(tp)
            return Schema(type=primitive_type(type(values[0])) if values else "string")
        if is_model(tp):
            return self.register(self._aliases.get(tp, tp.__name__), tp)
        kind = primitive_type(tp)
        if kind == "array":
            return Schema(type="array", items=Schema(type="string"))
        return Schema(type=kind)

    def _item_schema(self, args: Tuple[Any, ...]) -> Schema:
        members: List[Any] = [arg for arg in args if arg is not Ellipsis]
        if not members:
            return Schema(type="string")
        return self.schema_for_type(members[0])


__all__ = [
    "FieldSpec",
    "SCHEMA_REF_PREFIX",
    "Schema",
    "SchemaSynthesizer",
    "extract_description",
    "is_model",
    "iter_fields",
    "parse_json_name",
    "primitive_type",
    "unwrap",
]
