"""OpenAPI document structures and their JSON-compatible serialization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models import GlobalMetadata
from .schema import Schema

OPENAPI_VERSION = "3.0.0"

# Operation slots of an OpenAPI 3.0 path item, in serialization order.
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


@dataclass
class Diagnostic:
    """Recoverable problem recorded while assembling a document."""

    code: str
    message: str
    route: str = ""


@dataclass
class Info:
    title: str = ""
    version: str = ""
    description: str = ""

    @classmethod
    def from_metadata(cls, metadata: GlobalMetadata) -> "Info":
        return cls(title=metadata.title, version=metadata.version, description=metadata.description)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title, "version": self.version}
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class MediaType:
    schema: Optional[Schema] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"schema": self.schema.to_dict()} if self.schema is not None else {}


def _content_dict(content: Dict[str, MediaType]) -> Dict[str, Any]:
    return {media: value.to_dict() for media, value in content.items()}


@dataclass
class ParameterObject:
    name: str
    location: str
    required: bool = False
    schema: Optional[Schema] = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "in": self.location}
        if self.required:
            data["required"] = True
        if self.schema is not None:
            data["schema"] = self.schema.to_dict()
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class RequestBodyObject:
    description: str = ""
    required: bool = False
    content: Dict[str, MediaType] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.description:
            data["description"] = self.description
        if self.required:
            data["required"] = True
        if self.content:
            data["content"] = _content_dict(self.content)
        return data


@dataclass
class HeaderObject:
    description: str = ""
    required: bool = False
    schema: Optional[Schema] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.description:
            data["description"] = self.description
        if self.required:
            data["required"] = True
        if self.schema is not None:
            data["schema"] = self.schema.to_dict()
        return data


@dataclass
class ResponseObject:
    description: str
    content: Dict[str, MediaType] = field(default_factory=dict)
    headers: Dict[str, HeaderObject] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"description": self.description}
        if self.content:
            data["content"] = _content_dict(self.content)
        if self.headers:
            data["headers"] = {name: header.to_dict() for name, header in self.headers.items()}
        return data


@dataclass
class Operation:
    summary: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    parameters: List[ParameterObject] = field(default_factory=list)
    request_body: Optional[RequestBodyObject] = None
    responses: Dict[str, ResponseObject] = field(default_factory=dict)
    security: List[Dict[str, List[str]]] = field(default_factory=list)
    deprecated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.summary:
            data["summary"] = self.summary
        if self.description:
            data["description"] = self.description
        if self.tags:
            data["tags"] = list(self.tags)
        if self.parameters:
            data["parameters"] = [param.to_dict() for param in self.parameters]
        if self.request_body is not None:
            data["requestBody"] = self.request_body.to_dict()
        data["responses"] = {code: resp.to_dict() for code, resp in self.responses.items()}
        if self.security:
            data["security"] = [dict(entry) for entry in self.security]
        if self.deprecated:
            data["deprecated"] = True
        return data


@dataclass
class PathItem:
    operations: Dict[str, Operation] = field(default_factory=dict)

    def get(self, method: str) -> Optional[Operation]:
        return self.operations.get(method)

    def to_dict(self) -> Dict[str, Any]:
        return {
            method: self.operations[method].to_dict()
            for method in HTTP_METHODS
            if method in self.operations
        }


@dataclass
class SecurityScheme:
    """Every named scheme is an http bearer scheme; a declared header only annotates it."""

    type: str
    scheme: str = ""
    bearer_format: str = ""
    description: str = ""

    @classmethod
    def bearer(cls, description: str = "") -> "SecurityScheme":
        return cls(type="http", scheme="bearer", bearer_format="JWT", description=description)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.scheme:
            data["scheme"] = self.scheme
        if self.bearer_format:
            data["bearerFormat"] = self.bearer_format
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class Components:
    schemas: Dict[str, Schema] = field(default_factory=dict)
    security_schemes: Dict[str, SecurityScheme] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.schemas:
            data["schemas"] = {name: schema.to_dict() for name, schema in self.schemas.items()}
        if self.security_schemes:
            data["securitySchemes"] = {
                name: scheme.to_dict() for name, scheme in self.security_schemes.items()
            }
        return data


@dataclass
class Document:
    """Assembled specification. ``diagnostics`` are never serialized."""

    info: Info = field(default_factory=Info)
    paths: Dict[str, PathItem] = field(default_factory=dict)
    components: Components = field(default_factory=Components)
    openapi: str = OPENAPI_VERSION
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def operation(self, path: str, method: str) -> Optional[Operation]:
        item = self.paths.get(path)
        return item.get(method.lower()) if item is not None else None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "openapi": self.openapi,
            "info": self.info.to_dict(),
            "paths": {path: item.to_dict() for path, item in self.paths.items()},
        }
        components = self.components.to_dict()
        if components:
            data["components"] = components
        return data


__all__ = [
    "Components",
    "Diagnostic",
    "Document",
    "HTTP_METHODS",
    "HeaderObject",
    "Info",
    "MediaType",
    "OPENAPI_VERSION",
    "Operation",
    "ParameterObject",
    "PathItem",
    "RequestBodyObject",
    "ResponseObject",
    "SecurityScheme",
]
