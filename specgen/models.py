"""Core data models shared across specgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_MEDIA_TYPE = "application/json"


@dataclass
class GlobalMetadata:
    """Document-level info block read from the entry file."""

    title: str = ""
    version: str = ""
    description: str = ""


@dataclass
class Parameter:
    """A single operation parameter (path, query, header or cookie)."""

    name: str
    location: str
    required: bool = False
    schema_type: str = "string"
    description: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.location, self.name)


@dataclass
class RequestBody:
    model: str
    required: bool = False
    media_type: str = DEFAULT_MEDIA_TYPE
    description: str = ""


@dataclass
class Response:
    """Response descriptor for one status code; ``model`` may be empty."""

    status_code: str
    model: str = ""
    media_type: str = DEFAULT_MEDIA_TYPE
    description: str = ""


@dataclass
class Header:
    """Response header scoped to a status code."""

    status_code: str
    name: str
    type: str = "string"
    required: bool = False
    description: str = ""


@dataclass(frozen=True)
class SecurityRequirement:
    scheme: str
    header: Optional[str] = None


@dataclass
class RouteDoc:
    """Route record built from one handler's directives plus inferred fallbacks."""

    summary: str = ""
    description: str = ""
    method: str = ""
    path: str = ""
    tags: List[str] = field(default_factory=list)
    params: List[Parameter] = field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: Dict[str, Response] = field(default_factory=dict)
    headers: List[Header] = field(default_factory=list)
    security: List[SecurityRequirement] = field(default_factory=list)
    deprecated: bool = False
    file: str = ""
    line: Optional[int] = None
    handler: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.path and self.method)

    def add_param(self, param: Parameter) -> bool:
        """Append ``param`` unless its (location, name) pair is already present."""
        if any(existing.key == param.key for existing in self.params):
            return False
        self.params.append(param)
        return True


__all__ = [
    "DEFAULT_MEDIA_TYPE",
    "GlobalMetadata",
    "Header",
    "Parameter",
    "RequestBody",
    "Response",
    "RouteDoc",
    "SecurityRequirement",
]
