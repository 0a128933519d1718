"""Assembles route records, registered models and metadata into one document."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set

from ..logging import get_logger
from ..models import GlobalMetadata, RouteDoc
from ..parsers.paths import has_placeholder, normalize_method, normalize_path
from .openapi import (
    HTTP_METHODS,
    OPENAPI_VERSION,
    Diagnostic,
    Document,
    HeaderObject,
    Info,
    MediaType,
    Operation,
    ParameterObject,
    PathItem,
    RequestBodyObject,
    ResponseObject,
    SecurityScheme,
)
from .registry import ModelRegistry, model_type
from .schema import Schema, SchemaSynthesizer

_LOGGER = get_logger("generator")

DEFAULT_RESPONSE_DESCRIPTION = "Response"


class SpecAssembler:
    """Builds a ``Document``; recoverable problems become diagnostics, never exceptions."""

    def __init__(
        self,
        registry: Optional[ModelRegistry] = None,
        metadata: Optional[GlobalMetadata] = None,
        *,
        openapi_version: str = OPENAPI_VERSION,
    ) -> None:
        self.registry = registry or ModelRegistry()
        self.metadata = metadata or GlobalMetadata()
        self.openapi_version = openapi_version

    def assemble(self, routes: Iterable[RouteDoc]) -> Document:
        document = Document(info=Info.from_metadata(self.metadata), openapi=self.openapi_version)
        models = {model_type(self.registry.get(name)) for name in self.registry}
        aliases = {cls: self.registry.name_for(cls) for cls in models}
        synthesizer = SchemaSynthesizer(document.components.schemas, aliases)

        for route in routes:
            self._add_route(document, synthesizer, route)
        _LOGGER.info(
            "Assembled %d path(s), %d schema(s), %d diagnostic(s)",
            len(document.paths),
            len(document.components.schemas),
            len(document.diagnostics),
        )
        return document

    def _add_route(self, document: Document, synthesizer: SchemaSynthesizer, route: RouteDoc) -> None:
        path = normalize_path(route.path)
        method = normalize_method(route.method)
        label = f"{method.upper()} {path}"
        if method not in HTTP_METHODS:
            self._diagnose(document, "method-unsupported", f"HTTP method {route.method!r} is not supported", label)
            return

        item = document.paths.setdefault(path, PathItem())
        operation = Operation(
            summary=route.summary,
            description=route.description,
            tags=list(route.tags),
            parameters=self._parameters(document, route, path, label),
            request_body=self._request_body(document, synthesizer, route, label),
            responses=self._responses(document, synthesizer, route, label),
            security=self._security(document, route),
            deprecated=route.deprecated,
        )
        if method in item.operations:
            _LOGGER.debug("Replacing existing operation %s", label)
        item.operations[method] = operation

    def _parameters(
        self, document: Document, route: RouteDoc, path: str, label: str
    ) -> List[ParameterObject]:
        parameters: List[ParameterObject] = []
        seen: Set[tuple[str, str]] = set()
        for param in route.params:
            if param.key in seen:
                continue
            seen.add(param.key)
            if param.location == "path" and not has_placeholder(path, param.name):
                self._diagnose(
                    document,
                    "path-param-unmatched",
                    f"Path param {param.name!r} not found in route path {path!r}; skipping",
                    label,
                )
                continue
            parameters.append(
                ParameterObject(
                    name=param.name,
                    location=param.location,
                    required=param.required,
                    schema=Schema(type=param.schema_type),
                    description=param.description,
                )
            )
        return parameters

    def _request_body(
        self, document: Document, synthesizer: SchemaSynthesizer, route: RouteDoc, label: str
    ) -> Optional[RequestBodyObject]:
        body = route.request_body
        if body is None:
            return None
        reference = self._resolve(document, synthesizer, body.model, label)
        if reference is None:
            return None
        return RequestBodyObject(
            description=body.description,
            required=body.required,
            content={body.media_type: MediaType(schema=reference)},
        )

    def _responses(
        self, document: Document, synthesizer: SchemaSynthesizer, route: RouteDoc, label: str
    ) -> Dict[str, ResponseObject]:
        responses: Dict[str, ResponseObject] = {}
        for status, response in route.responses.items():
            headers = {
                header.name: HeaderObject(
                    description=header.description,
                    required=header.required,
                    schema=Schema(type=header.type),
                )
                for header in route.headers
                if header.status_code == status
            }
            wrapper = ResponseObject(
                description=response.description or DEFAULT_RESPONSE_DESCRIPTION,
                headers=headers,
            )
            if response.model:
                reference = self._resolve(document, synthesizer, response.model, label)
                if reference is None:
                    continue
                wrapper.content = {response.media_type: MediaType(schema=reference)}
            responses[status] = wrapper

        if not responses:
            responses["200"] = ResponseObject(description="OK")
        return responses

    @staticmethod
    def _security(document: Document, route: RouteDoc) -> List[Dict[str, List[str]]]:
        security: List[Dict[str, List[str]]] = []
        listed: Set[str] = set()
        schemes = document.components.security_schemes
        for requirement in route.security:
            if requirement.scheme not in schemes:
                note = f"Token sent in the {requirement.header} header" if requirement.header else ""
                schemes[requirement.scheme] = SecurityScheme.bearer(description=note)
            if requirement.scheme not in listed:
                listed.add(requirement.scheme)
                security.append({requirement.scheme: []})
        return security

    def _resolve(
        self, document: Document, synthesizer: SchemaSynthesizer, model: str, label: str
    ) -> Optional[Schema]:
        value = self.registry.get(model)
        if value is None:
            self._diagnose(document, "model-missing", f"Model not found in registry: {model}", label)
            return None
        return synthesizer.register(model, value)

    @staticmethod
    def _diagnose(document: Document, code: str, message: str, route: str) -> None:
        _LOGGER.warning("%s: %s (%s)", code, message, route)
        document.diagnostics.append(Diagnostic(code=code, message=message, route=route))


def generate_spec(
    routes: Iterable[RouteDoc],
    registry: Optional[ModelRegistry] = None,
    metadata: Optional[GlobalMetadata] = None,
    *,
    openapi_version: str = OPENAPI_VERSION,
) -> Document:
    """Assemble ``routes`` into a document using ``registry`` for request/response models."""
    assembler = SpecAssembler(registry, metadata, openapi_version=openapi_version)
    return assembler.assemble(routes)


__all__ = ["DEFAULT_RESPONSE_DESCRIPTION", "SpecAssembler", "generate_spec"]
