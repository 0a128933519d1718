"""Directive grammar: ``@Keyword`` lines parsed into a route record.

Keywords are matched by literal, case-sensitive prefix (``@Deprecated`` is the exception
and is matched case-insensitively against the whole line). Everything after the keyword
is whitespace-tokenized. Lines with too few tokens are skipped and reported through
``DirectiveParser.malformed``.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, List, Optional

from ..models import (
    DEFAULT_MEDIA_TYPE,
    Header,
    Parameter,
    RequestBody,
    Response,
    RouteDoc,
    SecurityRequirement,
)
from .paths import normalize_method, normalize_path

_BRACKET_FORM = re.compile(r"^(?P<name>[^\[\]:]+)\[(?P<header>[^\]]*)\]$")


def _unquote(value: str) -> str:
    return value.strip().strip('"')


def _as_flag(value: str) -> bool:
    return value == "true"


def parse_security(text: str) -> List[SecurityRequirement]:
    """Parse ``Name``, ``Name[Header]`` and ``Name:Header`` entries.

    Several entries may share one line when separated by commas or whitespace.
    """
    requirements: List[SecurityRequirement] = []
    for token in re.split(r"[,\s]+", text.strip()):
        if not token:
            continue
        match = _BRACKET_FORM.match(token)
        if match:
            name, header = match.group("name"), match.group("header").strip()
        elif ":" in token:
            name, header = token.split(":", 1)
        else:
            name, header = token, ""
        name = name.strip()
        if not name:
            continue
        requirements.append(SecurityRequirement(scheme=name, header=header.strip() or None))
    return requirements


class DirectiveParser:
    """Applies directive lines to a ``RouteDoc``."""

    def __init__(self) -> None:
        self.malformed: List[str] = []
        self._handlers: Dict[str, Callable[[RouteDoc, str], bool]] = {
            "@Summary ": self._summary,
            "@Description ": self._description,
            "@Tags ": self._tags,
            "@Success ": self._response,
            "@Failure ": self._response,
            "@Router ": self._router,
            "@Param ": self._param,
            "@RequestBody ": self._request_body,
            "@Header ": self._header,
            "@Security ": self._security,
        }

    def parse(self, lines: Iterable[str], doc: Optional[RouteDoc] = None) -> RouteDoc:
        """Return ``doc`` (or a fresh record) populated from ``lines``."""
        doc = doc if doc is not None else RouteDoc()
        for line in lines:
            self.apply(doc, line)
        return doc

    def apply(self, doc: RouteDoc, line: str) -> bool:
        """Apply one line; return True when it was a recognized, well-formed directive."""
        text = line.strip()
        if not text.startswith("@"):
            return False
        if text.lower() == "@deprecated":
            doc.deprecated = True
            return True
        for prefix, handler in self._handlers.items():
            if text.startswith(prefix):
                if handler(doc, text[len(prefix):]):
                    return True
                self.malformed.append(text)
                return False
        return False

    @staticmethod
    def _summary(doc: RouteDoc, rest: str) -> bool:
        doc.summary = rest
        return True

    @staticmethod
    def _description(doc: RouteDoc, rest: str) -> bool:
        doc.description = rest
        return True

    @staticmethod
    def _tags(doc: RouteDoc, rest: str) -> bool:
        doc.tags = [tag.strip() for tag in rest.split(",") if tag.strip()]
        return True

    @staticmethod
    def _response(doc: RouteDoc, rest: str) -> bool:
        # @Success 200 {object} Model "Description"  |  @Failure 401 "Unauthorized"
        parts = rest.split()
        if not parts:
            return False
        status = parts[0]
        model = ""
        if len(parts) > 1 and parts[1].startswith("{"):
            model = parts[2] if len(parts) > 2 else ""
            description = _unquote(" ".join(parts[3:]))
        else:
            description = _unquote(" ".join(parts[1:]))
        doc.responses[status] = Response(
            status_code=status,
            model=model,
            media_type=DEFAULT_MEDIA_TYPE,
            description=description,
        )
        return True

    @staticmethod
    def _router(doc: RouteDoc, rest: str) -> bool:
        parts = rest.split()
        if len(parts) != 2:
            return False
        doc.path = normalize_path(parts[0])
        doc.method = normalize_method(parts[1])
        return True

    @staticmethod
    def _param(doc: RouteDoc, rest: str) -> bool:
        # @Param name in type required "description"
        parts = rest.split()
        if len(parts) < 4:
            return False
        doc.params.append(
            Parameter(
                name=parts[0],
                location=parts[1],
                schema_type=parts[2],
                required=_as_flag(parts[3]),
                description=_unquote(" ".join(parts[4:])),
            )
        )
        return True

    @staticmethod
    def _request_body(doc: RouteDoc, rest: str) -> bool:
        # @RequestBody {object} Model true "Description"
        parts = rest.split()
        if len(parts) < 4:
            return False
        doc.request_body = RequestBody(
            model=parts[1],
            required=_as_flag(parts[2]),
            media_type=DEFAULT_MEDIA_TYPE,
            description=_unquote(" ".join(parts[3:])),
        )
        return True

    @staticmethod
    def _header(doc: RouteDoc, rest: str) -> bool:
        # @Header 200 X-Header string true "Description"
        parts = rest.split()
        if len(parts) < 5:
            return False
        doc.headers.append(
            Header(
                status_code=parts[0],
                name=parts[1],
                type=parts[2],
                required=_as_flag(parts[3]),
                description=_unquote(" ".join(parts[4:])),
            )
        )
        return True

    @staticmethod
    def _security(doc: RouteDoc, rest: str) -> bool:
        requirements = parse_security(rest)
        if not requirements:
            return False
        doc.security.extend(requirements)
        return True


def parse_directives(lines: Iterable[str]) -> RouteDoc:
    """Convenience wrapper returning a fresh ``RouteDoc`` for ``lines``."""
    return DirectiveParser().parse(lines)


__all__ = ["DirectiveParser", "parse_directives", "parse_security"]
