"""Route path normalization helpers."""

from __future__ import annotations

import re
from typing import List, Tuple

_PLACEHOLDER = re.compile(r"\{([^{}/]+)\}")

# Positional markers from the common routers, rewritten to OpenAPI placeholders.
_PARAM_PATTERNS: List[Tuple[re.Pattern[str], str]] = [
    (re.compile(r"/:([A-Za-z_][A-Za-z0-9_]*)"), r"/{\1}"),
    (
        re.compile(r"/<(?:(?:[A-Za-z_][A-Za-z0-9_]*):)?([A-Za-z_][A-Za-z0-9_]*)>"),
        r"/{\1}",
    ),
    (re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\s*:\s*[^}]+\}"), r"{\1}"),
    (re.compile(r"\(\?P<([A-Za-z_][A-Za-z0-9_]*)>[^)]+\)"), r"{\1}"),
]


def normalize_path(path: str) -> str:
    """Return ``path`` with every positional marker rewritten to ``{name}``."""
    if not path:
        return "/"
    result = path.strip()
    if not result.startswith("/"):
        result = "/" + result
    for pattern, replacement in _PARAM_PATTERNS:
        result = pattern.sub(replacement, result)
    result = re.sub(r"/{2,}", "/", result)
    if len(result) > 1 and result.endswith("/"):
        result = result[:-1]
    return result or "/"


def path_placeholders(path: str) -> List[str]:
    """Return placeholder names in order of appearance."""
    return _PLACEHOLDER.findall(path)


def has_placeholder(path: str, name: str) -> bool:
    return name in path_placeholders(path)


def normalize_method(value: str) -> str:
    """Lower-case an HTTP verb, stripping the ``[get]`` style brackets."""
    return (value or "").strip().strip("[]").strip().lower()


__all__ = ["has_placeholder", "normalize_method", "normalize_path", "path_placeholders"]
