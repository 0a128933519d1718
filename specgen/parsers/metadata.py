"""Document-level metadata read from the entry file's leading comments."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from ..logging import get_logger
from ..models import GlobalMetadata

_LOGGER = get_logger("parsers.metadata")

_TITLE = "@GlobalTitle "
_VERSION = "@GlobalVersion "
_DESCRIPTION = "@GlobalDescription "
_QUOTES = ('"""', "'''")


def parse_global_metadata(file_path: str | Path) -> GlobalMetadata:
    """Return the title/version/description directives found before the first statement.

    Leading blank lines, ``#`` comments and the module docstring are scanned; the first
    other line ends the scan. Missing directives (or an unreadable file) give empty strings.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _LOGGER.debug("Cannot read entry file %s: %s", path, exc)
        return GlobalMetadata()

    metadata = GlobalMetadata()
    for line in _header_lines(text):
        if line.startswith(_TITLE):
            metadata.title = line[len(_TITLE):].strip()
        elif line.startswith(_VERSION):
            metadata.version = line[len(_VERSION):].strip()
        elif line.startswith(_DESCRIPTION):
            metadata.description = line[len(_DESCRIPTION):].strip()
    return metadata


def _header_lines(text: str) -> Iterator[str]:
    """Yield comment and docstring lines up to the module's first statement."""
    closing: str | None = None
    seen_docstring = False
    for raw in text.splitlines():
        stripped = raw.strip()
        if closing is not None:
            end = stripped.find(closing)
            if end >= 0:
                yield stripped[:end].strip()
                closing = None
            else:
                yield stripped
            continue
        if not stripped:
            continue
        if stripped.startswith("#"):
            yield stripped.lstrip("#").strip()
            continue
        quote = next((q for q in _QUOTES if stripped.lstrip("rRuU").startswith(q)), None)
        if quote is not None and not seen_docstring:
            seen_docstring = True
            body = stripped.lstrip("rRuU")[len(quote):]
            end = body.find(quote)
            if end >= 0:
                yield body[:end].strip()
            else:
                yield body.strip()
                closing = quote
            continue
        break


__all__ = ["parse_global_metadata"]
