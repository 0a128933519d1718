"""Annotation extraction: route records from documented handler declarations."""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from ..errors import SourceParseError
from ..logging import get_logger
from ..models import RouteDoc
from ..source_scanner import iter_source_files
from .directives import DirectiveParser
from .inference import FunctionNode, InferenceEngine, InferenceRules

_LOGGER = get_logger("parsers.annotations")


def _declarations(tree: ast.Module) -> Iterator[Tuple[str, FunctionNode]]:
    """Yield module-level functions and methods of module-level classes."""
    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield node.name, node
        elif isinstance(node, ast.ClassDef):
            for child in node.body:
                if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
                    yield f"{node.name}.{child.name}", child


def comment_block(lines: Sequence[str], node: ast.AST) -> List[str]:
    """Return the ``#`` lines directly above ``node`` (and its decorators), top first."""
    decorators = getattr(node, "decorator_list", [])
    start = min([node.lineno, *(d.lineno for d in decorators)])
    collected: List[str] = []
    index = start - 2
    while index >= 0:
        stripped = lines[index].strip()
        if not stripped.startswith("#"):
            break
        collected.append(stripped.lstrip("#").strip())
        index -= 1
    collected.reverse()
    return collected


def doc_lines(lines: Sequence[str], node: FunctionNode) -> List[str]:
    """Comment block followed by docstring lines; empty when the handler is undocumented."""
    result = comment_block(lines, node)
    docstring = ast.get_docstring(node, clean=True)
    if docstring:
        result.extend(line.strip() for line in docstring.splitlines())
    return result


class AnnotationExtractor:
    """Builds ``RouteDoc`` records from every documented handler under a directory."""

    def __init__(
        self,
        rules: Optional[InferenceRules] = None,
        *,
        infer: bool = True,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self._inference = InferenceEngine(rules) if infer else None
        self._exclude_paths = list(exclude_paths)

    def parse_directory(self, root: str | Path) -> List[RouteDoc]:
        """Return accepted routes for all non-test sources below ``root``.

        Raises ``FileNotFoundError``/``OSError`` for filesystem failures and
        ``SourceParseError`` for the first file that is not valid Python.
        """
        root_path = Path(root).expanduser().resolve()
        routes: List[RouteDoc] = []
        for path in iter_source_files(root_path, self._exclude_paths):
            relative = path.relative_to(root_path).as_posix()
            routes.extend(self.parse_file(path, relative))
        _LOGGER.info("Extracted %d route(s) from %s", len(routes), root_path)
        return routes

    def parse_file(self, path: str | Path, relative: Optional[str] = None) -> List[RouteDoc]:
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SourceParseError(Path(relative or path), str(exc)) from exc
        return self.parse_source(source, relative or path.as_posix())

    def parse_source(self, source: str, filename: str = "<source>") -> List[RouteDoc]:
        try:
            tree = ast.parse(source, filename=filename)
        except SyntaxError as exc:
            raise SourceParseError(Path(filename), exc.msg, exc.lineno) from exc

        lines = source.splitlines()
        routes: List[RouteDoc] = []
        for qualname, node in _declarations(tree):
            block = doc_lines(lines, node)
            if not block:
                continue
            route = self._build_route(block, node, qualname, filename)
            if route is not None:
                routes.append(route)
        return routes

    def _build_route(
        self, block: List[str], node: FunctionNode, qualname: str, filename: str
    ) -> Optional[RouteDoc]:
        parser = DirectiveParser()
        route = parser.parse(block, RouteDoc(file=filename, line=node.lineno, handler=qualname))
        for line in parser.malformed:
            _LOGGER.debug("directive-malformed %s:%s %s", filename, node.lineno, line)
        if not route.is_complete:
            if route.path or route.method or parser.malformed:
                _LOGGER.debug("Skipping %s in %s: missing @Router path or method", qualname, filename)
            return None
        if self._inference is not None:
            self._inference.apply(route, node)
        return route


def parse_directory(
    root: str | Path,
    rules: Optional[InferenceRules] = None,
    *,
    infer: bool = True,
    exclude_paths: Sequence[str] = (),
) -> List[RouteDoc]:
    """Extract route records from ``root`` with the default extractor settings."""
    extractor = AnnotationExtractor(rules, infer=infer, exclude_paths=exclude_paths)
    return extractor.parse_directory(root)


__all__ = ["AnnotationExtractor", "comment_block", "doc_lines", "parse_directory"]
