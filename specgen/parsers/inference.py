"""Code-shape inference for handlers whose directives leave gaps.

Each detector is an independent ``ast.NodeVisitor`` pass over a handler body. A detector
that finds nothing returns an empty result (``[]``, ``{}`` or ``None``); that is the
normal "nothing to infer" outcome and never an error.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from http import HTTPStatus
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..logging import get_logger
from ..models import DEFAULT_MEDIA_TYPE, Header, Parameter, RequestBody, Response, RouteDoc

_LOGGER = get_logger("parsers.inference")

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


@dataclass(frozen=True)
class InferenceRules:
    """Call names recognized by the detectors."""

    path_accessors: Tuple[str, ...] = ("param", "path_param")
    query_accessors: Tuple[str, ...] = ("query", "query_param")
    header_accessors: Tuple[str, ...] = ("get_header",)
    response_header_setters: Tuple[str, ...] = ("header", "set_header")
    body_binders: Tuple[str, ...] = ("bind_json", "should_bind_json")
    json_writers: Tuple[str, ...] = ("json", "json_response")


def call_name(node: ast.Call) -> Optional[str]:
    """Return the bare name of the called function or method."""
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _string_literal(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _status_literal(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Constant):
        value = node.value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str) and value.strip().isdigit():
            return value.strip()
        return None
    # HTTPStatus.CREATED / http.HTTPStatus.CREATED
    if isinstance(node, ast.Attribute) and _type_name(node.value) == "HTTPStatus":
        member = HTTPStatus.__members__.get(node.attr)
        return str(member.value) if member is not None else None
    return None


def _type_name(node: Optional[ast.AST]) -> Optional[str]:
    """Return the class name an annotation or constructor expression refers to."""
    if node is None:
        return None
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value.rsplit(".", 1)[-1].strip() or None
    if isinstance(node, ast.Subscript) and _type_name(node.value) == "Optional":
        return _type_name(node.slice)
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        # Model | None
        for side in (node.left, node.right):
            if not (isinstance(side, ast.Constant) and side.value is None):
                return _type_name(side)
    return None


def _constructor_name(node: ast.AST) -> Optional[str]:
    """Return ``Model`` for ``Model(...)`` calls; lower-case callees are not constructors."""
    if not isinstance(node, ast.Call):
        return None
    name = _type_name(node.func)
    if name and name[:1].isupper():
        return name
    return None


class LocalTypes(ast.NodeVisitor):
    """Collects the declared type of each local name in a handler."""

    def __init__(self) -> None:
        self.types: Dict[str, str] = {}

    @classmethod
    def of(cls, func: FunctionNode) -> Dict[str, str]:
        collector = cls()
        arguments = func.args
        for arg in [*arguments.posonlyargs, *arguments.args, *arguments.kwonlyargs]:
            name = _type_name(arg.annotation)
            if name:
                collector.types.setdefault(arg.arg, name)
        for stmt in func.body:
            collector.visit(stmt)
        return collector.types

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        if isinstance(node.target, ast.Name):
            name = _type_name(node.annotation)
            if name:
                self.types.setdefault(node.target.id, name)
        self.generic_visit(node)

    def visit_Assign(self, node: ast.Assign) -> None:
        name = _constructor_name(node.value)
        if name:
            for target in node.targets:
                if isinstance(target, ast.Name):
                    self.types.setdefault(target.id, name)
        self.generic_visit(node)


class _CallDetector(ast.NodeVisitor):
    """Base pass visiting every call in a handler body whose name is in ``names``."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = frozenset(names)

    def scan(self, func: FunctionNode) -> None:
        for stmt in func.body:
            self.visit(stmt)

    def visit_Call(self, node: ast.Call) -> None:
        name = call_name(node)
        if name in self.names:
            self.on_call(name, node)
        self.generic_visit(node)

    def on_call(self, name: str, node: ast.Call) -> None:  # pragma: no cover - abstract
        raise NotImplementedError


class ParameterDetector(_CallDetector):
    """Path, query and header reads with a single string-literal argument."""

    def __init__(self, rules: InferenceRules) -> None:
        self._locations: Dict[str, str] = {}
        for name in rules.header_accessors:
            self._locations[name] = "header"
        for name in rules.query_accessors:
            self._locations[name] = "query"
        for name in rules.path_accessors:
            self._locations[name] = "path"
        super().__init__(self._locations)
        self.found: List[Parameter] = []

    def detect(self, func: FunctionNode) -> List[Parameter]:
        self.found = []
        self.scan(func)
        return self.found

    def on_call(self, name: str, node: ast.Call) -> None:
        if len(node.args) != 1 or node.keywords:
            return
        value = _string_literal(node.args[0])
        if value is None:
            return
        location = self._locations[name]
        if location == "path":
            self.found.append(
                Parameter(value, "path", True, "string", f"Path parameter '{value}'")
            )
        elif location == "query":
            self.found.append(
                Parameter(value, "query", False, "string", f"Query parameter '{value}'")
            )
        else:
            self.found.append(Parameter(value, "header", False, "string", f"Header '{value}'"))


class ResponseHeaderDetector(_CallDetector):
    """``c.header("X-Name", value)`` calls, recorded against status 200."""

    def __init__(self, rules: InferenceRules) -> None:
        super().__init__(rules.response_header_setters)
        self.found: List[Header] = []

    def detect(self, func: FunctionNode) -> List[Header]:
        self.found = []
        self.scan(func)
        return self.found

    def on_call(self, name: str, node: ast.Call) -> None:
        if len(node.args) != 2:
            return
        header = _string_literal(node.args[0])
        if header is None:
            return
        self.found.append(
            Header(
                status_code="200",
                name=header,
                type="string",
                required=True,
                description=f"Header '{header}'",
            )
        )


class RequestBodyDetector(_CallDetector):
    """First ``c.bind_json(req)`` whose argument has a resolvable local type."""

    def __init__(self, rules: InferenceRules) -> None:
        super().__init__(rules.body_binders)
        self._locals: Dict[str, str] = {}
        self.found: Optional[RequestBody] = None

    def detect(self, func: FunctionNode) -> Optional[RequestBody]:
        self.found = None
        self._locals = LocalTypes.of(func)
        self.scan(func)
        return self.found

    def on_call(self, name: str, node: ast.Call) -> None:
        if self.found is not None or len(node.args) != 1:
            return
        argument = node.args[0]
        if not isinstance(argument, ast.Name):
            return
        model = self._locals.get(argument.id)
        if model:
            self.found = RequestBody(model=model, required=True, media_type=DEFAULT_MEDIA_TYPE)


class ResponseDetector(_CallDetector):
    """``c.json(status, value)`` calls with a literal status code."""

    def __init__(self, rules: InferenceRules) -> None:
        super().__init__(rules.json_writers)
        self._locals: Dict[str, str] = {}
        self.found: Dict[str, Response] = {}

    def detect(self, func: FunctionNode) -> Dict[str, Response]:
        self.found = {}
        self._locals = LocalTypes.of(func)
        self.scan(func)
        return self.found

    def on_call(self, name: str, node: ast.Call) -> None:
        if len(node.args) != 2:
            return
        status = _status_literal(node.args[0])
        if status is None:
            return
        value = node.args[1]
        model = _constructor_name(value)
        if model is None and isinstance(value, ast.Name):
            model = self._locals.get(value.id)
        if model:
            self.found[status] = Response(status_code=status, model=model)


class InferenceEngine:
    """Fills the empty categories of a route record from its handler body."""

    def __init__(self, rules: Optional[InferenceRules] = None) -> None:
        self.rules = rules or InferenceRules()

    def apply(self, route: RouteDoc, func: FunctionNode) -> RouteDoc:
        if not route.headers:
            headers = ResponseHeaderDetector(self.rules).detect(func)
            if headers:
                route.headers.extend(headers)
                _LOGGER.debug("Inferred %d response header(s) for %s", len(headers), func.name)
        if not route.params:
            params = ParameterDetector(self.rules).detect(func)
            for param in params:
                route.add_param(param)
            if params:
                _LOGGER.debug("Inferred %d parameter(s) for %s", len(route.params), func.name)
        if route.request_body is None:
            body = RequestBodyDetector(self.rules).detect(func)
            if body is not None:
                route.request_body = body
                _LOGGER.debug("Inferred request body %s for %s", body.model, func.name)
        if not route.responses:
            responses = ResponseDetector(self.rules).detect(func)
            if responses:
                route.responses.update(responses)
                _LOGGER.debug("Inferred responses %s for %s", sorted(responses), func.name)
        return route


__all__ = [
    "InferenceEngine",
    "InferenceRules",
    "LocalTypes",
    "ParameterDetector",
    "RequestBodyDetector",
    "ResponseDetector",
    "ResponseHeaderDetector",
    "call_name",
]
