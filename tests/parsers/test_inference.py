"""Tests for code-shape inference detectors."""

from __future__ import annotations

import ast
import textwrap

from specgen.models import Header, Parameter, RequestBody, Response, RouteDoc
from specgen.parsers.inference import (
    InferenceEngine,
    InferenceRules,
    ParameterDetector,
    RequestBodyDetector,
    ResponseDetector,
    ResponseHeaderDetector,
)


def _function(source: str) -> ast.FunctionDef:
    tree = ast.parse(textwrap.dedent(source))
    node = tree.body[0]
    assert isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
    return node


RULES = InferenceRules()


def test_parameter_detector_reads_path_query_and_header_accessors() -> None:
    func = _function(
        """
        def handler(c):
            user_id = c.param("id")
            name = c.query("name")
            trace = c.get_header("X-Correlation-ID")
            ignored = c.query(name)
            also_ignored = c.param("a", "b")
        """
    )

    params = ParameterDetector(RULES).detect(func)

    assert params == [
        Parameter("id", "path", True, "string", "Path parameter 'id'"),
        Parameter("name", "query", False, "string", "Query parameter 'name'"),
        Parameter("X-Correlation-ID", "header", False, "string", "Header 'X-Correlation-ID'"),
    ]


def test_parameter_detector_returns_empty_when_nothing_matches() -> None:
    func = _function(
        """
        def handler(c):
            return 1
        """
    )

    assert ParameterDetector(RULES).detect(func) == []


def test_response_header_detector_tags_status_200() -> None:
    func = _function(
        """
        def handler(c):
            c.header("X-RateLimit-Remaining", "29")
            c.header("X-Single-Arg")
        """
    )

    headers = ResponseHeaderDetector(RULES).detect(func)

    assert headers == [
        Header("200", "X-RateLimit-Remaining", "string", True, "Header 'X-RateLimit-Remaining'")
    ]


def test_request_body_detector_resolves_annotated_local() -> None:
    func = _function(
        """
        def handler(c):
            req: CreateUserRequest = CreateUserRequest()
            other = UpdateUserRequest()
            c.bind_json(req)
            c.bind_json(other)
        """
    )

    body = RequestBodyDetector(RULES).detect(func)

    assert body == RequestBody(model="CreateUserRequest", required=True)


def test_request_body_detector_resolves_constructor_assignment() -> None:
    func = _function(
        """
        async def handler(c):
            payload = models.Widget()
            if c.should_bind_json(payload):
                return
        """
    )

    body = RequestBodyDetector(RULES).detect(func)

    assert body is not None
    assert body.model == "Widget"


def test_request_body_detector_returns_none_without_binding() -> None:
    func = _function(
        """
        def handler(c):
            data = c.body()
            c.bind_json(data)
        """
    )

    assert RequestBodyDetector(RULES).detect(func) is None


def test_response_detector_records_models_per_status() -> None:
    func = _function(
        """
        def handler(c):
            user: UserResponse = load()
            if not user:
                c.json(404, ErrorResponse(message="missing"))
                return
            c.json(200, user)
            c.json(500, {"message": "dict literals carry no model"})
            c.json(HTTPStatus.CREATED, UserResponse())
            c.json(code, UserResponse())
        """
    )

    responses = ResponseDetector(RULES).detect(func)

    assert responses == {
        "404": Response(status_code="404", model="ErrorResponse"),
        "200": Response(status_code="200", model="UserResponse"),
        "201": Response(status_code="201", model="UserResponse"),
    }


def test_engine_only_fills_empty_categories() -> None:
    func = _function(
        """
        def handler(c, body: CreateUserRequest):
            c.param("id")
            c.header("X-Trace", "1")
            c.bind_json(body)
            c.json(201, UserResponse())
        """
    )
    route = RouteDoc(path="/users/{id}", method="post")
    route.responses["400"] = Response(status_code="400", description="Bad")

    InferenceEngine().apply(route, func)

    assert [p.name for p in route.params] == ["id"]
    assert [h.name for h in route.headers] == ["X-Trace"]
    assert route.request_body is not None
    assert route.request_body.model == "CreateUserRequest"
    assert list(route.responses) == ["400"]


def test_engine_deduplicates_inferred_parameters() -> None:
    func = _function(
        """
        def handler(c):
            c.query("q")
            c.query("q")
        """
    )
    route = RouteDoc(path="/search", method="get")

    InferenceEngine().apply(route, func)

    assert [p.name for p in route.params] == ["q"]


def test_custom_rules_change_recognized_names() -> None:
    func = _function(
        """
        def handler(request):
            request.path_params_get("slug")
            request.query("ignored")
        """
    )
    rules = InferenceRules(path_accessors=("path_params_get",), query_accessors=())

    params = ParameterDetector(rules).detect(func)

    assert [(p.name, p.location) for p in params] == [("slug", "path")]
