"""Tests for specgen.parsers.annotations."""

from __future__ import annotations

import pytest

from specgen.errors import SourceParseError
from specgen.parsers.annotations import AnnotationExtractor


def test_extracts_comment_block_routes(source_builder) -> None:
    source_builder.write(
        {
            "handlers/users.py": """
            from app import app


            # @Summary Get user by ID
            # @Tags user
            # @Param id path string true "User ID"
            # @Success 200 {object} UserResponse "The user"
            # @Router /user/:id [get]
            @app.get("/user/<id>")
            def get_user(c):
                return None


            def helper():
                return 1
            """,
        }
    )

    routes = source_builder.routes()

    assert len(routes) == 1
    route = routes[0]
    assert route.summary == "Get user by ID"
    assert route.path == "/user/{id}"
    assert route.method == "get"
    assert route.tags == ["user"]
    assert route.responses["200"].model == "UserResponse"
    assert route.file == "handlers/users.py"
    assert route.handler == "get_user"


def test_extracts_docstring_routes_and_class_methods(source_builder) -> None:
    source_builder.write(
        {
            "views.py": '''
            class UserView:
                async def post(self, c):
                    """Create a user.

                    @Summary Create user
                    @RequestBody {object} CreateUserRequest true "payload"
                    @Router /users [post]
                    """
                    return None
            ''',
        }
    )

    routes = source_builder.routes()

    assert [(r.method, r.path, r.handler) for r in routes] == [("post", "/users", "UserView.post")]
    assert routes[0].request_body is not None
    assert routes[0].request_body.model == "CreateUserRequest"


def test_routes_without_path_or_method_are_discarded(source_builder) -> None:
    source_builder.write(
        {
            "main.py": """
            # @Summary No router
            def first(c):
                pass


            # @Summary Bad router
            # @Router /only-path
            def second(c):
                pass
            """,
        }
    )

    assert source_builder.routes() == []


def test_test_files_are_skipped(source_builder) -> None:
    block = """
    # @Router /ping [get]
    def ping(c):
        pass
    """
    source_builder.write(
        {
            "api.py": block,
            "test_api.py": block,
            "api_test.py": block,
            "conftest.py": block,
            ".venv/lib/site.py": block,
        }
    )

    routes = source_builder.routes()

    assert [route.file for route in routes] == ["api.py"]


def test_exclude_paths_are_honored(source_builder) -> None:
    block = """
    # @Router /ping [get]
    def ping(c):
        pass
    """
    source_builder.write({"api.py": block, "legacy/old.py": block})

    routes = source_builder.routes(exclude_paths=["legacy/"])

    assert [route.file for route in routes] == ["api.py"]


def test_syntax_error_is_fatal(source_builder) -> None:
    source_builder.write({"broken.py": "def oops(:\n    pass\n"})

    with pytest.raises(SourceParseError) as excinfo:
        source_builder.routes()

    assert "broken.py" in str(excinfo.value)
    assert excinfo.value.line == 1


def test_missing_directory_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        AnnotationExtractor().parse_directory(tmp_path / "missing")


def test_annotations_take_precedence_over_inference(source_builder) -> None:
    source_builder.write(
        {
            "api.py": """
            # @Param name query string true "Explicit"
            # @Router /search [get]
            def search(c):
                c.query("other")
                c.get_header("X-Trace")
                c.json(200, UserResponse(name="x"))
            """,
        }
    )

    route = source_builder.routes()[0]

    assert [(p.name, p.location, p.description) for p in route.params] == [("name", "query", "Explicit")]
    assert route.responses["200"].model == "UserResponse"


def test_inference_can_be_disabled(source_builder) -> None:
    source_builder.write(
        {
            "api.py": """
            # @Router /search [get]
            def search(c):
                c.query("q")
            """,
        }
    )

    assert source_builder.routes(infer=False)[0].params == []
    assert [p.name for p in source_builder.routes()[0].params] == ["q"]
