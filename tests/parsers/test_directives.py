"""Tests for the directive grammar."""

from __future__ import annotations

from specgen.models import SecurityRequirement
from specgen.parsers.directives import DirectiveParser, parse_directives, parse_security


def test_summary_description_and_tags() -> None:
    doc = parse_directives(
        [
            "@Summary Get user by ID",
            "@Description Returns user data based on ID",
            "@Tags user, admin",
        ]
    )

    assert doc.summary == "Get user by ID"
    assert doc.description == "Returns user data based on ID"
    assert doc.tags == ["user", "admin"]


def test_response_with_and_without_model() -> None:
    doc = parse_directives(
        [
            '@Success 200 {object} UserResponse "Returns the user"',
            '@Failure 401 "Unauthorized"',
            "@Success 204",
        ]
    )

    assert doc.responses["200"].model == "UserResponse"
    assert doc.responses["200"].description == "Returns the user"
    assert doc.responses["200"].media_type == "application/json"
    assert doc.responses["401"].model == ""
    assert doc.responses["401"].description == "Unauthorized"
    assert doc.responses["204"].description == ""


def test_failure_and_success_share_status_last_wins() -> None:
    doc = parse_directives(
        [
            '@Success 400 {object} Ok "first"',
            '@Failure 400 {object} ErrorResponse "second"',
        ]
    )

    assert list(doc.responses) == ["400"]
    assert doc.responses["400"].model == "ErrorResponse"
    assert doc.responses["400"].description == "second"


def test_router_requires_exactly_two_tokens() -> None:
    parser = DirectiveParser()
    doc = parser.parse(["@Router /user/:id [get]"])
    assert doc.path == "/user/{id}"
    assert doc.method == "get"

    broken = parser.parse(["@Router /user/{id} [get] extra"])
    assert broken.path == ""
    assert broken.method == ""
    assert parser.malformed == ["@Router /user/{id} [get] extra"]


def test_param_requires_four_tokens() -> None:
    doc = parse_directives(
        [
            '@Param id path string true "User ID"',
            "@Param X-Correlation-ID header string false",
            "@Param broken query string",
        ]
    )

    assert [(p.name, p.location) for p in doc.params] == [("id", "path"), ("X-Correlation-ID", "header")]
    first = doc.params[0]
    assert first.required is True
    assert first.schema_type == "string"
    assert first.description == "User ID"
    assert doc.params[1].required is False
    assert doc.params[1].description == ""


def test_request_body_directive() -> None:
    doc = parse_directives(['@RequestBody {object} CreateUserRequest true "User payload"'])

    assert doc.request_body is not None
    assert doc.request_body.model == "CreateUserRequest"
    assert doc.request_body.required is True
    assert doc.request_body.description == "User payload"
    assert doc.request_body.media_type == "application/json"


def test_request_body_with_too_few_tokens_is_ignored() -> None:
    doc = parse_directives(["@RequestBody {object} CreateUserRequest true"])
    assert doc.request_body is None


def test_header_requires_five_tokens() -> None:
    doc = parse_directives(
        [
            '@Header 200 X-RateLimit-Remaining integer true "Remaining quota"',
            "@Header 200 X-Short string true",
        ]
    )

    assert len(doc.headers) == 1
    header = doc.headers[0]
    assert (header.status_code, header.name, header.type, header.required) == (
        "200",
        "X-RateLimit-Remaining",
        "integer",
        True,
    )
    assert header.description == "Remaining quota"


def test_deprecated_is_case_insensitive() -> None:
    assert parse_directives(["@deprecated"]).deprecated is True
    assert parse_directives(["@DEPRECATED"]).deprecated is True
    assert parse_directives(["@Deprecated since v2"]).deprecated is False


def test_keywords_are_case_sensitive() -> None:
    doc = parse_directives(["@summary lower case", "@router /x [get]"])
    assert doc.summary == ""
    assert doc.path == ""


def test_security_grammar() -> None:
    assert parse_security("BearerAuth") == [SecurityRequirement("BearerAuth")]
    assert parse_security("ApiKey[X-Api-Key]") == [SecurityRequirement("ApiKey", "X-Api-Key")]
    assert parse_security("ApiKey:X-Api-Key") == [SecurityRequirement("ApiKey", "X-Api-Key")]
    assert parse_security("BearerAuth, ApiKey[X-Key]") == [
        SecurityRequirement("BearerAuth"),
        SecurityRequirement("ApiKey", "X-Key"),
    ]


def test_security_directive_accumulates() -> None:
    doc = parse_directives(["@Security BearerAuth", "@Security ApiKey:X-Api-Key"])
    assert [req.scheme for req in doc.security] == ["BearerAuth", "ApiKey"]
    assert doc.security[1].header == "X-Api-Key"
