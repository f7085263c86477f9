"""Tests for specgate.parser.checker -- the openapi-spec-validator backed checker."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import pytest

from specgate.error_codes import MALFORMED_SWAGGER_ERROR, SCHEMA_UNEXPECTED_HINT
from specgate.exceptions import RemoteReferenceError, SpecParseError
from specgate.models import Document, ParseOptions, SpecVersion
from specgate.parser.checker import OpenAPISpecChecker, _flatten_definitions, _format_error
from specgate.validation.openapi3 import V3_PARSE_OPTIONS, validate_v3
from specgate.validation.swagger2 import V2_PARSE_OPTIONS

SWAGGER_DOC: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {},
}

OPENAPI_DOC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {},
}


def _text(spec: dict[str, Any]) -> str:
    return json.dumps(spec)


@pytest.fixture
def checker() -> OpenAPISpecChecker:
    return OpenAPISpecChecker(fetch_remote=False)


# ---------------------------------------------------------------------------
# Clean definitions
# ---------------------------------------------------------------------------


class TestValidDefinitions:
    """Complete definitions produce a model and no messages."""

    def test_swagger2(self, checker: OpenAPISpecChecker) -> None:
        result = checker.read(_text(SWAGGER_DOC), SpecVersion.SWAGGER2, V2_PARSE_OPTIONS)
        assert result.messages == []
        assert result.document is not None
        assert result.document["info"]["title"] == "Petstore"

    def test_openapi30(self, checker: OpenAPISpecChecker) -> None:
        result = checker.read(_text(OPENAPI_DOC), SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)
        assert result.messages == []
        assert result.document is not None

    def test_yaml_definition(self, checker: OpenAPISpecChecker) -> None:
        content = "openapi: 3.0.3\ninfo:\n  title: T\n  version: '1'\npaths: {}\n"
        result = checker.read(content, SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)
        assert result.messages == []


# ---------------------------------------------------------------------------
# Version markers
# ---------------------------------------------------------------------------


class TestVersionMarkers:
    """A missing marker is reported in the gateway parser's wording."""

    def test_openapi_missing(self, checker: OpenAPISpecChecker) -> None:
        result = checker.read(_text(SWAGGER_DOC), SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)
        assert result.messages == ["attribute openapi is missing"]
        assert result.document is None

    def test_openapi_wrong_major_counts_as_missing(self, checker: OpenAPISpecChecker) -> None:
        result = checker.read('{"openapi": "2.0"}', SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)
        assert result.messages == ["attribute openapi is missing"]

    def test_swagger_missing(self, checker: OpenAPISpecChecker) -> None:
        result = checker.read(_text(OPENAPI_DOC), SpecVersion.SWAGGER2, V2_PARSE_OPTIONS)
        assert result.messages == ["attribute swagger is missing"]
        assert result.document is None


# ---------------------------------------------------------------------------
# Unparseable text
# ---------------------------------------------------------------------------


class TestUnparseable:
    def test_swagger_path_reports_malformed(self, checker: OpenAPISpecChecker) -> None:
        result = checker.read('{"swagger": ', SpecVersion.SWAGGER2, V2_PARSE_OPTIONS)
        assert result.messages == [MALFORMED_SWAGGER_ERROR]
        assert result.document is None

    def test_openapi_path_reports_parse_failure(self, checker: OpenAPISpecChecker) -> None:
        result = checker.read('{"openapi": ', SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)
        assert len(result.messages) == 1
        assert result.messages[0].startswith("Unable to parse definition: Invalid JSON")
        assert result.document is None


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class TestReferences:
    """Reference problems surface as messages."""

    def test_missing_definition_uses_components_pointer(
        self, checker: OpenAPISpecChecker
    ) -> None:
        spec = dict(SWAGGER_DOC)
        spec["paths"] = {
            "/pets": {
                "get": {
                    "responses": {
                        "200": {
                            "description": "OK",
                            "schema": {"$ref": "#/definitions/Missing"},
                        }
                    }
                }
            }
        }
        result = checker.read(_text(spec), SpecVersion.SWAGGER2, V2_PARSE_OPTIONS)

        assert "#/components/schemas/Missing is missing" in result.messages
        assert result.document is not None

    def test_remote_failure_on_swagger_path_is_malformed(
        self, checker: OpenAPISpecChecker
    ) -> None:
        spec = dict(SWAGGER_DOC)
        spec["definitions"] = {"Pet": {"$ref": "https://example.com/defs.json#/Pet"}}
        result = checker.read(_text(spec), SpecVersion.SWAGGER2, V2_PARSE_OPTIONS)

        assert result.messages == [MALFORMED_SWAGGER_ERROR]
        assert result.document is None

    def test_remote_failure_on_openapi_path_keeps_model(
        self, checker: OpenAPISpecChecker
    ) -> None:
        spec = dict(OPENAPI_DOC)
        spec["components"] = {"schemas": {"Pet": {"$ref": "defs.yaml#/Pet"}}}
        result = checker.read(_text(spec), SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)

        assert len(result.messages) == 1
        assert result.messages[0].startswith("Unable to load RELATIVE ref: defs.yaml#/Pet")
        assert result.document is not None

    def test_without_resolution_remote_refs_are_not_loaded(
        self, checker: OpenAPISpecChecker
    ) -> None:
        spec = dict(SWAGGER_DOC)
        spec["definitions"] = {"Pet": {"type": "object"}}
        result = checker.read(_text(spec), SpecVersion.SWAGGER2, ParseOptions())
        assert result.messages == []


# ---------------------------------------------------------------------------
# Structural checks
# ---------------------------------------------------------------------------


class TestStructuralMessages:
    def test_incomplete_info_is_reported(self, checker: OpenAPISpecChecker) -> None:
        content = '{"swagger": "2.0", "info": {"title": "T"}, "paths": {}}'
        result = checker.read(content, SpecVersion.SWAGGER2, V2_PARSE_OPTIONS)

        assert result.messages
        assert result.document is not None

    def test_swagger_style_schema_on_openapi_response(self, checker: OpenAPISpecChecker) -> None:
        spec = {
            **OPENAPI_DOC,
            "paths": {
                "/p": {
                    "get": {
                        "responses": {
                            "200": {
                                "description": "ok",
                                "schema": {"$ref": "#/components/schemas/A"},
                            }
                        }
                    }
                }
            },
            "components": {"schemas": {"A": {"type": "object"}}},
        }
        result = checker.read(_text(spec), SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)

        assert "attribute paths./p.get.responses.200.schema is unexpected" in result.messages

        path_result = validate_v3(Document.from_text(_text(spec)), 2, checker)
        shown = [d.parser_message for d in path_result.outcome.diagnostics]
        assert any(text.endswith(SCHEMA_UNEXPECTED_HINT) for text in shown)


class TestFormatError:
    """Wording of openapi-spec-validator errors."""

    @staticmethod
    def _error(validator: str, message: str, path: tuple = ("info",)) -> SimpleNamespace:
        return SimpleNamespace(
            validator=validator, message=message, absolute_path=path, context=None
        )

    def test_required(self) -> None:
        error = self._error("required", "'version' is a required property")
        assert _format_error(error) == ["attribute info.version is missing"]

    def test_additional_properties(self) -> None:
        error = self._error(
            "additionalProperties",
            "Additional properties are not allowed ('foo' was unexpected)",
        )
        assert _format_error(error) == ["attribute info.foo is unexpected"]

    def test_unmatched_extension_pattern(self) -> None:
        error = self._error(
            "additionalProperties", "'schema' does not match any of the regexes: '^x-'"
        )
        assert _format_error(error) == ["attribute info.schema is unexpected"]

    def test_several_unmatched_names(self) -> None:
        error = self._error(
            "additionalProperties", "'a', 'b' do not match any of the regexes: '^x-'"
        )
        assert _format_error(error) == [
            "attribute info.a is unexpected",
            "attribute info.b is unexpected",
        ]

    def test_other_validator_keeps_message(self) -> None:
        error = self._error("type", "5 is not of type 'string'", ("info", "title"))
        assert _format_error(error) == ["attribute info.title 5 is not of type 'string'"]


# ---------------------------------------------------------------------------
# Lenient Swagger parse
# ---------------------------------------------------------------------------


class TestParseSwagger:
    def test_returns_tree(self, checker: OpenAPISpecChecker) -> None:
        assert checker.parse_swagger(_text(SWAGGER_DOC))["swagger"] == "2.0"

    def test_syntax_error_raises(self, checker: OpenAPISpecChecker) -> None:
        with pytest.raises(SpecParseError):
            checker.parse_swagger('{"swagger": ')

    def test_unloadable_remote_reference_raises(self, checker: OpenAPISpecChecker) -> None:
        spec = dict(SWAGGER_DOC)
        spec["definitions"] = {"Pet": {"$ref": "https://example.com/defs.json#/Pet"}}
        with pytest.raises(RemoteReferenceError):
            checker.parse_swagger(_text(spec))


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


class TestFlattenDefinitions:
    def test_moves_definitions_to_components(self) -> None:
        flattened = _flatten_definitions(
            {"swagger": "2.0", "definitions": {"Pet": {"type": "object"}}}
        )
        assert "definitions" not in flattened
        assert flattened["components"]["schemas"] == {"Pet": {"type": "object"}}

    def test_rewrites_leftover_pointers(self) -> None:
        flattened = _flatten_definitions(
            {"definitions": {"Node": {"properties": {"child": {"$ref": "#/definitions/Node"}}}}}
        )
        child = flattened["components"]["schemas"]["Node"]["properties"]["child"]
        assert child == {"$ref": "#/components/schemas/Node"}
