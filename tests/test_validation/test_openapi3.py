"""Tests for specgate.validation.openapi3 -- the OpenAPI 3 path."""

from __future__ import annotations

from specgate.error_codes import (
    INVALID_OAS3_FOUND_ERROR_CODE,
    OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
    SCHEMA_UNEXPECTED_HINT,
)
from specgate.models import (
    Document,
    OutcomeKind,
    ParseResult,
    RunStatistics,
    SpecVersion,
)
from specgate.validation.openapi3 import (
    MALFORMED_SUMMARY,
    SPEC_MISSING_SUMMARY,
    V3_PARSE_OPTIONS,
    VALID_SUMMARY,
    WARNINGS_SUMMARY,
    validate_v3,
)

REMOTE_DOC = Document.from_text(
    '{"openapi": "3.0.0", "components": {"schemas": {'
    '"Pet": {"$ref": "https://ex.com/pet.json"},'
    '"Tag": {"$ref": "#/components/schemas/Pet"}}}}'
)


def _result(messages: list[str], document: dict | None = None) -> dict[SpecVersion, ParseResult]:
    return {SpecVersion.OPENAPI3: ParseResult(document=document, messages=messages)}


class TestCleanRead:
    def test_valid(self, stub_checker, openapi_document: Document) -> None:
        checker = stub_checker()
        result = validate_v3(openapi_document, 2, checker)

        assert result.spec == SpecVersion.OPENAPI3
        assert result.outcome.kind == OutcomeKind.VALID
        assert result.outcome.summary == VALID_SUMMARY
        assert result.statistics == RunStatistics(succeeded=1)
        assert result.accepted_by_gateway is None
        assert checker.calls == [(SpecVersion.OPENAPI3, V3_PARSE_OPTIONS)]

    def test_resolve_profile_without_flatten(self) -> None:
        assert V3_PARSE_OPTIONS.resolve
        assert V3_PARSE_OPTIONS.resolve_fully
        assert not V3_PARSE_OPTIONS.flatten

    def test_no_model_no_messages(self, stub_checker, openapi_document) -> None:
        checker = stub_checker(_result([], document=None))
        result = validate_v3(openapi_document, 0, checker)

        assert result.outcome.kind == OutcomeKind.PARSE_EXCEPTION
        assert result.statistics == RunStatistics(failed=1)


class TestOpenAPIMissing:
    """A missing marker hands the document back to the orchestrator."""

    def test_spec_missing_touches_no_counters(self, stub_checker, swagger_document) -> None:
        checker = stub_checker(_result(["attribute openapi is missing"]))
        result = validate_v3(swagger_document, 2, checker)

        assert result.spec_missing
        assert result.outcome.kind == OutcomeKind.SPEC_MISSING
        assert result.outcome.summary == SPEC_MISSING_SUMMARY
        assert result.statistics == RunStatistics()

        (diagnostic,) = result.outcome.diagnostics
        assert diagnostic.error_code == INVALID_OAS3_FOUND_ERROR_CODE
        assert diagnostic.parser_message == ""
        assert diagnostic.raw_parser_message == "attribute openapi is missing"

    def test_level_zero(self, stub_checker, swagger_document) -> None:
        checker = stub_checker(_result(["attribute openapi is missing"]))
        result = validate_v3(swagger_document, 0, checker)

        assert result.spec_missing
        assert result.outcome.diagnostics == []


class TestWarningsAndMalformed:
    def test_partially_passed(self, stub_checker, openapi_document) -> None:
        checker = stub_checker(_result(["attribute info.version is missing"], document={}))
        result = validate_v3(openapi_document, 1, checker)

        assert result.outcome.kind == OutcomeKind.VALID_WITH_WARNINGS
        assert result.outcome.summary == WARNINGS_SUMMARY
        assert result.statistics == RunStatistics(failed=1, partially_passed=1)
        (diagnostic,) = result.outcome.diagnostics
        assert diagnostic.error_code == OPENAPI_PARSE_EXCEPTION_ERROR_CODE
        assert diagnostic.parser_message == "attribute info.version is missing"

    def test_malformed(self, stub_checker, openapi_document) -> None:
        checker = stub_checker(_result(["Unable to parse definition: Invalid JSON"]))
        result = validate_v3(openapi_document, 2, checker)

        assert result.outcome.kind == OutcomeKind.MALFORMED
        assert result.outcome.summary == MALFORMED_SUMMARY
        assert result.statistics == RunStatistics(failed=1, malformed=1)

    def test_level_zero_counts_no_failure(self, stub_checker, openapi_document) -> None:
        checker = stub_checker(_result(["attribute info.version is missing"]))
        result = validate_v3(openapi_document, 0, checker)

        assert result.statistics == RunStatistics(malformed=1)
        assert result.outcome.diagnostics == []

    def test_schema_unexpected_gets_hint(self, stub_checker, openapi_document) -> None:
        message = "attribute paths./pets.get.responses.200.schema is unexpected"
        checker = stub_checker(_result([message], document={}))
        result = validate_v3(openapi_document, 2, checker)

        (diagnostic,) = result.outcome.diagnostics
        assert diagnostic.parser_message == message + SCHEMA_UNEXPECTED_HINT
        assert diagnostic.raw_parser_message == message


class TestRemoteReferences:
    def test_lists_remote_references_once(self, stub_checker) -> None:
        messages = [
            "Unable to load RELATIVE ref: https://ex.com/pet.json (HTTP 404)",
            "Unable to load RELATIVE ref: https://ex.com/pet.json (HTTP 404)",
        ]
        checker = stub_checker(_result(messages, document={}))
        result = validate_v3(REMOTE_DOC, 2, checker)

        assert [p.value for p in result.outcome.remote_references] == ["https://ex.com/pet.json"]
        assert result.outcome.diagnostics == []
        assert result.outcome.kind == OutcomeKind.VALID_WITH_WARNINGS

    def test_level_zero_lists_nothing(self, stub_checker) -> None:
        messages = ["Unable to load RELATIVE ref: https://ex.com/pet.json (HTTP 404)"]
        checker = stub_checker(_result(messages, document={}))
        result = validate_v3(REMOTE_DOC, 0, checker)

        assert result.outcome.remote_references == []
