"""OpenAPI 3 validation path.

:func:`validate_v3` reads a definition through the conformance checker with
the resolve / fully-resolve profile and interprets its messages:

* an unloadable remote reference lists the document's remote references
  instead of adding a diagnostic;
* ``openapi is missing`` flags the result ``spec_missing`` and adds an
  ``INVALID_OAS3_FOUND`` diagnostic without any parser detail;
* anything else is a parse-exception diagnostic, with a remediation hint
  appended when a ``schema`` attribute turned up where it does not belong.

A spec-missing result leaves every failure counter alone: the orchestrator is
expected to retry on the Swagger 2 path, whose own counters then apply.
"""

from __future__ import annotations

from specgate.error_codes import (
    INVALID_OAS3_FOUND_ERROR_CODE,
    OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
    SCHEMA_UNEXPECTED_HINT,
    UNABLE_TO_RENDER_THE_DEFINITION_ERROR,
)
from specgate.models import (
    Diagnostic,
    Document,
    OutcomeKind,
    ParseOptions,
    ReferencePointer,
    RunStatistics,
    SpecPathResult,
    SpecVersion,
    ValidationOutcome,
)
from specgate.parser.checker import ConformanceChecker
from specgate.validation.messages import MessageKind, classify_message
from specgate.validation.references import audit_document

V3_PARSE_OPTIONS = ParseOptions(resolve=True, resolve_fully=True)

VALID_SUMMARY = "Swagger file is valid OpenAPI 3 definition"
WARNINGS_SUMMARY = "OpenAPI passed with errors, using may lead to functionality issues."
MALFORMED_SUMMARY = "Malformed OpenAPI, Please fix the listed issues before proceeding"
SPEC_MISSING_SUMMARY = "Not an OpenAPI 3 definition"


def validate_v3(
    document: Document, level: int, checker: ConformanceChecker
) -> SpecPathResult:
    """Validate *document* as an OpenAPI 3 definition.

    Args:
        document: The raw definition.
        level: Validation level (0, 1 or 2).
        checker: The conformance checker to read the definition with.

    Returns:
        A :class:`~specgate.models.SpecPathResult`; ``spec_missing`` tells
        the caller to try the Swagger 2 path.
    """
    surface = level >= 1
    result = checker.read(
        document.text, SpecVersion.OPENAPI3, V3_PARSE_OPTIONS, base_uri=document.base_uri
    )

    spec_missing = False
    diagnostics: list[Diagnostic] = []
    remote_references: list[ReferencePointer] = []
    audited = False

    for message in result.messages:
        classified = classify_message(message, SpecVersion.OPENAPI3)
        if classified.kind == MessageKind.REMOTE_REFERENCE:
            # One listing covers every unloadable reference.
            if surface and not audited:
                references, audit_diagnostics = audit_document(document, SpecVersion.OPENAPI3)
                remote_references.extend(references)
                diagnostics.extend(audit_diagnostics)
                audited = True
        elif classified.kind == MessageKind.OPENAPI_MISSING:
            spec_missing = True
            diagnostics.append(
                Diagnostic.from_code(
                    SpecVersion.OPENAPI3,
                    INVALID_OAS3_FOUND_ERROR_CODE,
                    raw_parser_message=message,
                )
            )
        else:
            shown = message
            if classified.kind == MessageKind.SCHEMA_UNEXPECTED:
                shown = message + SCHEMA_UNEXPECTED_HINT
            diagnostics.append(
                Diagnostic.from_code(
                    SpecVersion.OPENAPI3,
                    OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
                    shown,
                    raw_parser_message=message,
                )
            )

    failed = 1 if level != 0 else 0
    if result.messages:
        if spec_missing:
            outcome = ValidationOutcome(kind=OutcomeKind.SPEC_MISSING, summary=SPEC_MISSING_SUMMARY)
            statistics = RunStatistics()
        elif result.document is not None:
            outcome = ValidationOutcome(
                kind=OutcomeKind.VALID_WITH_WARNINGS, summary=WARNINGS_SUMMARY
            )
            statistics = RunStatistics(failed=failed, partially_passed=1)
        else:
            outcome = ValidationOutcome(kind=OutcomeKind.MALFORMED, summary=MALFORMED_SUMMARY)
            statistics = RunStatistics(failed=failed, malformed=1)
    elif result.document is not None:
        outcome = ValidationOutcome(kind=OutcomeKind.VALID, summary=VALID_SUMMARY)
        statistics = RunStatistics(succeeded=1)
    else:
        outcome = ValidationOutcome(
            kind=OutcomeKind.PARSE_EXCEPTION, summary=UNABLE_TO_RENDER_THE_DEFINITION_ERROR
        )
        diagnostics.append(
            Diagnostic.from_code(
                SpecVersion.OPENAPI3,
                OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
                UNABLE_TO_RENDER_THE_DEFINITION_ERROR,
            )
        )
        statistics = RunStatistics(failed=1)

    if surface:
        outcome.diagnostics = diagnostics
        outcome.remote_references = remote_references

    return SpecPathResult(
        spec=SpecVersion.OPENAPI3,
        outcome=outcome,
        spec_missing=spec_missing,
        statistics=statistics,
    )
