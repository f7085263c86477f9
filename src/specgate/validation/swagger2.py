"""Swagger 2 validation path.

:func:`validate_v2` reads a definition through the conformance checker with a
fixed option profile (resolve, flatten, fully resolve) and interprets every
message it gets back:

* ``swagger is missing`` -- the document is not Swagger 2; the result is
  flagged ``spec_missing`` and an ``INVALID_OAS2_FOUND`` diagnostic is added.
* ``malformed or unreadable swagger supplied`` -- a lenient re-parse decides
  whether a remote reference is to blame. If so the remote references are
  listed instead of a diagnostic; otherwise a parse-exception diagnostic
  carries the lenient parser's explanation.
* anything else becomes a parse-exception diagnostic. The checker speaks of
  ``#/components/schemas/`` internally, so those pointers are shown as
  ``#/definitions/``. A missing schema target makes the definition
  unacceptable to the gateway even if a model was produced.

Message classification always runs; diagnostics and remote references are
only surfaced from level 1 upwards.
"""

from __future__ import annotations

from typing import Optional

from specgate.error_codes import (
    INVALID_OAS2_FOUND_ERROR_CODE,
    OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
    SWAGGER_IS_MISSING_MSG,
    UNABLE_TO_RENDER_THE_DEFINITION_ERROR,
)
from specgate.exceptions import SpecParseError
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
from specgate.validation.messages import MessageKind, classify_message, to_swagger_pointers
from specgate.validation.references import audit_document

V2_PARSE_OPTIONS = ParseOptions(resolve=True, flatten=True, resolve_fully=True)

VALID_SUMMARY = "Swagger file is valid"
WARNINGS_SUMMARY = "Swagger passed with errors, using may lead to functionality issues."
MALFORMED_SUMMARY = "Malformed Swagger, Please fix the listed issues before proceeding"


def validate_v2(
    document: Document, level: int, checker: ConformanceChecker
) -> SpecPathResult:
    """Validate *document* as a Swagger 2 definition.

    Args:
        document: The raw definition.
        level: Validation level (0, 1 or 2).
        checker: The conformance checker to read the definition with.

    Returns:
        A :class:`~specgate.models.SpecPathResult` with the outcome, the
        spec-missing flag, this path's statistics and the informational
        gateway-acceptance verdict.
    """
    surface = level >= 1
    result = checker.read(
        document.text, SpecVersion.SWAGGER2, V2_PARSE_OPTIONS, base_uri=document.base_uri
    )

    spec_missing = False
    accepted = True
    diagnostics: list[Diagnostic] = []
    remote_references: list[ReferencePointer] = []

    for message in result.messages:
        classified = classify_message(message, SpecVersion.SWAGGER2)
        if classified.kind == MessageKind.SWAGGER_MISSING:
            spec_missing = True
            diagnostics.append(
                Diagnostic.from_code(
                    SpecVersion.SWAGGER2,
                    INVALID_OAS2_FOUND_ERROR_CODE,
                    SWAGGER_IS_MISSING_MSG,
                    raw_parser_message=message,
                )
            )
        elif classified.kind == MessageKind.MALFORMED_SWAGGER:
            # Only worth a second parse when the answer will be shown.
            if surface:
                diagnostic, references = _explain_malformed(document, message, checker)
                diagnostics.extend(diagnostic)
                remote_references.extend(references)
        else:
            if classified.kind == MessageKind.SCHEMA_REF_MISSING:
                accepted = False
            diagnostics.append(
                Diagnostic.from_code(
                    SpecVersion.SWAGGER2,
                    OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
                    to_swagger_pointers(message),
                    raw_parser_message=message,
                )
            )

    if result.messages:
        failed = 1 if surface else 0
        if result.document is not None:
            outcome = ValidationOutcome(
                kind=OutcomeKind.VALID_WITH_WARNINGS, summary=WARNINGS_SUMMARY
            )
            statistics = RunStatistics(failed=failed, partially_passed=1)
        else:
            accepted = False
            outcome = ValidationOutcome(kind=OutcomeKind.MALFORMED, summary=MALFORMED_SUMMARY)
            statistics = RunStatistics(failed=failed, malformed=1)
    elif result.document is not None:
        outcome = ValidationOutcome(kind=OutcomeKind.VALID, summary=VALID_SUMMARY)
        statistics = RunStatistics(succeeded=1)
    else:
        accepted = False
        outcome = ValidationOutcome(
            kind=OutcomeKind.PARSE_EXCEPTION, summary=UNABLE_TO_RENDER_THE_DEFINITION_ERROR
        )
        diagnostics.append(
            Diagnostic.from_code(
                SpecVersion.SWAGGER2,
                OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
                UNABLE_TO_RENDER_THE_DEFINITION_ERROR,
            )
        )
        statistics = RunStatistics(failed=1)

    if surface:
        outcome.diagnostics = diagnostics
        outcome.remote_references = remote_references

    return SpecPathResult(
        spec=SpecVersion.SWAGGER2,
        outcome=outcome,
        spec_missing=spec_missing,
        statistics=statistics,
        accepted_by_gateway=accepted,
    )


def _explain_malformed(
    document: Document, message: str, checker: ConformanceChecker
) -> tuple[list[Diagnostic], list[ReferencePointer]]:
    """Tell an unloadable remote reference apart from any other parse failure."""
    cause: Optional[str] = None
    try:
        checker.parse_swagger(document.text, base_uri=document.base_uri)
    except SpecParseError as exc:
        if classify_message(str(exc)).kind == MessageKind.REMOTE_REFERENCE:
            references, diagnostics = audit_document(document, SpecVersion.SWAGGER2)
            return diagnostics, references
        cause = str(exc)

    return [
        Diagnostic.from_code(
            SpecVersion.SWAGGER2,
            OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
            message,
            cause=cause,
        )
    ], []
