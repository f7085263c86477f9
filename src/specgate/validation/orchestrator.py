"""Drive one document through classification and the spec paths.

:func:`validate_document` is an explicit state machine::

    START -> CLASSIFY_VERSION -> TRY_V3 -> TRY_V2 -> DONE
                              \\-> TRY_V2 ------/
                              \\-> DONE (unparseable)

* Unparseable text stops after classification and counts as one failed file.
* Swagger 2 definitions only take the Swagger 2 path.
* OpenAPI 3 and undetermined definitions start on the OpenAPI 3 path and move
  to the Swagger 2 path when it reports the ``openapi`` marker missing.
* An undetermined definition that is missing both markers gets one final
  "swagger or openapi should present" diagnostic (levels 1 and 2).

The two validators know nothing about each other; every retry decision is
made here. Each call returns its own statistics inside the
:class:`~specgate.models.DocumentReport`; nothing global is touched.
"""

from __future__ import annotations

import enum
from typing import Optional

from specgate.error_codes import (
    OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
    SWAGGER_OR_OPENAPI_IS_MISSING_MSG,
)
from specgate.models import (
    Diagnostic,
    Document,
    DocumentReport,
    RunStatistics,
    SpecPathResult,
    SpecVersion,
    VersionVerdict,
)
from specgate.parser.checker import ConformanceChecker, OpenAPISpecChecker
from specgate.validation.classifier import classify
from specgate.validation.openapi3 import validate_v3
from specgate.validation.swagger2 import validate_v2

VALIDATION_LEVELS = (0, 1, 2)


class DispatchState(str, enum.Enum):
    START = "start"
    CLASSIFY_VERSION = "classify-version"
    TRY_V3 = "try-v3"
    TRY_V2 = "try-v2"
    DONE = "done"


def validate_document(
    document: Document,
    level: int = 2,
    checker: Optional[ConformanceChecker] = None,
) -> DocumentReport:
    """Classify and validate a single document.

    Args:
        document: The raw definition.
        level: ``0`` classify and parse only, ``1`` surface diagnostics the way
            the gateway historically did, ``2`` surface every diagnostic.
        checker: Conformance checker to use; defaults to
            :class:`~specgate.parser.checker.OpenAPISpecChecker`.

    Returns:
        The document's :class:`~specgate.models.DocumentReport`. Its
        statistics always count the document once in ``total_files``.

    Raises:
        ValueError: If *level* is not 0, 1 or 2.
    """
    if level not in VALIDATION_LEVELS:
        raise ValueError(f"Validation level must be one of {VALIDATION_LEVELS}, got {level!r}")
    if checker is None:
        checker = OpenAPISpecChecker()

    verdict: Optional[VersionVerdict] = None
    results: list[SpecPathResult] = []
    diagnostics: list[Diagnostic] = []
    statistics = RunStatistics(total_files=1)

    state = DispatchState.START
    while state != DispatchState.DONE:
        if state == DispatchState.START:
            state = DispatchState.CLASSIFY_VERSION

        elif state == DispatchState.CLASSIFY_VERSION:
            verdict = classify(document)
            if verdict.parse_error is not None:
                statistics = statistics + RunStatistics(failed=1)
            state = _first_path(verdict)

        elif state == DispatchState.TRY_V3:
            result = validate_v3(document, level, checker)
            results.append(result)
            state = DispatchState.TRY_V2 if result.spec_missing else DispatchState.DONE

        elif state == DispatchState.TRY_V2:
            result = validate_v2(document, level, checker)
            results.append(result)
            if (
                result.spec_missing
                and verdict is not None
                and verdict.version == SpecVersion.UNDETERMINED
                and level >= 1
            ):
                diagnostics.append(
                    Diagnostic.from_code(
                        SpecVersion.OPENAPI3,
                        OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
                        SWAGGER_OR_OPENAPI_IS_MISSING_MSG,
                    )
                )
            state = DispatchState.DONE

    assert verdict is not None
    for result in results:
        statistics = statistics + result.statistics

    return DocumentReport(
        source=document.source,
        verdict=verdict,
        results=results,
        diagnostics=diagnostics,
        statistics=statistics,
    )


def _first_path(verdict: VersionVerdict) -> DispatchState:
    if not verdict.parsed:
        return DispatchState.DONE
    if verdict.version == SpecVersion.SWAGGER2:
        return DispatchState.TRY_V2
    return DispatchState.TRY_V3
