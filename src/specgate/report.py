"""Render validation reports through the output layer.

Validation code only builds :class:`~specgate.models.DocumentReport`
objects; this module decides what the user sees. Per document it prints the
parsing brackets carrying the declared name, every surfaced diagnostic in the
gateway's ``Error Code`` format, remote references as warnings, and the
outcome line. :func:`render_summary` prints the run counters on stdout, or
the whole :class:`~specgate.models.RunReport` as JSON in ``--json`` mode.
"""

from __future__ import annotations

from pathlib import Path

from specgate.models import (
    Diagnostic,
    DocumentReport,
    OutcomeKind,
    RunReport,
    RunStatistics,
    SpecPathResult,
    SpecVersion,
)
from specgate.output import (
    OutputFormat,
    debug,
    error,
    format_response,
    get_output,
    info,
    print_data,
    success,
    warning,
)

REMOTE_REFERENCES_HEADER = (
    "Validate the following remote references and make sure that they are valid "
    "and accessible:"
)
GATEWAY_ACCEPTED_MESSAGE = "Swagger file will be accepted by the API gateway"


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render a diagnostic the way the gateway reports it."""
    prefix = "Invalid Swagger" if diagnostic.spec == SpecVersion.SWAGGER2 else "Invalid OpenAPI"
    text = (
        f"{prefix}, Error Code: {diagnostic.error_code}, "
        f"Error: {diagnostic.error_message}"
    )
    if diagnostic.parser_message:
        text += f", Swagger Error: {diagnostic.parser_message}"
    if diagnostic.cause:
        text += f", Cause by: {diagnostic.cause}"
    return text


def format_summary(statistics: RunStatistics) -> str:
    return (
        f"Summary --- Total Files Processed: {statistics.total_files}. "
        f"Total Successful Files Count {statistics.succeeded}. "
        f"Total Failed Files Count: {statistics.failed}. "
        f"Total Malformed Swagger File Count: {statistics.malformed}. "
        f"Total Partially Passed File Count: {statistics.partially_passed}"
    )


def bracket(stage: str, report: DocumentReport) -> str:
    label = "openApiName" if report.verdict.version == SpecVersion.OPENAPI3 else "SwaggerName"
    return f'---------------- Parsing {stage} {label} "{report.verdict.name}" ----------------'


def render_document(report: DocumentReport) -> None:
    """Print everything surfaced for one document to stderr."""
    if report.source is not None:
        info(f"Start Parsing Swagger file {Path(report.source).name}")

    verdict = report.verdict
    if verdict.parse_error is not None:
        error(
            "Error occurred while parsing OAS definition. "
            f"Verify the provided definition format: {verdict.parse_error}"
        )
        return
    if verdict.version == SpecVersion.UNDETERMINED:
        error("Invalid OAS definition provided.")

    info(bracket("Started", report))
    for result in report.results:
        render_result(result)
    for diagnostic in report.diagnostics:
        error(format_diagnostic(diagnostic))
    info(bracket("Complete", report))


def render_result(result: SpecPathResult) -> None:
    outcome = result.outcome
    for diagnostic in outcome.diagnostics:
        error(format_diagnostic(diagnostic))
    if outcome.remote_references:
        warning(REMOTE_REFERENCES_HEADER)
        for pointer in outcome.remote_references:
            warning(pointer.literal)

    if outcome.kind == OutcomeKind.VALID:
        success(outcome.summary)
    elif outcome.kind == OutcomeKind.VALID_WITH_WARNINGS:
        info(outcome.summary)
    elif outcome.kind == OutcomeKind.SPEC_MISSING:
        debug(outcome.summary)
    else:
        error(outcome.summary)

    if result.accepted_by_gateway:
        info(GATEWAY_ACCEPTED_MESSAGE)


def render_summary(run: RunReport) -> None:
    """Print the run summary (or the full JSON report) to stdout."""
    if get_output().format == OutputFormat.JSON:
        format_response(run.model_dump(mode="json"))
    else:
        print_data(format_summary(run.statistics))
