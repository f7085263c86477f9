"""Turn the CLI's input argument into validated documents.

The argument is either literal definition text or ``location:<path>``. A
file path yields one document; a directory is walked recursively, entries in
sorted order, one document per regular file. A file that cannot be read is
reported and skipped -- the walk continues and the run still ends with a
summary.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from specgate.exceptions import SpecParseError
from specgate.models import Document, DocumentReport, RunStatistics
from specgate.output import debug, error
from specgate.parser.checker import ConformanceChecker
from specgate.parser.loader import read_document
from specgate.validation.aggregator import RunAggregator
from specgate.validation.orchestrator import validate_document

LOCATION_PREFIX = "location:"

ReportCallback = Callable[[DocumentReport], None]


def validate_input(
    argument: str,
    level: int,
    checker: ConformanceChecker,
    aggregator: RunAggregator,
    on_report: Optional[ReportCallback] = None,
) -> None:
    """Validate literal text or everything under a ``location:`` path.

    Args:
        argument: The CLI's first positional argument.
        level: Validation level (0, 1 or 2).
        checker: Conformance checker handed to every validation.
        aggregator: Receives every document report.
        on_report: Called with each report as soon as it is ready.
    """
    if argument.startswith(LOCATION_PREFIX):
        validate_location(
            argument[len(LOCATION_PREFIX):], level, checker, aggregator, on_report
        )
    else:
        _validate(Document.from_text(argument), level, checker, aggregator, on_report)


def validate_location(
    location: str | Path,
    level: int,
    checker: ConformanceChecker,
    aggregator: RunAggregator,
    on_report: Optional[ReportCallback] = None,
) -> None:
    """Validate a file, or every file below a directory."""
    path = Path(location)
    if path.is_file():
        try:
            document = read_document(path)
        except SpecParseError as exc:
            aggregator.add(RunStatistics(total_files=1))
            error(
                f"Error occurred while reading the definition from {path}, "
                f"hence the file will not be validated. {exc}"
            )
            return
        _validate(document, level, checker, aggregator, on_report)
    elif path.is_dir():
        try:
            entries = sorted(path.iterdir())
        except OSError as exc:
            error(f"Error occurred while listing directory {path}: {exc}")
            return
        debug(f"Validating {len(entries)} entries under {path}")
        for entry in entries:
            validate_location(entry, level, checker, aggregator, on_report)
    else:
        error(
            "Error occurred while reading the provided file/folder, "
            f"please verify the file/folder availability: {location}"
        )


def _validate(
    document: Document,
    level: int,
    checker: ConformanceChecker,
    aggregator: RunAggregator,
    on_report: Optional[ReportCallback],
) -> None:
    report = validate_document(document, level, checker)
    aggregator.record(report)
    if on_report is not None:
        on_report(report)
