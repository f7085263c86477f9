"""Typer application and CLI entry point for specgate.

The CLI takes one definition (literal text) or a ``location:`` pointing to a
file or directory, plus an optional validation level::

    specgate 'location:./apis' 2
    specgate '{"swagger": "2.0", "info": {"title": "T", "version": "1"}, "paths": {}}'

Every document is classified, validated on the matching spec path and
reported on stderr; the run always ends with a summary on stdout.

Installed as the ``specgate`` script through :func:`main`, which turns
escaping errors into exit codes and crash logs.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from specgate import __version__
from specgate.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_VALIDATION_FAILED,
)


app = typer.Typer(
    name="specgate",
    help="Validate Swagger 2 / OpenAPI 3 definitions against API gateway acceptance rules.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specgate {__version__}")
        raise typer.Exit()


@app.command()
def validate(
    source: str = typer.Argument(
        ...,
        help="Definition text, or location:<file-or-directory>.",
        show_default=False,
    ),
    level: Optional[int] = typer.Argument(
        None,
        min=0,
        max=2,
        help="0 = parse only, no diagnostics; 1 = gateway-compatible diagnostics; "
        "2 = all diagnostics. Defaults to the configured level (2).",
        show_default=False,
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the full report as JSON on stdout."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Tab-separated summary, no styling."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="No colour or markup; also honours NO_COLOR."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only warnings, errors and the summary."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Also show skipped spec paths and other debug lines."
    ),
    no_remote: bool = typer.Option(
        False, "--no-remote", help="Never fetch remote $ref targets."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0.1, help="Seconds allowed per remote $ref fetch."
    ),
    fail_on_error: bool = typer.Option(
        False,
        "--fail-on-error",
        help=f"Exit with {EXIT_VALIDATION_FAILED} when any definition failed or was malformed.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the specgate version.",
    ),
) -> None:
    """Validate one definition, or every definition under a location."""
    from specgate.batch import validate_input
    from specgate.config import resolve_config
    from specgate.exceptions import ConfigError
    from specgate.output import OutputFormat, OutputManager, error, set_output, suggest
    from specgate.parser.checker import OpenAPISpecChecker
    from specgate.report import render_document, render_summary
    from specgate.validation.aggregator import RunAggregator

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    set_output(
        OutputManager(
            format=OutputFormat(cli_format or OutputFormat.AUTO.value),
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    try:
        config = resolve_config(
            cli_level=level,
            cli_format=cli_format,
            cli_timeout=timeout,
            cli_no_remote=no_remote,
        )
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if cli_format is None and config.output.format != OutputFormat.AUTO.value:
        try:
            configured = OutputFormat(config.output.format)
        except ValueError:
            error(f"Unknown output format in configuration: {config.output.format}")
            raise typer.Exit(code=ConfigError.exit_code) from None
        set_output(
            OutputManager(format=configured, no_color=no_color, quiet=quiet, verbose=verbose)
        )

    checker = OpenAPISpecChecker(
        fetch_remote=config.remote.enabled, timeout=config.remote.timeout
    )
    aggregator = RunAggregator()
    validate_input(
        source, config.default_level, checker, aggregator, on_report=render_document
    )
    render_summary(aggregator.snapshot())

    if aggregator.has_failures:
        if config.default_level == 0:
            suggest("Run with validation level 1 or 2 to see why definitions failed.")
        if fail_on_error:
            raise typer.Exit(code=EXIT_VALIDATION_FAILED)


def _setup_signal_handlers() -> None:
    def _on_interrupt(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nInterrupted.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _on_interrupt)


def _write_crash_log() -> Path:
    """Save the traceback being handled and return where it went."""
    from specgate.config import get_data_dir

    crash_dir = get_data_dir() / "logs"
    crash_dir.mkdir(parents=True, exist_ok=True)
    path = crash_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    path.write_text(traceback.format_exc(), encoding="utf-8")
    return path


def main() -> None:
    """Console-script entry point.

    Domain errors that escape the command exit with their own code; anything
    else leaves a crash log and exits with :data:`EXIT_GENERIC_FAILURE`.
    """
    from specgate.exceptions import SpecgateError
    from specgate.output import error

    _setup_signal_handlers()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        sys.exit(EXIT_INTERRUPTED)
    except SpecgateError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:  # noqa: BLE001
        crash_log = _write_crash_log()
        error(f"Unexpected failure; traceback saved to {crash_log}")
        sys.exit(EXIT_GENERIC_FAILURE)
