"""Console output for validation runs, split between stdout and stderr.

specgate follows the `clig.dev <https://clig.dev/>`_ stream rules:

* **stdout** carries the run result only: the summary line, or the whole
  run report in ``--json`` mode. Scripts can pipe it safely.
* **stderr** carries the per-document narrative: parsing brackets,
  ``Error Code`` diagnostics, remote-reference warnings and outcome lines.
* Rich styling is used only when stdout is an interactive terminal and
  colour has not been turned off by ``NO_COLOR``, ``TERM=dumb`` or
  ``--no-color``. Without colour every line is written with ``print`` so it
  is never re-wrapped.

:class:`OutputManager` holds the preferences for one invocation and is
installed with :func:`set_output` by :func:`specgate.app.validate`. The
module-level functions (:func:`info`, :func:`error`, ...) forward to it so
the reporting code never passes a manager around.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.json import JSON
from rich.markup import escape


class OutputFormat(str, Enum):
    """How the run result on stdout is rendered.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` otherwise; ``--json`` and ``--plain`` pick one explicitly.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Style(NamedTuple):
    """How one message level looks on stderr."""

    prefix: str
    markup: str
    quiet_hides: bool
    verbose_only: bool = False


_STYLES = {
    "info": _Style("", "", quiet_hides=True),
    "success": _Style("", "green", quiet_hides=True),
    "warning": _Style("Warning: ", "yellow", quiet_hides=False),
    "error": _Style("Error: ", "bold red", quiet_hides=False),
    "suggest": _Style("→ ", "dim", quiet_hides=True),
    "debug": _Style("[debug] ", "dim", quiet_hides=False, verbose_only=True),
}


class OutputManager:
    """Output preferences and consoles for one run.

    Args:
        format: Rendering of the run result. ``AUTO`` is resolved here.
        no_color: Turn off colour and Rich markup.
        quiet: Hide informational lines (brackets, outcome lines of valid
            documents, suggestions). Warnings and errors are always shown.
        verbose: Show debug lines such as skipped spec paths.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            interactive = _is_tty() and not self._no_color
            format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # -- stdout ---------------------------------------------------------- #

    def print_data(self, text: str) -> None:
        """Write one line of result data to stdout."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:  # noqa: ANN401
        """Write structured result data to stdout.

        JSON mode emits indented JSON, plain mode ``key<TAB>value`` lines for
        a mapping (``str()`` for anything else), Rich mode highlighted JSON.
        """
        if self._format == OutputFormat.PLAIN:
            lines = (
                [f"{key}\t{value}" for key, value in data.items()]
                if isinstance(data, dict)
                else [str(data)]
            )
            for line in lines:
                self.print_data(line)
            return

        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(text)
        else:
            self._stdout.print(JSON(text))

    # -- stderr ---------------------------------------------------------- #

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def suggest(self, message: str) -> None:
        """Point the user at a next step, e.g. a higher validation level."""
        self._emit("suggest", message)

    def debug(self, message: str) -> None:
        self._emit("debug", message)

    def _emit(self, level: str, message: str) -> None:
        style = _STYLES[level]
        if style.verbose_only and not self._verbose:
            return
        if style.quiet_hides and self._quiet:
            return

        if self._no_color:
            print(f"{style.prefix}{message}", file=sys.stderr, flush=True)
        elif level in ("warning", "error"):
            # Only the prefix is coloured; the message stays readable.
            self._stderr.print(
                f"[{style.markup}]{style.prefix.rstrip()}[/{style.markup}] {escape(message)}"
            )
        elif style.markup:
            self._stderr.print(f"[{style.markup}]{escape(style.prefix + message)}[/{style.markup}]")
        else:
            self._stderr.print(escape(message))


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# -- process-wide manager ------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests use this between runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:  # noqa: ANN401
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
