"""Fixtures shared by the specgate tests: a scripted checker, sample
definitions, a sandboxed config directory and preset output managers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from specgate.models import Document, ParseOptions, ParseResult, SpecVersion
from specgate.output import OutputFormat, OutputManager, reset_output, set_output


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


# ---------------------------------------------------------------------------
# Output state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    # Managers hold the streams of the test that created them; CliRunner
    # closes those afterwards.
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Conformance checker stub
# ---------------------------------------------------------------------------


class StubChecker:
    """Conformance checker returning canned results per spec family.

    Args:
        results: ``ParseResult`` to hand back for each spec family. Families
            without an entry get a clean result (a model, no messages).
        swagger_error: Exception raised by :meth:`parse_swagger`, if any.
    """

    def __init__(
        self,
        results: Optional[dict[SpecVersion, ParseResult]] = None,
        swagger_error: Optional[Exception] = None,
    ) -> None:
        self.results = results or {}
        self.swagger_error = swagger_error
        self.calls: list[tuple[SpecVersion, ParseOptions]] = []
        self.parse_swagger_calls = 0

    def read(
        self,
        content: str,
        spec: SpecVersion,
        options: ParseOptions,
        base_uri: Optional[str] = None,
    ) -> ParseResult:
        self.calls.append((spec, options))
        return self.results.get(spec, ParseResult(document={}, messages=[]))

    def parse_swagger(self, content: str, base_uri: Optional[str] = None) -> dict[str, Any]:
        self.parse_swagger_calls += 1
        if self.swagger_error is not None:
            raise self.swagger_error
        return {}

    @property
    def specs_read(self) -> list[SpecVersion]:
        return [spec for spec, _ in self.calls]


@pytest.fixture
def stub_checker():
    """Factory building a :class:`StubChecker`.

    Usage::

        checker = stub_checker({SpecVersion.SWAGGER2: ParseResult(messages=[...])})
    """

    def _make(
        results: Optional[dict[SpecVersion, ParseResult]] = None,
        swagger_error: Optional[Exception] = None,
    ) -> StubChecker:
        return StubChecker(results, swagger_error)

    return _make


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger_document() -> Document:
    """A complete, valid Swagger 2 definition as JSON text."""
    return Document.from_text(json.dumps(SWAGGER_DOC))


@pytest.fixture
def openapi_document() -> Document:
    """A complete, valid OpenAPI 3.0 definition as JSON text."""
    return Document.from_text(json.dumps(OPENAPI_DOC))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run with config and data directories under ``tmp_path``.

    The working directory becomes ``tmp_path`` too, so a ``specgate.json``
    written there acts as project config. ``SPECGATE_*`` variables from the
    caller are removed. Returns ``tmp_path``.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specgate.config._is_xdg_platform", lambda: True)

    for var in ["SPECGATE_LEVEL", "SPECGATE_REMOTE_TIMEOUT", "SPECGATE_NO_REMOTE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN, colourless, verbose OutputManager.

    Every diagnostic goes through ``print`` so ``capsys``/``capfd`` see
    unwrapped lines.
    """
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a manager that prints only warnings and errors."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
