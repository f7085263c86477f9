"""Canonical Pydantic models shared across all specgate modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RemoteConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

**Checker boundary models** -- exchanged with the external conformance
checker: :class:`ParseOptions` and :class:`ParseResult`.

**Validation models** -- produced by the validation pipeline and consumed by
the reporter: :class:`SpecVersion`, :class:`DocumentEncoding`,
:class:`Document`, :class:`VersionVerdict`, :class:`ReferencePointer`,
:class:`Diagnostic`, :class:`OutcomeKind`, :class:`ValidationOutcome`,
:class:`SpecPathResult`, :class:`RunStatistics`, :class:`DocumentReport`
and :class:`RunReport`.

Documents are immutable once read. Verdicts, outcomes and per-document
reports are created per validation call; only :class:`RunStatistics` is
folded across a whole run.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, computed_field

from specgate.error_codes import ERROR_MESSAGES


# --- Config ---


class RemoteConfig(BaseModel):
    """Settings for loading non-local ``$ref`` targets."""

    enabled: bool = Field(default=True, description="Fetch remote references")
    timeout: float = Field(
        default=30.0, gt=0, description="Per-reference fetch timeout in seconds"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specgate/config.json``.

    Loaded by :func:`~specgate.config.load_global_config`. Fields here have
    the lowest precedence and can be overridden by project config, environment
    variables, or CLI arguments. See :func:`~specgate.config.resolve_config`
    for the full precedence chain.
    """

    default_level: int = Field(
        default=2, ge=0, le=2, description="Validation level used when none is given"
    )
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Documents ---


class SpecVersion(str, enum.Enum):
    """Specification family a definition claims to be."""

    SWAGGER2 = "swagger2"
    OPENAPI3 = "openapi3"
    UNDETERMINED = "undetermined"


class DocumentEncoding(str, enum.Enum):
    """Serialisation of a raw definition, sniffed from its first character."""

    JSON = "json"
    YAML = "yaml"


class Document(BaseModel):
    """A raw API definition as handed to the validation pipeline.

    Use :meth:`from_text` rather than the constructor so the encoding tag is
    always derived from the text.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    encoding: DocumentEncoding
    source: Optional[str] = Field(
        default=None, description="File the text was read from, if any"
    )

    @classmethod
    def from_text(cls, text: str, source: Optional[str] = None) -> Document:
        encoding = (
            DocumentEncoding.JSON
            if text.strip().startswith("{")
            else DocumentEncoding.YAML
        )
        return cls(text=text, encoding=encoding, source=source)

    @property
    def base_uri(self) -> Optional[str]:
        """Directory against which relative ``$ref`` targets are resolved."""
        if self.source is None:
            return None
        return str(Path(self.source).resolve().parent)


class VersionVerdict(BaseModel):
    """Result of classifying a :class:`Document`.

    ``name`` is ``None`` only when the text could not be parsed at all; a
    parsed document without an ``info.title`` carries an empty string. In
    that unparseable case ``parse_error`` holds the parser's explanation.
    """

    version: SpecVersion
    name: Optional[str] = None
    parse_error: Optional[str] = None

    @property
    def parsed(self) -> bool:
        return self.name is not None


class ReferenceKind(str, enum.Enum):
    LOCAL = "local"
    REMOTE = "remote"


class ReferencePointer(BaseModel):
    """A ``$ref`` value found in a document.

    ``literal`` is the JSON rendering of the value (strings keep their
    quotes), which is what the local/remote prefix test is applied to.
    """

    value: Any
    literal: str
    kind: ReferenceKind


# --- Checker boundary ---


class ParseOptions(BaseModel):
    """Option profile passed to the conformance checker."""

    model_config = ConfigDict(frozen=True)

    resolve: bool = False
    flatten: bool = False
    resolve_fully: bool = False


class ParseResult(BaseModel):
    """What the conformance checker hands back: a model (or nothing) and its messages."""

    document: Optional[dict[str, Any]] = None
    messages: list[str] = Field(default_factory=list)


# --- Validation results ---


class Diagnostic(BaseModel):
    """A catalogued validation finding.

    ``parser_message`` is the text shown to the caller (possibly rewritten or
    extended); ``raw_parser_message`` is the checker's text exactly as it was
    received and is kept even when the shown text differs.
    """

    spec: SpecVersion
    error_code: int
    error_message: str
    parser_message: str = ""
    raw_parser_message: str = ""
    cause: Optional[str] = None

    @classmethod
    def from_code(
        cls,
        spec: SpecVersion,
        error_code: int,
        parser_message: str = "",
        raw_parser_message: Optional[str] = None,
        cause: Optional[str] = None,
    ) -> Diagnostic:
        """Build a diagnostic whose ``error_message`` comes from the catalogue."""
        return cls(
            spec=spec,
            error_code=error_code,
            error_message=ERROR_MESSAGES[error_code],
            parser_message=parser_message,
            raw_parser_message=(
                parser_message if raw_parser_message is None else raw_parser_message
            ),
            cause=cause,
        )


class OutcomeKind(str, enum.Enum):
    VALID = "valid"
    VALID_WITH_WARNINGS = "valid-with-warnings"
    MALFORMED = "malformed"
    SPEC_MISSING = "spec-missing"
    PARSE_EXCEPTION = "parse-exception"


class ValidationOutcome(BaseModel):
    """Outcome of running one spec path over a document."""

    kind: OutcomeKind
    summary: str = ""
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    remote_references: list[ReferencePointer] = Field(default_factory=list)


class RunStatistics(BaseModel):
    """Run-level counters.

    Counters only ever grow: statistics from separate validation calls are
    combined with ``+`` (or :meth:`merge`) rather than mutated in place.
    """

    total_files: NonNegativeInt = 0
    succeeded: NonNegativeInt = 0
    failed: NonNegativeInt = 0
    malformed: NonNegativeInt = 0
    partially_passed: NonNegativeInt = 0

    def __add__(self, other: RunStatistics) -> RunStatistics:
        return RunStatistics(
            **{
                name: getattr(self, name) + getattr(other, name)
                for name in RunStatistics.model_fields
            }
        )

    def merge(self, *others: RunStatistics) -> RunStatistics:
        result = self
        for other in others:
            result = result + other
        return result


class SpecPathResult(BaseModel):
    """What a spec-path validator returns: outcome, spec-missing flag and its counters.

    ``accepted_by_gateway`` is informational and only computed on the
    Swagger 2 path.
    """

    spec: SpecVersion
    outcome: ValidationOutcome
    spec_missing: bool = False
    statistics: RunStatistics = Field(default_factory=RunStatistics)
    accepted_by_gateway: Optional[bool] = None


class DocumentStatus(str, enum.Enum):
    VALID = "valid"
    VALID_WITH_WARNINGS = "valid-with-warnings"
    MALFORMED = "malformed"
    FAILED = "failed"


_STATUS_BY_OUTCOME = {
    OutcomeKind.VALID: DocumentStatus.VALID,
    OutcomeKind.VALID_WITH_WARNINGS: DocumentStatus.VALID_WITH_WARNINGS,
    OutcomeKind.MALFORMED: DocumentStatus.MALFORMED,
}


class DocumentReport(BaseModel):
    """Everything the orchestrator learned about a single document."""

    source: Optional[str] = None
    verdict: VersionVerdict
    results: list[SpecPathResult] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    statistics: RunStatistics = Field(default_factory=RunStatistics)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> DocumentStatus:
        if self.verdict.parse_error is not None or not self.results:
            return DocumentStatus.FAILED
        if self.results[-1].spec_missing:
            return DocumentStatus.FAILED
        return _STATUS_BY_OUTCOME.get(
            self.results[-1].outcome.kind, DocumentStatus.FAILED
        )

    def all_diagnostics(self) -> list[Diagnostic]:
        """Diagnostics from every spec path followed by the orchestrator's own."""
        found: list[Diagnostic] = []
        for result in self.results:
            found.extend(result.outcome.diagnostics)
        found.extend(self.diagnostics)
        return found


class RunReport(BaseModel):
    """All document reports of one invocation plus the folded statistics."""

    documents: list[DocumentReport] = Field(default_factory=list)
    statistics: RunStatistics = Field(default_factory=RunStatistics)
