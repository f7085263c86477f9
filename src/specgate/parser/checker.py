"""Boundary to the external Swagger 2 / OpenAPI 3 conformance checker.

The validation pipeline never checks spec conformance itself. It asks a
:class:`ConformanceChecker` to read a definition and interprets what comes
back: a parsed model (or ``None``) and a list of free-text messages. Any
object with the two methods of the protocol can be plugged in; tests use a
stub, the CLI uses :class:`OpenAPISpecChecker`.

:class:`OpenAPISpecChecker` combines :class:`~specgate.parser.resolver.RefResolver`
for ``$ref`` handling with `openapi-spec-validator
<https://github.com/python-openapi/openapi-spec-validator>`_ for structural
rules, and words its messages the way the gateway's own parser does
(``attribute info.title is missing``, ``attribute swagger is missing``,
``Unable to load RELATIVE ref: ...``) so the message classifier sees the text
it was written for.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional, Protocol

from openapi_spec_validator import (
    OpenAPIV2SpecValidator,
    OpenAPIV30SpecValidator,
    OpenAPIV31SpecValidator,
)

from specgate.error_codes import (
    DEFINITIONS_REF_PATH,
    MALFORMED_SWAGGER_ERROR,
    OPENAPI_IS_MISSING_MSG,
    REFERENCE_KEY,
    SCHEMA_REF_PATH,
    SWAGGER_IS_MISSING_MSG,
)
from specgate.exceptions import SpecParseError
from specgate.models import ParseOptions, ParseResult, SpecVersion
from specgate.parser.loader import parse_document
from specgate.parser.resolver import RefResolver

_REQUIRED_RE = re.compile(r"^'(.+)' is a required property")
_UNEXPECTED_RE = re.compile(r"\((.+) (?:was|were) unexpected\)")
# Wording used when the object also declares patternProperties (e.g. "^x-").
_UNMATCHED_RE = re.compile(r"^(.+?) (?:does|do) not match any of the regexes")
_QUOTED_RE = re.compile(r"'([^']+)'")


class ConformanceChecker(Protocol):
    """What the validators need from a conformance checker."""

    def read(
        self,
        content: str,
        spec: SpecVersion,
        options: ParseOptions,
        base_uri: Optional[str] = None,
    ) -> ParseResult:
        """Parse and check *content* as *spec*; never raises for bad definitions."""
        ...

    def parse_swagger(self, content: str, base_uri: Optional[str] = None) -> dict[str, Any]:
        """Leniently parse a Swagger 2 definition (no resolution, no checks).

        Raises:
            SpecParseError: If the text cannot be parsed or a remote
                reference cannot be loaded.
        """
        ...


class OpenAPISpecChecker:
    """Default checker backed by openapi-spec-validator.

    Args:
        fetch_remote: Whether remote ``$ref`` targets may be loaded.
        timeout: Seconds allowed per remote fetch.
    """

    def __init__(self, fetch_remote: bool = True, timeout: float = 30.0) -> None:
        self.fetch_remote = fetch_remote
        self.timeout = timeout

    def read(
        self,
        content: str,
        spec: SpecVersion,
        options: ParseOptions,
        base_uri: Optional[str] = None,
    ) -> ParseResult:
        try:
            raw = parse_document(content)
        except SpecParseError as exc:
            if spec == SpecVersion.SWAGGER2:
                return ParseResult(messages=[MALFORMED_SWAGGER_ERROR])
            return ParseResult(messages=[f"Unable to parse definition: {exc}"])

        if spec == SpecVersion.OPENAPI3 and not str(raw.get("openapi", "")).startswith("3."):
            return ParseResult(messages=[f"attribute {OPENAPI_IS_MISSING_MSG}"])
        if spec == SpecVersion.SWAGGER2 and "swagger" not in raw:
            return ParseResult(messages=[f"attribute {SWAGGER_IS_MISSING_MSG}"])

        messages: list[str] = []
        document = raw
        if options.resolve:
            resolver = RefResolver(
                base_uri=base_uri,
                fetch_remote=self.fetch_remote,
                timeout=self.timeout,
                inline_local=options.resolve_fully,
            )
            document = resolver.resolve(raw)
            messages.extend(resolver.messages)
            if resolver.remote_failed:
                if spec == SpecVersion.SWAGGER2:
                    return ParseResult(messages=[MALFORMED_SWAGGER_ERROR])
                # Structure cannot be judged with parts of the definition missing.
                return ParseResult(document=document, messages=messages)

        messages.extend(_structural_messages(document, spec))

        if options.flatten:
            document = _flatten_definitions(document)
            messages = [m.replace(DEFINITIONS_REF_PATH, SCHEMA_REF_PATH) for m in messages]
        return ParseResult(document=document, messages=messages)

    def parse_swagger(self, content: str, base_uri: Optional[str] = None) -> dict[str, Any]:
        raw = parse_document(content)
        RefResolver(
            base_uri=base_uri, fetch_remote=self.fetch_remote, timeout=self.timeout
        ).load_remote_references(raw)
        return raw


def _validator_for(document: dict[str, Any], spec: SpecVersion) -> Any:  # noqa: ANN401
    if spec == SpecVersion.SWAGGER2:
        return OpenAPIV2SpecValidator(document)
    if str(document.get("openapi", "")).startswith("3.1"):
        return OpenAPIV31SpecValidator(document)
    return OpenAPIV30SpecValidator(document)


def _structural_messages(document: dict[str, Any], spec: SpecVersion) -> list[str]:
    try:
        errors = list(_validator_for(document, spec).iter_errors())
    except Exception as exc:  # noqa: BLE001 -- checker crashes are findings too
        return [f"Unable to validate definition: {exc}"]

    messages: list[str] = []
    for error in errors:
        messages.extend(_format_error(error))
    return messages


def _format_error(error: Any) -> list[str]:  # noqa: ANN401
    error = _most_specific(error)
    path = ".".join(str(part) for part in getattr(error, "absolute_path", ()))
    validator = getattr(error, "validator", None)
    message = str(getattr(error, "message", error))

    if validator == "required":
        match = _REQUIRED_RE.match(message)
        if match:
            return [f"attribute {_join(path, match.group(1))} is missing"]
    if validator == "additionalProperties":
        match = _UNEXPECTED_RE.search(message) or _UNMATCHED_RE.match(message)
        if match:
            return [
                f"attribute {_join(path, name)} is unexpected"
                for name in _QUOTED_RE.findall(match.group(1))
            ]
    return [f"attribute {path} {message}" if path else message]


def _most_specific(error: Any) -> Any:  # noqa: ANN401
    """Descend into ``oneOf``/``anyOf`` sub-errors that name a concrete attribute."""
    while True:
        context: Iterable[Any] = getattr(error, "context", None) or ()
        by_kind = {getattr(sub, "validator", None): sub for sub in reversed(list(context))}
        chosen = by_kind.get("additionalProperties") or by_kind.get("required")
        if chosen is None:
            return error
        error = chosen


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _flatten_definitions(document: dict[str, Any]) -> dict[str, Any]:
    """Move Swagger 2 ``definitions`` under ``components.schemas``.

    ``#/definitions/`` pointers left in the document (circular references)
    are rewritten to the new location.
    """
    flattened = _rewrite_refs(document)
    definitions = flattened.pop("definitions", None)
    if isinstance(definitions, dict):
        components = flattened.setdefault("components", {})
        if isinstance(components, dict):
            components.setdefault("schemas", {}).update(definitions)
    return flattened


def _rewrite_refs(node: Any) -> Any:  # noqa: ANN401
    if isinstance(node, dict):
        return {
            key: (
                value.replace(DEFINITIONS_REF_PATH, SCHEMA_REF_PATH, 1)
                if key == REFERENCE_KEY and isinstance(value, str)
                else _rewrite_refs(value)
            )
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [_rewrite_refs(item) for item in node]
    return node
