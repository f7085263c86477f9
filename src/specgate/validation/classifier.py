"""Decide which specification family a definition claims to be.

:func:`classify` parses the document with the shared sniff rule and looks at
its version markers:

* ``openapi`` whose text starts with ``3.`` -> :attr:`SpecVersion.OPENAPI3`
* otherwise any ``swagger`` field -> :attr:`SpecVersion.SWAGGER2`
* otherwise -> :attr:`SpecVersion.UNDETERMINED`

Classification is read-only. A document that cannot be parsed at all is
reported through :attr:`VersionVerdict.parse_error`; counting it as a failed
file is the orchestrator's job.
"""

from __future__ import annotations

from typing import Any

from specgate.exceptions import SpecParseError
from specgate.models import Document, SpecVersion, VersionVerdict
from specgate.parser.loader import parse_document


def classify(document: Document) -> VersionVerdict:
    """Classify *document* as Swagger 2, OpenAPI 3 or undetermined.

    Args:
        document: The raw definition.

    Returns:
        A :class:`~specgate.models.VersionVerdict`. ``name`` is the
        ``info.title`` (empty when absent) for parseable documents and
        ``None`` when parsing failed.
    """
    try:
        root = parse_document(document.text)
    except SpecParseError as exc:
        return VersionVerdict(version=SpecVersion.UNDETERMINED, parse_error=str(exc))

    name = declared_name(root)
    openapi = root.get("openapi")
    if openapi is not None and _as_text(openapi).startswith("3."):
        return VersionVerdict(version=SpecVersion.OPENAPI3, name=name)
    if "swagger" in root:
        return VersionVerdict(version=SpecVersion.SWAGGER2, name=name)
    return VersionVerdict(version=SpecVersion.UNDETERMINED, name=name)


def declared_name(root: dict[str, Any]) -> str:
    """Return ``info.title`` as text, or ``""`` when it is not there."""
    info = root.get("info")
    if not isinstance(info, dict):
        return ""
    title = info.get("title")
    return "" if title is None else _as_text(title)


def _as_text(value: Any) -> str:  # noqa: ANN401
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return ""
    return str(value)
