"""Read API definitions and turn them into generic JSON/YAML trees.

This module handles all I/O for raw definitions: sniffing whether text is
JSON or YAML, parsing it, reading it from disk, and fetching remote ``$ref``
targets. The sniff rule is deliberately simple and shared by every caller:
text whose first non-whitespace character is ``{`` is JSON, anything else is
YAML. JSON text is never retried as YAML.

YAML is read the way a generic tree reader would read it: timestamps stay
strings and mapping keys are always strings (``200:`` becomes ``"200"``), so
the tree looks the same whichever encoding the author picked.

The public functions are:

* :func:`parse_content` -- Parse text into a generic tree (any root type).
* :func:`parse_document` -- Parse text whose root must be a mapping.
* :func:`read_document` -- Read a file into a :class:`~specgate.models.Document`.
* :func:`fetch_text` -- Load the text behind a remote reference.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import yaml

from specgate.exceptions import SpecParseError
from specgate.models import Document, DocumentEncoding


class _TreeLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as plain strings."""


_TreeLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def sniff_encoding(content: str) -> DocumentEncoding:
    """Return the encoding implied by the first non-whitespace character."""
    if content.strip().startswith("{"):
        return DocumentEncoding.JSON
    return DocumentEncoding.YAML


def parse_content(content: str) -> Any:  # noqa: ANN401
    """Parse *content* as JSON or YAML according to :func:`sniff_encoding`.

    Args:
        content: Raw definition text.

    Returns:
        The generic tree: dicts, lists and scalars.

    Raises:
        SpecParseError: If the text is not valid in its sniffed encoding.
    """
    if sniff_encoding(content) == DocumentEncoding.JSON:
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise SpecParseError(f"Invalid JSON: {exc}") from exc

    try:
        tree = yaml.load(content, Loader=_TreeLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        raise SpecParseError(f"Invalid YAML: {exc}") from exc
    return _stringify_keys(tree)


def parse_document(content: str) -> dict[str, Any]:
    """Parse *content* and require a mapping at the root.

    Raises:
        SpecParseError: If parsing fails or the root is not an object.
    """
    tree = parse_content(content)
    if not isinstance(tree, dict):
        raise SpecParseError(
            "Definition must be a JSON/YAML object (got "
            f"{type(tree).__name__ if tree is not None else 'empty document'})"
        )
    return tree


def read_document(path: str | Path) -> Document:
    """Read a definition file as UTF-8.

    Args:
        path: Path to a regular file.

    Returns:
        An immutable :class:`~specgate.models.Document` remembering its source.

    Raises:
        SpecParseError: If the file cannot be read or is not valid UTF-8.
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read definition file {path}: {exc}") from exc
    return Document.from_text(content, source=str(file_path))


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch_text(location: str, timeout: float) -> str:
    """Load the text behind a remote reference.

    Args:
        location: An ``http(s)`` URL or an absolute file path.
        timeout: Seconds to wait for an HTTP response.

    Returns:
        The fetched text.

    Raises:
        SpecParseError: If the URL or file cannot be loaded.
    """
    if is_url(location):
        try:
            response = httpx.get(location, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SpecParseError(
                f"HTTP {exc.response.status_code} fetching {location}"
            ) from exc
        except httpx.RequestError as exc:
            raise SpecParseError(f"Failed to fetch {location}: {exc}") from exc
        return response.text

    file_path = Path(location)
    if not file_path.is_file():
        raise SpecParseError(f"File not found: {location}")
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read {location}: {exc}") from exc


def _stringify_keys(node: Any) -> Any:  # noqa: ANN401
    if isinstance(node, dict):
        return {str(key): _stringify_keys(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_stringify_keys(item) for item in node]
    return node
