"""Find the ``$ref`` pointers of a definition that leave the document.

Conformance checkers tend to fail opaquely when a remote reference cannot be
fetched, so the validators fall back to listing every non-local reference
and letting the user check them. The auditor re-parses the raw text on its
own because it is called from places that only have the text at hand.

A pointer is local when its JSON literal starts with ``"#/`` -- i.e. it is a
string beginning with ``#/``. Everything else, including non-string ``$ref``
values, is remote.
"""

from __future__ import annotations

import json
from typing import Any, Iterator

from specgate.error_codes import (
    LOCAL_REFERENCE_PREFIX,
    OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
    REFERENCE_KEY,
    UNABLE_TO_LOAD_REMOTE_REFERENCE,
)
from specgate.exceptions import SpecParseError
from specgate.models import (
    Diagnostic,
    Document,
    ReferenceKind,
    ReferencePointer,
    SpecVersion,
)
from specgate.parser.loader import parse_content


def find_remote_references(content: str) -> Iterator[ReferencePointer]:
    """Yield the remote references of *content* in document order.

    Args:
        content: Raw definition text (JSON or YAML, sniffed).

    Returns:
        A one-shot iterator of :class:`~specgate.models.ReferencePointer`
        with ``kind == REMOTE``.

    Raises:
        SpecParseError: If *content* cannot be parsed.
    """
    tree = parse_content(content)
    return (
        pointer
        for pointer in iter_references(tree)
        if pointer.kind == ReferenceKind.REMOTE
    )


def iter_references(node: Any) -> Iterator[ReferencePointer]:  # noqa: ANN401
    """Yield every ``$ref`` value under *node*, depth-first.

    Mapping entries are visited in key order; a ``$ref`` entry contributes its
    value and is not descended into, every other entry is. Sequence elements
    are visited in order.
    """
    if isinstance(node, dict):
        for key, value in node.items():
            if key == REFERENCE_KEY:
                yield _pointer(value)
            else:
                yield from iter_references(value)
    elif isinstance(node, list):
        for item in node:
            yield from iter_references(item)


def _pointer(value: Any) -> ReferencePointer:  # noqa: ANN401
    literal = json.dumps(value, ensure_ascii=False, default=str)
    kind = (
        ReferenceKind.LOCAL
        if literal.startswith(f'"{LOCAL_REFERENCE_PREFIX}')
        else ReferenceKind.REMOTE
    )
    return ReferencePointer(value=value, literal=literal, kind=kind)


def audit_document(
    document: Document, spec: SpecVersion
) -> tuple[list[ReferencePointer], list[Diagnostic]]:
    """List the remote references of *document* for a validator's outcome.

    Returns:
        ``(remote_references, diagnostics)``. When the text itself cannot be
        parsed no references are returned and a parse-exception diagnostic
        explains why.
    """
    try:
        return list(find_remote_references(document.text)), []
    except SpecParseError as exc:
        return [], [
            Diagnostic.from_code(
                spec,
                OPENAPI_PARSE_EXCEPTION_ERROR_CODE,
                UNABLE_TO_LOAD_REMOTE_REFERENCE,
                cause=str(exc),
            )
        ]
