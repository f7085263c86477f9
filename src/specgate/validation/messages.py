"""Classify free-text checker messages into a small set of kinds.

The conformance checker only speaks in sentences. :func:`classify_message`
turns one sentence into a :class:`ClassifiedMessage` so the spec-path
validators can branch on a kind instead of repeating substring tests. The
function is pure: the same text always yields the same result.

Kinds are tested in a fixed order and the first match wins. By default:

1. ``REMOTE_REFERENCE`` -- a remote ``$ref`` could not be loaded
2. ``SWAGGER_MISSING`` -- the Swagger 2 marker is absent
3. ``OPENAPI_MISSING`` -- the OpenAPI 3 marker is absent
4. ``MALFORMED_SWAGGER`` -- the Swagger 2 reader gave up on the text
5. ``SCHEMA_REF_MISSING`` -- a ``#/components/schemas/`` target does not exist
6. ``SCHEMA_UNEXPECTED`` -- a ``schema`` attribute sits where it is not allowed
7. ``OTHER``

Messages from the Swagger 2 path are tested for ``SWAGGER_MISSING`` and then
``MALFORMED_SWAGGER`` before anything else, matching how the gateway reads
its Swagger parser.
"""

from __future__ import annotations

import enum
import re
from typing import NamedTuple, Optional

from specgate.error_codes import (
    DEFINITIONS_REF_PATH,
    IS_MISSING_MSG,
    MALFORMED_SWAGGER_ERROR,
    OPENAPI_IS_MISSING_MSG,
    SCHEMA_IS_UNEXPECTED_MSG,
    SCHEMA_REF_PATH,
    SWAGGER_IS_MISSING_MSG,
    UNABLE_TO_LOAD_REMOTE_REFERENCE,
)
from specgate.models import SpecVersion

_REMOTE_REF_RE = re.compile(re.escape(UNABLE_TO_LOAD_REMOTE_REFERENCE) + r"\s*(\S+)")
_SCHEMA_NAME_RE = re.compile(re.escape(SCHEMA_REF_PATH) + r"([^\s'\"]+)")
_UNEXPECTED_ATTRIBUTE_RE = re.compile(r"attribute (\S+) is unexpected")


class MessageKind(str, enum.Enum):
    REMOTE_REFERENCE = "remote-reference"
    SWAGGER_MISSING = "swagger-missing"
    OPENAPI_MISSING = "openapi-missing"
    MALFORMED_SWAGGER = "malformed-swagger"
    SCHEMA_REF_MISSING = "schema-ref-missing"
    SCHEMA_UNEXPECTED = "schema-unexpected"
    OTHER = "other"


class ClassifiedMessage(NamedTuple):
    """A message kind plus the detail extracted from the text, if any.

    ``detail`` is the unloadable reference for ``REMOTE_REFERENCE``, the
    schema name for ``SCHEMA_REF_MISSING`` and the offending attribute for
    ``SCHEMA_UNEXPECTED``.
    """

    kind: MessageKind
    detail: Optional[str] = None


_DEFAULT_ORDER = (
    MessageKind.REMOTE_REFERENCE,
    MessageKind.SWAGGER_MISSING,
    MessageKind.OPENAPI_MISSING,
    MessageKind.MALFORMED_SWAGGER,
    MessageKind.SCHEMA_REF_MISSING,
    MessageKind.SCHEMA_UNEXPECTED,
)

_SWAGGER2_ORDER = (
    MessageKind.SWAGGER_MISSING,
    MessageKind.MALFORMED_SWAGGER,
    MessageKind.REMOTE_REFERENCE,
    MessageKind.OPENAPI_MISSING,
    MessageKind.SCHEMA_REF_MISSING,
    MessageKind.SCHEMA_UNEXPECTED,
)


def classify_message(message: str, spec: Optional[SpecVersion] = None) -> ClassifiedMessage:
    """Classify a single checker message.

    Pass ``spec=SpecVersion.SWAGGER2`` for messages read on the Swagger 2
    path; any other value uses the default order.
    """
    order = _SWAGGER2_ORDER if spec == SpecVersion.SWAGGER2 else _DEFAULT_ORDER
    for kind in order:
        classified = _match(kind, message)
        if classified is not None:
            return classified
    return ClassifiedMessage(MessageKind.OTHER)


def _match(kind: MessageKind, message: str) -> Optional[ClassifiedMessage]:
    if kind == MessageKind.REMOTE_REFERENCE:
        if UNABLE_TO_LOAD_REMOTE_REFERENCE not in message:
            return None
        match = _REMOTE_REF_RE.search(message)
    elif kind == MessageKind.SCHEMA_REF_MISSING:
        if not is_schema_missing(message):
            return None
        match = _SCHEMA_NAME_RE.search(message)
    elif kind == MessageKind.SCHEMA_UNEXPECTED:
        if SCHEMA_IS_UNEXPECTED_MSG not in message:
            return None
        match = _UNEXPECTED_ATTRIBUTE_RE.search(message)
    else:
        marker = {
            MessageKind.SWAGGER_MISSING: SWAGGER_IS_MISSING_MSG,
            MessageKind.OPENAPI_MISSING: OPENAPI_IS_MISSING_MSG,
            MessageKind.MALFORMED_SWAGGER: MALFORMED_SWAGGER_ERROR,
        }[kind]
        return ClassifiedMessage(kind) if marker in message else None
    return ClassifiedMessage(kind, match.group(1) if match else None)


def is_schema_missing(message: str) -> bool:
    """True when *message* reports a missing ``#/components/schemas/`` target."""
    return SCHEMA_REF_PATH in message and IS_MISSING_MSG in message


def to_swagger_pointers(message: str) -> str:
    """Rewrite ``#/components/schemas/`` pointers to the Swagger 2 ``#/definitions/`` form."""
    return message.replace(SCHEMA_REF_PATH, DEFINITIONS_REF_PATH)
