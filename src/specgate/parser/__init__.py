"""Definition parser -- load text, resolve ``$ref`` pointers, and check conformance.

This sub-package is the I/O and parsing half of the specgate pipeline. The
validation package above it only ever sees generic trees, parse results and
message strings produced here.

Typical usage::

    from specgate.parser import OpenAPISpecChecker, read_document
    from specgate.models import ParseOptions, SpecVersion

    document = read_document("petstore.yaml")
    result = OpenAPISpecChecker().read(
        document.text, SpecVersion.OPENAPI3, ParseOptions(resolve=True)
    )

Sub-modules:

* :mod:`~specgate.parser.loader` -- Encoding sniffing, JSON/YAML parsing,
  file reads and remote fetches.
* :mod:`~specgate.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection and remote loading.
* :mod:`~specgate.parser.checker` -- The conformance-checker protocol and its
  openapi-spec-validator implementation.
"""

from specgate.parser.checker import ConformanceChecker, OpenAPISpecChecker
from specgate.parser.loader import parse_content, parse_document, read_document

__all__ = [
    "ConformanceChecker",
    "OpenAPISpecChecker",
    "parse_content",
    "parse_document",
    "read_document",
]
