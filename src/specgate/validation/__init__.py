"""Validation pipeline -- classify a definition and route it to a spec path.

Typical usage::

    from specgate.models import Document
    from specgate.validation import RunAggregator, validate_document

    aggregator = RunAggregator()
    report = validate_document(Document.from_text(text), level=2)
    aggregator.record(report)

Sub-modules:

* :mod:`~specgate.validation.classifier` -- Swagger 2 / OpenAPI 3 / undetermined.
* :mod:`~specgate.validation.messages` -- Checker message kinds.
* :mod:`~specgate.validation.references` -- Remote ``$ref`` auditing.
* :mod:`~specgate.validation.swagger2` -- The Swagger 2 path.
* :mod:`~specgate.validation.openapi3` -- The OpenAPI 3 path.
* :mod:`~specgate.validation.orchestrator` -- The dispatch state machine.
* :mod:`~specgate.validation.aggregator` -- Run-level statistics.
"""

from specgate.validation.aggregator import RunAggregator
from specgate.validation.classifier import classify
from specgate.validation.openapi3 import validate_v3
from specgate.validation.orchestrator import validate_document
from specgate.validation.references import find_remote_references
from specgate.validation.swagger2 import validate_v2

__all__ = [
    "RunAggregator",
    "classify",
    "find_remote_references",
    "validate_document",
    "validate_v2",
    "validate_v3",
]
