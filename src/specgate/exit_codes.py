"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specgate.exceptions.SpecgateError` subclass.
Validation problems inside a document never change the exit code unless
``--fail-on-error`` is passed, in which case :data:`EXIT_VALIDATION_FAILED`
signals that at least one document failed or was malformed.

Example::

    $ specgate location:./apis 2 --fail-on-error
    $ echo $?
    8   # EXIT_VALIDATION_FAILED -- at least one definition was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (e.g. a non-integer level)."""

EXIT_SPEC_PARSE_ERROR = 7
"""A definition could not be read or parsed outside the validation pipeline."""

EXIT_VALIDATION_FAILED = 8
"""At least one definition failed validation (only with ``--fail-on-error``)."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C (128 + SIGINT)."""
