"""Exception hierarchy for specgate.

All exceptions inherit from :class:`SpecgateError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specgate.exit_codes`.
The top-level error handler in :func:`specgate.app.main` catches
``SpecgateError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Validation findings are *not* exceptions: the validators turn every problem
they detect into a :class:`~specgate.models.Diagnostic`. Exceptions are
reserved for the I/O and parsing layers underneath them.

Subclass hierarchy::

    SpecgateError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConfigError             (exit 1)
    +-- SpecParseError          (exit 7)
        +-- RemoteReferenceError (exit 7)
"""

from specgate.error_codes import UNABLE_TO_LOAD_REMOTE_REFERENCE
from specgate.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecgateError(Exception):
    """Base exception for all specgate errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecgateError):
    """Raised for invalid CLI arguments such as an out-of-range validation level."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecgateError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(SpecgateError):
    """Raised when a definition cannot be read or parsed as JSON/YAML."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class RemoteReferenceError(SpecParseError):
    """Raised when a non-local ``$ref`` target cannot be loaded.

    The message always starts with
    :data:`~specgate.error_codes.UNABLE_TO_LOAD_REMOTE_REFERENCE` so that
    callers inspecting the text can recognise the condition.

    Args:
        ref: The reference exactly as written in the document.
        reason: Why loading failed.
    """

    def __init__(self, ref: str, reason: str):
        super().__init__(f"{UNABLE_TO_LOAD_REMOTE_REFERENCE} {ref} ({reason})")
        self.ref = ref
        self.reason = reason
