"""Exception hierarchy for specir.

All exceptions inherit from :class:`SpecirError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specir.exit_codes`.
The top-level error handler in :func:`specir.app.main` catches
``SpecirError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The analysis core (type mapper, validator, relationship detector) never
raises for malformed input; problems there are reported as data. These
exceptions are used at the I/O and policy edges only.

Subclass hierarchy::

    SpecirError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- SpecParseError         (exit 7)
    +-- ValidationFailedError  (exit 8)
    +-- ConfigError            (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from specir.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_VALIDATION_FAILURE,
)

if TYPE_CHECKING:
    from specir.models import ValidationIssue


class SpecirError(Exception):
    """Base exception for all specir errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specir.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecirError):
    """Raised for invalid CLI arguments or unknown option values."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SpecirError):
    """Raised when the OpenAPI document cannot be loaded, parsed, or dereferenced."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ValidationFailedError(SpecirError):
    """Raised by the ``fail-fast`` recovery strategy on the first validation error.

    Args:
        message: Human-readable error description.
        issues: The validation issues that caused the failure. The first
            entry is the one that stopped processing.
    """

    exit_code = EXIT_VALIDATION_FAILURE

    def __init__(
        self,
        message: str,
        issues: Optional[list[ValidationIssue]] = None,
        exit_code: int | None = None,
    ):
        super().__init__(message, exit_code)
        self.issues: list[ValidationIssue] = list(issues or [])


class ConfigError(SpecirError):
    """Raised for configuration problems (invalid JSON, unknown enum values)."""

    exit_code = EXIT_GENERIC_FAILURE
