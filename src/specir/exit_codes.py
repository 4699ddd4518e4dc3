"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specir.exceptions.SpecirError` subclass.
CI scripts can inspect the exit code to decide whether a spec is fit for
code generation without parsing stderr.

Example::

    $ specir validate openapi.yaml
    $ echo $?
    8   # EXIT_VALIDATION_FAILURE -- the spec has blocking errors
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI specification could not be loaded or parsed."""

EXIT_VALIDATION_FAILURE = 8
"""The OpenAPI specification was parsed but failed validation with errors."""
