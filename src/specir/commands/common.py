"""Helpers shared by the sub-commands: loading, config, error reporting."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer

from specir.exceptions import SpecirError
from specir.models import GlobalConfig
from specir.output import debug, error


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Turn a :class:`~specir.exceptions.SpecirError` into an error message and exit code."""
    try:
        yield
    except SpecirError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def load_source(source: str, require_version: bool = True) -> dict[str, Any]:
    """Load and version-check the document at *source* (path, URL or ``-``).

    With ``require_version=False`` a document without an ``openapi`` field is
    passed through so the validator can report it. Swagger 2.x documents and
    unsupported versions are still rejected.

    Raises:
        typer.Exit: With the parse-error exit code when loading fails.
    """
    from specir.parser import load_spec, validate_openapi_version

    with exit_on_error():
        document = load_spec(source)
        if not require_version and "openapi" not in document and "swagger" not in document:
            debug(f"Loaded document without an openapi field from {source}")
            return document
        version = validate_openapi_version(document)
    debug(f"Loaded OpenAPI {version} document from {source}")
    return document


def load_config(
    strict: Optional[bool] = None,
    structure: Optional[str] = None,
    recovery: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration with CLI overrides applied."""
    from specir.config import resolve_config

    with exit_on_error():
        return resolve_config(
            cli_strict=strict, cli_structure=structure, cli_recovery=recovery
        )
