"""Normalise inconsistent ``operationId`` values into camelCase method names.

Specs in the wild mix several conventions, often within one document::

    User_GetById      tag + method, as emitted by many .NET generators
    get_all_users     plain snake_case
    listPets          camelCase
    ListPets          PascalCase

:func:`detect_convention` classifies an operationId (checked in that priority
order) and returns a :class:`~specir.models.NamingConventionResult` whose
``operation_name`` is always a legal identifier. It never raises.
"""

from __future__ import annotations

import re
from typing import Any

from specir.models import NamingConvention, NamingConventionResult
from specir.naming.casing import camel_case, lower_first
from specir.naming.identifiers import ensure_valid_identifier

_INVALID_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")
_PART_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_CAMEL_RE = re.compile(r"^[a-z][A-Za-z0-9]*$")
_PASCAL_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")

PLACEHOLDER_NAME = "_"


def detect_convention(raw: Any) -> NamingConventionResult:
    """Classify *raw* and derive a camelCase operation name.

    Args:
        raw: The operationId as found in the document. ``None``, non-strings
            and blank strings are accepted.

    Returns:
        The detected convention and normalised name. Surrounding whitespace is
        trimmed and characters outside ``[A-Za-z0-9_]`` are replaced by ``_``
        first; either change sets ``was_sanitized`` and records a warning.

    Example::

        result = detect_convention("User_GetById")
        result.convention      # NamingConvention.TAG_METHOD
        result.tag, result.method  # ("User", "GetById")
        result.operation_name  # "userGetById"
    """
    if not isinstance(raw, str) or not raw.strip():
        return NamingConventionResult(
            convention=NamingConvention.UNKNOWN,
            operation_name=PLACEHOLDER_NAME,
            was_sanitized=True,
            warnings=["operationId is missing, empty, or not a string"],
        )

    warnings: list[str] = []
    stripped = raw.strip()
    if stripped != raw:
        warnings.append(f"operationId '{raw}' had surrounding whitespace; trimmed")
    sanitized = _INVALID_CHARS_RE.sub("_", stripped)
    if sanitized != stripped:
        warnings.append(
            f"operationId '{stripped}' contained invalid characters; using '{sanitized}'"
        )
    was_sanitized = sanitized != raw

    underscores = sanitized.count("_")

    if underscores == 1:
        tag, method = sanitized.split("_")
        if tag and method and _PART_RE.match(tag) and _PART_RE.match(method):
            return NamingConventionResult(
                convention=NamingConvention.TAG_METHOD,
                tag=tag,
                method=method,
                operation_name=camel_case(sanitized) or PLACEHOLDER_NAME,
                was_sanitized=was_sanitized,
                warnings=warnings,
            )

    if underscores >= 2:
        name = camel_case(sanitized)
        if name:
            return NamingConventionResult(
                convention=NamingConvention.SNAKE_CASE,
                operation_name=ensure_valid_identifier(name),
                was_sanitized=was_sanitized,
                warnings=warnings,
            )

    if _CAMEL_RE.match(sanitized):
        return NamingConventionResult(
            convention=NamingConvention.CAMEL_CASE,
            operation_name=sanitized,
            was_sanitized=was_sanitized,
            warnings=warnings,
        )

    if _PASCAL_RE.match(sanitized):
        return NamingConventionResult(
            convention=NamingConvention.CAMEL_CASE,
            operation_name=lower_first(sanitized),
            was_sanitized=was_sanitized,
            warnings=[
                *warnings,
                f"operationId '{sanitized}' is PascalCase; converted to camelCase",
            ],
        )

    return NamingConventionResult(
        convention=NamingConvention.UNKNOWN,
        operation_name=ensure_valid_identifier(sanitized),
        was_sanitized=was_sanitized,
        warnings=[
            *warnings,
            f"Could not detect a naming convention for '{sanitized}'; "
            "treated as a single name",
        ],
    )


def normalize_operation_name(raw: Any) -> str:
    """Return only the normalised operation name for *raw*."""
    return detect_convention(raw).operation_name
