"""Naming convention normaliser and identifier resolver.

Public API:
    :func:`detect_convention`, :func:`normalize_operation_name`: operationId
        classification and camelCase normalisation.
    :func:`is_valid_identifier`, :func:`sanitize_identifier`: identifier
        legality for emitted code.
    :func:`has_nestjs_conflict`, :func:`resolve_nestjs_conflict`: framework
        name collisions.
"""

from specir.naming.convention import detect_convention, normalize_operation_name
from specir.naming.identifiers import (
    FRAMEWORK_CONFLICTS,
    RESERVED_WORDS,
    has_nestjs_conflict,
    is_valid_identifier,
    resolve_nestjs_conflict,
    sanitize_identifier,
)

__all__ = [
    "FRAMEWORK_CONFLICTS",
    "RESERVED_WORDS",
    "detect_convention",
    "has_nestjs_conflict",
    "is_valid_identifier",
    "normalize_operation_name",
    "resolve_nestjs_conflict",
    "sanitize_identifier",
]
