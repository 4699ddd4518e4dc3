"""Identifier legality for the emitted TypeScript code.

The reserved-word and framework-name tables are immutable module constants;
any number of analyses may read them concurrently.
"""

from __future__ import annotations

import re
from typing import Any

RESERVED_WORDS = frozenset({
    "abstract", "arguments", "await", "boolean", "break", "byte", "case",
    "catch", "char", "class", "const", "continue", "debugger", "default",
    "delete", "do", "double", "else", "enum", "eval", "export", "extends",
    "false", "final", "finally", "float", "for", "function", "goto", "if",
    "implements", "import", "in", "instanceof", "int", "interface", "let",
    "long", "native", "new", "null", "package", "private", "protected",
    "public", "return", "short", "static", "super", "switch", "synchronized",
    "this", "throw", "throws", "transient", "true", "try", "typeof", "var",
    "void", "volatile", "while", "with", "yield",
})

# Decorator and class names exported by NestJS and @nestjs/swagger.
FRAMEWORK_CONFLICTS = frozenset({
    "ApiResponse", "ApiParam", "ApiQuery", "ApiBody", "ApiHeader", "ApiCookie",
    "ApiExcludeEndpoint", "ApiSecurity", "ApiOAuth2", "ApiBearerAuth",
    "ApiBasicAuth", "ApiKeyAuth", "ApiOperation", "ApiProduces", "ApiConsumes",
    "ApiTags", "ApiExtraModels", "ApiImplicitParam", "ApiImplicitQuery",
    "ApiImplicitBody", "ApiExtension", "ApiDefaultResponse", "ApiDocumentation",
    "Controller", "Injectable", "Module", "Patch", "Post", "Put", "Delete",
    "Get", "Head", "Options", "Param", "Query", "Body", "Headers", "Req", "Res",
})

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_INVALID_CHARS_RE = re.compile(r"[^A-Za-z0-9_$]")
_LEADING_DIGITS_RE = re.compile(r"^\d+")


def is_reserved_word(name: str) -> bool:
    return name.lower() in RESERVED_WORDS


def is_valid_identifier(name: Any) -> bool:
    """Return True if *name* is a legal, non-reserved identifier.

    A legal identifier starts with a letter, ``_`` or ``$`` and continues
    with letters, digits, ``_`` or ``$``. Reserved words are matched
    case-insensitively, so ``Class`` is rejected as well as ``class``.
    """
    if not isinstance(name, str) or not name:
        return False
    return bool(_IDENTIFIER_RE.match(name)) and not is_reserved_word(name)


def sanitize_identifier(name: Any, prefix: str = "Generated") -> str:
    """Turn *name* into a legal identifier.

    Steps, in order: strip surrounding whitespace, replace every disallowed
    character with ``_``, drop leading digits, prepend *prefix* if nothing
    usable is left, and append ``_`` to a reserved word. The function is
    idempotent: ``sanitize_identifier(sanitize_identifier(x)) ==
    sanitize_identifier(x)``.

    Args:
        name: The raw name. Non-strings yield *prefix*.
        prefix: Fallback used for empty results.

    Returns:
        A string accepted by :func:`is_valid_identifier`.

    Example::

        sanitize_identifier("user-name")  # "user_name"
        sanitize_identifier("2fa code")   # "fa_code"
        sanitize_identifier("class")      # "class_"
        sanitize_identifier("123")        # "Generated"
    """
    if not isinstance(name, str):
        return prefix
    sanitized = _INVALID_CHARS_RE.sub("_", name.strip())
    sanitized = _LEADING_DIGITS_RE.sub("", sanitized)
    if not sanitized:
        sanitized = prefix
    if is_reserved_word(sanitized):
        sanitized += "_"
    return sanitized


def ensure_valid_identifier(text: str) -> str:
    """Make *text* legal by prefixing ``_`` instead of dropping characters.

    Used for operation names, where leading digits carry meaning
    (``2fa`` -> ``_2fa``).
    """
    cleaned = _INVALID_CHARS_RE.sub("", text)
    if not cleaned:
        return "_"
    if _IDENTIFIER_RE.match(cleaned):
        return cleaned
    return "_" + cleaned


def has_nestjs_conflict(name: str) -> bool:
    """Return True if *name* shadows a NestJS decorator or class."""
    return name in FRAMEWORK_CONFLICTS


def resolve_nestjs_conflict(name: str, suffix: str = "Dto") -> str:
    """Append *suffix* to *name* if it shadows a framework name.

    Example::

        resolve_nestjs_conflict("ApiResponse")  # "ApiResponseDto"
        resolve_nestjs_conflict("Pet")          # "Pet"
    """
    if has_nestjs_conflict(name):
        return name + suffix
    return name
