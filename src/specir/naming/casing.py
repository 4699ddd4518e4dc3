"""Case conversion and English number helpers.

All functions are pure string transforms. Word boundaries are found the way
most case-conversion libraries do it: underscores, hyphens, whitespace, a
lower-to-upper transition (``userId`` -> ``user Id``) and the end of an
acronym (``HTTPServer`` -> ``HTTP Server``).
"""

from __future__ import annotations

import re

_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")

_IRREGULAR_SINGULARS = {
    "people": "person",
    "children": "child",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
    "geese": "goose",
    "feet": "foot",
    "teeth": "tooth",
}

_SIBILANT_PLURAL_RE = re.compile(r"(ss|x|z|ch|sh|us)es$", re.IGNORECASE)
_UNCOUNTED_ENDINGS = ("ss", "us", "is", "data", "info", "news", "series")


def capitalize(text: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    return text[:1].upper() + text[1:]


def lower_first(text: str) -> str:
    """Lower-case the first character, leaving the rest untouched."""
    return text[:1].lower() + text[1:]


def split_words(text: str) -> list[str]:
    """Split *text* into words on separators and case transitions.

    Example::

        split_words("getUserByID")   # ["get", "User", "By", "ID"]
        split_words("list_pets-v2")  # ["list", "pets", "v", "2"]
    """
    return _WORD_RE.findall(text)


def camel_case(text: str) -> str:
    """Convert *text* to ``camelCase``.

    Example::

        camel_case("get_all_users")  # "getAllUsers"
        camel_case("User_GetById")   # "userGetById"
    """
    words = split_words(text)
    if not words:
        return ""
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def pascal_case(text: str) -> str:
    """Convert *text* to ``PascalCase`` (``order-items`` -> ``OrderItems``)."""
    return "".join(w.capitalize() for w in split_words(text))


def to_constant_case(text: str) -> str:
    """Convert *text* to ``UPPER_SNAKE_CASE``.

    Example::

        to_constant_case("PetStatus")          # "PET_STATUS"
        to_constant_case("ClientResponseDto")  # "CLIENT_RESPONSE_DTO"
    """
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", text)
    text = re.sub(r"[\s\-]+", "_", text)
    return text.upper()


def to_kebab_case(text: str) -> str:
    """Convert *text* to ``kebab-case`` (``UserStore`` -> ``user-store``)."""
    return "-".join(w.lower() for w in split_words(text))


def singularize(word: str) -> str:
    """Return the singular form of an English plural noun.

    Covers the regular patterns found in REST path segments (``pets``,
    ``categories``, ``addresses``, ``boxes``) and a handful of irregular
    nouns. Words that already look singular are returned unchanged.
    """
    lower = word.lower()
    if lower in _IRREGULAR_SINGULARS:
        return _match_case(_IRREGULAR_SINGULARS[lower], word)
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + ("Y" if word[-3].isupper() else "y")
    if _SIBILANT_PLURAL_RE.search(word):
        return word[:-2]
    if lower.endswith(_UNCOUNTED_ENDINGS):
        return word
    if lower.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def is_plural(word: str) -> bool:
    """Return True if *word* looks like a plural noun."""
    return singularize(word).lower() != word.lower()


def _match_case(replacement: str, original: str) -> str:
    if original.isupper():
        return replacement.upper()
    if original[:1].isupper():
        return capitalize(replacement)
    return replacement
