"""Helpers for ``$ref`` strings.

The analysis modules never inline references; they only need the schema name
a reference points at. :func:`resolve_pointer` performs a single-hop lookup
for the rare caller that needs the target node itself (for example, to check
whether a referenced schema declares a back-reference). It never follows a
reference found at the target, so cyclic documents cannot recurse.
"""

from __future__ import annotations

from typing import Any, Optional

from specir.exceptions import SpecParseError

SCHEMA_REF_PREFIX = "#/components/schemas/"

# Names that would shadow a built-in of the emitted language.
_RENAMED_SCHEMAS = {"Object": "ObjectDto"}


def extract_ref_name(ref: Any) -> Optional[str]:
    """Return the last segment of a ``$ref`` string.

    Example::

        extract_ref_name("#/components/schemas/Pet")  # "Pet"
        extract_ref_name("#/components/schemas/")     # None
    """
    if not isinstance(ref, str):
        return None
    name = ref.rsplit("/", 1)[-1]
    return _unescape(name) or None


def normalize_schema_name(name: str) -> str:
    """Rename schema names that collide with built-in types (``Object``)."""
    return _RENAMED_SCHEMAS.get(name, name)


def is_schema_ref(ref: Any) -> bool:
    """Return True if *ref* has the form ``#/components/schemas/<Name>``."""
    return (
        isinstance(ref, str)
        and ref.startswith(SCHEMA_REF_PREFIX)
        and len(ref) > len(SCHEMA_REF_PREFIX)
        and "/" not in ref[len(SCHEMA_REF_PREFIX):]
    )


def ref_target(node: Any) -> Optional[str]:
    """Return the raw (un-normalized) schema name a reference node points to."""
    if not isinstance(node, dict):
        return None
    ref = node.get("$ref")
    if not is_schema_ref(ref):
        return None
    return _unescape(ref[len(SCHEMA_REF_PREFIX):])


def resolve_pointer(ref: str, document: dict[str, Any]) -> Any:
    """Return the node an internal JSON Pointer reference points at.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).

    Args:
        ref: An internal reference such as ``"#/components/schemas/Pet"``.
        document: The document to resolve against.

    Returns:
        The node at the pointer. A ``$ref`` found there is returned as-is.

    Raises:
        SpecParseError: If *ref* is external or does not exist in *document*.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = document
    for raw_segment in ref[2:].split("/"):
        segment = _unescape(raw_segment)
        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )
    return current


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")
