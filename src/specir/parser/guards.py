"""Classifiers for raw OpenAPI nodes.

Every function here is total: it accepts any Python value (including ``None``,
lists, and scalars left behind by a malformed document) and answers with a
``bool`` or a value, never an exception. The type mapper, validator, and
relationship detector branch on these predicates instead of touching raw keys
directly, so a document that is only partly well-formed still yields partial
results.

A node carrying ``$ref`` is a reference and nothing else: sibling keys are
ignored by every predicate that asks "is this a schema of kind X?".
"""

from __future__ import annotations

from typing import Any, Optional

JSON_MEDIA_TYPE = "application/json"

COMPOSITE_KEYWORDS = ("allOf", "oneOf", "anyOf")

VALID_SCHEMA_TYPES = frozenset(
    {"string", "number", "integer", "boolean", "array", "object", "null"}
)


# --- Schemas ---


def is_reference(node: Any) -> bool:
    """Return True if *node* is a ``{"$ref": ...}`` object."""
    return isinstance(node, dict) and "$ref" in node


def is_schema(node: Any) -> bool:
    """Return True if *node* is an inline schema object (not a reference)."""
    return isinstance(node, dict) and "$ref" not in node


def schema_type(node: Any) -> Optional[str]:
    """Return the declared type of *node*, or ``None``.

    OpenAPI 3.1 allows ``type: ["string", "null"]``; the first non-``null``
    entry is returned in that case.
    """
    if not is_schema(node):
        return None
    declared = node.get("type")
    if isinstance(declared, str):
        return declared
    if isinstance(declared, list):
        for entry in declared:
            if isinstance(entry, str) and entry != "null":
                return entry
    return None


def is_array_schema(node: Any) -> bool:
    """Return True if *node* is an inline ``type: array`` schema."""
    return schema_type(node) == "array"


def is_object_schema(node: Any) -> bool:
    """Return True if *node* is an inline ``type: object`` schema."""
    return schema_type(node) == "object"


def has_properties(node: Any) -> bool:
    """Return True if *node* is an inline schema with a ``properties`` mapping."""
    return is_schema(node) and isinstance(node.get("properties"), dict)


def is_enum_schema(node: Any) -> bool:
    """Return True if *node* declares a non-empty ``enum`` list."""
    return is_schema(node) and isinstance(node.get("enum"), list) and bool(node["enum"])


def composite_keyword(node: Any) -> Optional[str]:
    """Return the first of ``allOf``/``oneOf``/``anyOf`` present on *node*."""
    if not is_schema(node):
        return None
    for keyword in COMPOSITE_KEYWORDS:
        if isinstance(node.get(keyword), list):
            return keyword
    return None


def is_composite_schema(node: Any) -> bool:
    """Return True if *node* combines sub-schemas with allOf/oneOf/anyOf."""
    return composite_keyword(node) is not None


def is_free_form_object(node: Any) -> bool:
    """Return True for an object schema without declared properties."""
    return is_object_schema(node) and not has_properties(node)


def is_nullable(node: Any) -> bool:
    """Return True if *node* admits ``null``.

    Covers the 3.0 ``nullable: true`` flag and the 3.1 ``"null"`` type entry.
    """
    if not is_schema(node):
        return False
    if node.get("nullable") is True:
        return True
    declared = node.get("type")
    return isinstance(declared, list) and "null" in declared


# --- Operations ---


def is_operation(node: Any) -> bool:
    """Return True if *node* looks like an operation (has ``responses``)."""
    return isinstance(node, dict) and "responses" in node


def is_path_item(node: Any) -> bool:
    """Return True if *node* is a mapping that can hold operations."""
    return isinstance(node, dict)


def is_parameter(node: Any) -> bool:
    """Return True if *node* is an inline parameter object with ``in``."""
    return isinstance(node, dict) and "$ref" not in node and "in" in node


def is_request_body(node: Any) -> bool:
    """Return True if *node* is an inline request body with ``content``."""
    return isinstance(node, dict) and "$ref" not in node and "content" in node


def is_response(node: Any) -> bool:
    """Return True if *node* is an inline response object with ``description``."""
    return isinstance(node, dict) and "$ref" not in node and "description" in node


def has_json_content(content: Any) -> bool:
    """Return True if a ``content`` mapping offers ``application/json``."""
    return isinstance(content, dict) and JSON_MEDIA_TYPE in content


def get_json_schema(content: Any) -> Optional[dict[str, Any]]:
    """Return the ``application/json`` schema of a ``content`` mapping, or ``None``."""
    if not has_json_content(content):
        return None
    media = content[JSON_MEDIA_TYPE]
    if not isinstance(media, dict):
        return None
    schema = media.get("schema")
    return schema if isinstance(schema, dict) else None
