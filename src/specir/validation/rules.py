"""Individual validation rules.

Each ``check_*`` function inspects one part of the document and files issues
on the :class:`~specir.models.ValidationResult` it is given. None of them
raise: a malformed node is reported and skipped.

Issue codes
-----------

=========================  ========  =========================================
Code                       Severity  Meaning
=========================  ========  =========================================
MISSING_REQUIRED_FIELD     error     ``openapi``/``info``/title/version absent
INVALID_SCHEMA             error     schema is null or not a mapping
INVALID_SCHEMA_TYPE        error     ``type`` outside the JSON Schema set
ARRAY_MISSING_ITEMS        error     ``type: array`` without ``items``
INVALID_ENUM               error     ``enum`` empty or not a list
INVALID_REF_FORMAT         error     ``$ref`` not ``#/components/schemas/X``
UNDEFINED_SCHEMA_REF       error     ``$ref`` to an undeclared schema
INVALID_OPERATION          error     operation is not a mapping
MISSING_RESPONSES          error     operation without responses
INVALID_PARAMETER          error     parameter without ``name``/``in``
INVALID_RESPONSE           error     response object without ``description``
DUPLICATE_OPERATION_ID     error     operationId used more than once
MISSING_TYPE               warning   schema without ``type``
INVALID_PATH               warning   path not starting with ``/``
INVALID_IDENTIFIER         warning   schema name unusable as a class name
NESTJS_CONFLICT            warning   schema name shadows a framework name
PARAMETER_MISSING_SCHEMA   warning   parameter without ``schema``/``content``
INVALID_OPERATION_ID       warning   operationId unusable as a method name
MISSING_OPERATION_ID       info      operation without operationId
=========================  ========  =========================================
"""

from __future__ import annotations

import re
from typing import Any, Iterator

from specir.models import ValidationResult, ValidationSeverity
from specir.naming.identifiers import has_nestjs_conflict, is_valid_identifier
from specir.parser.guards import (
    COMPOSITE_KEYWORDS,
    VALID_SCHEMA_TYPES,
    is_parameter,
    is_reference,
    is_response,
)
from specir.parser.refs import SCHEMA_REF_PREFIX, extract_ref_name, is_schema_ref
from specir.validation.result import report

ERROR = ValidationSeverity.ERROR
WARNING = ValidationSeverity.WARNING
INFO = ValidationSeverity.INFO

_OPERATION_ID_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


# --- Document ---


def check_required_fields(document: dict[str, Any], result: ValidationResult) -> None:
    """Check ``openapi``, ``info``, ``info.title`` and ``info.version``."""
    if not document.get("openapi"):
        report(
            result, ERROR, "Missing required field: openapi", "root",
            suggestion='Add openapi: "3.0.0" or later to the document',
            code="MISSING_REQUIRED_FIELD",
        )

    info = document.get("info")
    if info is None:
        report(
            result, ERROR, "Missing required field: info", "root",
            suggestion="Add an info object with title and version",
            code="MISSING_REQUIRED_FIELD",
        )
        return
    if not isinstance(info, dict):
        report(
            result, ERROR, "Field 'info' must be an object", "info",
            suggestion="Add an info object with title and version",
            code="MISSING_REQUIRED_FIELD",
        )
        return
    if not info.get("title"):
        report(
            result, ERROR, "Missing required field: info.title", "info",
            suggestion="Add a title for your API",
            code="MISSING_REQUIRED_FIELD",
        )
    if not info.get("version"):
        report(
            result, ERROR, "Missing required field: info.version", "info",
            suggestion='Add a version number (e.g. "1.0.0")',
            code="MISSING_REQUIRED_FIELD",
        )


# --- Schemas ---


def check_schema(
    schema: Any,
    location: str,
    result: ValidationResult,
    seen: set[int],
) -> None:
    """Check one schema node and, recursively, its inline sub-schemas.

    References are accepted as-is here; their targets are checked by
    :func:`check_references`. *seen* holds the identities of nodes already
    visited so aliased YAML structures are walked once.
    """
    if schema is None:
        report(
            result, ERROR, "Schema is null", location,
            suggestion="Ensure the schema definition is not empty",
            code="INVALID_SCHEMA",
        )
        return
    if not isinstance(schema, dict):
        report(
            result, ERROR,
            f"Invalid schema object (got {type(schema).__name__})", location,
            suggestion="A schema must be a mapping",
            code="INVALID_SCHEMA",
        )
        return
    if is_reference(schema) or id(schema) in seen:
        return
    seen.add(id(schema))

    declared = schema.get("type")
    has_composite = any(k in schema for k in COMPOSITE_KEYWORDS)

    if declared is None:
        if not has_composite:
            report(
                result, WARNING, "Schema missing 'type' field", location,
                suggestion='Add a type field (e.g. "type": "object")',
                code="MISSING_TYPE",
            )
    else:
        for bad in _invalid_types(declared):
            report(
                result, ERROR, f"Invalid schema type {bad!r}", location,
                suggestion="Type must be one of: " + ", ".join(sorted(VALID_SCHEMA_TYPES)),
                code="INVALID_SCHEMA_TYPE",
            )

    if _declares(declared, "array") and "items" not in schema:
        report(
            result, ERROR, "Array schema missing 'items' definition", location,
            suggestion='Array schemas must specify items: { type: "..." }',
            code="ARRAY_MISSING_ITEMS",
        )

    if "enum" in schema:
        enum = schema["enum"]
        if not isinstance(enum, list) or not enum:
            report(
                result, ERROR, "Enum must have at least one value", location,
                suggestion="Define enum values as a non-empty array",
                code="INVALID_ENUM",
            )

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for prop_name, prop_schema in properties.items():
            check_schema(prop_schema, f"{location}.properties.{prop_name}", result, seen)

    if "items" in schema:
        check_schema(schema["items"], f"{location}.items", result, seen)

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        check_schema(additional, f"{location}.additionalProperties", result, seen)

    for keyword in COMPOSITE_KEYWORDS:
        if keyword not in schema:
            continue
        branches = schema[keyword]
        if not isinstance(branches, list):
            report(
                result, ERROR, f"'{keyword}' must be an array of schemas", location,
                code="INVALID_SCHEMA",
            )
            continue
        for index, branch in enumerate(branches):
            check_schema(branch, f"{location}.{keyword}[{index}]", result, seen)


def check_schema_name(
    name: str,
    result: ValidationResult,
    check_conflicts: bool = True,
) -> None:
    """Check that a schema name can be used as a class name."""
    location = f"components.schemas.{name}"
    if not is_valid_identifier(name):
        report(
            result, WARNING,
            f'Schema name "{name}" is not a valid TypeScript identifier', location,
            suggestion="Use a name that starts with a letter and contains only "
            "letters, digits, $ and _",
            code="INVALID_IDENTIFIER",
        )
    if check_conflicts and has_nestjs_conflict(name):
        report(
            result, WARNING,
            f'Schema name "{name}" conflicts with a NestJS decorator name', location,
            suggestion=f'Rename the schema to avoid the conflict (e.g. "{name}Dto")',
            code="NESTJS_CONFLICT",
        )


def _invalid_types(declared: Any) -> list[Any]:
    if isinstance(declared, str):
        return [] if declared in VALID_SCHEMA_TYPES else [declared]
    if isinstance(declared, list):
        return [t for t in declared if t not in VALID_SCHEMA_TYPES]
    return [declared]


def _declares(declared: Any, kind: str) -> bool:
    if isinstance(declared, list):
        return kind in declared
    return declared == kind


# --- References ---


def iter_refs(node: Any, location: str, seen: set[int]) -> Iterator[tuple[str, Any]]:
    """Yield ``(location, ref)`` for every schema-position ``$ref`` under *node*.

    Walks properties, items, additionalProperties, ``not`` and composite
    branches. Stops at each reference.
    """
    if not isinstance(node, dict) or id(node) in seen:
        return
    if is_reference(node):
        yield location, node["$ref"]
        return
    seen.add(id(node))

    properties = node.get("properties")
    if isinstance(properties, dict):
        for prop_name, prop_schema in properties.items():
            yield from iter_refs(prop_schema, f"{location}.properties.{prop_name}", seen)
    for key in ("items", "additionalProperties", "not"):
        if isinstance(node.get(key), dict):
            yield from iter_refs(node[key], f"{location}.{key}", seen)
    for keyword in COMPOSITE_KEYWORDS:
        branches = node.get(keyword)
        if isinstance(branches, list):
            for index, branch in enumerate(branches):
                yield from iter_refs(branch, f"{location}.{keyword}[{index}]", seen)


def check_references(
    node: Any,
    location: str,
    schema_names: set[str],
    result: ValidationResult,
) -> None:
    """Check every reference under *node* for format and target existence.

    Reference integrity is structural only: a cycle of references between
    declared schemas is valid.
    """
    for ref_location, ref in iter_refs(node, location, set()):
        if not is_schema_ref(ref):
            report(
                result, ERROR, f'Invalid reference format: "{ref}"', ref_location,
                suggestion=f"References must use the form {SCHEMA_REF_PREFIX}SchemaName",
                code="INVALID_REF_FORMAT",
            )
            continue
        target = extract_ref_name(ref)
        if target not in schema_names:
            report(
                result, ERROR, f'Reference to undefined schema: "{target}"', ref_location,
                suggestion=f'Define "{target}" in components.schemas',
                code="UNDEFINED_SCHEMA_REF",
            )


def operation_schema_nodes(operation: dict[str, Any], location: str) -> Iterator[tuple[str, Any]]:
    """Yield ``(location, schema)`` for the schemas an operation embeds.

    Covers parameters, every media type of the request body, and every media
    type of every response.
    """
    yield from parameter_schema_nodes(operation.get("parameters"), location)

    body = operation.get("requestBody")
    if isinstance(body, dict):
        yield from _media_schemas(body.get("content"), f"{location}.requestBody")

    responses = operation.get("responses")
    if isinstance(responses, dict):
        for code, response in responses.items():
            if isinstance(response, dict):
                yield from _media_schemas(
                    response.get("content"), f"{location}.responses.{code}"
                )


def parameter_schema_nodes(params: Any, location: str) -> Iterator[tuple[str, Any]]:
    """Yield ``(location, schema)`` for each parameter in *params* that has a schema."""
    if not isinstance(params, list):
        return
    for index, param in enumerate(params):
        if isinstance(param, dict) and "schema" in param:
            yield f"{location}.parameters[{index}].schema", param["schema"]


def _media_schemas(content: Any, location: str) -> Iterator[tuple[str, Any]]:
    if not isinstance(content, dict):
        return
    for media_type, media in content.items():
        if isinstance(media, dict) and "schema" in media:
            yield f"{location}.content.{media_type}.schema", media["schema"]


# --- Paths and operations ---


def check_path(path: str, result: ValidationResult) -> None:
    """Check that *path* starts with a slash."""
    if not path.startswith("/"):
        report(
            result, WARNING, f'Path does not start with a slash: "{path}"',
            f"paths.{path}",
            suggestion='Paths must start with "/" (e.g. "/users")',
            code="INVALID_PATH",
        )


def check_operation(operation: Any, location: str, result: ValidationResult) -> bool:
    """Check the structure of one operation.

    Returns:
        ``True`` if *operation* is a mapping and further checks (operationId,
        references) make sense.
    """
    if not isinstance(operation, dict):
        report(
            result, ERROR, "Invalid operation object", location,
            suggestion="An operation must be a mapping with a 'responses' field",
            code="INVALID_OPERATION",
        )
        return False

    responses = operation.get("responses")
    if not isinstance(responses, dict) or not responses:
        report(
            result, ERROR, "Operation missing responses", location,
            suggestion="Add at least one response definition",
            code="MISSING_RESPONSES",
        )

    check_parameters(operation.get("parameters"), location, result)

    if isinstance(responses, dict):
        for status, response in responses.items():
            if is_reference(response) or is_response(response):
                continue
            report(
                result, ERROR, f"Invalid response for status {status}",
                f"{location}.responses.{status}",
                suggestion="A response must be a mapping with a 'description'",
                code="INVALID_RESPONSE",
            )
    return True


def check_parameters(params: Any, location: str, result: ValidationResult) -> None:
    """Check a ``parameters`` list of a path item or an operation."""
    if not isinstance(params, list):
        return
    for index, param in enumerate(params):
        param_location = f"{location}.parameters[{index}]"
        if is_reference(param):
            continue
        if not is_parameter(param) or "name" not in param:
            report(
                result, ERROR, f"Invalid parameter at index {index}", param_location,
                suggestion="A parameter must have 'in' and 'name' fields",
                code="INVALID_PARAMETER",
            )
            continue
        if "schema" not in param and "content" not in param:
            report(
                result, WARNING,
                f'Parameter "{param["name"]}" missing schema or content', param_location,
                suggestion="Add a schema so the parameter type can be generated",
                code="PARAMETER_MISSING_SCHEMA",
            )


def check_operation_id(
    operation: dict[str, Any],
    location: str,
    seen_ids: dict[str, str],
    result: ValidationResult,
) -> None:
    """Check presence, format and document-wide uniqueness of operationId.

    *seen_ids* maps each operationId met so far to its location; a repeat
    yields one ``DUPLICATE_OPERATION_ID`` error naming both locations.
    """
    operation_id = operation.get("operationId")
    if operation_id is None or operation_id == "":
        report(
            result, INFO, "Operation missing operationId", location,
            suggestion="Add an operationId to control the generated method name",
            code="MISSING_OPERATION_ID",
        )
        return

    if not isinstance(operation_id, str) or not _OPERATION_ID_RE.match(operation_id):
        report(
            result, WARNING,
            f'operationId "{operation_id}" is not a valid JavaScript identifier', location,
            suggestion="Use a camelCase identifier (e.g. getUserById, createUser)",
            code="INVALID_OPERATION_ID",
        )
        if not isinstance(operation_id, str):
            return

    first = seen_ids.get(operation_id)
    if first is not None:
        report(
            result, ERROR,
            f'Duplicate operationId "{operation_id}" at {first} and {location}', location,
            suggestion=f"operationId must be unique (first used at {first})",
            code="DUPLICATE_OPERATION_ID",
        )
    else:
        seen_ids[operation_id] = location
