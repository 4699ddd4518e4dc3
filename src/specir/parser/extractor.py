"""Walk the ``paths`` section of a raw OpenAPI document.

Unlike a full extractor, nothing here resolves references or builds models:
the walker hands out the raw operation mappings together with their path and
method, and a few helpers pull out the schema names an operation talks about.
Callers (validator, relationship detector, CLI) decide what to do with
malformed nodes.

Parameter merging follows the OpenAPI rules: path-level parameters provide
defaults, and operation-level parameters override them when they share the
same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any, Iterator, NamedTuple, Optional

from specir.parser.guards import (
    composite_keyword,
    get_json_schema,
    is_array_schema,
    is_reference,
)
from specir.parser.refs import ref_target

# HTTP methods recognized by OpenAPI, in path-item declaration order.
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class OperationRef(NamedTuple):
    """One ``(path, method)`` entry of the document."""

    path: str
    method: str
    operation: Any
    path_item: dict[str, Any]

    @property
    def location(self) -> str:
        return f"paths.{self.path}.{self.method}"


def iter_paths(document: Any) -> Iterator[tuple[str, Any]]:
    """Yield ``(path, path_item)`` pairs; nothing for a malformed ``paths``."""
    if not isinstance(document, dict):
        return
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        yield str(path), path_item


def iter_operations(document: Any) -> Iterator[OperationRef]:
    """Yield every operation declared under ``paths``.

    The operation value is passed through untouched, even if it is not a
    mapping, so the validator can report it.

    Example::

        for op in iter_operations(doc):
            print(op.method.upper(), op.path, op.operation.get("operationId"))
    """
    for path, path_item in iter_paths(document):
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            if method in path_item:
                yield OperationRef(path, method, path_item[method], path_item)


def merged_parameters(
    path_item: dict[str, Any], operation: dict[str, Any]
) -> list[Any]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level ones with the same
    ``(name, in)`` key. Malformed entries are kept so they can be reported.
    """
    merged: dict[tuple[Any, Any], Any] = {}
    extras: list[Any] = []
    for source in (path_item.get("parameters"), operation.get("parameters")):
        if not isinstance(source, list):
            continue
        for param in source:
            if (
                isinstance(param, dict)
                and isinstance(param.get("name"), str)
                and isinstance(param.get("in"), str)
            ):
                merged[(param["name"], param["in"])] = param
            else:
                extras.append(param)
    return [*merged.values(), *extras]


def success_responses(operation: dict[str, Any]) -> list[Any]:
    """Return the 2xx response objects of *operation* in declaration order."""
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return []
    return [
        response
        for code, response in responses.items()
        if str(code).startswith("2")
    ]


def schema_ref_names(schema: Any, seen: Optional[set[int]] = None) -> list[str]:
    """Return the schema names *schema* points at without descending into properties.

    Looks at the node itself, array ``items``, and composite branches.
    *seen* holds the ids of array nodes already walked, so aliased YAML
    nodes that contain themselves terminate.
    """
    if is_reference(schema):
        target = ref_target(schema)
        return [target] if target else []
    if is_array_schema(schema):
        seen = set() if seen is None else seen
        if id(schema) in seen:
            return []
        seen.add(id(schema))
        return schema_ref_names(schema.get("items"), seen)
    keyword = composite_keyword(schema)
    if keyword is not None:
        names: list[str] = []
        for branch in schema[keyword]:
            names.extend(schema_ref_names(branch) if is_reference(branch) else [])
        return names
    return []


def operation_schema_refs(
    operation: Any, path_item: Optional[dict[str, Any]] = None
) -> list[str]:
    """Return the schema names an operation uses.

    Order: success responses, then request body, then parameters. Duplicates
    are removed, keeping the first occurrence.
    """
    if not isinstance(operation, dict):
        return []

    names: list[str] = []
    for response in success_responses(operation):
        if isinstance(response, dict):
            names.extend(schema_ref_names(get_json_schema(response.get("content"))))

    body = operation.get("requestBody")
    if isinstance(body, dict) and not is_reference(body):
        names.extend(schema_ref_names(get_json_schema(body.get("content"))))

    for param in merged_parameters(path_item or {}, operation):
        if isinstance(param, dict):
            names.extend(schema_ref_names(param.get("schema")))

    return list(dict.fromkeys(names))
