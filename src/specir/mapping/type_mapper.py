"""Map OpenAPI schema nodes to language-neutral type descriptions.

:func:`map_schema_to_type` turns one schema node into a
:class:`~specir.models.TypeMapping`: a TypeScript-style type expression plus
the ordered list of validation constraints an emitter must attach to the
property. :func:`map_entity` applies it to every property of a named schema.

Recursion stops at reference boundaries. A ``$ref`` yields the target's name
and a cross-reference, never the target's contents, so self-referencing and
mutually-referencing schemas need no cycle detection here. Inline recursion
(array items, composite branches, ``additionalProperties``) additionally
tracks the identity of visited nodes, which keeps aliased YAML structures
finite.

Constraint order on the result is fixed: type constraint, generic
constraints (pattern, lengths, ranges, sizes), format constraint, enum
membership, nested constraints, nullability, then presence/optional.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from specir.mapping.examples import synthesize_example
from specir.models import (
    Constraint,
    ConstraintKind,
    EntityMapping,
    EntityRef,
    EnumDefinition,
    MappingContext,
    PropertyMapping,
    TypeMapping,
)
from specir.naming.casing import capitalize, pascal_case, to_constant_case
from specir.naming.identifiers import resolve_nestjs_conflict, sanitize_identifier
from specir.parser.guards import (
    composite_keyword,
    has_properties,
    is_array_schema,
    is_enum_schema,
    is_nullable,
    is_reference,
    is_schema,
    schema_type,
)
from specir.parser.refs import extract_ref_name, normalize_schema_name

ANY_TYPE = "any"
FREE_FORM_TYPE = "Record<string, any>"
UNNAMED_OBJECT_TYPE = "unknown"
UNRESOLVED_REF_TYPE = "Unknown"

_FORMAT_CONSTRAINTS = {
    "email": ConstraintKind.FORMAT_EMAIL,
    "uuid": ConstraintKind.FORMAT_UUID,
    "uri": ConstraintKind.FORMAT_URL,
    "url": ConstraintKind.FORMAT_URL,
    "date-time": ConstraintKind.FORMAT_DATE_TIME,
}

# Item constraints that are re-applied to each element of the array.
_ITEM_CONSTRAINTS = frozenset({
    ConstraintKind.NESTED_VALIDATE,
    ConstraintKind.NESTED_TYPE,
    ConstraintKind.ENUM_MEMBERSHIP,
})

_IDENTIFIER_CHARS_RE = re.compile(r"^[A-Za-z0-9_$]+$")


class _Draft:
    """Mutable accumulator for one mapping, before nullability and presence."""

    def __init__(self) -> None:
        self.base_type = ANY_TYPE
        self.is_array = False
        self.constraints: list[Constraint] = []
        self.enum_definition: Optional[EnumDefinition] = None
        self.cross_references: list[EntityRef] = []

    def add(self, kind: ConstraintKind, *args: Any) -> None:
        self.constraints.append(Constraint(kind=kind, args=list(args)))


def map_schema_to_type(
    node: Any,
    is_required: bool = True,
    context: Optional[MappingContext] = None,
) -> TypeMapping:
    """Describe the type of one schema node.

    Args:
        node: A raw schema node. Malformed values map to ``any``.
        is_required: Whether the owning property is listed in ``required``.
            Required properties get a presence constraint, optional ones an
            ``optional`` constraint and ``| undefined``.
        context: Owning class and property name. Needed to give enums a
            name; without it enums become an inline union of literals.

    Returns:
        The type mapping. Never raises.

    Example::

        m = map_schema_to_type({"type": "array", "items": {"$ref": "#/components/schemas/Tag"}})
        m.type_expression   # "Tag[]"
        m.constraint_kinds()
        # [ARRAY_TYPE, NESTED_VALIDATE, NESTED_TYPE, NOT_EMPTY]
    """
    return _map(node, is_required, context, frozenset())


def _map(
    node: Any,
    is_required: bool,
    context: Optional[MappingContext],
    active: frozenset[int],
) -> TypeMapping:
    draft = _Draft()
    nullable = False

    if is_reference(node):
        _map_reference(node, draft)
    elif is_schema(node) and id(node) not in active:
        nullable = is_nullable(node)
        _map_inline(node, context, draft, active | {id(node)})

    return _finish(node, draft, is_required, nullable)


def _map_reference(node: dict[str, Any], draft: _Draft) -> None:
    name = extract_ref_name(node.get("$ref"))
    if name is None:
        draft.base_type = UNRESOLVED_REF_TYPE
        return
    normalized = normalize_schema_name(name)
    draft.base_type = normalized
    draft.cross_references.append(EntityRef(name=normalized, ref=node["$ref"]))
    draft.add(ConstraintKind.NESTED_VALIDATE)
    draft.add(ConstraintKind.NESTED_TYPE, normalized)


def _map_inline(
    node: dict[str, Any],
    context: Optional[MappingContext],
    draft: _Draft,
    active: frozenset[int],
) -> None:
    keyword = composite_keyword(node)
    if keyword is not None:
        _map_composite(node, keyword, draft, active)
    elif is_array_schema(node):
        _map_array(node, draft, active)
    elif is_enum_schema(node):
        _map_enum(node, context, draft)
    else:
        kind = schema_type(node)
        if kind == "string":
            _map_string(node, draft)
        elif kind in ("integer", "number"):
            _map_number(node, kind, draft)
        elif kind == "boolean":
            draft.base_type = "boolean"
            draft.add(ConstraintKind.BOOLEAN_TYPE)
        elif kind == "object" or (kind is None and has_properties(node)):
            _map_object(node, draft, active)
        elif kind == "null":
            draft.base_type = "null"


def _map_composite(
    node: dict[str, Any], keyword: str, draft: _Draft, active: frozenset[int]
) -> None:
    branches = node[keyword]

    # A lone $ref wrapped in allOf is the usual way to attach siblings
    # (nullable, description) to a reference.
    if keyword == "allOf" and len(branches) == 1 and is_reference(branches[0]):
        _map_reference(branches[0], draft)
        return

    parts: list[str] = []
    ref_names: list[str] = []
    for branch in branches:
        mapped = _map(branch, True, None, active)
        parts.append(_wrap(mapped.type_expression))
        draft.cross_references.extend(mapped.cross_references)
        if is_reference(branch) and mapped.cross_references:
            ref_names.append(mapped.cross_references[0].name)

    parts = list(dict.fromkeys(parts))
    if parts:
        draft.base_type = (" & " if keyword == "allOf" else " | ").join(parts)
    if ref_names:
        draft.add(ConstraintKind.NESTED_VALIDATE)
        draft.add(ConstraintKind.NESTED_TYPE, *dict.fromkeys(ref_names))


def _map_array(node: dict[str, Any], draft: _Draft, active: frozenset[int]) -> None:
    draft.is_array = True
    draft.add(ConstraintKind.ARRAY_TYPE)

    items = node.get("items")
    item: Optional[TypeMapping] = None
    if isinstance(items, dict):
        item = _map(items, True, None, active)
        draft.base_type = f"{_wrap(item.type_expression)}[]"
        draft.cross_references.extend(item.cross_references)
    else:
        draft.base_type = f"{ANY_TYPE}[]"

    _add_number(node, "minItems", ConstraintKind.MIN_ITEMS, draft)
    _add_number(node, "maxItems", ConstraintKind.MAX_ITEMS, draft)

    if item is not None:
        for constraint in item.constraints:
            if constraint.kind in _ITEM_CONSTRAINTS:
                draft.constraints.append(constraint.model_copy(update={"each": True}))


def _map_enum(
    node: dict[str, Any], context: Optional[MappingContext], draft: _Draft
) -> None:
    values = list(node["enum"])
    if context is not None:
        name = enum_name(context)
        const_name = to_constant_case(name)
        draft.base_type = name
        draft.enum_definition = EnumDefinition(
            name=name, const_name=const_name, values=values
        )
        draft.add(ConstraintKind.ENUM_MEMBERSHIP, const_name)
    else:
        draft.base_type = " | ".join(dict.fromkeys(_literal(v) for v in values))
        draft.add(ConstraintKind.ENUM_MEMBERSHIP, *values)


def _map_string(node: dict[str, Any], draft: _Draft) -> None:
    draft.base_type = "string"
    draft.add(ConstraintKind.STRING_TYPE)
    pattern = node.get("pattern")
    if isinstance(pattern, str):
        draft.add(ConstraintKind.PATTERN, pattern)
    _add_number(node, "minLength", ConstraintKind.MIN_LENGTH, draft)
    _add_number(node, "maxLength", ConstraintKind.MAX_LENGTH, draft)
    fmt = node.get("format")
    if isinstance(fmt, str) and fmt in _FORMAT_CONSTRAINTS:
        draft.add(_FORMAT_CONSTRAINTS[fmt])


def _map_number(node: dict[str, Any], kind: str, draft: _Draft) -> None:
    draft.base_type = "number"
    if kind == "integer":
        draft.add(ConstraintKind.NUMERIC_TYPE, "integer")
    else:
        draft.add(ConstraintKind.NUMERIC_TYPE)
    _add_bound(node, "minimum", "exclusiveMinimum", ConstraintKind.MIN_VALUE, draft)
    _add_bound(node, "maximum", "exclusiveMaximum", ConstraintKind.MAX_VALUE, draft)


def _map_object(node: dict[str, Any], draft: _Draft, active: frozenset[int]) -> None:
    if has_properties(node):
        draft.base_type = UNNAMED_OBJECT_TYPE
    else:
        additional = node.get("additionalProperties")
        if isinstance(additional, dict) and additional:
            value = _map(additional, True, None, active)
            draft.base_type = f"Record<string, {value.type_expression}>"
            draft.cross_references.extend(value.cross_references)
        else:
            draft.base_type = FREE_FORM_TYPE
    draft.add(ConstraintKind.OBJECT_TYPE)


def _add_number(node: dict[str, Any], key: str, kind: ConstraintKind, draft: _Draft) -> None:
    value = node.get(key)
    if _is_number(value):
        draft.add(kind, value)


def _add_bound(
    node: dict[str, Any],
    key: str,
    exclusive_key: str,
    kind: ConstraintKind,
    draft: _Draft,
) -> None:
    value = node.get(key)
    exclusive = node.get(exclusive_key)
    if _is_number(value):
        if exclusive is True:
            draft.add(kind, value, "exclusive")
        else:
            draft.add(kind, value)
    elif _is_number(exclusive):
        # OpenAPI 3.1 spells exclusive bounds as numbers.
        draft.add(kind, exclusive, "exclusive")


def _finish(
    node: Any, draft: _Draft, is_required: bool, nullable: bool
) -> TypeMapping:
    constraints = list(draft.constraints)
    expression = draft.base_type

    if nullable:
        expression += " | null"
        constraints.append(Constraint(kind=ConstraintKind.NULLABLE))

    if is_required:
        constraints.append(Constraint(kind=_presence_kind(node)))
    else:
        expression += " | undefined"
        constraints.append(Constraint(kind=ConstraintKind.OPTIONAL))

    description = node.get("description") if is_schema(node) else None
    return TypeMapping(
        type_expression=expression,
        base_type=draft.base_type,
        is_array=draft.is_array,
        is_nullable=nullable,
        is_optional=not is_required,
        constraints=constraints,
        enum_definition=draft.enum_definition,
        cross_references=_dedupe_refs(draft.cross_references),
        description=description if isinstance(description, str) else None,
        example=synthesize_example(node),
    )


def _presence_kind(node: Any) -> ConstraintKind:
    """``required`` means present; only a minimum length makes it non-empty."""
    if schema_type(node) == "string" and not is_reference(node):
        min_length = node.get("minLength")
        if not (_is_number(min_length) and min_length > 0):
            return ConstraintKind.DEFINED
    return ConstraintKind.NOT_EMPTY


def enum_name(context: MappingContext) -> str:
    """Name an enum after its owner: ``Pet`` + ``status`` -> ``PetStatus``."""
    prop = context.prop_name
    suffix = capitalize(prop) if _IDENTIFIER_CHARS_RE.match(prop) else pascal_case(prop)
    return f"{context.class_name}{suffix}"


def entity_class_name(name: str) -> str:
    """Return the class name emitted for the schema called *name*."""
    return resolve_nestjs_conflict(sanitize_identifier(normalize_schema_name(name)))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


def _wrap(expression: str) -> str:
    if " | " in expression or " & " in expression:
        return f"({expression})"
    return expression


def _dedupe_refs(refs: list[EntityRef]) -> list[EntityRef]:
    seen: dict[str, EntityRef] = {}
    for ref in refs:
        seen.setdefault(ref.name, ref)
    return list(seen.values())


# --- Entities ---


def map_entity(name: str, schema: Any) -> EntityMapping:
    """Build the DTO mapping for the named schema *name*.

    Declared properties are mapped with the schema's ``required`` list and an
    enum-naming context. Inline ``allOf`` branches contribute their
    properties; referenced ``allOf`` branches become base classes in
    ``extends``.

    Example::

        entity = map_entity("Pet", doc["components"]["schemas"]["Pet"])
        [p.name for p in entity.properties]   # ["id", "name", "status"]
        entity.enums[0].name                   # "PetStatus"
    """
    class_name = entity_class_name(name)
    properties: dict[str, Any] = {}
    required: set[str] = set()
    extends: list[str] = []
    _collect_properties(schema, properties, required, extends, set())

    description = schema.get("description") if is_schema(schema) else None
    entity = EntityMapping(
        name=name,
        class_name=class_name,
        extends=list(dict.fromkeys(extends)),
        description=description if isinstance(description, str) else None,
    )
    for prop_name, prop_schema in properties.items():
        mapping = map_schema_to_type(
            prop_schema,
            prop_name in required,
            MappingContext(class_name=class_name, prop_name=prop_name),
        )
        entity.properties.append(
            PropertyMapping(name=prop_name, required=prop_name in required, mapping=mapping)
        )
        if mapping.enum_definition is not None:
            entity.enums.append(mapping.enum_definition)
    return entity


def _collect_properties(
    schema: Any,
    properties: dict[str, Any],
    required: set[str],
    extends: list[str],
    seen: set[int],
) -> None:
    if is_reference(schema):
        target = extract_ref_name(schema.get("$ref"))
        if target:
            extends.append(normalize_schema_name(target))
        return
    if not is_schema(schema) or id(schema) in seen:
        return
    seen.add(id(schema))

    if has_properties(schema):
        for prop_name, prop_schema in schema["properties"].items():
            properties[str(prop_name)] = prop_schema
    required_list = schema.get("required")
    if isinstance(required_list, list):
        required.update(r for r in required_list if isinstance(r, str))

    all_of = schema.get("allOf")
    if isinstance(all_of, list):
        for branch in all_of:
            _collect_properties(branch, properties, required, extends, seen)
