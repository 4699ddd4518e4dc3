"""Tests for specir.mapping.type_mapper."""

from __future__ import annotations

from typing import Any

import pytest

from specir.mapping.type_mapper import (
    entity_class_name,
    enum_name,
    map_entity,
    map_schema_to_type,
)
from specir.models import ConstraintKind as K
from specir.models import MappingContext


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


# ---------------------------------------------------------------------------
# Primitive types
# ---------------------------------------------------------------------------


class TestPrimitives:
    """Strings, numbers and booleans."""

    def test_required_string_is_defined(self) -> None:
        mapping = map_schema_to_type({"type": "string"})
        assert mapping.type_expression == "string"
        assert mapping.constraint_kinds() == [K.STRING_TYPE, K.DEFINED]

    def test_min_length_makes_not_empty(self) -> None:
        mapping = map_schema_to_type({"type": "string", "minLength": 3, "maxLength": 32})
        assert mapping.constraint_kinds() == [
            K.STRING_TYPE,
            K.MIN_LENGTH,
            K.MAX_LENGTH,
            K.NOT_EMPTY,
        ]
        assert mapping.find(K.MIN_LENGTH).args == [3]

    def test_constraint_order(self) -> None:
        node = {"type": "string", "format": "email", "pattern": "^.+@.+$", "nullable": True}
        mapping = map_schema_to_type(node, is_required=False)
        assert mapping.type_expression == "string | null | undefined"
        assert mapping.constraint_kinds() == [
            K.STRING_TYPE,
            K.PATTERN,
            K.FORMAT_EMAIL,
            K.NULLABLE,
            K.OPTIONAL,
        ]
        assert mapping.is_nullable and mapping.is_optional

    def test_optional_integer(self) -> None:
        mapping = map_schema_to_type({"type": "integer", "format": "int64"}, is_required=False)
        assert mapping.type_expression == "number | undefined"
        assert mapping.base_type == "number"
        assert mapping.constraints[0].args == ["integer"]
        assert mapping.constraint_kinds() == [K.NUMERIC_TYPE, K.OPTIONAL]

    def test_bounds(self) -> None:
        mapping = map_schema_to_type(
            {"type": "number", "minimum": 1, "exclusiveMinimum": True, "exclusiveMaximum": 10}
        )
        assert mapping.find(K.NUMERIC_TYPE).args == []
        assert mapping.find(K.MIN_VALUE).args == [1, "exclusive"]
        assert mapping.find(K.MAX_VALUE).args == [10, "exclusive"]

    def test_boolean(self) -> None:
        mapping = map_schema_to_type({"type": "boolean", "default": False})
        assert mapping.type_expression == "boolean"
        assert mapping.example is False

    def test_openapi_31_null_union(self) -> None:
        mapping = map_schema_to_type({"type": ["string", "null"]})
        assert mapping.type_expression == "string | null"
        assert mapping.is_nullable


# ---------------------------------------------------------------------------
# References, arrays and composition
# ---------------------------------------------------------------------------


class TestReferences:
    """$ref nodes stop recursion and produce cross-references."""

    def test_reference(self) -> None:
        mapping = map_schema_to_type(_ref("Category"))
        assert mapping.type_expression == "Category"
        assert mapping.constraint_kinds() == [K.NESTED_VALIDATE, K.NESTED_TYPE, K.NOT_EMPTY]
        assert [r.name for r in mapping.cross_references] == ["Category"]

    def test_builtin_name_is_renamed(self) -> None:
        mapping = map_schema_to_type(_ref("Object"))
        assert mapping.type_expression == "ObjectDto"
        assert mapping.cross_references[0].ref == "#/components/schemas/Object"

    def test_unresolvable_ref(self) -> None:
        mapping = map_schema_to_type({"$ref": 5})
        assert mapping.type_expression == "Unknown"
        assert mapping.cross_references == []

    def test_nullable_allof_wrapper(self) -> None:
        mapping = map_schema_to_type({"allOf": [_ref("Pet")], "nullable": True})
        assert mapping.type_expression == "Pet | null"
        assert mapping.find(K.NESTED_TYPE).args == ["Pet"]


class TestArrays:
    """Array schemas and item constraints."""

    def test_array_of_refs(self) -> None:
        mapping = map_schema_to_type({"type": "array", "items": _ref("Tag")})
        assert mapping.type_expression == "Tag[]"
        assert mapping.is_array
        assert mapping.constraint_kinds() == [
            K.ARRAY_TYPE,
            K.NESTED_VALIDATE,
            K.NESTED_TYPE,
            K.NOT_EMPTY,
        ]
        assert mapping.find(K.NESTED_TYPE).each

    def test_array_sizes(self) -> None:
        node = {"type": "array", "items": {"type": "string"}, "minItems": 1, "maxItems": 5}
        mapping = map_schema_to_type(node, is_required=False)
        assert mapping.type_expression == "string[] | undefined"
        assert mapping.constraint_kinds() == [K.ARRAY_TYPE, K.MIN_ITEMS, K.MAX_ITEMS, K.OPTIONAL]

    def test_enum_items_are_wrapped(self) -> None:
        node = {"type": "array", "items": {"type": "string", "enum": ["a", "b"]}}
        mapping = map_schema_to_type(node)
        assert mapping.type_expression == "('a' | 'b')[]"
        membership = mapping.find(K.ENUM_MEMBERSHIP)
        assert membership.each
        assert membership.args == ["a", "b"]

    def test_missing_items(self) -> None:
        assert map_schema_to_type({"type": "array"}).type_expression == "any[]"

    def test_self_aliasing_items_terminate(self) -> None:
        node: dict[str, Any] = {"type": "array"}
        node["items"] = node
        assert map_schema_to_type(node).type_expression == "any[]"


class TestComposition:
    """oneOf, anyOf and allOf."""

    def test_one_of_refs(self) -> None:
        mapping = map_schema_to_type({"oneOf": [_ref("Pet"), _ref("Tag")]})
        assert mapping.type_expression == "Pet | Tag"
        assert mapping.find(K.NESTED_TYPE).args == ["Pet", "Tag"]
        assert {r.name for r in mapping.cross_references} == {"Pet", "Tag"}

    def test_all_of_intersection(self) -> None:
        mapping = map_schema_to_type({"allOf": [_ref("Pet"), {"type": "object"}]})
        assert mapping.type_expression == "Pet & Record<string, any>"

    def test_nested_unions_are_parenthesised(self) -> None:
        node = {"anyOf": [{"type": "string", "nullable": True}, {"type": "integer"}]}
        assert map_schema_to_type(node).type_expression == "(string | null) | number"


class TestObjectsAndEnums:
    """Object shapes and enum naming."""

    def test_free_form_object(self) -> None:
        assert map_schema_to_type({"type": "object"}).type_expression == "Record<string, any>"

    def test_additional_properties(self) -> None:
        node = {"type": "object", "additionalProperties": {"type": "integer"}}
        mapping = map_schema_to_type(node)
        assert mapping.type_expression == "Record<string, number>"
        assert mapping.constraint_kinds() == [K.OBJECT_TYPE, K.NOT_EMPTY]

    def test_inline_object_with_properties(self) -> None:
        node = {"properties": {"a": {"type": "string"}}}
        assert map_schema_to_type(node).type_expression == "unknown"

    def test_named_enum(self) -> None:
        node = {"type": "string", "enum": ["available", "sold"]}
        mapping = map_schema_to_type(node, context=MappingContext(class_name="Pet", prop_name="status"))
        assert mapping.type_expression == "PetStatus"
        assert mapping.enum_definition.const_name == "PET_STATUS"
        assert mapping.find(K.ENUM_MEMBERSHIP).args == ["PET_STATUS"]
        assert mapping.example == "available"

    def test_inline_enum_literals(self) -> None:
        mapping = map_schema_to_type({"enum": [1, None, True, "it's"]})
        assert mapping.type_expression == "1 | null | true | 'it\\'s'"

    def test_enum_name_with_separators(self) -> None:
        assert enum_name(MappingContext(class_name="Order", prop_name="ship-status")) == "OrderShipStatus"


@pytest.mark.parametrize("node", [None, 3, "string", [], {"type": "weird"}])
def test_malformed_nodes_map_to_any(node: Any) -> None:
    mapping = map_schema_to_type(node)
    assert mapping.type_expression == "any"
    assert mapping.constraint_kinds() == [K.NOT_EMPTY]


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class TestMapEntity:
    """Whole-schema mapping."""

    def test_petstore_pet(self, petstore: dict[str, Any]) -> None:
        entity = map_entity("Pet", petstore["components"]["schemas"]["Pet"])
        assert entity.class_name == "Pet"
        assert entity.description == "A pet for sale"
        assert [p.name for p in entity.properties] == [
            "id",
            "name",
            "category",
            "photoUrls",
            "tags",
            "status",
        ]
        by_name = {p.name: p for p in entity.properties}
        assert by_name["name"].required
        assert by_name["name"].mapping.constraint_kinds() == [K.STRING_TYPE, K.DEFINED]
        assert by_name["id"].mapping.type_expression == "number | undefined"
        assert by_name["id"].mapping.example == 10
        assert by_name["photoUrls"].mapping.constraint_kinds() == [K.ARRAY_TYPE, K.NOT_EMPTY]
        assert [e.name for e in entity.enums] == ["PetStatus"]

    def test_all_of_inheritance(self) -> None:
        schema = {
            "allOf": [
                _ref("Base"),
                {"type": "object", "required": ["x"], "properties": {"x": {"type": "string"}}},
            ]
        }
        entity = map_entity("Derived", schema)
        assert entity.extends == ["Base"]
        assert [(p.name, p.required) for p in entity.properties] == [("x", True)]

    def test_class_name_normalisation(self) -> None:
        assert entity_class_name("ApiResponse") == "ApiResponseDto"
        assert entity_class_name("Object") == "ObjectDto"
        assert entity_class_name("my-model") == "my_model"

    def test_self_reference_terminates(self) -> None:
        schema = {"type": "object", "properties": {"parent": _ref("Category")}}
        entity = map_entity("Category", schema)
        (parent,) = entity.properties
        assert parent.mapping.type_expression == "Category | undefined"
        assert [r.name for r in parent.mapping.cross_references] == ["Category"]

    def test_mutual_references_terminate(self) -> None:
        schemas = {
            "User": {"type": "object", "properties": {"profile": _ref("Profile")}},
            "Profile": {"type": "object", "properties": {"user": _ref("User")}},
        }
        entities = [map_entity(name, schema) for name, schema in schemas.items()]
        assert [
            [r.name for p in e.properties for r in p.mapping.cross_references] for e in entities
        ] == [["Profile"], ["User"]]
        assert map_schema_to_type(_ref("User")).type_expression == "User"

    def test_malformed_schema(self) -> None:
        entity = map_entity("Broken", "not a schema")
        assert entity.properties == []
        assert entity.extends == []
