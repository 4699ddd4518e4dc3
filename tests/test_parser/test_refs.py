"""Tests for specir.parser.refs."""

from __future__ import annotations

from typing import Any

import pytest

from specir.exceptions import SpecParseError
from specir.parser.refs import (
    extract_ref_name,
    is_schema_ref,
    normalize_schema_name,
    ref_target,
    resolve_pointer,
)


class TestExtractRefName:
    """Last-segment extraction from $ref strings."""

    def test_schema_ref(self) -> None:
        assert extract_ref_name("#/components/schemas/Pet") == "Pet"

    def test_trailing_slash(self) -> None:
        assert extract_ref_name("#/components/schemas/") is None

    def test_escaped_segment(self) -> None:
        assert extract_ref_name("#/components/schemas/a~1b") == "a/b"

    def test_non_string(self) -> None:
        assert extract_ref_name(None) is None
        assert extract_ref_name(7) is None


class TestSchemaRefs:
    """Recognising #/components/schemas/<Name> references."""

    def test_is_schema_ref(self) -> None:
        assert is_schema_ref("#/components/schemas/Pet")
        assert not is_schema_ref("#/components/parameters/Limit")
        assert not is_schema_ref("#/components/schemas/Pet/properties/id")
        assert not is_schema_ref("other.yaml#/Pet")

    def test_ref_target(self) -> None:
        assert ref_target({"$ref": "#/components/schemas/Order"}) == "Order"
        assert ref_target({"$ref": "#/components/responses/NotFound"}) is None
        assert ref_target({"type": "string"}) is None
        assert ref_target("Pet") is None

    def test_normalize_schema_name(self) -> None:
        assert normalize_schema_name("Object") == "ObjectDto"
        assert normalize_schema_name("Pet") == "Pet"


class TestResolvePointer:
    """Single-hop JSON Pointer lookup."""

    @pytest.fixture
    def document(self) -> dict[str, Any]:
        return {
            "components": {
                "schemas": {
                    "Pet": {"type": "object"},
                    "Alias": {"$ref": "#/components/schemas/Pet"},
                    "a/b": {"type": "string"},
                }
            },
            "tags": [{"name": "pet"}],
        }

    def test_resolves_schema(self, document: dict[str, Any]) -> None:
        assert resolve_pointer("#/components/schemas/Pet", document) == {"type": "object"}

    def test_does_not_follow_chained_ref(self, document: dict[str, Any]) -> None:
        target = resolve_pointer("#/components/schemas/Alias", document)
        assert target == {"$ref": "#/components/schemas/Pet"}

    def test_escaped_and_indexed(self, document: dict[str, Any]) -> None:
        assert resolve_pointer("#/components/schemas/a~1b", document)["type"] == "string"
        assert resolve_pointer("#/tags/0/name", document) == "pet"

    def test_external_ref(self, document: dict[str, Any]) -> None:
        with pytest.raises(SpecParseError, match="External"):
            resolve_pointer("other.yaml#/Pet", document)

    def test_missing_key(self, document: dict[str, Any]) -> None:
        with pytest.raises(SpecParseError, match="key 'Nope' not found"):
            resolve_pointer("#/components/schemas/Nope", document)

    def test_bad_index(self, document: dict[str, Any]) -> None:
        with pytest.raises(SpecParseError, match="invalid array index"):
            resolve_pointer("#/tags/9", document)
