"""Tests for specir.reports.relationships."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from specir.analysis import analyze
from specir.models import RelationshipGraph
from specir.reports import EXPORT_VERSION, build_relationships_export, write_relationships_json

STAMP = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class TestBuildExport:
    """Structure of RELATIONSHIPS.json."""

    def test_metadata(self, petstore: dict[str, Any]) -> None:
        data = build_relationships_export(analyze(petstore), STAMP)
        assert data["metadata"] == {
            "specTitle": "Petstore",
            "specVersion": "1.0.0",
            "exportVersion": EXPORT_VERSION,
            "generatedAt": "2024-05-01T12:30:00Z",
            "totalEntities": 6,
            "totalRelationships": 6,
        }

    def test_entities_sorted_with_endpoints(self, petstore: dict[str, Any]) -> None:
        data = build_relationships_export(analyze(petstore), STAMP)
        assert list(data["entities"]) == ["Category", "Order", "Pet", "Profile", "Tag", "User"]
        endpoint = data["entities"]["Order"]["endpoints"][0]
        assert endpoint == {
            "method": "POST",
            "path": "/store/orders",
            "operationId": "place_new_order",
            "operationName": "placeNewOrder",
            "summary": None,
        }

    def test_relationships_sorted_camel_case(self, petstore: dict[str, Any]) -> None:
        data = build_relationships_export(analyze(petstore), STAMP)
        pairs = [(r["sourceEntity"], r["targetEntity"]) for r in data["relationships"]]
        assert pairs == sorted(pairs)
        pet_tag = next(r for r in data["relationships"] if r["targetEntity"] == "Tag")
        assert pet_tag["type"] == "hasMany"
        assert pet_tag["confidence"] == "high"
        assert pet_tag["detectedBy"] == ["schema_ref", "path_pattern"]
        assert {e["source"] for e in pet_tag["evidence"]} == {"schema_ref", "path_pattern"}

    def test_naive_timestamp_treated_as_utc(self) -> None:
        data = build_relationships_export(RelationshipGraph(), datetime(2024, 1, 2, 3, 4, 5))
        assert data["metadata"]["generatedAt"] == "2024-01-02T03:04:05Z"
        assert data["metadata"]["specTitle"] is None

    def test_default_timestamp(self) -> None:
        data = build_relationships_export(RelationshipGraph())
        assert data["metadata"]["generatedAt"].endswith("Z")


class TestWriteExport:
    """Writing the file to disk."""

    def test_writes_json(self, tmp_path: Path, petstore: dict[str, Any]) -> None:
        path = write_relationships_json(analyze(petstore), tmp_path / "out", STAMP)
        assert path == tmp_path / "out" / "RELATIONSHIPS.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["metadata"]["totalRelationships"] == 6
        assert [p.name for p in path.parent.iterdir()] == ["RELATIONSHIPS.json"]
