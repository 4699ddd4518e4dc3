"""Tests for specir.pipeline."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from specir.exceptions import ValidationFailedError
from specir.exit_codes import EXIT_VALIDATION_FAILURE
from specir.models import ArtifactKind, OutputStructure, RecoveryStrategy
from specir.pipeline import (
    apply_recovery,
    build_entity_mappings,
    document_artifacts,
    entity_from_location,
)
from specir.planning import plan_artifacts
from specir.validation import validate


@pytest.fixture
def broken_doc() -> dict[str, Any]:
    """One valid schema, one with a blocking error, and a bad operation."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Broken", "version": "1"},
        "paths": {"/a": {"get": {"operationId": "getA"}}},
        "components": {
            "schemas": {
                "Good": {"type": "object", "properties": {"id": {"type": "integer"}}},
                "Bad": {"type": "object", "properties": {"tags": {"type": "array"}}},
            }
        },
    }


class TestEntityFromLocation:
    """Schema names from issue locations."""

    def test_schema_locations(self) -> None:
        assert entity_from_location("components.schemas.Pet.properties.tags") == "Pet"
        assert entity_from_location("components.schemas.Pet") == "Pet"

    def test_other_locations(self) -> None:
        assert entity_from_location("paths./pets.get") is None
        assert entity_from_location("components.schemas.") is None


class TestApplyRecovery:
    """The three recovery strategies."""

    def test_no_errors(self, petstore: dict[str, Any]) -> None:
        outcome = apply_recovery(validate(petstore), RecoveryStrategy.FAIL_FAST)
        assert outcome.skipped_entities == []
        assert outcome.warnings == []

    def test_fail_fast(self, broken_doc: dict[str, Any]) -> None:
        result = validate(broken_doc)
        with pytest.raises(ValidationFailedError) as exc_info:
            apply_recovery(result, RecoveryStrategy.FAIL_FAST)
        assert exc_info.value.exit_code == EXIT_VALIDATION_FAILURE
        assert exc_info.value.issues == [result.errors[0]]
        assert "components.schemas.Bad.properties.tags" in str(exc_info.value)

    def test_skip(self, broken_doc: dict[str, Any]) -> None:
        outcome = apply_recovery(validate(broken_doc), "skip")
        assert outcome.strategy == RecoveryStrategy.SKIP
        assert outcome.skipped_entities == ["Bad"]
        assert outcome.warnings == [
            "Skipping schema 'Bad': Array schema missing 'items' definition"
        ]

    def test_warn_logs_every_error(
        self, broken_doc: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="specir.pipeline"):
            outcome = apply_recovery(validate(broken_doc), RecoveryStrategy.WARN)
        assert outcome.skipped_entities == []
        assert len(outcome.warnings) == 2
        assert outcome.warnings[1] == "paths./a.get: Operation missing responses"
        assert len(caplog.records) == 2


class TestBuildEntityMappings:
    """Mapping the schemas that survive recovery."""

    def test_skip_excludes_bad_schema(self, broken_doc: dict[str, Any]) -> None:
        mappings, outcome = build_entity_mappings(broken_doc, strategy=RecoveryStrategy.SKIP)
        assert [m.name for m in mappings] == ["Good"]
        assert outcome.skipped_entities == ["Bad"]

    def test_warn_keeps_everything(self, broken_doc: dict[str, Any]) -> None:
        mappings, _ = build_entity_mappings(broken_doc)
        assert [m.name for m in mappings] == ["Good", "Bad"]

    def test_reuses_given_result(self, petstore: dict[str, Any]) -> None:
        result = validate(petstore)
        mappings, outcome = build_entity_mappings(petstore, result, RecoveryStrategy.FAIL_FAST)
        assert len(mappings) == 6
        assert outcome.warnings == []


class TestDocumentArtifacts:
    """Artifacts for one generation run."""

    def test_petstore_artifacts(self, petstore: dict[str, Any]) -> None:
        mappings, _ = build_entity_mappings(petstore)
        artifacts = document_artifacts(petstore, mappings)
        assert [a.name for a in artifacts if a.kind == ArtifactKind.DTOS] == [
            "pet",
            "category",
            "tag",
            "order",
            "user",
            "profile",
        ]
        controllers = [a for a in artifacts if a.kind == ArtifactKind.CONTROLLERS]
        assert [a.name for a in controllers] == ["pet", "store", "user"]
        assert len([a for a in artifacts if a.kind == ArtifactKind.DECORATORS]) == 3

    def test_domain_layout_keeps_entity_together(self, petstore: dict[str, Any]) -> None:
        mappings, _ = build_entity_mappings(petstore)
        files = plan_artifacts(
            document_artifacts(petstore, mappings), Path("gen"), OutputStructure.DOMAIN_BASED
        )
        kinds_by_domain: dict[str, set[str]] = {}
        for planned in files:
            domain, kind = planned.path.parts[1:3]
            kinds_by_domain.setdefault(domain, set()).add(kind)
        assert sorted(kinds_by_domain) == [
            "category", "order", "pet", "profile", "store", "tag", "user",
        ]
        assert kinds_by_domain["pet"] == {"dtos", "controllers", "decorators"}
        assert kinds_by_domain["user"] == {"dtos", "controllers", "decorators"}

    def test_controller_content(self, petstore: dict[str, Any]) -> None:
        artifacts = document_artifacts(petstore, [])
        store = next(
            a for a in artifacts if a.kind == ArtifactKind.CONTROLLERS and a.name == "store"
        )
        content = json.loads(store.content)
        assert content["resource"] == "store"
        assert [o["operationName"] for o in content["operations"]] == [
            "placeNewOrder",
            "getInventory",
        ]

    def test_untagged_operations_use_path(self) -> None:
        document = {"paths": {"/order-items/{id}": {"get": {"responses": {}}}}}
        (controller, decorator) = document_artifacts(document, [])
        assert controller.name == "order-items"
        assert json.loads(decorator.content)["decorators"] == [None]

    def test_root_path_is_default(self) -> None:
        document = {"paths": {"/": {"get": {"operationId": "root", "responses": {}}}}}
        assert document_artifacts(document, [])[0].name == "default"
