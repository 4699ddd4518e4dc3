"""Glue between analysis results and emission.

The analysis modules never raise for malformed input. This module is where
policy is applied: a :class:`~specir.models.RecoveryStrategy` decides what
validation errors mean for generation, and the surviving schemas are mapped
to :class:`~specir.models.EntityMapping` IR. It also groups operations into
the controller/decorator artifacts the planner lays out on disk.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from specir.exceptions import ValidationFailedError
from specir.mapping.type_mapper import map_entity
from specir.models import (
    ArtifactKind,
    EntityMapping,
    PlannedArtifact,
    RecoveryOutcome,
    RecoveryStrategy,
    ValidationResult,
)
from specir.naming.convention import normalize_operation_name
from specir.parser.extractor import iter_operations
from specir.planning.structure import extract_resource_name_from_tag
from specir.validation.validator import validate

logger = logging.getLogger(__name__)

_SCHEMA_LOCATION_PREFIX = "components.schemas."


def entity_from_location(location: str) -> Optional[str]:
    """Return the schema name an issue location points into, if any.

    Example::

        entity_from_location("components.schemas.Pet.properties.tags")  # "Pet"
        entity_from_location("paths./pets.get")                         # None
    """
    if not location.startswith(_SCHEMA_LOCATION_PREFIX):
        return None
    rest = location[len(_SCHEMA_LOCATION_PREFIX):]
    name = rest.split(".", 1)[0]
    return name or None


def apply_recovery(
    result: ValidationResult, strategy: RecoveryStrategy = RecoveryStrategy.WARN
) -> RecoveryOutcome:
    """Apply *strategy* to the errors in *result*.

    Args:
        result: Output of the validator.
        strategy: ``fail-fast`` raises on the first error, ``skip`` marks
            every schema with an error for exclusion, ``warn`` logs the
            errors and excludes nothing.

    Raises:
        ValidationFailedError: With ``fail-fast`` when *result* has errors.
    """
    strategy = RecoveryStrategy(strategy)
    outcome = RecoveryOutcome(strategy=strategy)
    if not result.errors:
        return outcome

    if strategy is RecoveryStrategy.FAIL_FAST:
        first = result.errors[0]
        raise ValidationFailedError(
            f"Validation failed at {first.location}: {first.message}",
            issues=[first],
        )

    if strategy is RecoveryStrategy.SKIP:
        for issue in result.errors:
            name = entity_from_location(issue.location)
            if name is None or name in outcome.skipped_entities:
                continue
            outcome.skipped_entities.append(name)
            message = f"Skipping schema '{name}': {issue.message}"
            outcome.warnings.append(message)
            logger.debug(message)
        return outcome

    for issue in result.errors:
        message = f"{issue.location}: {issue.message}"
        outcome.warnings.append(message)
        logger.warning("Continuing despite validation error at %s", message)
    return outcome


def _schemas(document: Any) -> dict[str, Any]:
    components = document.get("components") if isinstance(document, dict) else None
    schemas = components.get("schemas") if isinstance(components, dict) else None
    return schemas if isinstance(schemas, dict) else {}


def build_entity_mappings(
    document: Any,
    result: Optional[ValidationResult] = None,
    strategy: RecoveryStrategy = RecoveryStrategy.WARN,
) -> tuple[list[EntityMapping], RecoveryOutcome]:
    """Map every schema that survives *strategy* to an :class:`EntityMapping`.

    Args:
        document: Raw OpenAPI document.
        result: A validation result for *document*; computed when omitted.
        strategy: Recovery strategy to apply to the result.

    Returns:
        The mappings in schema declaration order, and the recovery outcome.

    Raises:
        ValidationFailedError: With ``fail-fast`` when validation found errors.
    """
    if result is None:
        result = validate(document)
    outcome = apply_recovery(result, strategy)
    skipped = set(outcome.skipped_entities)

    mappings = [
        map_entity(str(name), schema)
        for name, schema in _schemas(document).items()
        if str(name) not in skipped and isinstance(schema, dict)
    ]
    return mappings, outcome


def _resource_of(path: str, operation: dict[str, Any]) -> str:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and isinstance(tags[0], str) and tags[0].strip():
        return extract_resource_name_from_tag(tags[0])
    for segment in path.split("/"):
        if segment and not segment.startswith("{"):
            return extract_resource_name_from_tag(segment)
    return "default"


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def document_artifacts(
    document: Any, mappings: list[EntityMapping]
) -> list[PlannedArtifact]:
    """Build the artifacts one generation run would produce.

    One DTO artifact per entity mapping, and one controller and one
    decorator artifact per resource. Operations are grouped into resources
    by their first tag, else by their first literal path segment. Every
    artifact is named by its kebab-case resource key, so an entity and its
    controller share one directory in the ``domain-based`` layout. Contents
    are the JSON form of the IR each emitter consumes.
    """
    artifacts = [
        PlannedArtifact(
            kind=ArtifactKind.DTOS,
            name=extract_resource_name_from_tag(mapping.name),
            content=mapping.model_dump_json(indent=2) + "\n",
        )
        for mapping in mappings
    ]

    resources: dict[str, list[dict[str, Any]]] = {}
    for op in iter_operations(document):
        if not isinstance(op.operation, dict):
            continue
        operation_id = op.operation.get("operationId")
        resources.setdefault(_resource_of(op.path, op.operation), []).append(
            {
                "method": op.method.upper(),
                "path": op.path,
                "operationId": operation_id if isinstance(operation_id, str) else None,
                "operationName": normalize_operation_name(operation_id)
                if isinstance(operation_id, str)
                else None,
            }
        )

    for resource, operations in resources.items():
        artifacts.append(
            PlannedArtifact(
                kind=ArtifactKind.CONTROLLERS,
                name=resource,
                content=_dump({"resource": resource, "operations": operations}),
            )
        )
        artifacts.append(
            PlannedArtifact(
                kind=ArtifactKind.DECORATORS,
                name=resource,
                content=_dump(
                    {"resource": resource, "decorators": [o["operationName"] for o in operations]}
                ),
            )
        )
    return artifacts
