"""Machine-readable export of a relationship graph (``RELATIONSHIPS.json``).

The export is deterministic apart from ``metadata.generatedAt``: entities
are keyed in name order and relationships are sorted by source, then
target. Keys are camelCase so the file can be consumed by non-Python tools.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from specir.config import atomic_write
from specir.models import Endpoint, Relationship, RelationshipGraph

EXPORT_VERSION = "1.0.0"
RELATIONSHIPS_FILENAME = "RELATIONSHIPS.json"


def _endpoint(endpoint: Endpoint) -> dict[str, Any]:
    return {
        "method": endpoint.method,
        "path": endpoint.path,
        "operationId": endpoint.operation_id,
        "operationName": endpoint.operation_name,
        "summary": endpoint.summary,
    }


def _relationship(rel: Relationship) -> dict[str, Any]:
    return {
        "sourceEntity": rel.source_entity,
        "targetEntity": rel.target_entity,
        "type": rel.type.value,
        "confidence": rel.confidence.value,
        "detectedBy": [source.value for source in rel.detected_by],
        "evidence": [
            {"source": ev.source.value, "location": ev.location, "details": ev.details}
            for ev in rel.evidence
        ],
    }


def _sorted(relationships: list[Relationship]) -> list[Relationship]:
    return sorted(relationships, key=lambda r: (r.source_entity, r.target_entity))


def build_relationships_export(
    graph: RelationshipGraph, generated_at: Optional[datetime] = None
) -> dict[str, Any]:
    """Convert *graph* to the ``RELATIONSHIPS.json`` structure.

    Args:
        graph: Output of :func:`specir.analysis.analyze`.
        generated_at: Timestamp to record; defaults to now (UTC).

    Returns:
        A dict with ``entities``, ``relationships`` and ``metadata`` keys.
    """
    stamp = generated_at or datetime.now(timezone.utc)
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)

    entities = {
        name: {
            "name": entity.name,
            "endpoints": [_endpoint(ep) for ep in entity.endpoints],
            "relationships": [_relationship(r) for r in _sorted(entity.relationships)],
        }
        for name, entity in sorted(graph.entities.items())
    }
    return {
        "entities": entities,
        "relationships": [_relationship(r) for r in _sorted(graph.relationships)],
        "metadata": {
            "specTitle": graph.spec_title,
            "specVersion": graph.spec_version,
            "exportVersion": EXPORT_VERSION,
            "generatedAt": stamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
            "totalEntities": len(graph.entities),
            "totalRelationships": len(graph.relationships),
        },
    }


def write_relationships_json(
    graph: RelationshipGraph, out_dir: Path, generated_at: Optional[datetime] = None
) -> Path:
    """Write ``RELATIONSHIPS.json`` into *out_dir* and return its path."""
    path = Path(out_dir) / RELATIONSHIPS_FILENAME
    data = build_relationships_export(graph, generated_at)
    atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    return path
