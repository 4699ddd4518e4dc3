"""Infer entity relationships from an OpenAPI document.

Three detectors look at the document independently:

* **schema-ref** reads ``$ref`` properties of each top-level schema;
* **naming-pattern** reads foreign-key style property names (``petId``,
  ``tag_ids``);
* **path-pattern** reads nested resource paths (``/users/{id}/orders``).

Each returns a flat list of single-evidence relationships. The lists are
merged on ``(source, target, type)``; agreement between detectors raises the
confidence of the merged edge. Every pass is a single walk over declared
schemas or paths, and references are never followed, so cyclic documents
are handled without special casing.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from specir.models import (
    Confidence,
    Endpoint,
    Entity,
    Evidence,
    EvidenceSource,
    Relationship,
    RelationshipGraph,
    RelationshipType,
)
from specir.naming.casing import is_plural, pascal_case, singularize
from specir.naming.convention import normalize_operation_name
from specir.parser.extractor import iter_operations, operation_schema_refs
from specir.parser.guards import composite_keyword, is_array_schema, is_reference
from specir.parser.refs import ref_target

logger = logging.getLogger(__name__)

_FOREIGN_KEY_RE = re.compile(r"^(?P<base>.+?)(?:Id|_id|ID)$")
_FOREIGN_KEYS_RE = re.compile(r"^(?P<base>.+?)(?:Ids|_ids|IDs)$")
_SEPARATORS_RE = re.compile(r"[_\-\s]")

_BASE_CONFIDENCE = {
    EvidenceSource.SCHEMA_REF: Confidence.MEDIUM,
    EvidenceSource.PATH_PATTERN: Confidence.MEDIUM,
    EvidenceSource.NAMING_PATTERN: Confidence.LOW,
}


class EntityIndex:
    """Case- and separator-insensitive lookup of known entity names."""

    def __init__(self, names: list[str]) -> None:
        self._names = list(names)
        self._known = set(self._names)
        self._by_key: dict[str, str] = {}
        for name in names:
            self._by_key.setdefault(self.key(name), name)

    @staticmethod
    def key(text: str) -> str:
        return _SEPARATORS_RE.sub("", text).lower()

    def __contains__(self, name: object) -> bool:
        return name in self._known

    def __iter__(self):
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def lookup(self, text: str) -> Optional[str]:
        """Return the entity *text* names, trying its singular form second."""
        if not text:
            return None
        found = self._by_key.get(self.key(text))
        if found is None:
            found = self._by_key.get(self.key(singularize(text)))
        return found


def _schemas(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        return {}
    components = document.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, dict) else {}


def _properties(schema: Any) -> dict[str, Any]:
    if not isinstance(schema, dict):
        return {}
    props = schema.get("properties")
    return props if isinstance(props, dict) else {}


def _single_ref(prop: Any) -> Optional[str]:
    """Target of a direct reference, or of the only reference in a composite."""
    if is_reference(prop):
        return ref_target(prop)
    keyword = composite_keyword(prop)
    if keyword is None:
        return None
    targets = [ref_target(branch) for branch in prop[keyword] if is_reference(branch)]
    targets = [t for t in targets if t]
    return targets[0] if len(targets) == 1 else None


def _is_foreign_key(prop_name: str) -> bool:
    return bool(_FOREIGN_KEY_RE.match(prop_name)) and not _FOREIGN_KEYS_RE.match(prop_name)


def _has_many_back(schemas: dict[str, Any], target: str, source: str) -> bool:
    """Return True if *target* declares an array of references to *source*."""
    for prop in _properties(schemas.get(target)).values():
        if is_array_schema(prop) and ref_target(prop.get("items")) == source:
            return True
    return False


def _edge(
    source: str,
    target: str,
    rel_type: RelationshipType,
    evidence_source: EvidenceSource,
    location: str,
    details: str,
) -> Relationship:
    return Relationship(
        source_entity=source,
        target_entity=target,
        type=rel_type,
        confidence=_BASE_CONFIDENCE[evidence_source],
        detected_by=[evidence_source],
        evidence=[Evidence(source=evidence_source, location=location, details=details)],
    )


def detect_schema_ref_relationships(
    document: Any, entities: EntityIndex
) -> list[Relationship]:
    """Relationships implied by ``$ref`` properties.

    An array of references is ``hasMany``. A scalar reference is
    ``belongsTo`` when the property is named like a foreign key or the
    target holds a to-many reference back, and ``hasOne`` otherwise.
    """
    schemas = _schemas(document)
    found: list[Relationship] = []
    for name, schema in schemas.items():
        source = str(name)
        for prop_name, prop in _properties(schema).items():
            prop_name = str(prop_name)
            location = f"components.schemas.{source}.properties.{prop_name}"

            if is_array_schema(prop):
                target = _single_ref(prop.get("items"))
                rel_type = RelationshipType.HAS_MANY
                details = f"Array of references to {target}"
                location = f"{location}.items"
            else:
                target = _single_ref(prop)
                if target is None:
                    continue
                if _is_foreign_key(prop_name) or _has_many_back(schemas, target, source):
                    rel_type = RelationshipType.BELONGS_TO
                    details = f"Foreign-key reference to {target}"
                else:
                    rel_type = RelationshipType.HAS_ONE
                    details = f"Direct reference to {target}"

            if target is None:
                continue
            if target not in entities:
                logger.debug("Dropping reference to unknown schema %r at %s", target, location)
                continue
            found.append(
                _edge(source, target, rel_type, EvidenceSource.SCHEMA_REF, location, details)
            )
    return found


def detect_naming_pattern_relationships(
    document: Any, entities: EntityIndex
) -> list[Relationship]:
    """Relationships implied by ``<entity>Id`` and ``<entity>Ids`` property names."""
    found: list[Relationship] = []
    for name, schema in _schemas(document).items():
        source = str(name)
        for prop_name in _properties(schema):
            prop_name = str(prop_name)
            many = _FOREIGN_KEYS_RE.match(prop_name)
            one = None if many else _FOREIGN_KEY_RE.match(prop_name)
            match = many or one
            if match is None:
                continue

            target = entities.lookup(match.group("base"))
            if target is None:
                logger.debug(
                    "Property %s.%s names no known entity", source, prop_name
                )
                continue
            rel_type = RelationshipType.HAS_MANY if many else RelationshipType.BELONGS_TO
            found.append(
                _edge(
                    source,
                    target,
                    rel_type,
                    EvidenceSource.NAMING_PATTERN,
                    f"components.schemas.{source}.properties.{prop_name}",
                    f'Property "{prop_name}" follows the '
                    f'{"plural" if many else "singular"} foreign-key naming pattern',
                )
            )
    return found


def _is_param(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


def detect_path_pattern_relationships(
    document: Any, entities: EntityIndex
) -> list[Relationship]:
    """Relationships implied by nested paths.

    Every ``/<parent>/{param}/<child>`` run in a path is one edge: a plural
    child segment gives ``hasMany``, a singular one ``hasOne``.
    """
    found: list[Relationship] = []
    paths = document.get("paths") if isinstance(document, dict) else None
    if not isinstance(paths, dict):
        return found

    for path in paths:
        path = str(path)
        segments = [s for s in path.split("/") if s]
        for i in range(len(segments) - 2):
            parent_seg, param, child_seg = segments[i : i + 3]
            if _is_param(parent_seg) or not _is_param(param) or _is_param(child_seg):
                continue
            parent = entities.lookup(pascal_case(singularize(parent_seg)))
            child = entities.lookup(pascal_case(singularize(child_seg)))
            if parent is None or child is None:
                logger.debug("Path %s: %s/%s are not known entities", path, parent_seg, child_seg)
                continue
            rel_type = (
                RelationshipType.HAS_MANY if is_plural(child_seg) else RelationshipType.HAS_ONE
            )
            found.append(
                _edge(
                    parent,
                    child,
                    rel_type,
                    EvidenceSource.PATH_PATTERN,
                    f"paths.{path}",
                    f"Nested path: {parent} {rel_type.value} {child}",
                )
            )
    return found


def merge_relationships(detections: list[Relationship]) -> list[Relationship]:
    """Merge detections sharing ``(source, target, type)``.

    ``detected_by`` keeps each source once in first-seen order and evidence
    lists are concatenated. Two or more sources give high confidence; a lone
    schema-ref or path-pattern source gives medium and a lone naming-pattern
    source low.
    """
    grouped: dict[tuple[str, str, RelationshipType], tuple[list, list]] = {}
    for rel in detections:
        key = (rel.source_entity, rel.target_entity, rel.type)
        sources, evidence = grouped.setdefault(key, ([], []))
        for source in rel.detected_by:
            if source not in sources:
                sources.append(source)
        evidence.extend(rel.evidence)

    merged: list[Relationship] = []
    for (source, target, rel_type), (sources, evidence) in grouped.items():
        if len(sources) >= 2:
            confidence = Confidence.HIGH
        else:
            confidence = _BASE_CONFIDENCE[sources[0]]
        merged.append(
            Relationship(
                source_entity=source,
                target_entity=target,
                type=rel_type,
                confidence=confidence,
                detected_by=sources,
                evidence=evidence,
            )
        )
    return merged


def _attribute_endpoints(document: Any, entities: EntityIndex) -> dict[str, list[Endpoint]]:
    endpoints: dict[str, list[Endpoint]] = {name: [] for name in entities}
    for op in iter_operations(document):
        if not isinstance(op.operation, dict):
            continue
        owner = next(
            (n for n in operation_schema_refs(op.operation, op.path_item) if n in entities),
            None,
        )
        if owner is None:
            for segment in op.path.split("/"):
                if segment and not _is_param(segment):
                    owner = entities.lookup(pascal_case(singularize(segment)))
                    if owner is not None:
                        break
        if owner is None:
            logger.debug("No entity for %s %s, endpoint dropped", op.method.upper(), op.path)
            continue

        operation_id = op.operation.get("operationId")
        summary = op.operation.get("summary")
        endpoints[owner].append(
            Endpoint(
                method=op.method.upper(),
                path=op.path,
                operation_id=operation_id if isinstance(operation_id, str) else None,
                operation_name=(
                    normalize_operation_name(operation_id)
                    if isinstance(operation_id, str)
                    else None
                ),
                summary=summary if isinstance(summary, str) else None,
            )
        )
    return endpoints


class RelationshipDetector:
    """Build a :class:`~specir.models.RelationshipGraph` from a document.

    The detector holds no state between calls; each :meth:`analyze` builds a
    fresh graph.

    Example::

        graph = RelationshipDetector().analyze(document)
        for rel in graph.relationships:
            print(rel.source_entity, rel.type.value, rel.target_entity)
    """

    def analyze(self, document: Any) -> RelationshipGraph:
        """Analyze *document*. A non-mapping input yields an empty graph."""
        if not isinstance(document, dict):
            return RelationshipGraph()

        entities = EntityIndex([str(name) for name in _schemas(document)])
        detections = [
            *detect_schema_ref_relationships(document, entities),
            *detect_naming_pattern_relationships(document, entities),
            *detect_path_pattern_relationships(document, entities),
        ]
        relationships = merge_relationships(detections)
        endpoints = _attribute_endpoints(document, entities)

        info = document.get("info") if isinstance(document.get("info"), dict) else {}
        title = info.get("title")
        version = info.get("version")
        return RelationshipGraph(
            entities={
                name: Entity(
                    name=name,
                    endpoints=endpoints[name],
                    relationships=[r for r in relationships if r.source_entity == name],
                )
                for name in entities
            },
            relationships=relationships,
            spec_title=title if isinstance(title, str) else None,
            spec_version=str(version) if version is not None else None,
        )


def analyze(document: Any) -> RelationshipGraph:
    """Shortcut for ``RelationshipDetector().analyze(document)``."""
    return RelationshipDetector().analyze(document)
