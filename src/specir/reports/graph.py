"""Mermaid rendering of a relationship graph (``GRAPH.md``)."""

from __future__ import annotations

from pathlib import Path

from specir.config import atomic_write
from specir.models import RelationshipGraph

GRAPH_FILENAME = "GRAPH.md"

_ENTITY_STYLE = (
    "classDef entityStyle fill:#4A90E2,stroke:#2E5C8A,stroke-width:2px,"
    "color:#fff,font-weight:bold"
)


def _node_id(name: str) -> str:
    return "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in name)


def mutual_pairs(graph: RelationshipGraph) -> list[tuple[str, str]]:
    """Return entity pairs with edges in both directions, each pair once.

    Self-references are not mutual pairs.
    """
    edges = {(r.source_entity, r.target_entity) for r in graph.relationships}
    pairs: list[tuple[str, str]] = []
    seen: set[frozenset[str]] = set()
    for rel in graph.relationships:
        a, b = rel.source_entity, rel.target_entity
        key = frozenset((a, b))
        if a != b and (b, a) in edges and key not in seen:
            seen.add(key)
            pairs.append((a, b))
    return pairs


def render_mermaid(graph: RelationshipGraph) -> str:
    """Render *graph* as a Mermaid ``graph LR`` flowchart.

    Mutual pairs are drawn once as ``A <-->|mutual| B``; every other edge
    is drawn as ``A -->|type| B``.
    """
    lines = ["graph LR", ""]
    for name in graph.entities:
        lines.append(f'  {_node_id(name)}["{name}"]:::entityStyle')
    if graph.entities:
        lines.append("")

    pairs = mutual_pairs(graph)
    paired = {frozenset(p) for p in pairs}
    for a, b in pairs:
        lines.append(f"  {_node_id(a)} <-->|mutual| {_node_id(b)}")
    if pairs:
        lines.append("")

    drawn: set[tuple[str, str, str]] = set()
    for rel in graph.relationships:
        if frozenset((rel.source_entity, rel.target_entity)) in paired:
            continue
        edge = (rel.source_entity, rel.target_entity, rel.type.value)
        if edge in drawn:
            continue
        drawn.add(edge)
        lines.append(
            f"  {_node_id(rel.source_entity)} -->|{rel.type.value}| {_node_id(rel.target_entity)}"
        )
    if drawn:
        lines.append("")

    lines.append(f"  {_ENTITY_STYLE}")
    return "\n".join(lines)


def render_summary_table(graph: RelationshipGraph) -> str:
    """Markdown table of endpoint and relationship counts per entity."""
    in_pair = {name for pair in mutual_pairs(graph) for name in pair}
    lines = [
        "| Entity | Endpoints | Relationships | Bidirectional |",
        "|--------|-----------|---------------|---------------|",
    ]
    for name, entity in sorted(graph.entities.items()):
        lines.append(
            f"| {name} | {len(entity.endpoints)} | {len(entity.relationships)} | "
            f"{'Yes' if name in in_pair else 'No'} |"
        )
    return "\n".join(lines)


def render_graph_markdown(graph: RelationshipGraph) -> str:
    """Render the full ``GRAPH.md`` document: header, diagram, summary table."""
    lines = ["# Entity Relationship Graph", ""]
    if graph.spec_title:
        source = f"Generated from: **{graph.spec_title}**"
        if graph.spec_version:
            source += f" v{graph.spec_version}"
        lines.extend([source, ""])
    lines.extend(
        [
            "## Mermaid Diagram",
            "",
            "```mermaid",
            render_mermaid(graph),
            "```",
            "",
            "## Entity Summary",
            "",
            render_summary_table(graph),
            "",
        ]
    )
    return "\n".join(lines)


def write_graph_markdown(graph: RelationshipGraph, out_dir: Path) -> Path:
    """Write ``GRAPH.md`` into *out_dir* and return its path."""
    path = Path(out_dir) / GRAPH_FILENAME
    atomic_write(path, render_graph_markdown(graph))
    return path
