"""Report writers: ``RELATIONSHIPS.json`` and ``GRAPH.md``."""

from specir.reports.graph import (
    render_graph_markdown,
    render_mermaid,
    write_graph_markdown,
)
from specir.reports.relationships import (
    EXPORT_VERSION,
    build_relationships_export,
    write_relationships_json,
)

__all__ = [
    "EXPORT_VERSION",
    "build_relationships_export",
    "render_graph_markdown",
    "render_mermaid",
    "write_graph_markdown",
    "write_relationships_json",
]
