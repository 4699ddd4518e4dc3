"""``specir analyze`` -- infer entities and relationships."""

from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import Optional

import typer

from specir.analysis import analyze
from specir.commands.common import exit_on_error, load_source
from specir.output import OutputFormat, get_output, info, success
from specir.reports import (
    build_relationships_export,
    render_graph_markdown,
    write_graph_markdown,
    write_relationships_json,
)


class AnalyzeFormat(str, enum.Enum):
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


def analyze_command(
    spec: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
    format: AnalyzeFormat = typer.Option(
        AnalyzeFormat.TABLE, "--format", "-f", case_sensitive=False,
        help="table, json (RELATIONSHIPS.json shape) or markdown (GRAPH.md).",
    ),
    out: Optional[Path] = typer.Option(
        None, "--out", help="Also write RELATIONSHIPS.json and GRAPH.md to this directory."
    ),
) -> None:
    """Detect entity relationships from $refs, property names and paths.

    Example::

        specir analyze petstore.yaml
        specir analyze petstore.yaml --format markdown --out docs/
    """
    document = load_source(spec)
    graph = analyze(document)
    output = get_output()

    if output.format == OutputFormat.JSON:
        output.format_response(build_relationships_export(graph))
    elif format == AnalyzeFormat.JSON:
        output.print_data(
            json.dumps(build_relationships_export(graph), indent=2, ensure_ascii=False)
        )
    elif format == AnalyzeFormat.MARKDOWN:
        output.print_data(render_graph_markdown(graph))
    else:
        output.print_table(
            ["Entity", "Endpoints", "Relationships"],
            [
                [name, str(len(entity.endpoints)), str(len(entity.relationships))]
                for name, entity in graph.entities.items()
            ],
            title=f"Entities ({len(graph.entities)})",
        )
        if graph.relationships:
            output.print_table(
                ["Source", "Type", "Target", "Confidence", "Detected by"],
                [
                    [
                        rel.source_entity,
                        rel.type.value,
                        rel.target_entity,
                        rel.confidence.value,
                        ", ".join(s.value for s in rel.detected_by),
                    ]
                    for rel in graph.relationships
                ],
                title=f"Relationships ({len(graph.relationships)})",
            )
        else:
            info("No relationships detected.")

    if out is not None:
        with exit_on_error():
            json_path = write_relationships_json(graph, out)
            graph_path = write_graph_markdown(graph, out)
        success(f"Wrote {json_path} and {graph_path}")
