"""``specir plan`` -- show where generated artifacts would be written."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specir.commands.common import exit_on_error, load_config, load_source
from specir.models import OutputStructure, RecoveryStrategy
from specir.output import get_output, warning
from specir.pipeline import build_entity_mappings, document_artifacts
from specir.planning import plan_artifacts


def plan_command(
    spec: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
    structure: Optional[OutputStructure] = typer.Option(
        None, "--structure", case_sensitive=False, help="Output directory layout."
    ),
    root: Optional[Path] = typer.Option(
        None, "--root", help="Output root directory (default: generation.output_dir)."
    ),
    recovery: Optional[RecoveryStrategy] = typer.Option(
        None, "--recovery", case_sensitive=False,
        help="What to do with schemas that fail validation.",
    ),
) -> None:
    """Plan the generated file layout without writing anything.

    Example::

        specir plan petstore.yaml --structure domain-based --root src/generated
    """
    document = load_source(spec)
    config = load_config(
        structure=structure.value if structure else None,
        recovery=recovery.value if recovery else None,
    )

    with exit_on_error():
        mappings, outcome = build_entity_mappings(
            document, strategy=config.generation.recovery_strategy
        )
    for message in outcome.warnings:
        warning(message)

    files = plan_artifacts(
        document_artifacts(document, mappings),
        root or Path(config.generation.output_dir),
        config.generation,
    )
    get_output().print_table(
        ["Kind", "Name", "Path"],
        [[f.kind.value, f.name, str(f.path)] for f in files],
        title=f"{config.generation.structure.value} ({len(files)} files)",
    )
