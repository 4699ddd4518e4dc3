"""``specir types`` -- show the DTO type mappings for each schema."""

from __future__ import annotations

from typing import Optional

import typer

from specir.commands.common import exit_on_error, load_config, load_source
from specir.exceptions import InvalidUsageError
from specir.models import RecoveryStrategy, TypeMapping
from specir.output import OutputFormat, get_output, warning
from specir.pipeline import build_entity_mappings


def _constraint_summary(mapping: TypeMapping) -> str:
    parts = []
    for constraint in mapping.constraints:
        text = constraint.kind.value
        if constraint.args:
            text += "(" + ", ".join(str(a) for a in constraint.args) + ")"
        if constraint.each:
            text += "[each]"
        parts.append(text)
    return " ".join(parts)


def types_command(
    spec: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
    entity: Optional[str] = typer.Option(
        None, "--entity", "-e", help="Only show this schema."
    ),
    recovery: Optional[RecoveryStrategy] = typer.Option(
        None, "--recovery", case_sensitive=False,
        help="What to do with schemas that fail validation.",
    ),
) -> None:
    """Map every schema to a typed DTO description.

    Example::

        specir types petstore.yaml --entity Pet
        specir --json types petstore.yaml --recovery skip
    """
    document = load_source(spec)
    config = load_config(recovery=recovery.value if recovery else None)

    with exit_on_error():
        mappings, outcome = build_entity_mappings(
            document, strategy=config.generation.recovery_strategy
        )
        if entity is not None:
            mappings = [m for m in mappings if entity in (m.name, m.class_name)]
            if not mappings:
                raise InvalidUsageError(f"No schema named '{entity}'")

    for message in outcome.warnings:
        warning(message)

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_response([m.model_dump(mode="json") for m in mappings])
        return

    for mapping in mappings:
        title = mapping.class_name
        if mapping.extends:
            title += f" extends {', '.join(mapping.extends)}"
        output.print_table(
            ["Property", "Type", "Required", "Constraints"],
            [
                [
                    prop.name,
                    prop.mapping.type_expression,
                    "yes" if prop.required else "",
                    _constraint_summary(prop.mapping),
                ]
                for prop in mapping.properties
            ],
            title=title,
        )
