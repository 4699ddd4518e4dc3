"""``specir naming`` -- classify operationIds and show normalized names."""

from __future__ import annotations

import typer

from specir.commands.common import load_source
from specir.naming import detect_convention
from specir.output import get_output, warning
from specir.parser import iter_operations


def naming_command(
    spec: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
) -> None:
    """Show the naming convention and normalized method name of every operation.

    Example::

        specir naming petstore.yaml
    """
    document = load_source(spec)

    rows: list[list[str]] = []
    for op in iter_operations(document):
        raw = op.operation.get("operationId") if isinstance(op.operation, dict) else None
        result = detect_convention(raw)
        for message in result.warnings:
            warning(f"{op.method.upper()} {op.path}: {message}")
        rows.append(
            [
                op.method.upper(),
                op.path,
                raw if isinstance(raw, str) else "-",
                result.convention.value,
                result.operation_name,
                "yes" if result.was_sanitized else "",
            ]
        )

    get_output().print_table(
        ["Method", "Path", "operationId", "Convention", "Name", "Sanitized"],
        rows,
        title=f"Operations ({len(rows)})",
    )
