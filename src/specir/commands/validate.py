"""``specir validate`` -- check a document against the generation rules."""

from __future__ import annotations

import typer

from specir.commands.common import load_config, load_source
from specir.exit_codes import EXIT_VALIDATION_FAILURE
from specir.output import OutputFormat, get_output
from specir.validation import (
    SpecValidator,
    format_validation_report,
    render_validation_report,
    validation_report_json,
)


def validate_command(
    spec: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors."),
    no_references: bool = typer.Option(
        False, "--no-references", help="Skip $ref integrity checks."
    ),
    no_operation_ids: bool = typer.Option(
        False, "--no-operation-ids", help="Skip operationId checks."
    ),
    no_name_conflicts: bool = typer.Option(
        False, "--no-name-conflicts", help="Skip framework name conflict checks."
    ),
    show_info: bool = typer.Option(
        False, "--info", help="Include info-level issues in the report."
    ),
) -> None:
    """Validate an OpenAPI document.

    Exits with 0 when the document is valid and 8 when it has errors.

    Example::

        specir validate petstore.yaml --strict
        specir --json validate https://example.com/openapi.json
    """
    document = load_source(spec, require_version=False)
    config = load_config(strict=True if strict else None)

    validator_config = config.validation.model_copy(
        update={
            "check_references": config.validation.check_references and not no_references,
            "check_operation_ids": config.validation.check_operation_ids
            and not no_operation_ids,
            "check_name_conflicts": config.validation.check_name_conflicts
            and not no_name_conflicts,
        }
    )
    result = SpecValidator(validator_config).validate(document)

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_response(validation_report_json(result))
    elif output.format == OutputFormat.PLAIN:
        output.print_data(format_validation_report(result))
    else:
        render_validation_report(result, output.console, show_info=show_info)

    if not result.valid:
        raise typer.Exit(code=EXIT_VALIDATION_FAILURE)
