"""Human- and machine-readable validation reports.

Three renderings of the same :class:`~specir.models.ValidationResult`:

* :func:`format_validation_report` -- plain text, for ``--plain`` and logs.
* :func:`render_validation_report` -- Rich tables on a console.
* :func:`validation_report_json` -- a JSON-serialisable dict.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table

from specir.models import ValidationIssue, ValidationResult, ValidationSeverity

_ICONS = {
    ValidationSeverity.ERROR: "✗",
    ValidationSeverity.WARNING: "⚠",
    ValidationSeverity.INFO: "ℹ",
}

_STYLES = {
    ValidationSeverity.ERROR: "red",
    ValidationSeverity.WARNING: "yellow",
    ValidationSeverity.INFO: "blue",
}


def format_issue(issue: ValidationIssue) -> str:
    """Format one issue as an indented plain-text block."""
    lines = [f"{_ICONS[issue.severity]} {issue.message}"]
    lines.append(f"  Location: {issue.location}")
    if issue.suggestion:
        lines.append(f"  Suggestion: {issue.suggestion}")
    if issue.code:
        lines.append(f"  Code: {issue.code}")
    return "\n".join(lines)


def report_tips(result: ValidationResult) -> list[str]:
    """Next-step hints shown under a report with errors or warnings."""
    tips: list[str] = []
    if result.warnings:
        tips.append("Run with --strict to treat warnings as errors")
    if result.errors:
        tips.append("Use --recovery skip to leave out invalid schemas and continue")
    return tips


def format_validation_report(result: ValidationResult) -> str:
    """Render *result* as plain text: summary, errors, warnings, tips.

    Example::

        print(format_validation_report(validate(document)))
    """
    summary = result.summary
    lines = [
        "Validation Summary",
        f"  Schemas validated:     {summary.schemas_validated}",
        f"  Operations validated:  {summary.operations_validated}",
    ]
    if summary.errors_found:
        lines.append(f"  Errors:                {summary.errors_found}")
    if summary.warnings_found:
        lines.append(f"  Warnings:              {summary.warnings_found}")
    if summary.info_found:
        lines.append(f"  Info:                  {summary.info_found}")

    for title, issues in (("Errors", result.errors), ("Warnings", result.warnings)):
        if issues:
            lines.append("")
            lines.append(f"{title} ({len(issues)}):")
            for issue in issues:
                lines.append("")
                lines.extend(f"  {line}" for line in format_issue(issue).splitlines())

    tips = report_tips(result)
    if tips:
        lines.append("")
        lines.append("Tips:")
        lines.extend(f"  - {tip}" for tip in tips)
    return "\n".join(lines)


def render_validation_report(
    result: ValidationResult, console: Console, show_info: bool = False
) -> None:
    """Print *result* to *console* as Rich tables.

    Args:
        result: The validation result.
        console: Target console (normally stdout).
        show_info: Include info-level issues in the table.
    """
    summary = result.summary
    status = "[green]valid[/green]" if result.valid else "[bold red]invalid[/bold red]"
    console.print(
        f"[bold]Validation Summary[/bold]: {status} -- "
        f"{summary.schemas_validated} schemas, "
        f"{summary.operations_validated} operations, "
        f"[red]{summary.errors_found} errors[/red], "
        f"[yellow]{summary.warnings_found} warnings[/yellow], "
        f"[blue]{summary.info_found} info[/blue]"
    )

    issues = [*result.errors, *result.warnings]
    if show_info:
        issues.extend(result.info)
    if not issues:
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("", width=2)
    table.add_column("Code")
    table.add_column("Location", overflow="fold")
    table.add_column("Message", overflow="fold")
    table.add_column("Suggestion", overflow="fold", style="dim")
    for issue in issues:
        style = _STYLES[issue.severity]
        table.add_row(
            f"[{style}]{_ICONS[issue.severity]}[/{style}]",
            issue.code or "-",
            issue.location,
            issue.message,
            issue.suggestion or "",
        )
    console.print(table)

    for tip in report_tips(result):
        console.print(f"[dim]→ {tip}[/dim]")


def validation_report_json(result: ValidationResult) -> dict[str, Any]:
    """Return *result* as a JSON-serialisable dict."""
    return result.model_dump(mode="json")
