"""Tests for specir.validation.formatter."""

from __future__ import annotations

import io

from rich.console import Console

from specir.models import ValidationIssue, ValidationResult, ValidationSeverity
from specir.validation import (
    format_validation_report,
    render_validation_report,
    validation_report_json,
)
from specir.validation.formatter import format_issue, report_tips


def _result(*issues: ValidationIssue) -> ValidationResult:
    result = ValidationResult()
    result.summary.schemas_validated = 3
    result.summary.operations_validated = 2
    for issue in issues:
        result.add_issue(issue)
    return result


ERROR = ValidationIssue(
    severity=ValidationSeverity.ERROR,
    message="Array schema missing 'items' definition",
    location="components.schemas.Pet.properties.tags",
    suggestion='Array schemas must specify items: { type: "..." }',
    code="ARRAY_MISSING_ITEMS",
)
WARNING = ValidationIssue(
    severity=ValidationSeverity.WARNING,
    message="Schema missing 'type' field",
    location="components.schemas.Loose",
    code="MISSING_TYPE",
)
INFO = ValidationIssue(
    severity=ValidationSeverity.INFO,
    message="Operation missing operationId",
    location="paths./a.get",
)


class TestFormatIssue:
    """Single-issue blocks."""

    def test_full_issue(self) -> None:
        text = format_issue(ERROR)
        assert text.splitlines() == [
            "✗ Array schema missing 'items' definition",
            "  Location: components.schemas.Pet.properties.tags",
            '  Suggestion: Array schemas must specify items: { type: "..." }',
            "  Code: ARRAY_MISSING_ITEMS",
        ]

    def test_optional_fields_omitted(self) -> None:
        assert format_issue(INFO).splitlines() == [
            "ℹ Operation missing operationId",
            "  Location: paths./a.get",
        ]


class TestPlainReport:
    """format_validation_report output."""

    def test_clean_report(self) -> None:
        text = format_validation_report(_result())
        assert text.splitlines() == [
            "Validation Summary",
            "  Schemas validated:     3",
            "  Operations validated:  2",
        ]

    def test_sections_and_tips(self) -> None:
        text = format_validation_report(_result(ERROR, WARNING, INFO))
        assert "  Errors:                1" in text
        assert "  Warnings:              1" in text
        assert "  Info:                  1" in text
        assert "Errors (1):" in text
        assert "Warnings (1):" in text
        assert "  ⚠ Schema missing 'type' field" in text
        assert "Operation missing operationId" not in text
        assert text.endswith(
            "Tips:\n"
            "  - Run with --strict to treat warnings as errors\n"
            "  - Use --recovery skip to leave out invalid schemas and continue"
        )

    def test_tips(self) -> None:
        assert report_tips(_result(WARNING)) == ["Run with --strict to treat warnings as errors"]
        assert report_tips(_result(INFO)) == []


class TestRichReport:
    """render_validation_report output."""

    def _render(self, result: ValidationResult, show_info: bool = False) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, no_color=True)
        render_validation_report(result, console, show_info=show_info)
        return buffer.getvalue()

    def test_valid_summary_only(self) -> None:
        text = self._render(_result())
        assert "Validation Summary: valid" in text
        assert "Location" not in text

    def test_issue_table(self) -> None:
        text = self._render(_result(ERROR, INFO))
        assert "invalid" in text
        assert "ARRAY_MISSING_ITEMS" in text
        assert "paths./a.get" not in text
        assert "--recovery skip" in text

    def test_show_info(self) -> None:
        assert "paths./a.get" in self._render(_result(INFO), show_info=True)


class TestJsonReport:
    """validation_report_json output."""

    def test_serialisable(self) -> None:
        data = validation_report_json(_result(ERROR))
        assert data["valid"] is False
        assert data["errors"][0]["severity"] == "error"
        assert data["summary"]["errors_found"] == 1
