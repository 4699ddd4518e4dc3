"""Helpers for building and transforming :class:`~specir.models.ValidationResult`."""

from __future__ import annotations

from typing import Optional

from specir.models import (
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    ValidationSummary,
)


def report(
    result: ValidationResult,
    severity: ValidationSeverity,
    message: str,
    location: str,
    suggestion: Optional[str] = None,
    code: Optional[str] = None,
) -> None:
    """Create an issue and file it on *result*."""
    result.add_issue(
        ValidationIssue(
            severity=severity,
            message=message,
            location=location,
            suggestion=suggestion,
            code=code,
        )
    )


def promote_warnings(result: ValidationResult) -> ValidationResult:
    """Return a copy of *result* with every warning turned into an error.

    This is the whole of strict mode: a single pass after validation. The
    warning bucket of the returned result is always empty, its error count
    is never lower than the input's, and ``valid`` is re-derived.
    """
    promoted = [
        issue.model_copy(update={"severity": ValidationSeverity.ERROR})
        for issue in result.warnings
    ]
    errors = [*(i.model_copy() for i in result.errors), *promoted]
    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=[],
        info=[i.model_copy() for i in result.info],
        summary=ValidationSummary(
            schemas_validated=result.summary.schemas_validated,
            operations_validated=result.summary.operations_validated,
            errors_found=len(errors),
            warnings_found=0,
            info_found=len(result.info),
        ),
    )
