"""Specification validator.

Public API:
    :func:`validate`, :class:`SpecValidator`: run all checks over a document.
    :func:`promote_warnings`: the strict-mode transform.
    :func:`format_validation_report`, :func:`render_validation_report`,
    :func:`validation_report_json`: report renderings.
"""

from specir.validation.formatter import (
    format_validation_report,
    render_validation_report,
    validation_report_json,
)
from specir.validation.result import promote_warnings
from specir.validation.validator import SpecValidator, validate

__all__ = [
    "SpecValidator",
    "format_validation_report",
    "promote_warnings",
    "render_validation_report",
    "validate",
    "validation_report_json",
]
