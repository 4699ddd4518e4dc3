"""Specification validator: one pass over the document, issues as data.

The pass runs in a fixed order so that issue lists are deterministic:

1. top-level fields (``openapi``, ``info.title``, ``info.version``);
2. ``components.schemas`` -- structure, reference integrity, name checks;
3. ``paths`` -- path format, operation structure, operationId presence,
   format and uniqueness, and references used by operations.

Strict mode is applied afterwards by
:func:`~specir.validation.result.promote_warnings`.
"""

from __future__ import annotations

from typing import Any, Optional

from specir.models import ValidationResult, ValidatorConfig
from specir.parser.extractor import HTTP_METHODS, iter_paths
from specir.validation import rules
from specir.validation.result import promote_warnings, report


class SpecValidator:
    """Validate OpenAPI documents against the rules code generation relies on.

    Args:
        config: Which checks to run. Defaults to all checks, non-strict.

    Example::

        validator = SpecValidator(ValidatorConfig(strict=True))
        result = validator.validate(document)
        if not result.valid:
            for issue in result.errors:
                print(issue.location, issue.message)
    """

    def __init__(self, config: Optional[ValidatorConfig] = None) -> None:
        self._config = config or ValidatorConfig()

    @property
    def config(self) -> ValidatorConfig:
        return self._config

    def validate(self, document: Any) -> ValidationResult:
        """Validate *document* and return every issue found.

        Never raises; a non-mapping document is reported as missing its
        required fields.
        """
        result = ValidationResult()
        doc = document if isinstance(document, dict) else {}

        rules.check_required_fields(doc, result)
        schema_names = self._validate_schemas(doc, result)
        self._validate_paths(doc, schema_names, result)

        if self._config.strict:
            return promote_warnings(result)
        return result

    def _validate_schemas(self, doc: dict[str, Any], result: ValidationResult) -> set[str]:
        components = doc.get("components")
        if not isinstance(components, dict) or "schemas" not in components:
            return set()
        schemas = components["schemas"]
        if not isinstance(schemas, dict):
            report(
                result, rules.ERROR, "components.schemas must be a mapping",
                "components.schemas", code="INVALID_SCHEMA",
            )
            return set()

        names = {str(name) for name in schemas}
        seen: set[int] = set()
        for name, schema in schemas.items():
            name = str(name)
            location = f"components.schemas.{name}"
            result.summary.schemas_validated += 1

            rules.check_schema(schema, location, result, seen)
            if self._config.check_references:
                rules.check_references(schema, location, names, result)
            rules.check_schema_name(name, result, self._config.check_name_conflicts)
        return names

    def _validate_paths(
        self, doc: dict[str, Any], schema_names: set[str], result: ValidationResult
    ) -> None:
        seen_ids: dict[str, str] = {}

        for path, path_item in iter_paths(doc):
            rules.check_path(path, result)
            if not isinstance(path_item, dict):
                continue
            rules.check_parameters(path_item.get("parameters"), f"paths.{path}", result)
            if self._config.check_references:
                for node_location, schema in rules.parameter_schema_nodes(
                    path_item.get("parameters"), f"paths.{path}"
                ):
                    rules.check_references(schema, node_location, schema_names, result)

            for method in HTTP_METHODS:
                if method not in path_item:
                    continue
                location = f"paths.{path}.{method}"
                operation = path_item[method]
                result.summary.operations_validated += 1

                if not rules.check_operation(operation, location, result):
                    continue
                if self._config.check_operation_ids:
                    rules.check_operation_id(operation, location, seen_ids, result)
                if self._config.check_references:
                    for node_location, schema in rules.operation_schema_nodes(
                        operation, location
                    ):
                        rules.check_references(schema, node_location, schema_names, result)


def validate(document: Any, config: Optional[ValidatorConfig] = None) -> ValidationResult:
    """Validate *document* with *config* (all checks, non-strict by default)."""
    return SpecValidator(config).validate(document)
