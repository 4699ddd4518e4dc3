"""specir -- Analyse OpenAPI 3.0/3.1 specs into a code-generation IR.

This package turns an OpenAPI document into a language-neutral intermediate
representation from which server boilerplate (DTO classes with validation
annotations, controllers, endpoint decorators) can be emitted mechanically.

Typical workflow::

    specir validate openapi.yaml        # structural checks, severity report
    specir analyze openapi.yaml --out docs/   # relationship graph
    specir types openapi.yaml --entity Pet    # per-property type mappings

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    pipeline: Recovery strategies and per-entity type mappings.
"""

__version__ = "0.1.0"
