"""Load OpenAPI documents from a URL, local file, or stdin.

All I/O needed before analysis lives here. Documents may be JSON or YAML;
the format is picked from the file extension or ``Content-Type`` header and
falls back to trying JSON first, then YAML.

Public functions:

* :func:`load_spec` -- read and parse a document from any supported source.
* :func:`validate_openapi_version` -- return the ``openapi`` version string,
  rejecting Swagger 2.x and non-3.x documents.
* :func:`load_document` -- both of the above in one call.

The returned dict is handed unchanged to :func:`~specir.validation.validate`,
:func:`~specir.analysis.analyze` and
:func:`~specir.pipeline.build_entity_mappings`. No ``$ref`` is inlined; the
analysis modules stop at reference boundaries.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specir.exceptions import SpecParseError

_JSON_SUFFIXES = frozenset({".json"})
_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from a URL, file path, or stdin (``-``).

    Args:
        source: An ``http(s)://`` URL, a file path, or ``-`` for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be read or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source)
    return _load_from_file(source)


def load_document(source: str) -> tuple[dict[str, Any], str]:
    """Load a document and check its OpenAPI version.

    Returns:
        A ``(document, openapi_version)`` tuple.

    Raises:
        SpecParseError: If loading fails or the version is unsupported.
    """
    document = load_spec(source)
    return document, validate_openapi_version(document)


def _load_from_stdin() -> dict[str, Any]:
    """Read and parse a document from stdin."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")
    return _parse_content(content)


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document over HTTP(S).

    Raises:
        SpecParseError: On non-2xx responses, network failures, or
            unparseable content.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    return _parse_content(response.text, hint=_hint_from_content_type(content_type))


def _load_from_file(path: str) -> dict[str, Any]:
    """Read a document from disk, using the extension as a format hint."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")
    return _parse_content(content, hint=_hint_from_suffix(file_path.suffix))


def _hint_from_suffix(suffix: str) -> str:
    suffix = suffix.lower()
    if suffix in _JSON_SUFFIXES:
        return "json"
    if suffix in _YAML_SUFFIXES:
        return "yaml"
    return ""


def _hint_from_content_type(content_type: str) -> str:
    if "json" in content_type:
        return "json"
    if "yaml" in content_type or "yml" in content_type:
        return "yaml"
    return ""


def _ensure_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML.

    JSON is tried first unless *hint* is ``"yaml"``; a ``"json"`` hint
    disables the YAML fallback.

    Raises:
        SpecParseError: If neither parser accepts the content, or the
            top-level value is not a mapping.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _ensure_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _ensure_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError(
        "Failed to parse spec as JSON or YAML" + "".join(f"\n  {e}" for e in errors)
    )


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Return the document's OpenAPI version if it is 3.x.

    Args:
        spec: The parsed document.

    Returns:
        The version string, e.g. ``"3.0.3"`` or ``"3.1.0"``.

    Raises:
        SpecParseError: For Swagger 2.x, a missing ``openapi`` field, or a
            non-3.x version.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.0.x and 3.1.x are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    version = spec.get("openapi")
    if version is None:
        raise SpecParseError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. "
            "Only OpenAPI 3.0.x and 3.1.x are supported."
        )
    return version_str
