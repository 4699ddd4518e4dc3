"""Best-effort example values for schema nodes.

Documentation annotations read better with a concrete value, so when a schema
gives none the mapper falls back to a sample derived from its ``format``.
"""

from __future__ import annotations

from typing import Any

from specir.parser.guards import is_schema

FORMAT_EXAMPLES: dict[str, str] = {
    "date-time": "2024-01-01T00:00:00Z",
    "date": "2024-01-01",
    "time": "12:00:00",
    "email": "user@example.com",
    "uuid": "00000000-0000-0000-0000-000000000000",
    "uri": "https://example.com",
    "url": "https://example.com",
    "hostname": "example.com",
    "ipv4": "192.0.2.1",
    "ipv6": "2001:db8::1",
}


def synthesize_example(node: Any) -> Any:
    """Return an example for *node*, or ``None`` when nothing sensible exists.

    Precedence: ``example``, first entry of ``examples`` (OpenAPI 3.1),
    ``default``, first ``enum`` value, then a sample for a known ``format``.
    """
    if not is_schema(node):
        return None
    if "example" in node:
        return node["example"]
    examples = node.get("examples")
    if isinstance(examples, list) and examples:
        return examples[0]
    if "default" in node:
        return node["default"]
    enum = node.get("enum")
    if isinstance(enum, list) and enum:
        return enum[0]
    fmt = node.get("format")
    if isinstance(fmt, str):
        return FORMAT_EXAMPLES.get(fmt)
    return None
