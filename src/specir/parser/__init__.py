"""OpenAPI document loading and raw-node helpers.

Public API:
    :func:`load_spec`: Load a document from a URL, file, or stdin.
    :func:`load_document`: Load a document and check its version.
    :func:`validate_openapi_version`: Check the ``openapi`` version string.
    :func:`iter_operations`: Walk every ``(path, method)`` operation.
"""

from specir.parser.extractor import OperationRef, iter_operations
from specir.parser.loader import load_document, load_spec, validate_openapi_version

__all__ = [
    "OperationRef",
    "iter_operations",
    "load_document",
    "load_spec",
    "validate_openapi_version",
]
