"""Output structure planner."""

from specir.planning.structure import (
    extract_resource_name_from_tag,
    file_name,
    get_directory_path,
    plan_artifacts,
    resolve_output_path,
)

__all__ = [
    "extract_resource_name_from_tag",
    "file_name",
    "get_directory_path",
    "plan_artifacts",
    "resolve_output_path",
]
