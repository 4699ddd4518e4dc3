"""Decide where generated artifacts go on disk.

Two layouts are supported:

* ``type-based`` groups files by artifact kind: ``<root>/dtos/pet.dto.ts``;
* ``domain-based`` groups them by resource first:
  ``<root>/pet/dtos/pet.dto.ts``.

Only paths differ between the layouts; :func:`plan_artifacts` produces the
same set of contents for either.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Union

from specir.models import (
    ArtifactKind,
    GenerationConfig,
    OutputStructure,
    PlannedArtifact,
    PlannedFile,
)
from specir.naming.casing import to_kebab_case

StructureLike = Union[GenerationConfig, OutputStructure, str]

_FILE_SUFFIXES = {
    ArtifactKind.DTOS: ".dto.ts",
    ArtifactKind.CONTROLLERS: ".controller.ts",
    ArtifactKind.DECORATORS: ".decorator.ts",
    ArtifactKind.COMMON: ".ts",
}

_TAG_SUFFIX_RE = re.compile(r"(Controller|Service|Api)$", re.IGNORECASE)


def _structure(config: StructureLike) -> OutputStructure:
    if isinstance(config, GenerationConfig):
        return config.structure
    return OutputStructure(config)


def file_name(kind: ArtifactKind, name: str) -> str:
    """Return the file name for an artifact (``pet`` + dtos -> ``pet.dto.ts``)."""
    return f"{name}{_FILE_SUFFIXES[ArtifactKind(kind)]}"


def get_directory_path(
    root: Path, kind: ArtifactKind, name: str, config: StructureLike
) -> Path:
    """Return the directory an artifact is written to.

    *name* is only used by the ``domain-based`` layout.
    """
    kind = ArtifactKind(kind)
    if _structure(config) is OutputStructure.DOMAIN_BASED:
        return Path(root) / name / kind.value
    return Path(root) / kind.value


def resolve_output_path(
    root: Path, kind: ArtifactKind, name: str, config: StructureLike
) -> Path:
    """Return the full output path of an artifact.

    Example::

        resolve_output_path(Path("generated"), ArtifactKind.DTOS, "pet",
                            OutputStructure.TYPE_BASED)
        # generated/dtos/pet.dto.ts
        resolve_output_path(Path("generated"), ArtifactKind.DTOS, "pet",
                            OutputStructure.DOMAIN_BASED)
        # generated/pet/dtos/pet.dto.ts
    """
    return get_directory_path(root, kind, name, config) / file_name(kind, name)


def extract_resource_name_from_tag(tag: str) -> str:
    """Turn an OpenAPI tag or controller name into a resource name.

    Drops a trailing ``Controller``, ``Service`` or ``Api`` and converts
    the rest to kebab-case: ``PetController`` -> ``pet``,
    ``UserStore`` -> ``user-store``.
    """
    cleaned = _TAG_SUFFIX_RE.sub("", tag.strip())
    return to_kebab_case(cleaned) or to_kebab_case(tag)


def plan_artifacts(
    artifacts: list[PlannedArtifact], root: Path, config: StructureLike
) -> list[PlannedFile]:
    """Assign an output path to every artifact that has content.

    Empty artifacts are dropped. Order is preserved.
    """
    return [
        PlannedFile(
            path=resolve_output_path(root, artifact.kind, artifact.name, config),
            kind=artifact.kind,
            name=artifact.name,
            content=artifact.content,
        )
        for artifact in artifacts
        if artifact.content
    ]
