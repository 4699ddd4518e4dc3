"""Canonical Pydantic models shared across all specir modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ValidatorConfig`, :class:`OutputConfig`, :class:`GenerationConfig`
    and :class:`GlobalConfig`.

**Type mapping models** -- produced by :mod:`specir.mapping` for every schema
node and consumed by code emitters:
    :class:`ConstraintKind`, :class:`Constraint`, :class:`EnumDefinition`,
    :class:`EntityRef`, :class:`TypeMapping`, :class:`MappingContext`,
    :class:`PropertyMapping` and :class:`EntityMapping`.

**Validation models** -- produced by :mod:`specir.validation`:
    :class:`ValidationSeverity`, :class:`ValidationIssue`,
    :class:`ValidationSummary` and :class:`ValidationResult`.

**Analysis and planning models** -- relationship graph, naming and output
layout:
    :class:`RelationshipType`, :class:`EvidenceSource`, :class:`Confidence`,
    :class:`Evidence`, :class:`Relationship`, :class:`Endpoint`,
    :class:`Entity`, :class:`RelationshipGraph`, :class:`NamingConvention`,
    :class:`NamingConventionResult`, :class:`OutputStructure`,
    :class:`ArtifactKind`, :class:`PlannedArtifact`, :class:`PlannedFile`,
    :class:`RecoveryStrategy` and :class:`RecoveryOutcome`.

All models use Pydantic v2. The relationship graph models are frozen because a
graph is built once per analysis and only read afterwards.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class ValidatorConfig(BaseModel):
    """Switches controlling which checks :mod:`specir.validation` performs.

    Example::

        ValidatorConfig(strict=True, check_name_conflicts=False)
    """

    strict: bool = Field(
        default=False, description="Promote every warning to an error"
    )
    check_references: bool = Field(
        default=True, description="Verify that every $ref targets a defined schema"
    )
    check_operation_ids: bool = Field(
        default=True, description="Check operationId presence, format and uniqueness"
    )
    check_name_conflicts: bool = Field(
        default=True, description="Flag schema names that clash with framework names"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class OutputStructure(str, enum.Enum):
    """Directory layout used when planning generated files."""

    TYPE_BASED = "type-based"
    DOMAIN_BASED = "domain-based"


class RecoveryStrategy(str, enum.Enum):
    """How emission reacts to validation errors.

    * ``skip`` -- leave out the entities that carry errors.
    * ``fail-fast`` -- abort on the first error.
    * ``warn`` -- log every error and emit everything anyway.
    """

    SKIP = "skip"
    FAIL_FAST = "fail-fast"
    WARN = "warn"


class GenerationConfig(BaseModel):
    """Settings that shape the emitted artifacts."""

    structure: OutputStructure = Field(
        default=OutputStructure.TYPE_BASED, description="Output directory layout"
    )
    recovery_strategy: RecoveryStrategy = Field(
        default=RecoveryStrategy.WARN,
        description="Reaction to validation errors: skip, fail-fast, warn",
    )
    output_dir: str = Field(
        default="generated", description="Root directory for planned files"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specir/config.json``.

    Loaded and saved by :func:`~specir.config.load_global_config` and
    :func:`~specir.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specir.config.resolve_config`
    for the full precedence chain.
    """

    validation: ValidatorConfig = Field(default_factory=ValidatorConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Type mapping ---


class ConstraintKind(str, enum.Enum):
    """Closed set of validation annotations a property can carry.

    Emitters map each kind to one decorator or validator call of the target
    framework. The order in which constraints appear on a
    :class:`TypeMapping` is the order in which they should be emitted.
    """

    STRING_TYPE = "string-type"
    NUMERIC_TYPE = "numeric-type"
    BOOLEAN_TYPE = "boolean-type"
    ARRAY_TYPE = "array-type"
    OBJECT_TYPE = "object-type"
    PATTERN = "pattern"
    MIN_LENGTH = "min-length"
    MAX_LENGTH = "max-length"
    MIN_VALUE = "min-value"
    MAX_VALUE = "max-value"
    MIN_ITEMS = "min-items"
    MAX_ITEMS = "max-items"
    FORMAT_EMAIL = "format-email"
    FORMAT_UUID = "format-uuid"
    FORMAT_URL = "format-url"
    FORMAT_DATE_TIME = "format-date-time"
    NESTED_VALIDATE = "nested-validate"
    NESTED_TYPE = "nested-type"
    ENUM_MEMBERSHIP = "enum-membership"
    NOT_EMPTY = "not-empty"
    DEFINED = "defined"
    NULLABLE = "nullable"
    OPTIONAL = "optional"


class Constraint(BaseModel):
    """A single validation annotation with its arguments.

    ``each`` marks constraints lifted from array items; emitters apply them to
    every element rather than to the array itself.
    """

    kind: ConstraintKind
    args: list[Any] = Field(default_factory=list)
    each: bool = False


class EnumDefinition(BaseModel):
    """A named enumeration extracted from a property.

    Example::

        EnumDefinition(name="PetStatus", const_name="PET_STATUS",
                       values=["available", "sold"])
    """

    name: str
    const_name: str
    values: list[Any] = Field(default_factory=list)


class EntityRef(BaseModel):
    """Cross-reference from a mapped type to a named schema."""

    name: str = Field(description="Normalized schema name, e.g. 'ObjectDto'")
    ref: str = Field(description="Original $ref string")


class TypeMapping(BaseModel):
    """Language-neutral description of the type of one schema node.

    ``type_expression`` uses TypeScript-like syntax (``Pet[]``,
    ``'a' | 'b'``, ``string | null | undefined``) because the emitted code
    targets a TypeScript framework. ``base_type`` is the expression before
    nullability and optionality decoration (``Pet[]`` for an array of ``Pet``).
    """

    type_expression: str
    base_type: str
    is_array: bool = False
    is_nullable: bool = False
    is_optional: bool = False
    constraints: list[Constraint] = Field(default_factory=list)
    enum_definition: Optional[EnumDefinition] = None
    cross_references: list[EntityRef] = Field(default_factory=list)
    description: Optional[str] = None
    example: Any = None

    def constraint_kinds(self) -> list[ConstraintKind]:
        """Return the constraint kinds in emission order."""
        return [c.kind for c in self.constraints]

    def find(self, kind: ConstraintKind) -> Optional[Constraint]:
        """Return the first constraint of *kind*, or ``None``."""
        for constraint in self.constraints:
            if constraint.kind == kind:
                return constraint
        return None


class MappingContext(BaseModel):
    """Where a schema node sits: the owning class and the property name.

    Needed to name enum types (``Pet`` + ``status`` -> ``PetStatus``).
    """

    class_name: str
    prop_name: str


class PropertyMapping(BaseModel):
    """One property of an entity with its resolved type."""

    name: str
    required: bool = False
    mapping: TypeMapping


class EntityMapping(BaseModel):
    """The DTO intermediate representation of one named schema."""

    name: str = Field(description="Schema key in components.schemas")
    class_name: str = Field(description="Normalized class name")
    extends: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    properties: list[PropertyMapping] = Field(default_factory=list)
    enums: list[EnumDefinition] = Field(default_factory=list)


# --- Validation ---


class ValidationSeverity(str, enum.Enum):
    """How serious a validation issue is."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """A single finding of the specification validator.

    ``location`` is a dotted path into the document, for example
    ``components.schemas.Pet.properties.tags`` or ``paths./pets.get``.
    """

    severity: ValidationSeverity
    message: str
    location: str
    suggestion: Optional[str] = None
    code: Optional[str] = None


class ValidationSummary(BaseModel):
    """Counters reported alongside the issue lists."""

    schemas_validated: int = 0
    operations_validated: int = 0
    errors_found: int = 0
    warnings_found: int = 0
    info_found: int = 0


class ValidationResult(BaseModel):
    """Outcome of one validation run.

    ``valid`` is ``False`` exactly when ``errors`` is non-empty. Use
    :meth:`add_issue` to keep the counters and the flag consistent.
    """

    valid: bool = True
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    info: list[ValidationIssue] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)

    def add_issue(self, issue: ValidationIssue) -> None:
        """File *issue* under its severity and update the summary counters."""
        if issue.severity == ValidationSeverity.ERROR:
            self.errors.append(issue)
            self.summary.errors_found += 1
            self.valid = False
        elif issue.severity == ValidationSeverity.WARNING:
            self.warnings.append(issue)
            self.summary.warnings_found += 1
        else:
            self.info.append(issue)
            self.summary.info_found += 1

    @property
    def issues(self) -> list[ValidationIssue]:
        """All issues, errors first."""
        return [*self.errors, *self.warnings, *self.info]


# --- Relationships ---


class RelationshipType(str, enum.Enum):
    """Cardinality of a relationship, seen from the source entity."""

    HAS_MANY = "hasMany"
    HAS_ONE = "hasOne"
    BELONGS_TO = "belongsTo"


class EvidenceSource(str, enum.Enum):
    """Which detector produced a piece of evidence."""

    SCHEMA_REF = "schema_ref"
    NAMING_PATTERN = "naming_pattern"
    PATH_PATTERN = "path_pattern"


class Confidence(str, enum.Enum):
    """How strongly a relationship is supported by its evidence."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Evidence(BaseModel):
    """Where and why a detector saw a relationship."""

    model_config = ConfigDict(frozen=True)

    source: EvidenceSource
    location: str
    details: str


class Relationship(BaseModel):
    """A directed, typed edge between two entities."""

    model_config = ConfigDict(frozen=True)

    source_entity: str
    target_entity: str
    type: RelationshipType
    confidence: Confidence
    detected_by: list[EvidenceSource] = Field(default_factory=list)
    evidence: list[Evidence] = Field(default_factory=list)


class Endpoint(BaseModel):
    """An operation attributed to an entity."""

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    operation_id: Optional[str] = None
    operation_name: Optional[str] = None
    summary: Optional[str] = None


class Entity(BaseModel):
    """A named top-level schema with its endpoints and outgoing relationships."""

    model_config = ConfigDict(frozen=True)

    name: str
    endpoints: list[Endpoint] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)


class RelationshipGraph(BaseModel):
    """Result of relationship analysis over one document.

    ``entities`` is keyed by schema name. Every relationship's endpoints are
    keys of ``entities``.
    """

    model_config = ConfigDict(frozen=True)

    entities: dict[str, Entity] = Field(default_factory=dict)
    relationships: list[Relationship] = Field(default_factory=list)
    spec_title: Optional[str] = None
    spec_version: Optional[str] = None


# --- Naming ---


class NamingConvention(str, enum.Enum):
    """Recognised shapes of an operationId."""

    TAG_METHOD = "tag_method"
    SNAKE_CASE = "snake_case"
    CAMEL_CASE = "camel_case"
    UNKNOWN = "unknown"


class NamingConventionResult(BaseModel):
    """Outcome of normalising one operationId into a method name."""

    convention: NamingConvention
    tag: Optional[str] = None
    method: Optional[str] = None
    operation_name: str
    was_sanitized: bool = False
    warnings: list[str] = Field(default_factory=list)


# --- Output planning ---


class ArtifactKind(str, enum.Enum):
    """Category of a generated file."""

    DTOS = "dtos"
    CONTROLLERS = "controllers"
    DECORATORS = "decorators"
    COMMON = "common"


class PlannedArtifact(BaseModel):
    """A unit of emitted content awaiting a file location."""

    kind: ArtifactKind
    name: str
    content: str = ""


class PlannedFile(BaseModel):
    """An artifact with the path it will be written to."""

    path: Path
    kind: ArtifactKind
    name: str
    content: str = ""


# --- Recovery ---


class RecoveryOutcome(BaseModel):
    """What a recovery strategy decided for a validation result."""

    strategy: RecoveryStrategy
    skipped_entities: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
