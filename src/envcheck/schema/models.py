"""Shared models for schema declaration, field resolution and outcomes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from envcheck.core.types import ConstraintKind, FieldType, ResolvedValue

# Parameters each constraint kind cannot do without.
REQUIRED_PARAMS: dict[ConstraintKind, tuple[str, ...]] = {
    ConstraintKind.LENGTH_RANGE: ("min_bytes", "max_bytes"),
    ConstraintKind.ENUM: ("values",),
    ConstraintKind.CONTAINS: ("needle",),
    ConstraintKind.MAX_LENGTH: ("limit",),
    ConstraintKind.EQUALS: ("expected",),
    ConstraintKind.REQUIRES: ("field",),
}


class ConstraintBinding(BaseModel):
    """A constraint kind paired with the parameters it is evaluated with."""

    model_config = ConfigDict(frozen=True)

    kind: ConstraintKind
    params: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_params(self) -> ConstraintBinding:
        missing = [p for p in REQUIRED_PARAMS.get(self.kind, ()) if p not in self.params]
        if missing:
            raise ValueError(
                f"Constraint '{self.kind}' is missing parameter(s): {', '.join(missing)}"
            )
        return self

    @property
    def is_dependency(self) -> bool:
        return self.kind == ConstraintKind.REQUIRES


class FieldDefinition(BaseModel):
    """Declaration of a single configuration field within a schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    field_type: FieldType = FieldType.STRING
    default: str | None = None
    optional: bool = False
    constraints: tuple[ConstraintBinding, ...] = ()
    deprecated: str | None = None
    env_keys: tuple[str, ...] = ()
    description: str = ""

    @property
    def source_keys(self) -> tuple[str, ...]:
        """Keys read from the raw source, in priority order."""
        return self.env_keys or (self.name,)

    @property
    def dependencies(self) -> tuple[str, ...]:
        return tuple(b.params["field"] for b in self.constraints if b.is_dependency)


class SchemaDefinition(BaseModel):
    """An ordered, flat collection of field definitions."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: tuple[FieldDefinition, ...] = ()

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> FieldDefinition | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None


class FieldDescriptor(BaseModel):
    """Runtime state of one field: its raw input and coerced value."""

    model_config = ConfigDict(frozen=True)

    name: str
    field_type: FieldType
    raw_value: str | None
    resolved_value: ResolvedValue
    optional: bool = False
    default: str | None = None
    constraints: tuple[ConstraintBinding, ...] = ()
    deprecated: str | None = None

    @property
    def is_present(self) -> bool:
        value = self.resolved_value
        return value is not None and not (isinstance(value, str) and not value.strip())

    @property
    def local_constraints(self) -> tuple[ConstraintBinding, ...]:
        return tuple(b for b in self.constraints if not b.is_dependency)

    @property
    def dependency_constraints(self) -> tuple[ConstraintBinding, ...]:
        return tuple(b for b in self.constraints if b.is_dependency)


class FieldViolation(BaseModel):
    """A single failed constraint on a single field."""

    model_config = ConfigDict(frozen=True)

    field: str
    constraint: ConstraintKind
    message: str
    related: str | None = None


class DeprecationNotice(BaseModel):
    """Warning that a deprecated field has been given a non-default value."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class ValidationOutcome(BaseModel):
    """Aggregate result of validating every field of a schema."""

    model_config = ConfigDict(frozen=True)

    errors: tuple[FieldViolation, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def errors_for(self, field: str) -> list[FieldViolation]:
        return [v for v in self.errors if v.field == field]

    def invalid_fields(self) -> list[str]:
        """Names of fields with at least one violation, in error order."""
        seen: dict[str, None] = {}
        for violation in self.errors:
            seen.setdefault(violation.field, None)
        return list(seen)
