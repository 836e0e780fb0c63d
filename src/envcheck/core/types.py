"""Core type definitions shared across all envcheck modules."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ConstraintKind(StrEnum):
    """Kinds of constraint a field can be bound to."""

    PRESENCE = "presence"
    LENGTH_RANGE = "length_range"
    URL = "url"
    NUMERIC = "numeric"
    ENUM = "enum"
    BOOLEAN = "boolean"
    EMAIL = "email"
    CONTAINS = "contains"
    MAX_LENGTH = "max_length"
    EQUALS = "equals"
    REQUIRES = "requires"


class FieldType(StrEnum):
    """Typed form a raw string value is coerced into."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


# Value a field holds after coercion.
ResolvedValue = str | int | float | bool | None


class HealthStatus(BaseModel):
    """Health check response for any service."""

    service: str
    healthy: bool
    details: dict[str, Any] = Field(default_factory=dict)
