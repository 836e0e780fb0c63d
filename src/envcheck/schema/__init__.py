"""Schema declaration, field coercion and the resolved-field registry."""

from envcheck.schema.builder import SchemaBuilder
from envcheck.schema.loader import load_schema, parse_schema
from envcheck.schema.models import (
    ConstraintBinding,
    DeprecationNotice,
    FieldDefinition,
    FieldDescriptor,
    FieldViolation,
    SchemaDefinition,
    ValidationOutcome,
)
from envcheck.schema.registry import FieldRegistry

__all__ = [
    "ConstraintBinding",
    "DeprecationNotice",
    "FieldDefinition",
    "FieldDescriptor",
    "FieldRegistry",
    "FieldViolation",
    "SchemaBuilder",
    "SchemaDefinition",
    "ValidationOutcome",
    "load_schema",
    "parse_schema",
]
