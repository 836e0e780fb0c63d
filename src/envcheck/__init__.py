"""Runtime configuration validation for service processes."""

from envcheck.core.errors import (
    EnvironmentValidationError,
    RegistryFrozenError,
    SchemaError,
    UnknownFieldError,
)
from envcheck.environment import Environment, load_environment
from envcheck.schema import SchemaBuilder, ValidationOutcome, load_schema

__all__ = [
    "Environment",
    "EnvironmentValidationError",
    "RegistryFrozenError",
    "SchemaBuilder",
    "SchemaError",
    "UnknownFieldError",
    "ValidationOutcome",
    "load_environment",
    "load_schema",
]
