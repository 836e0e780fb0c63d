"""Exception types raised by envcheck.

Constraint violations are never raised; they are collected into a
``ValidationOutcome``. These exceptions cover schema and usage errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from envcheck.schema.models import ValidationOutcome


class SchemaError(ValueError):
    """A schema declaration is malformed."""


class UnknownFieldError(KeyError):
    """A field name was looked up that the schema does not declare."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown configuration field: {self.name}"


class RegistryFrozenError(RuntimeError):
    """A field was registered after the registry was frozen."""


class EnvironmentValidationError(RuntimeError):
    """The environment failed validation and the host must not start."""

    def __init__(self, outcome: ValidationOutcome) -> None:
        self.outcome = outcome
        lines = [f"{v.field}: {v.message}" for v in outcome.errors]
        super().__init__(
            f"Environment validation failed with {len(lines)} error(s):\n  "
            + "\n  ".join(lines)
        )
