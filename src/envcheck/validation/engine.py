"""Validation engine for resolved configuration fields."""

from __future__ import annotations

import logging
from typing import Callable

from envcheck.core.types import ConstraintKind
from envcheck.schema.coercion import coerce
from envcheck.schema.models import (
    DeprecationNotice,
    FieldDescriptor,
    FieldViolation,
    ValidationOutcome,
)
from envcheck.schema.registry import FieldRegistry
from envcheck.validation.constraints import CONSTRAINTS
from envcheck.validation.dependencies import DependencyGraph

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Registry-based validation engine.

    Runs every field's local constraints, then every dependency constraint,
    and collects all failures. With ``fail_fast`` the first failure ends the
    run instead.
    """

    def __init__(self, fail_fast: bool = False) -> None:
        self.fail_fast = fail_fast
        self._constraints: dict[ConstraintKind, Callable[..., str | None]] = dict(CONSTRAINTS)

    def validate_field(self, descriptor: FieldDescriptor) -> list[FieldViolation]:
        """Validate a single field's local constraints. Returns the violations."""
        violations: list[FieldViolation] = []

        # Optional fields without a value are not checked at all
        if descriptor.optional and not descriptor.is_present:
            return violations

        for binding in descriptor.local_constraints:
            fn = self._constraints[binding.kind]
            reason = fn(descriptor.resolved_value, **binding.params)
            if reason:
                violations.append(
                    FieldViolation(
                        field=descriptor.name,
                        constraint=binding.kind,
                        message=f"{descriptor.name} {reason}",
                    )
                )
                if self.fail_fast:
                    break

        return violations

    def evaluate(
        self, registry: FieldRegistry, graph: DependencyGraph | None = None
    ) -> ValidationOutcome:
        """Validate every registered field, local pass first, dependency pass second."""
        if graph is None:
            graph = DependencyGraph.from_fields(registry.all())

        errors: list[FieldViolation] = []
        for descriptor in registry.all():
            errors.extend(self.validate_field(descriptor))
            if self.fail_fast and errors:
                return ValidationOutcome(errors=tuple(errors))

        dependency_errors = graph.evaluate(registry)
        if self.fail_fast:
            dependency_errors = dependency_errors[:1]
        errors.extend(dependency_errors)

        logger.debug(
            "Evaluated %d field(s) and %d dependency edge(s): %d violation(s)",
            len(registry), len(graph), len(errors),
        )
        return ValidationOutcome(errors=tuple(errors))


def collect_deprecations(registry: FieldRegistry) -> list[DeprecationNotice]:
    """List deprecated fields whose resolved value differs from their default."""
    notices: list[DeprecationNotice] = []
    for descriptor in registry.all():
        if descriptor.deprecated is None or not descriptor.is_present:
            continue
        if descriptor.resolved_value == coerce(descriptor.field_type, descriptor.default):
            continue
        notices.append(DeprecationNotice(field=descriptor.name, message=descriptor.deprecated))
    return notices
