"""Cross-field dependency constraints.

An edge ``(field, requires)`` reads "``field`` may only be set if ``requires``
is also set". Edges are evaluated in a second pass, against a registry in
which every field has already been resolved.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from envcheck.core.types import ConstraintKind
from envcheck.schema.models import FieldDefinition, FieldDescriptor, FieldViolation
from envcheck.schema.registry import FieldRegistry
from envcheck.validation.constraints import CONSTRAINTS


class DependencyEdge(NamedTuple):
    field: str
    requires: str


class DependencyGraph:
    """Directed graph of "X requires Y" edges between fields."""

    def __init__(self, edges: Iterable[tuple[str, str]] = ()) -> None:
        self._edges: list[DependencyEdge] = []
        for field, requires in edges:
            self.add(field, requires)

    @classmethod
    def from_fields(
        cls, fields: Iterable[FieldDefinition | FieldDescriptor]
    ) -> DependencyGraph:
        graph = cls()
        for field in fields:
            for binding in field.constraints:
                if binding.is_dependency:
                    graph.add(field.name, binding.params["field"])
        return graph

    def add(self, field: str, requires: str) -> None:
        edge = DependencyEdge(field, requires)
        if edge not in self._edges:
            self._edges.append(edge)

    @property
    def edges(self) -> tuple[DependencyEdge, ...]:
        return tuple(self._edges)

    def requirements_of(self, field: str) -> tuple[str, ...]:
        return tuple(e.requires for e in self._edges if e.field == field)

    def dependents_of(self, field: str) -> tuple[str, ...]:
        return tuple(e.field for e in self._edges if e.requires == field)

    def evaluate(self, registry: FieldRegistry) -> list[FieldViolation]:
        """Return one violation per edge whose subject is set without its companion.

        Raises:
            RuntimeError: if the registry is still accepting registrations.
        """
        if not registry.frozen:
            raise RuntimeError(
                "Dependency constraints need a fully populated registry; freeze it first."
            )

        check = CONSTRAINTS[ConstraintKind.REQUIRES]
        violations: list[FieldViolation] = []
        for edge in self._edges:
            reason = check(registry.resolve(edge.field), field=edge.requires, registry=registry)
            if reason:
                violations.append(
                    FieldViolation(
                        field=edge.field,
                        constraint=ConstraintKind.REQUIRES,
                        message=f"{edge.field} {reason}",
                        related=edge.requires,
                    )
                )
        return violations

    def __len__(self) -> int:
        return len(self._edges)
