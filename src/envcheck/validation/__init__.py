"""Constraint evaluation over resolved configuration fields."""

from envcheck.validation.dependencies import DependencyEdge, DependencyGraph
from envcheck.validation.engine import ValidationEngine, collect_deprecations

__all__ = ["DependencyEdge", "DependencyGraph", "ValidationEngine", "collect_deprecations"]
