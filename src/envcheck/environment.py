"""Owned, validated configuration instance.

An ``Environment`` is built once at process start from a schema and a raw
source. It never changes afterwards; reloading configuration means building a
new instance.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from envcheck.core.config import Settings
from envcheck.core.errors import EnvironmentValidationError
from envcheck.core.types import ResolvedValue
from envcheck.presets.server import server_schema
from envcheck.schema.loader import load_schema
from envcheck.schema.models import (
    DeprecationNotice,
    FieldDescriptor,
    SchemaDefinition,
    ValidationOutcome,
)
from envcheck.schema.registry import FieldRegistry
from envcheck.sources import RawSource, build_source
from envcheck.validation.dependencies import DependencyGraph
from envcheck.validation.engine import ValidationEngine, collect_deprecations

logger = logging.getLogger(__name__)


class Environment(Mapping[str, ResolvedValue]):
    """Typed, read-only view of a schema resolved against a raw source.

    Validation runs at most once per instance. ``validate()`` hands every
    caller the same awaitable, and the resulting ``ValidationOutcome`` object
    is returned unchanged on every later request.
    """

    def __init__(
        self,
        schema: SchemaDefinition,
        source: RawSource,
        *,
        engine: ValidationEngine | None = None,
        warn_deprecated: bool = True,
    ) -> None:
        self.schema = schema
        self._engine = engine or ValidationEngine()
        self._registry = FieldRegistry.from_source(schema, source)
        self._graph = DependencyGraph.from_fields(schema.fields)
        self._deprecations = collect_deprecations(self._registry)
        self._outcome: ValidationOutcome | None = None
        self._task: asyncio.Task[ValidationOutcome] | None = None

        if warn_deprecated:
            for notice in self._deprecations:
                logger.warning("%s is deprecated: %s", notice.field, notice.message)

    # --- Typed access ---

    def __getitem__(self, name: str) -> ResolvedValue:
        return self._registry.resolve(name)

    def __iter__(self) -> Iterator[str]:
        return iter(d.name for d in self._registry.all())

    def __len__(self) -> int:
        return len(self._registry)

    def descriptor(self, name: str) -> FieldDescriptor:
        return self._registry.get(name)

    def as_dict(self) -> dict[str, ResolvedValue]:
        return {d.name: d.resolved_value for d in self._registry.all()}

    @property
    def deprecations(self) -> list[DeprecationNotice]:
        return list(self._deprecations)

    # --- Validation ---

    async def _run_once(self) -> ValidationOutcome:
        if self._outcome is None:
            self._outcome = self._engine.evaluate(self._registry, self._graph)
            if self._outcome.is_valid:
                logger.info("Environment %s is valid", self.schema.name)
            else:
                logger.info(
                    "Environment %s has %d validation error(s)",
                    self.schema.name, len(self._outcome.errors),
                )
        return self._outcome

    def validate(self) -> asyncio.Task[ValidationOutcome]:
        """Return the shared validation task for the running event loop."""
        loop = asyncio.get_running_loop()
        if self._task is None or self._task.get_loop() is not loop:
            self._task = loop.create_task(self._run_once())
        return self._task

    @property
    def outcome(self) -> ValidationOutcome | None:
        """The memoized outcome, or None while validation has not completed."""
        return self._outcome

    async def assert_valid(self) -> ValidationOutcome:
        """Await validation and raise if the environment is invalid."""
        outcome = await self.validate()
        if not outcome.is_valid:
            raise EnvironmentValidationError(outcome)
        return outcome


def load_environment(
    schema: SchemaDefinition | None = None,
    *,
    source: RawSource | None = None,
    settings: Settings | None = None,
) -> Environment:
    """Construct an Environment from settings-driven sources.

    Defaults to the server schema (or ``settings.schema_path`` when set) and to
    the sources described by ``settings.source``.
    """
    settings = settings or Settings()
    if schema is None:
        schema = load_schema(settings.schema_path) if settings.schema_path else server_schema()
    if source is None:
        source = build_source(settings.source)

    return Environment(
        schema,
        source,
        engine=ValidationEngine(fail_fast=settings.validation.fail_fast),
        warn_deprecated=settings.validation.warn_deprecated,
    )


def describe_schema(schema: SchemaDefinition) -> list[dict[str, Any]]:
    """Serializable summary of each field's type, default and constraints."""
    return [
        {
            "name": field.name,
            "type": str(field.field_type),
            "default": field.default,
            "optional": field.optional,
            "deprecated": field.deprecated,
            "constraints": [
                {"kind": str(b.kind), "params": dict(b.params)} for b in field.constraints
            ],
        }
        for field in schema.fields
    ]
