"""Registry of resolved configuration fields."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from envcheck.core.errors import RegistryFrozenError, SchemaError, UnknownFieldError
from envcheck.core.types import ResolvedValue
from envcheck.schema.coercion import coerce, effective_raw, is_blank
from envcheck.schema.models import FieldDefinition, FieldDescriptor, SchemaDefinition

logger = logging.getLogger(__name__)


def read_raw(definition: FieldDefinition, source: Mapping[str, str | None]) -> str | None:
    """Return the first non-blank raw value among the field's source keys."""
    for key in definition.source_keys:
        value = source.get(key)
        if not is_blank(value):
            return value
    return None


class FieldRegistry:
    """Holds one FieldDescriptor per declared field, in registration order.

    Values are coerced when a field is registered. Once frozen the registry
    accepts no further registrations and is safe to share between readers.
    """

    def __init__(self) -> None:
        self._fields: dict[str, FieldDescriptor] = {}
        self._frozen = False

    @classmethod
    def from_source(
        cls, schema: SchemaDefinition, source: Mapping[str, str | None]
    ) -> FieldRegistry:
        """Register every schema field from ``source`` and freeze the result."""
        registry = cls()
        for definition in schema.fields:
            registry.register(definition, read_raw(definition, source))
        registry.freeze()
        logger.debug("Resolved %d field(s) for schema %s", len(registry), schema.name)
        return registry

    def register(self, definition: FieldDefinition, raw_value: str | None) -> FieldDescriptor:
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register {definition.name}: registry is frozen"
            )
        if definition.name in self._fields:
            raise SchemaError(f"Field {definition.name} is already registered")

        descriptor = FieldDescriptor(
            name=definition.name,
            field_type=definition.field_type,
            raw_value=raw_value,
            resolved_value=coerce(
                definition.field_type, effective_raw(raw_value, definition.default)
            ),
            optional=definition.optional,
            default=definition.default,
            constraints=definition.constraints,
            deprecated=definition.deprecated,
        )
        self._fields[definition.name] = descriptor
        return descriptor

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> FieldDescriptor:
        try:
            return self._fields[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    def resolve(self, name: str) -> ResolvedValue:
        return self.get(name).resolved_value

    def is_present(self, name: str) -> bool:
        return self.get(name).is_present

    def all(self) -> tuple[FieldDescriptor, ...]:
        return tuple(self._fields.values())

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)
