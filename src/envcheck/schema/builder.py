"""Explicit schema construction with plain function calls.

Example::

    builder = SchemaBuilder("service")
    builder.string("DATABASE_URL", presence(), url(protocols=["postgres"], require_tld=False))
    builder.number("PORT", optional=True)
    builder.mutually_requires("SSL_KEY", "SSL_CERT")
    schema = builder.build()
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from envcheck.core.errors import SchemaError
from envcheck.core.types import ConstraintKind, FieldType
from envcheck.schema.models import ConstraintBinding, FieldDefinition, SchemaDefinition

# --- Constraint binding factories ---


def presence() -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.PRESENCE)


def byte_length(min_bytes: int, max_bytes: int | None = None) -> ConstraintBinding:
    return ConstraintBinding(
        kind=ConstraintKind.LENGTH_RANGE,
        params={"min_bytes": min_bytes, "max_bytes": max_bytes},
    )


def url(
    protocols: list[str] | None = None,
    require_tld: bool = True,
    require_protocol: bool = False,
) -> ConstraintBinding:
    params: dict[str, Any] = {"require_tld": require_tld, "require_protocol": require_protocol}
    if protocols is not None:
        params["protocols"] = list(protocols)
    return ConstraintBinding(kind=ConstraintKind.URL, params=params)


def numeric() -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.NUMERIC)


def one_of(*values: Any) -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.ENUM, params={"values": list(values)})


def boolean() -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.BOOLEAN)


def email(allow_display_name: bool = False, allow_ip_domain: bool = False) -> ConstraintBinding:
    return ConstraintBinding(
        kind=ConstraintKind.EMAIL,
        params={"allow_display_name": allow_display_name, "allow_ip_domain": allow_ip_domain},
    )


def contains(needle: str) -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.CONTAINS, params={"needle": needle})


def max_length(limit: int) -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.MAX_LENGTH, params={"limit": limit})


def equals(expected: Any) -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.EQUALS, params={"expected": expected})


def requires(field: str) -> ConstraintBinding:
    return ConstraintBinding(kind=ConstraintKind.REQUIRES, params={"field": field})


def render_default(value: Any) -> str | None:
    """Render a declared default as the raw string it stands in for."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SchemaBuilder:
    """Collects field declarations and dependency edges into a SchemaDefinition."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._fields: dict[str, dict[str, Any]] = {}
        self._duplicates: list[str] = []

    def field(
        self,
        name: str,
        *constraints: ConstraintBinding,
        field_type: FieldType = FieldType.STRING,
        default: Any = None,
        optional: bool = False,
        deprecated: str | None = None,
        env_keys: str | list[str] | tuple[str, ...] = (),
        description: str = "",
    ) -> SchemaBuilder:
        if name in self._fields:
            self._duplicates.append(name)
            return self
        if isinstance(env_keys, str):
            env_keys = (env_keys,)
        self._fields[name] = {
            "name": name,
            "field_type": field_type,
            "default": render_default(default),
            "optional": optional,
            "constraints": list(constraints),
            "deprecated": deprecated,
            "env_keys": tuple(env_keys),
            "description": description,
        }
        return self

    def string(self, name: str, *constraints: ConstraintBinding, **kwargs: Any) -> SchemaBuilder:
        return self.field(name, *constraints, field_type=FieldType.STRING, **kwargs)

    def number(self, name: str, *constraints: ConstraintBinding, **kwargs: Any) -> SchemaBuilder:
        if not any(c.kind == ConstraintKind.NUMERIC for c in constraints):
            constraints = (numeric(), *constraints)
        return self.field(name, *constraints, field_type=FieldType.NUMBER, **kwargs)

    def boolean(self, name: str, *constraints: ConstraintBinding, **kwargs: Any) -> SchemaBuilder:
        if not any(c.kind == ConstraintKind.BOOLEAN for c in constraints):
            constraints = (boolean(), *constraints)
        return self.field(name, *constraints, field_type=FieldType.BOOLEAN, **kwargs)

    def requires(self, field: str, dependency: str) -> SchemaBuilder:
        """Declare that ``field`` may only be set if ``dependency`` is also set."""
        if field not in self._fields:
            raise SchemaError(f"Cannot add a dependency to undeclared field {field}")
        bindings = self._fields[field]["constraints"]
        if not any(b.is_dependency and b.params["field"] == dependency for b in bindings):
            bindings.append(requires(dependency))
        return self

    def mutually_requires(self, first: str, second: str) -> SchemaBuilder:
        return self.requires(first, second).requires(second, first)

    def build(self) -> SchemaDefinition:
        if self._duplicates:
            raise SchemaError(
                f"Duplicate field name(s) in schema {self.name}: {', '.join(self._duplicates)}"
            )
        try:
            fields = [
                FieldDefinition(**{**spec, "constraints": tuple(spec["constraints"])})
                for spec in self._fields.values()
            ]
        except ValidationError as exc:
            raise SchemaError(f"Invalid field in schema {self.name}: {exc}") from exc
        check_schema(self.name, fields)
        return SchemaDefinition(name=self.name, fields=tuple(fields))


def check_schema(name: str, fields: list[FieldDefinition]) -> None:
    """Raise SchemaError for duplicate names and unresolvable dependencies."""
    seen: set[str] = set()
    for field in fields:
        if field.name in seen:
            raise SchemaError(f"Duplicate field name in schema {name}: {field.name}")
        seen.add(field.name)

    for field in fields:
        for dependency in field.dependencies:
            if dependency == field.name:
                raise SchemaError(f"Field {field.name} cannot require itself")
            if dependency not in seen:
                raise SchemaError(
                    f"Field {field.name} requires undeclared field {dependency}"
                )
