"""Load schema definitions from YAML documents.

A schema document looks like::

    name: service
    fields:
      - name: DATABASE_URL
        constraints:
          - presence
          - url: {protocols: [postgres], require_tld: false}
      - name: PORT
        type: number
        optional: true
      - name: SSL_KEY
        optional: true
        requires: [SSL_CERT]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from envcheck.core.errors import SchemaError
from envcheck.core.types import ConstraintKind, FieldType
from envcheck.schema.builder import SchemaBuilder
from envcheck.schema.models import ConstraintBinding, SchemaDefinition

# Parameter a scalar or list shorthand expands to, e.g. ``max_length: 50``.
_SHORTHAND_PARAM: dict[ConstraintKind, str] = {
    ConstraintKind.ENUM: "values",
    ConstraintKind.CONTAINS: "needle",
    ConstraintKind.MAX_LENGTH: "limit",
    ConstraintKind.EQUALS: "expected",
    ConstraintKind.REQUIRES: "field",
}


def _parse_binding(data: Any) -> ConstraintBinding:
    if isinstance(data, str):
        kind, params = data, {}
    elif isinstance(data, dict) and len(data) == 1:
        kind, params = next(iter(data.items()))
    else:
        raise SchemaError(f"Constraint must be a name or a single-key mapping, got {data!r}")

    try:
        kind = ConstraintKind(kind)
    except ValueError:
        raise SchemaError(f"Unknown constraint kind: {kind}") from None

    if params is None:
        params = {}
    elif not isinstance(params, dict):
        if kind == ConstraintKind.LENGTH_RANGE and isinstance(params, list) and len(params) == 2:
            params = {"min_bytes": params[0], "max_bytes": params[1]}
        elif kind in _SHORTHAND_PARAM:
            params = {_SHORTHAND_PARAM[kind]: params}
        else:
            raise SchemaError(f"Constraint '{kind}' takes a mapping of parameters")

    try:
        return ConstraintBinding(kind=kind, params=params)
    except ValidationError as exc:
        raise SchemaError(str(exc)) from exc


def _as_list(entry: dict[str, Any], key: str) -> list[Any]:
    """Read a list-valued key, accepting a single scalar as a one-item list."""
    value = entry.get(key)
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    if not isinstance(value, list):
        raise SchemaError(f"Field {entry['name']}: '{key}' must be a list, got {value!r}")
    return value


def parse_schema(data: dict[str, Any]) -> SchemaDefinition:
    """Build a SchemaDefinition from an already-parsed YAML document."""
    if not isinstance(data, dict) or "name" not in data:
        raise SchemaError("Schema document must be a mapping with a 'name' key")

    entries = data.get("fields") or []
    if not isinstance(entries, list):
        raise SchemaError(f"'fields' in schema {data['name']} must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise SchemaError(f"Field entry must be a mapping in schema {data['name']}, got {entry!r}")
        if "name" not in entry:
            raise SchemaError(f"Field entry without a name in schema {data['name']}")

    builder = SchemaBuilder(data["name"])
    for entry in entries:
        try:
            field_type = FieldType(entry.get("type", "string"))
        except ValueError:
            raise SchemaError(f"Unknown field type for {entry['name']}: {entry['type']}") from None

        bindings = [_parse_binding(c) for c in _as_list(entry, "constraints")]
        env_keys = _as_list(entry, "env_keys")
        if not all(isinstance(key, str) for key in env_keys):
            raise SchemaError(f"Field {entry['name']}: 'env_keys' must be variable names")
        declare = {
            FieldType.STRING: builder.string,
            FieldType.NUMBER: builder.number,
            FieldType.BOOLEAN: builder.boolean,
        }[field_type]
        declare(
            entry["name"],
            *bindings,
            default=entry.get("default"),
            optional=entry.get("optional", False),
            deprecated=entry.get("deprecated"),
            env_keys=env_keys,
            description=entry.get("description", ""),
        )

    for entry in entries:
        for dependency in _as_list(entry, "requires"):
            if not isinstance(dependency, str):
                raise SchemaError(f"Field {entry['name']}: 'requires' must name fields")
            builder.requires(entry["name"], dependency)

    return builder.build()


def load_schema(path: str | Path) -> SchemaDefinition:
    path = Path(path)
    if not path.exists():
        raise SchemaError(f"Schema file not found: {path}")
    try:
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise SchemaError(f"Schema file {path} is not valid YAML: {exc}") from exc
    return parse_schema(data)
