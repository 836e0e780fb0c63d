"""Coercion of raw string input into typed field values.

Nothing here validates. A malformed number coerces to NaN and is left for the
numeric constraint to reject; a default is never substituted for a bad value.
"""

from __future__ import annotations

import math
import re

from envcheck.core.types import FieldType, ResolvedValue

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

TRUE_STRING = "true"


def is_blank(raw: str | None) -> bool:
    return raw is None or not raw.strip()


def effective_raw(raw: str | None, default: str | None = None) -> str | None:
    """Return the raw input, or the declared default when input is blank."""
    if is_blank(raw):
        return default
    return raw


def to_optional_number(raw: str | None) -> int | float | None:
    if is_blank(raw):
        return None
    text = raw.strip()
    if not INTEGER_PATTERN.fullmatch(text):
        return math.nan
    return int(text, 10)


def to_boolean(raw: str | None) -> bool | None:
    # Only the exact canonical string is truthy; "yes", "1" and "True" are False.
    if is_blank(raw):
        return None
    return raw == TRUE_STRING


def coerce(field_type: FieldType, raw: str | None) -> ResolvedValue:
    if field_type == FieldType.NUMBER:
        return to_optional_number(raw)
    if field_type == FieldType.BOOLEAN:
        return to_boolean(raw)
    if is_blank(raw):
        return None
    return raw
