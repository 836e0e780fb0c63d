"""Built-in constraint predicates, one per constraint kind."""

from __future__ import annotations

import ipaddress
import math
import re
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import urlsplit

from envcheck.core.types import ConstraintKind
from envcheck.schema.coercion import INTEGER_PATTERN

if TYPE_CHECKING:
    from envcheck.schema.registry import FieldRegistry

# Registry of constraint functions: kind -> callable(value, **params) -> str | None
# Returns a failure reason on failure, None on success.
CONSTRAINTS: dict[ConstraintKind, Callable[..., str | None]] = {}

DEFAULT_URL_PROTOCOLS = ("http", "https", "ftp")

_HOST_LABEL = re.compile(r"[a-z0-9\u00a1-\uffff]([a-z0-9\u00a1-\uffff-]{0,61}[a-z0-9\u00a1-\uffff])?", re.I)
_TLD = re.compile(r"([a-z\u00a1-\uffff]{2,}|xn--[a-z0-9-]{2,})", re.I)
_EMAIL_LOCAL = re.compile(r"[a-z\d!#$%&'*+\-/=?^_`{|}~]+(\.[a-z\d!#$%&'*+\-/=?^_`{|}~]+)*", re.I)
_EMAIL_QUOTED_LOCAL = re.compile(r'"([\x20\x21\x23-\x5b\x5d-\x7e]|\\[\x20-\x7e])*"')
_DISPLAY_NAME = re.compile(r"(?P<name>[^<>]*?)\s*<(?P<address>[^<>]+)>")


def register(kind: ConstraintKind):
    """Decorator to register a constraint function."""
    def decorator(fn):
        CONSTRAINTS[kind] = fn
        return fn
    return decorator


def _is_fqdn(host: str, require_tld: bool = True) -> bool:
    if not host or len(host) > 253:
        return False
    labels = host.split(".")
    if require_tld:
        if len(labels) < 2 or not _TLD.fullmatch(labels[-1]):
            return False
    return all(_HOST_LABEL.fullmatch(label) for label in labels)


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


@register(ConstraintKind.PRESENCE)
def validate_presence(value: Any, **_kwargs: Any) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return "should not be empty"
    return None


@register(ConstraintKind.LENGTH_RANGE)
def validate_length_range(
    value: Any, min_bytes: int = 0, max_bytes: int | None = None, **_kwargs: Any
) -> str | None:
    if max_bytes is None:
        reason = f"must be at least {min_bytes} bytes long"
    else:
        reason = f"must be between {min_bytes} and {max_bytes} bytes long"
    if not isinstance(value, str):
        return reason
    size = len(value.encode("utf-8"))
    if size < int(min_bytes) or (max_bytes is not None and size > int(max_bytes)):
        return reason
    return None


@register(ConstraintKind.URL)
def validate_url(
    value: Any,
    protocols: list[str] | tuple[str, ...] = DEFAULT_URL_PROTOCOLS,
    require_tld: bool = True,
    require_protocol: bool = False,
    **_kwargs: Any,
) -> str | None:
    reason = "must be a URL address"
    if not isinstance(value, str) or not value or len(value) >= 2083:
        return reason
    if any(ch.isspace() for ch in value) or value.startswith("mailto:"):
        return reason

    if "://" in value:
        scheme, _, rest = value.partition("://")
        if scheme.lower() not in {p.lower() for p in protocols}:
            return f"must be a URL address using one of: {', '.join(protocols)}"
    elif require_protocol or value.startswith("//"):
        return reason
    else:
        rest = value

    try:
        parts = urlsplit(f"//{rest}")
        host = parts.hostname
        port = parts.port
    except ValueError:
        return reason
    if not host:
        return reason
    if port is not None and not 0 < port <= 65535:
        return reason
    if not (_is_ip(host) or _is_fqdn(host, require_tld=require_tld)):
        return reason
    return None


@register(ConstraintKind.NUMERIC)
def validate_numeric(value: Any, **_kwargs: Any) -> str | None:
    reason = "must be a number conforming to the specified constraints"
    if isinstance(value, bool):
        return reason
    if isinstance(value, int):
        return None
    if isinstance(value, float):
        return None if math.isfinite(value) and value.is_integer() else reason
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
        return None
    return reason


@register(ConstraintKind.ENUM)
def validate_enum(value: Any, values: list[Any] | tuple[Any, ...] = (), **_kwargs: Any) -> str | None:
    if value not in values:
        return f"must be one of the following values: {', '.join(str(v) for v in values)}"
    return None


@register(ConstraintKind.BOOLEAN)
def validate_boolean(value: Any, **_kwargs: Any) -> str | None:
    if not isinstance(value, bool):
        return "must be a boolean value"
    return None


@register(ConstraintKind.EMAIL)
def validate_email(
    value: Any,
    allow_display_name: bool = False,
    allow_ip_domain: bool = False,
    **_kwargs: Any,
) -> str | None:
    reason = "must be an email"
    if not isinstance(value, str) or not value.strip():
        return reason

    address = value
    match = _DISPLAY_NAME.fullmatch(value.strip())
    if match:
        if not allow_display_name:
            return reason
        address = match.group("address")

    local, sep, domain = address.rpartition("@")
    if not sep or not local or not domain or len(local) > 64 or len(domain) > 254:
        return reason
    if not (_EMAIL_LOCAL.fullmatch(local) or _EMAIL_QUOTED_LOCAL.fullmatch(local)):
        return reason

    if _is_fqdn(domain):
        return None
    if allow_ip_domain and _is_ip(domain):
        return None
    return reason


@register(ConstraintKind.CONTAINS)
def validate_contains(value: Any, needle: str = "", **_kwargs: Any) -> str | None:
    if not isinstance(value, str) or needle not in value:
        return f"must contain a {needle} string"
    return None


@register(ConstraintKind.MAX_LENGTH)
def validate_max_length(value: Any, limit: int = 0, **_kwargs: Any) -> str | None:
    if not isinstance(value, str) or len(value) > int(limit):
        return f"must be shorter than or equal to {limit} characters"
    return None


@register(ConstraintKind.EQUALS)
def validate_equals(value: Any, expected: Any = None, **_kwargs: Any) -> str | None:
    if value != expected:
        return f"must be equal to {expected}"
    return None


@register(ConstraintKind.REQUIRES)
def validate_requires(
    value: Any, field: str = "", registry: FieldRegistry | None = None, **_kwargs: Any
) -> str | None:
    """Fail when ``value`` is set but the companion ``field`` is not."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if registry is None or not registry.is_present(field):
        return f"cannot be used without {field}"
    return None
