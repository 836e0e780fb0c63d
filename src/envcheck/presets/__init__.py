"""Ready-made schemas."""

from envcheck.presets.server import server_schema

__all__ = ["server_schema"]
