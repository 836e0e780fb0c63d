"""HTTP surface for configuration validation status."""

from envcheck.web.app import create_app

__all__ = ["create_app"]
