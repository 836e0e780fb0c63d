"""Shared types, settings and errors."""
