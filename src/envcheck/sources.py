"""Raw value sources: process environment, ``.env`` files and YAML files."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from dotenv import dotenv_values

from envcheck.core.config import SourceConfig

logger = logging.getLogger(__name__)

RawSource = Mapping[str, str | None]


def from_os_environ() -> dict[str, str | None]:
    return dict(os.environ)


def from_dotenv(path: str | Path) -> dict[str, str | None]:
    """Read a ``.env`` file without touching ``os.environ``. Missing file → empty."""
    path = Path(path)
    if not path.exists():
        logger.debug("No dotenv file at %s", path)
        return {}
    return dict(dotenv_values(path))


def _render_scalar(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ValueError(f"Configuration values must be scalars, got {type(value).__name__}")
    return str(value)


def from_yaml(path: str | Path) -> dict[str, str | None]:
    """Read a flat YAML mapping of field name to scalar value."""
    path = Path(path)
    if not path.exists():
        logger.debug("No YAML config file at %s", path)
        return {}
    with open(path) as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of names to values")
    return {str(key): _render_scalar(value) for key, value in data.items()}


def merge_sources(*sources: RawSource) -> dict[str, str | None]:
    """Merge sources left to right; later sources win for non-None values."""
    merged: dict[str, str | None] = {}
    for source in sources:
        for key, value in source.items():
            if value is not None or key not in merged:
                merged[key] = value
    return merged


def build_source(config: SourceConfig | None = None) -> dict[str, str | None]:
    """Assemble the raw source described by ``config``.

    Files are read first and the process environment is layered on top, so an
    exported variable always overrides the same key in a file.
    """
    config = config or SourceConfig()
    layers: list[RawSource] = []
    if config.env_file:
        layers.append(from_dotenv(config.env_file))
    if config.yaml_file:
        layers.append(from_yaml(config.yaml_file))
    if config.include_os_environ:
        layers.append(from_os_environ())
    return merge_sources(*layers)
