"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class SourceConfig(BaseSettings):
    """Where raw configuration values are read from."""

    model_config = {"env_prefix": "ENVCHECK_SOURCE_"}

    env_file: str | None = ".env"
    yaml_file: str | None = None
    include_os_environ: bool = True


class ValidationConfig(BaseSettings):
    """Validation engine behaviour."""

    model_config = {"env_prefix": "ENVCHECK_VALIDATION_"}

    fail_fast: bool = False
    warn_deprecated: bool = True


class Settings(BaseSettings):
    """Root envcheck settings."""

    model_config = {"env_prefix": "ENVCHECK_"}

    log_level: str = "INFO"
    schema_path: str | None = None

    source: SourceConfig = Field(default_factory=SourceConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
