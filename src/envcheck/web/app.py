"""FastAPI application factory gated on configuration validity.

The application refuses to start serving until the environment has been
validated; an invalid environment aborts startup with every violation logged.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from envcheck.core.errors import EnvironmentValidationError
from envcheck.environment import Environment, load_environment
from envcheck.web.config_router import router as config_router

logger = logging.getLogger(__name__)


def create_app(environment: Environment | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        environment: Optional pre-built Environment. Loaded from settings if omitted.
    """
    if environment is None:
        environment = load_environment()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await environment.assert_valid()
        except EnvironmentValidationError as exc:
            for violation in exc.outcome.errors:
                logger.error("%s: %s", violation.field, violation.message)
            raise
        yield

    app = FastAPI(
        title="envcheck",
        description="Configuration validation status for a running service.",
        lifespan=lifespan,
    )
    app.state.environment = environment
    app.include_router(config_router)
    return app
