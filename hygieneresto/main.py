"""HygieneResto FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from hygieneresto.api.error_handler import register_exception_handlers
from hygieneresto.api.router import api_router
from hygieneresto.core.config import Settings
from hygieneresto.core.config import settings as default_settings
from hygieneresto.core.logging import configure_logging
from hygieneresto.db.init_db import init_db
from hygieneresto.db.session import sessionmanager


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API. Tests pass their own settings; production uses the environment."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
        configure_logging(settings)
        sessionmanager.init(settings)
        await init_db(sessionmanager, settings)
        logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started ({settings.ENVIRONMENT})")
        try:
            yield
        finally:
            await sessionmanager.close()
            logger.info(f"{settings.PROJECT_NAME} stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Restaurant hygiene (HACCP) tracking: temperatures, traceability and staff.",
        docs_url=f"{settings.API_PREFIX}/docs",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app


app = create_app()
