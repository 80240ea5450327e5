"""
forgeclaw_portal.api.app

FastAPI app factory for the ForgeClaw Portal API.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine, Northflank HTTP client, demo store).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forgeclaw_portal import __version__
from forgeclaw_portal.api.errors import register_error_handlers
from forgeclaw_portal.api.routers.advisors import router as advisors_router
from forgeclaw_portal.api.routers.auth import router as auth_router
from forgeclaw_portal.api.routers.dev_auth import router as dev_auth_router
from forgeclaw_portal.api.routers.health import router as health_router
from forgeclaw_portal.api.routers.northflank import router as northflank_router
from forgeclaw_portal.api.routers.skills import router as skills_router
from forgeclaw_portal.db.init_db import init_db, seed_demo_user
from forgeclaw_portal.db.session import create_engine, create_sessionmaker
from forgeclaw_portal.northflank.client import create_http_client
from forgeclaw_portal.northflank.demo import DemoStore
from forgeclaw_portal.observability.logging import configure_logging, get_logger
from forgeclaw_portal.observability.middleware import RequestContextMiddleware
from forgeclaw_portal.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, demo_mode=settings.demo_mode)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod runs Alembic migrations.
            await init_db(engine)

        app.state.demo_store = DemoStore()
        app.state.northflank_http = create_http_client(settings)
        if settings.demo_mode:
            await seed_demo_user(app.state.sessionmaker)
        elif not settings.northflank_api_token:
            log.warning("northflank_token_missing")
        if settings.env != "prod" and not settings.demo_mode:
            # Live Northflank with /api/dev/token still open: any caller can mint an admin token.
            log.warning("dev_token_route_enabled", env=settings.env)

        try:
            yield
        finally:
            await app.state.northflank_http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="ForgeClaw Portal API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(auth_router)
    app.include_router(advisors_router)
    app.include_router(skills_router)
    app.include_router(northflank_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business logic stays in routers/services and the
# Northflank boundary.
