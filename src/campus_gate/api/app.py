"""
campus_gate.api.app

FastAPI app factory for the campus gate service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, Role Store, edge gate).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from campus_gate import __version__
from campus_gate.api.routers.areas import router as areas_router
from campus_gate.api.routers.dev_auth import router as dev_auth_router
from campus_gate.api.routers.health import router as health_router
from campus_gate.api.routers.principals import router as principals_router
from campus_gate.api.routers.session import router as session_router
from campus_gate.auth.identity import IdentityProvider, SessionIdentityProvider
from campus_gate.auth.store import RoleStore, SqlRoleStore
from campus_gate.db.init_db import init_db
from campus_gate.db.session import create_engine, create_sessionmaker
from campus_gate.gate.decision import AccessGate
from campus_gate.gate.middleware import EdgeGateMiddleware
from campus_gate.observability.logging import configure_logging, get_logger
from campus_gate.observability.middleware import RequestContextMiddleware
from campus_gate.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    role_store: RoleStore | None = None,
    gate_identity: IdentityProvider | None = None,
) -> FastAPI:
    """
    `role_store` and `gate_identity` replace the SQL store / cookie identity
    provider used by the edge gate (outage drills, tests). Handlers keep using
    the cookie identity provider to issue and clear sessions.
    """

    configure_logging(
        service_name=settings.service_name, level=settings.log_level, fmt=settings.log_format
    )
    identity = SessionIdentityProvider(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic migrations.
            await init_db(engine)

        store = role_store or SqlRoleStore(app.state.sessionmaker)
        app.state.role_store = store
        app.state.access_gate = AccessGate(
            identity=gate_identity or identity,
            store=store,
            sign_in_path=settings.sign_in_path,
        )
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Campus Gate",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.identity = identity

    # Last added runs first: request context wraps the gate so gate logs carry request_id.
    app.add_middleware(EdgeGateMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(session_router)
    app.include_router(principals_router)
    app.include_router(areas_router)

    return app


# --- Module Notes -----------------------------------------------------------
# The gate lives on app.state rather than in the middleware constructor because the
# Role Store needs the engine, which only exists once the lifespan has started.
