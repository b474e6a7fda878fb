"""Auto Transport Logistics API — FastAPI application factory."""


import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from logistics.core.config import settings
from logistics.core.exceptions import MigrationError, register_exception_handlers
from logistics.db.base import engine
from logistics.db.migrator import MigrationRunner
from logistics.middleware.request_log import RequestLogMiddleware
from logistics.schemas.common import HealthResponse

# v1 routers
from logistics.routers.v1.auth import router as auth_v1_router
from logistics.routers.v1.carriers import router as carriers_v1_router
from logistics.routers.v1.customers import router as customers_v1_router
from logistics.routers.v1.organization import router as organization_v1_router
from logistics.routers.v1.shipments import router as shipments_v1_router
from logistics.routers.v1.users import router as users_v1_router
from logistics.routers.v1.vehicles import router as vehicles_v1_router

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.app_env == "development" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    runner = MigrationRunner(engine)
    if settings.migrate_on_startup:
        try:
            version = await runner.apply()
        except MigrationError:
            logger.critical("Schema migration failed; refusing to start", exc_info=True)
            raise
        logger.info("Database schema at version %d", version)
    app.state.migrations = runner
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url="/docs" if settings.app_env == "development" else None,
        redoc_url="/redoc" if settings.app_env == "development" else None,
        lifespan=lifespan,
    )

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Request logging ---
    app.add_middleware(RequestLogMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app)

    # --- v1 API routes (/api/v1/*) ---
    for router in (
        auth_v1_router,
        organization_v1_router,
        users_v1_router,
        customers_v1_router,
        carriers_v1_router,
        shipments_v1_router,
        vehicles_v1_router,
    ):
        app.include_router(router, prefix="/api/v1")

    # --- Health check ---
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        runner = getattr(app.state, "migrations", None) or MigrationRunner(engine)
        version, _ = await runner.current_version()
        return HealthResponse(app=settings.app_name, env=settings.app_env, schema_version=version)

    return app


app = create_app()
