import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.bale.api.dependencies import DBSession
from src.bale.api.middlewares import setup_middlewares
from src.bale.api.routes.router import api_router, page_router
from src.bale.core.config import get_settings
from src.bale.core.db import dispose_engine
from src.bale.core.exceptions import setup_exception_handlers
from src.bale.core.logging import get_logger, setup_logging
from src.bale.core.rate_limit import limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Sessions, first-login provisioning and account status"},
    {"name": "invites", "description": "Platform invites and access requests"},
    {"name": "upgrades", "description": "Demo-to-full account upgrade requests"},
    {"name": "admin", "description": "Invite and upgrade decisions"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant inventory backend",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    app.state.limiter = limiter
    setup_middlewares(app, settings)

    app.include_router(api_router)
    app.include_router(page_router)

    # Prometheus metrics instrumentation
    instrumentator = Instrumentator().instrument(app)

    # Protect /metrics endpoint if API key is configured
    if settings.metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
            if (
                api_key is None
                or settings.metrics_api_key is None
                or not secrets.compare_digest(api_key, settings.metrics_api_key)
            ):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
    else:
        instrumentator.expose(app, endpoint="/metrics")

    @app.get("/health", include_in_schema=False)
    async def health(session: DBSession) -> JSONResponse:
        """Database ping."""
        health_status: dict[str, Any] = {"status": "healthy", "database": "healthy"}
        try:
            await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Health check failed", error=str(e))
            health_status = {"status": "unhealthy", "database": "unhealthy"}

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(content=health_status, status_code=status_code)

    return app


app = create_app()
