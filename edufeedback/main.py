"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from sqlalchemy import text

from edufeedback.core.config import get_settings
from edufeedback.core.database import SessionLocal, close_engine, create_schema
from edufeedback.core.metrics import build_metrics_response, instrument_http_request
from edufeedback.modules.feedback.router import router as feedback_router
from edufeedback.modules.identity.repository import IdentityRepository
from edufeedback.modules.identity.router import router as identity_router
from edufeedback.modules.identity.service import IdentityService
from edufeedback.modules.teachers.router import router as teachers_router
from edufeedback.shared.exceptions import register_exception_handlers
from edufeedback.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


async def _bootstrap_admin() -> None:
    """Ensure the configured admin account exists."""
    async with SessionLocal() as session:
        try:
            service = IdentityService(IdentityRepository(session))
            await service.ensure_admin(
                email=settings.bootstrap_admin_email,
                password=settings.bootstrap_admin_password,
                name=settings.bootstrap_admin_name,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Failed to bootstrap admin account")
            raise


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application startup and shutdown hooks."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s (%s)", settings.app_name, settings.app_env)

    if settings.auto_create_schema:
        await create_schema()
        logger.info("Database schema ensured")

    if settings.bootstrap_admin_email:
        await _bootstrap_admin()

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

app.include_router(identity_router, prefix=settings.api_prefix)
app.include_router(teachers_router, prefix=settings.api_prefix)
app.include_router(feedback_router, prefix=settings.api_prefix)


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "ok"}


async def _is_database_ready() -> bool:
    """Return True if DB accepts basic queries."""
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database readiness check failed")
        return False


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Readiness probe endpoint with DB dependency check."""
    if not await _is_database_ready():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not ready",
        )
    return {
        "status": "ready",
        "database": "ok",
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
