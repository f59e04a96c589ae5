from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gearx.core.config import settings
from gearx.core.logging import configure_logging, correlation_context, get_logger
from gearx.core.metrics import get_counters, get_metrics
from gearx.core.numeric import safe_round
from gearx.db.database import Base, engine, get_db
from gearx.routers.admin import router as admin_router
from gearx.routers.exceptions import register_exception_handlers
from gearx.routers.score import router as score_router
import gearx.models  # noqa: F401 - register ORM tables on Base.metadata


configure_logging(environment=settings.environment)
logger = get_logger("gearx.main", component="app")

_app_start_time = datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup in development.

    Production deployments set ``RUN_STARTUP_DDL=false`` and apply
    ``migrations/versions`` with Alembic instead.
    """
    if settings.run_startup_ddl:
        logger.info("startup_execute_ddl", extra={"structured_data": {"run_startup_ddl": True}})
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_exception_handlers(app)

app.include_router(admin_router)
app.include_router(score_router)


@app.middleware("http")
async def bind_correlation_id(request: Request, call_next):
    with correlation_context(request.headers.get("x-request-id")) as cid:
        response = await call_next(request)
        response.headers["X-Request-ID"] = cid
        return response


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Uptime, database connectivity and a metrics summary for load balancers."""
    now = datetime.now(timezone.utc)
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
        overall_status = "healthy"
    except SQLAlchemyError as e:
        logger.error("health_check_db_failed", extra={"structured_data": {"error": str(e)}})
        db_status = "disconnected"
        overall_status = "unhealthy"
    return {
        "status": overall_status,
        "started_at": _app_start_time.isoformat(),
        "uptime_seconds": safe_round((now - _app_start_time).total_seconds(), 2),
        "environment": settings.environment,
        "database": {
            "status": db_status,
            "engine": engine.url.get_backend_name(),
        },
        "metrics_summary": {
            "tracked_operations": len(get_metrics()),
            "tracked_counters": len(get_counters()),
        },
    }


@app.get("/", include_in_schema=False)
def root():
    return {
        "name": settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }
