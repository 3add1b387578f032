"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from timedesk.config import settings
from timedesk.core.logging import setup_logging
from timedesk.database import engine, init_db, close_db
from timedesk.middleware.metrics import MetricsMiddleware, setup_metrics
from timedesk.api.v1 import auth, employees, hours, tasks, tracking

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)
setup_metrics(app)

# Include routers
app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["auth"])
app.include_router(
    employees.router, prefix=f"{settings.API_V1_PREFIX}/employees", tags=["employees"]
)
app.include_router(
    tracking.router, prefix=f"{settings.API_V1_PREFIX}/tracking", tags=["tracking"]
)
app.include_router(hours.router, prefix=f"{settings.API_V1_PREFIX}/hours", tags=["hours"])
app.include_router(tasks.router, prefix=f"{settings.API_V1_PREFIX}/tasks", tags=["tasks"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    health_status = {
        "status": "ok",
        "checks": {
            "database": "unknown",
            "redis": "unknown",
        },
    }

    # Check database
    try:
        async with engine.begin() as conn:
            await conn.execute(select(1))
        health_status["checks"]["database"] = "ok"
    except Exception as e:
        logger.warning(f"Health check: database unavailable: {e}")
        health_status["checks"]["database"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    # Check Redis
    try:
        r = redis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
        r.ping()
        health_status["checks"]["redis"] = "ok"
    except Exception as e:
        health_status["checks"]["redis"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    return health_status
