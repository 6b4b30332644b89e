"""
Showdown Vote FastAPI Application
Main entry point for the application
"""

import logging
import subprocess
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException

from showdown_vote.core import errors
from showdown_vote.core.config import settings
from showdown_vote.core.metrics import ACTIVE_CONNECTIONS, REQUEST_COUNT, REQUEST_DURATION

# Sentry integration
if settings.sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        environment=settings.app_env,
    )

from showdown_vote.api.health import router as health_router
from showdown_vote.api.relay import router as relay_router
from showdown_vote.api.public import router as public_router
from showdown_vote.api.audience import router as audience_router
from showdown_vote.api.votes import router as votes_router

logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title="Showdown Vote API",
    description="Live audience voting for RED vs BLUE showdowns",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.on_event("startup")
async def startup_event():
    """Refuse insecure configuration, then run database migrations"""
    if not settings.relay_key:
        if settings.is_production:
            raise RuntimeError("RELAY_KEY is required in production")
        logger.error("RELAY_KEY is not set; relay ingestion will answer RELAY_KEY_NOT_SET")

    if not settings.run_migrations_on_startup:
        return

    logger.info("Running database migrations...")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        capture_output=True,
        text=True,
        timeout=60
    )
    if result.returncode != 0:
        logger.error(f"Migration failed: {result.stderr}")
        raise RuntimeError("Database migrations failed")
    logger.info("Database migrations completed successfully")


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Add metrics middleware
@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start_time = time.time()
    ACTIVE_CONNECTIONS.inc()
    response = None

    try:
        response = await call_next(request)
        return response
    finally:
        duration = time.time() - start_time
        ACTIVE_CONNECTIONS.dec()

        # Record metrics only if response is available
        if response:
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code
            ).inc()

            REQUEST_DURATION.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=errors.error_body(errors.INVALID_INPUT)
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = errors.error_body(str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.url.path}: {type(exc).__name__}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=errors.error_body(errors.INTERNAL_ERROR)
    )


# Add metrics endpoint
@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Include routers
app.include_router(health_router, prefix="/api", tags=["health"])
app.include_router(relay_router, prefix="/api", tags=["relay"])
app.include_router(public_router, prefix="/api", tags=["public"])
app.include_router(audience_router, prefix="/api", tags=["audience"])
app.include_router(votes_router, prefix="/api", tags=["votes"])
