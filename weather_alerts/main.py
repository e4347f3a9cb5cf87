"""
Weather Alerts FastAPI application entry point.

Flow: scheduler → evaluator → (weather provider, alert store); the API exposes
the store, a manual evaluation trigger and a weather proxy.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weather_alerts import __version__
from weather_alerts.config import Settings, get_settings
from weather_alerts.db.session import check_db_connection, get_database_status
from weather_alerts.services.container import Services, build_services

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_PROCESS_STARTED = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    services: Services = app.state.services
    settings = services.settings
    logger.info("%s starting", settings.app_name)
    try:
        db_ok = True
        try:
            check_db_connection(services.engine)
            logger.info("Database connection verified")
        except Exception as e:
            db_ok = False
            logger.critical(
                "Database unreachable: %s. Serving in degraded mode; scheduler not started",
                e,
            )

        if not services.weather_client.is_configured:
            logger.warning("Weather provider not configured; evaluations will report failures")

        if db_ok and settings.scheduler_enabled:
            services.scheduler.start()
        elif not settings.scheduler_enabled:
            logger.info("Scheduler disabled (SCHEDULER_ENABLED=false)")

        yield
    finally:
        logger.info("%s shutting down", settings.app_name)
        services.scheduler.stop()
        services.engine.dispose()
        logger.info("Database connection pool closed")


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or out-of-range input is a client error (400)."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = services.settings if services is not None else get_settings()
    if services is None:
        services = build_services(settings)

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    # Mount API routes
    from weather_alerts.api.alerts import router as alerts_router
    from weather_alerts.api.weather import router as weather_router

    app.include_router(alerts_router, prefix="/api/alerts", tags=["alerts"])
    app.include_router(weather_router, prefix="/api/weather", tags=["weather"])

    @app.get("/")
    def root() -> dict:
        return {
            "message": "Hello World!",
            "service": "Weather Alert System API",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity and reports the scheduler."""
        database = get_database_status(services.engine)
        body = {
            "version": __version__,
            "uptime": round(time.monotonic() - _PROCESS_STARTED, 3),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": database["status"],
            "scheduler": services.scheduler.status(),
        }
        if database["status"] != "connected":
            return JSONResponse(status_code=503, content={"status": "unhealthy", **body})
        return {"status": "ok", **body}

    return app


app = create_app()
