"""
FastAPI application setup.

``create_app`` wires one ErrorClassifier and one ErrorMetrics instance into
``app.state``, installs the classifying exception handlers and the error
analysis router, and starts the periodic metrics reset when configured.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from .config import Settings, get_settings
from .core import scheduler as scheduler_registry
from .core.error_handlers import register_exception_handlers
from .routers import error_analysis as error_analysis_router
from .services.error_classification_service import ErrorClassifier
from .services.error_metrics_service import ErrorMetrics

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)


def create_app(
    settings: Optional[Settings] = None,
    classifier: Optional[ErrorClassifier] = None,
    metrics: Optional[ErrorMetrics] = None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title=settings.app_name, version="0.1.0")
    app.state.settings = settings
    app.state.classifier = classifier or ErrorClassifier()
    app.state.error_metrics = metrics or ErrorMetrics(thresholds=settings.alert_thresholds)

    register_exception_handlers(app)
    app.include_router(error_analysis_router.router)

    @app.on_event("startup")
    async def startup_event():
        interval = settings.metrics_reset_interval_minutes
        if not interval:
            logger.info("Periodic error metrics reset disabled.")
            return
        scheduler = AsyncIOScheduler()
        scheduler_registry.schedule_metrics_reset(scheduler, app.state.error_metrics, interval)
        scheduler.start()
        scheduler_registry.set_scheduler(scheduler)
        app.state.scheduler = scheduler
        logger.info("APScheduler started for error metrics reset.")

    @app.on_event("shutdown")
    def shutdown_event():
        scheduler = getattr(app.state, "scheduler", None)
        if scheduler is not None and scheduler.running:
            scheduler.shutdown()
            scheduler_registry.set_scheduler(None)
            logger.info("APScheduler shut down.")

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    return app


# Entry point for ``uvicorn faultline.app:app``
configure_logging()
app = create_app()
