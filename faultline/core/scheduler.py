"""
Scheduler Management Module

Provides access to the APScheduler instance without circular dependencies.
The scheduler is created in app.py during startup and registered here.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..services.error_metrics_service import ErrorMetrics

logger = logging.getLogger(__name__)

METRICS_RESET_JOB_ID = "error_metrics_reset_job"

# Global scheduler instance - will be set by app.py during startup
_scheduler: Optional[AsyncIOScheduler] = None


def set_scheduler(scheduler: Optional[AsyncIOScheduler]) -> None:
    """
    Register the scheduler instance.
    Called by app.py during startup, and with None on shutdown.

    Args:
        scheduler: The AsyncIOScheduler instance
    """
    global _scheduler
    _scheduler = scheduler


def get_scheduler() -> AsyncIOScheduler:
    """
    Get the scheduler instance.

    Returns:
        The AsyncIOScheduler instance

    Raises:
        RuntimeError: If scheduler has not been initialized
    """
    if _scheduler is None:
        raise RuntimeError("Scheduler has not been initialized. This should be set during app startup.")
    return _scheduler


def schedule_metrics_reset(scheduler: AsyncIOScheduler, metrics: ErrorMetrics, minutes: int) -> None:
    """Reset the error counters every ``minutes`` minutes."""
    scheduler.add_job(
        metrics.reset,
        "interval",
        minutes=minutes,
        id=METRICS_RESET_JOB_ID,
        replace_existing=True,
    )
    logger.info(f"Scheduled error metrics reset every {minutes} minutes")
