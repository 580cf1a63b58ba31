"""Daily reminder sweep scheduled with APScheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from src.config import settings

logger = logging.getLogger(__name__)

JOB_ID = "reminder_sweep"


def build_reminder_scheduler(
    sweep: Callable[[], object],
    hour: int | None = None,
    minute: int | None = None,
) -> BackgroundScheduler:
    """Return an unstarted scheduler that runs ``sweep`` once a day."""
    hour = settings.reminder_cron_hour if hour is None else hour
    minute = settings.reminder_cron_minute if minute is None else minute

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        sweep,
        trigger=CronTrigger(hour=hour, minute=minute),
        id=JOB_ID,
        name="Check for due and overdue action items",
        misfire_grace_time=3600,
        coalesce=True,
        max_instances=1,
    )
    logger.info("Reminder sweep scheduled daily at %02d:%02d", hour, minute)
    return scheduler
