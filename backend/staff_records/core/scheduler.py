"""Background job scheduling (APScheduler) for housekeeping tasks.

The only job today is the token blacklist sweep. It runs on its own thread,
independent of request handling; a failing run is logged and the next one
happens on schedule.
"""

from __future__ import annotations

import atexit
import logging
from dataclasses import dataclass

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from flask import Flask

from staff_records.services._shared.ports import TokenBlacklistStore

log = logging.getLogger(__name__)

SWEEP_JOB_ID = "token_blacklist_sweep"

JOB_DEFAULTS = {
    "coalesce": True,
    "max_instances": 1,
    "misfire_grace_time": 300,
}

_scheduler: BackgroundScheduler | None = None


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Scheduler settings read from the Flask config."""

    enabled: bool = True
    sweep_minutes: int = 15
    timezone: str = "UTC"

    @classmethod
    def from_app(cls, app: Flask) -> SchedulerConfig:
        return cls(
            enabled=bool(app.config.get("SCHEDULER_ENABLED", True)),
            sweep_minutes=int(app.config.get("TOKEN_BLACKLIST_SWEEP_MINUTES", 15)),
        )


def _job_listener(event: JobExecutionEvent) -> None:
    if event.exception:
        log.error(
            "Scheduled job failed",
            extra={"job_id": event.job_id},
            exc_info=event.exception,
        )
    else:
        log.debug("Scheduled job executed", extra={"job_id": event.job_id})


def sweep_blacklist(blacklist: TokenBlacklistStore) -> int:
    """Run one sweep; never raises.

    :param blacklist: Store to prune.
    :returns: Entries removed, or 0 when the sweep failed.
    :rtype: int
    """
    try:
        return blacklist.sweep()
    except Exception:
        log.exception("Token blacklist sweep failed", extra={"job_id": SWEEP_JOB_ID})
        return 0


def create_scheduler(config: SchedulerConfig) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(job_defaults=JOB_DEFAULTS, timezone=config.timezone)
    scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
    return scheduler


def register_sweep_job(
    scheduler: BackgroundScheduler, blacklist: TokenBlacklistStore, *, minutes: int
) -> None:
    scheduler.add_job(
        sweep_blacklist,
        trigger=IntervalTrigger(minutes=minutes),
        args=[blacklist],
        id=SWEEP_JOB_ID,
        name="Remove expired entries from the token blacklist",
        replace_existing=True,
    )


def start_scheduler(app: Flask, blacklist: TokenBlacklistStore) -> BackgroundScheduler | None:
    """Start the process-wide scheduler unless disabled or already running."""
    global _scheduler
    config = SchedulerConfig.from_app(app)
    if not config.enabled:
        log.info("Scheduler disabled")
        return None
    if _scheduler is not None and _scheduler.running:
        return _scheduler

    scheduler = create_scheduler(config)
    register_sweep_job(scheduler, blacklist, minutes=config.sweep_minutes)
    scheduler.start()
    atexit.register(stop_scheduler)
    _scheduler = scheduler
    log.info(
        "Scheduler started",
        extra={"job_id": SWEEP_JOB_ID},
    )
    return scheduler


def stop_scheduler(wait: bool = False) -> None:
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=wait)
    _scheduler = None


def get_scheduler() -> BackgroundScheduler | None:
    return _scheduler


def init_app(app: Flask) -> None:
    from staff_records.core.security import get_blacklist

    scheduler = start_scheduler(app, get_blacklist(app))
    if scheduler is not None:
        app.extensions["scheduler"] = scheduler
