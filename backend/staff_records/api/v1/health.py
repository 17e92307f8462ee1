"""``GET /health``: liveness plus the two dependencies worth probing."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from staff_records.api.deps import ok
from staff_records.core.extensions import db
from staff_records.core.scheduler import SWEEP_JOB_ID, get_scheduler

bp = Blueprint("health", __name__)


def _database_status() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db.session.rollback()
        return "fail"
    return "ok"


@bp.get("/health")
def healthcheck():
    """Always 200 while the process serves; ``db`` says whether queries work."""
    scheduler = get_scheduler()
    return ok(
        {
            "status": "ok",
            "db": _database_status(),
            "blacklist_sweep": "scheduled" if scheduler and scheduler.get_job(SWEEP_JOB_ID) else "off",
            "version": current_app.config.get("APP_VERSION", "dev"),
        }
    )
