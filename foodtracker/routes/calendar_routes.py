from flask import Blueprint
from foodtracker.utils.auth import require_auth
from foodtracker.controllers.calendar_controller import (
    month_handler,
    week_handler,
    day_handler,
    streaks_handler,
    stats_handler,
)

calendar_bp = Blueprint("calendar", __name__, url_prefix="/api/calendar")


@calendar_bp.get("/month")
@require_auth
def month():
    return month_handler()


@calendar_bp.get("/week")
@require_auth
def week():
    return week_handler()


@calendar_bp.get("/day/<date_str>")
@require_auth
def day(date_str):
    return day_handler(date_str)


@calendar_bp.get("/streaks")
@require_auth
def streaks():
    return streaks_handler()


@calendar_bp.get("/stats")
@require_auth
def stats():
    return stats_handler()
