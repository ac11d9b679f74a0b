from flask import Blueprint
from foodtracker.utils.auth import require_auth
from foodtracker.controllers.nutrition_controller import (
    daily_handler,
    update_day_log_handler,
    weekly_handler,
    macro_breakdown_handler,
)

nutrition_bp = Blueprint("nutrition", __name__, url_prefix="/api/nutrition")


@nutrition_bp.get("/daily/<date_str>")
@require_auth
def daily(date_str):
    return daily_handler(date_str)


@nutrition_bp.put("/daily/<date_str>/log")
@require_auth
def update_day_log(date_str):
    return update_day_log_handler(date_str)


@nutrition_bp.get("/weekly")
@require_auth
def weekly():
    return weekly_handler()


@nutrition_bp.get("/macro-breakdown/<date_str>")
@require_auth
def macro_breakdown(date_str):
    return macro_breakdown_handler(date_str)
