from datetime import date
from flask import request
from foodtracker.schemas.nutrition_schema import DayLogSchema
from foodtracker.services import nutrition_service
from foodtracker.utils.dates import date_arg, require_date
from foodtracker.utils.http import ok, error, json_body, validate_schema


def daily_handler(date_str):
    day = require_date(date_str)
    return ok(nutrition_service.daily_summary(request.user_id, day))


def update_day_log_handler(date_str):
    day = require_date(date_str)
    data, errors = validate_schema(DayLogSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid day log", 400, details=errors)
    row = nutrition_service.update_day_log(request.user_id, day, data)
    return ok(row.to_dict())


def weekly_handler():
    day = date_arg("date", date.today())
    return ok(nutrition_service.weekly_summary(request.user_id, day))


def macro_breakdown_handler(date_str):
    day = require_date(date_str)
    return ok(nutrition_service.macro_breakdown(request.user_id, day))
