from datetime import date
from flask import request
from foodtracker.services import calendar_service
from foodtracker.utils.dates import date_arg, require_date
from foodtracker.utils.http import ok, error, arg_int


def month_handler():
    today = date.today()
    month = arg_int("month", today.month)
    year = arg_int("year", today.year, min_value=1900, max_value=9999)
    return ok(calendar_service.month_view(request.user_id, month, year))


def week_handler():
    day = date_arg("date", date.today())
    return ok(calendar_service.week_view(request.user_id, day))


def day_handler(date_str):
    return ok(calendar_service.day_view(request.user_id, require_date(date_str)))


def streaks_handler():
    end_date = date_arg("end_date", date.today())
    return ok(calendar_service.streaks(request.user_id, end_date))


def stats_handler():
    start_date = date_arg("start_date")
    end_date = date_arg("end_date")
    if start_date is None or end_date is None:
        return error("VALIDATION_ERROR", "start_date and end_date are required", 400)
    return ok(calendar_service.stats(request.user_id, start_date, end_date))
