"""
Calendar Service

Month, week and day views plus logging streaks. Views are computed from the
meals in memory with the same aggregation as the daily record; nothing is
written except by the day view, which refreshes the stored row.
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from foodtracker.errors import ValidationError
from foodtracker.models.daily_nutrition import GOAL_COLUMNS, progress_ratio
from foodtracker.models.meal import Meal
from foodtracker.services.auth_service import get_user
from foodtracker.services.nutrition_service import (
    active_goal,
    add_totals,
    day_totals,
    daily_summary,
    empty_totals,
    goal_snapshot,
    meal_nutrients,
    meals_between,
    week_bounds,
)
from foodtracker.utils.http import round2

STREAK_LOOKBACK_DAYS = 90


def _date_range(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def _goal_progress(totals, goals: Dict[str, Optional[Decimal]]) -> Dict[str, Optional[float]]:
    result = {}
    for nutrient, column in GOAL_COLUMNS.items():
        ratio = progress_ratio(totals[nutrient], goals.get(column))
        result[nutrient] = round2(ratio * 100) if ratio is not None else None
    return result


def _calendar_day(day: date, meals: List[Meal], goals, month: Optional[int] = None) -> Tuple[Dict[str, Any], Dict[str, Decimal]]:
    totals, count = day_totals(meals)
    data = {
        "date": day.isoformat(),
        "total_calories": round2(totals["calories"]),
        "total_protein": round2(totals["protein"]),
        "total_carbs": round2(totals["carbs"]),
        "total_fat": round2(totals["fat"]),
        "total_fiber": round2(totals["fiber"]),
        "meal_count": count,
        "has_data": count > 0,
        "day_of_week": day.isoweekday() % 7,  # 0 = Sunday
        "meals": [
            {
                "id": meal.id,
                "name": meal.name,
                "category": meal.category,
                "time": meal.time,
                "calories": round2(meal_nutrients(meal)["calories"]),
            }
            for meal in meals
        ],
        "goal_progress": _goal_progress(totals, goals) if count else None,
    }
    if month is not None:
        data["is_current_month"] = day.month == month
    return data, totals


def _summary(day_entries, totals_by_day) -> Dict[str, Any]:
    days_with_data = sum(1 for d in day_entries if d["has_data"])
    total = empty_totals()
    for totals in totals_by_day:
        add_totals(total, totals)

    def average(name):
        return round2(total[name] / days_with_data) if days_with_data else 0.0

    return {
        "total_days": len(day_entries),
        "days_with_data": days_with_data,
        "total_calories": round2(total["calories"]),
        "total_protein": round2(total["protein"]),
        "total_carbs": round2(total["carbs"]),
        "total_fat": round2(total["fat"]),
        "average_calories": average("calories"),
        "average_protein": average("protein"),
        "average_carbs": average("carbs"),
        "average_fat": average("fat"),
    }


def _user_goals(user_id: int):
    return goal_snapshot(get_user(user_id), active_goal(user_id))


def month_view(user_id: int, month: int, year: int) -> Dict[str, Any]:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    start = date(year, month, 1)
    end = date(year, month, calendar.monthrange(year, month)[1])
    goals = _user_goals(user_id)
    grouped = meals_between(user_id, start, end)

    days, totals = [], []
    for day in _date_range(start, end):
        entry, day_total = _calendar_day(day, grouped.get(day, []), goals, month)
        days.append(entry)
        totals.append(day_total)
    return {"month": month, "year": year, "days": days, "summary": _summary(days, totals)}


def week_view(user_id: int, day: date) -> Dict[str, Any]:
    start, end = week_bounds(day)
    goals = _user_goals(user_id)
    grouped = meals_between(user_id, start, end)

    days, totals = [], []
    for current in _date_range(start, end):
        entry, day_total = _calendar_day(current, grouped.get(current, []), goals)
        days.append(entry)
        totals.append(day_total)
    return {
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "days": days,
        "summary": _summary(days, totals),
    }


def day_view(user_id: int, day: date) -> Dict[str, Any]:
    return daily_summary(user_id, day)


def streaks(user_id: int, end_date: date) -> Dict[str, Any]:
    """Current and longest run of consecutive days with at least one meal."""
    start = end_date - timedelta(days=STREAK_LOOKBACK_DAYS)
    logged = {
        row.date
        for row in Meal.query.with_entities(Meal.date)
        .filter(Meal.user_id == user_id, Meal.date >= start, Meal.date <= end_date)
        .distinct()
    }

    streak_dates = []
    current = end_date
    while current >= start and current in logged:
        streak_dates.insert(0, current.isoformat())
        current -= timedelta(days=1)

    longest = run = 0
    for day in _date_range(start, end_date):
        run = run + 1 if day in logged else 0
        longest = max(longest, run)

    return {
        "current_streak": len(streak_dates),
        "longest_streak": longest,
        "streak_dates": streak_dates,
    }


def stats(user_id: int, start_date: date, end_date: date) -> Dict[str, Any]:
    if end_date < start_date:
        raise ValidationError("end_date must not be before start_date")
    grouped = meals_between(user_id, start_date, end_date)

    total_days = (end_date - start_date).days + 1
    days_with_data = len(grouped)
    total_meals = sum(len(meals) for meals in grouped.values())
    total_calories = sum((day_totals(meals)[0]["calories"] for meals in grouped.values()), Decimal("0"))

    most_active = least_active = None
    if grouped:
        ordered = sorted(grouped.items())
        most_active = max(ordered, key=lambda item: len(item[1]))[0].isoformat()
        least_active = min(ordered, key=lambda item: len(item[1]))[0].isoformat()

    return {
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "total_days": total_days,
        "days_with_data": days_with_data,
        "completion_rate": round(days_with_data * 100 / total_days),
        "average_calories": round2(total_calories / days_with_data) if days_with_data else 0.0,
        "average_meals_per_day": round2(Decimal(total_meals) / days_with_data) if days_with_data else 0.0,
        "most_active_day": most_active,
        "least_active_day": least_active,
    }
