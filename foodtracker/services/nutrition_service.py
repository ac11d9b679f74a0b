"""
Nutrition Service

Aggregates food entry contributions into per-meal and per-day totals and
maintains the DailyNutrition record for each (user, date).

Totals are accumulated as full precision Decimals. Rounding happens only when
a row is stored (two places) and when values are serialised.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from foodtracker.errors import ConflictError, DataIntegrityError, NotFoundError
from foodtracker.extensions import db
from foodtracker.models.daily_nutrition import DailyNutrition, DAY_LOG_FIELDS, GOAL_COLUMNS
from foodtracker.models.food import Food, NUTRIENTS
from foodtracker.models.food_entry import FoodEntry
from foodtracker.models.meal import Meal
from foodtracker.models.nutrition_goal import NutritionGoal
from foodtracker.models.user import User
from foodtracker.services.units import to_grams
from foodtracker.utils.enums import GoalPeriod, MealCategory
from foodtracker.utils.http import TWO_PLACES, round2

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9

Totals = Dict[str, Decimal]


def empty_totals() -> Totals:
    return {name: ZERO for name in NUTRIENTS}


def add_totals(target: Totals, other: Totals) -> Totals:
    for name in NUTRIENTS:
        target[name] += other[name]
    return target


def entry_nutrients(entry: FoodEntry, food: Optional[Food] = None) -> Totals:
    """
    Contribution of one food entry.

    Every nutrient is ``food.X * grams / food.nutrient_basis_g`` where grams is
    the entry quantity converted through the unit table.

    Raises:
        DataIntegrityError: the entry references a food that no longer exists
        ValidationError: the unit cannot be converted for this food
    """
    food = food if food is not None else entry.food
    if food is None:
        raise DataIntegrityError(
            f"Food entry {entry.id} references missing food {entry.food_id}",
            code="MISSING_FOOD",
        )
    grams = to_grams(entry.quantity, entry.unit, food)
    basis = Decimal(food.nutrient_basis_g or 100)
    if basis <= 0:
        raise DataIntegrityError(f"Food {food.id} has a non-positive nutrient basis", code="INVALID_FOOD")
    factor = grams / basis
    result = {}
    for name in NUTRIENTS:
        value = getattr(food, name)
        result[name] = Decimal(value) * factor if value is not None else ZERO
    return result


def meal_nutrients(meal: Meal) -> Totals:
    totals = empty_totals()
    for entry in meal.entries:
        add_totals(totals, entry_nutrients(entry))
    return totals


def day_totals(meals: Iterable[Meal]) -> Tuple[Totals, int]:
    """Sum per meal totals across ``meals``; returns ``(totals, meal_count)``."""
    totals = empty_totals()
    count = 0
    for meal in meals:
        add_totals(totals, meal_nutrients(meal))
        count += 1
    return totals, count


def serialize_totals(totals: Totals) -> Dict[str, Any]:
    return {name: round2(value) for name, value in totals.items()}


def _meals_query(user_id: int):
    return (
        Meal.query
        .options(selectinload(Meal.entries).selectinload(FoodEntry.food))
        .filter(Meal.user_id == user_id)
        .execution_options(populate_existing=True)
    )


def meals_for_day(user_id: int, day: date) -> List[Meal]:
    return _meals_query(user_id).filter(Meal.date == day).order_by(Meal.time, Meal.id).all()


def meals_between(user_id: int, start: date, end: date) -> Dict[date, List[Meal]]:
    meals = (
        _meals_query(user_id)
        .filter(and_(Meal.date >= start, Meal.date <= end))
        .order_by(Meal.date, Meal.time, Meal.id)
        .all()
    )
    grouped = defaultdict(list)
    for meal in meals:
        grouped[meal.date].append(meal)
    return grouped


def active_goal(user_id: int, period: GoalPeriod = GoalPeriod.DAILY) -> Optional[NutritionGoal]:
    return NutritionGoal.query.filter_by(user_id=user_id, period=period.value, is_active=True).first()


def goal_snapshot(user: User, goal: Optional[NutritionGoal] = None) -> Dict[str, Optional[Decimal]]:
    """
    Goal values copied onto the daily row.

    The active daily NutritionGoal wins field by field, then the user's daily
    preferences. A field with neither stays None, meaning no goal.
    """
    preferences = user.goal_preferences()
    snapshot = {}
    for nutrient, column in GOAL_COLUMNS.items():
        value = getattr(goal, column) if goal is not None else None
        if value is None:
            value = preferences.get(nutrient)
        snapshot[column] = Decimal(value) if value is not None else None
    return snapshot


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _dialect_name() -> str:
    return db.session.get_bind().dialect.name


def _find_daily_row(user_id: int, day: date) -> Optional[DailyNutrition]:
    return DailyNutrition.query.filter_by(user_id=user_id, date=day).first()


def _upsert_daily_row(values: Dict[str, Any]) -> None:
    """
    Insert or update the (user_id, date) row.

    SQLite and PostgreSQL use a single ``ON CONFLICT`` statement. Other
    dialects select then write inside a savepoint; losing the race to a
    concurrent insert raises ConflictError.
    """
    dialect = _dialect_name()
    if dialect in ("sqlite", "postgresql"):
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        stmt = insert(DailyNutrition.__table__).values(**values)
        updates = {k: stmt.excluded[k] for k in values if k not in ("user_id", "date")}
        updates["updated_at"] = datetime.utcnow()
        stmt = stmt.on_conflict_do_update(index_elements=["user_id", "date"], set_=updates)
        db.session.execute(stmt)
        return

    row = _find_daily_row(values["user_id"], values["date"])
    try:
        with db.session.begin_nested():
            if row is None:
                row = DailyNutrition(user_id=values["user_id"], date=values["date"])
                db.session.add(row)
            for key, value in values.items():
                setattr(row, key, value)
            db.session.flush()
    except IntegrityError:
        raise ConflictError(
            f"Concurrent update of daily nutrition for {values['date'].isoformat()}",
            code="DAILY_NUTRITION_CONFLICT",
        )


def recompute_daily_nutrition(user_id: int, day: date) -> DailyNutrition:
    """
    Recompute and persist the DailyNutrition row for ``(user_id, day)``.

    Totals and the goal snapshot are written; the day log fields (water,
    exercise, notes) are left alone. The caller owns the transaction and
    commits once together with whatever mutation triggered the recompute.

    Raises:
        DataIntegrityError: an entry references a missing food, or the meals
            belong to a user that does not exist
        ValidationError: an entry unit cannot be converted
    """
    meals = meals_for_day(user_id, day)
    user = db.session.get(User, user_id)
    if user is None:
        if meals:
            raise DataIntegrityError(f"Meals reference missing user {user_id}", code="MISSING_USER")
        raise NotFoundError("User not found", code="USER_NOT_FOUND")

    totals, meal_count = day_totals(meals)

    values: Dict[str, Any] = {"user_id": user_id, "date": day, "meal_count": meal_count}
    for name, value in totals.items():
        values[f"total_{name}"] = _quantize(value)
    values.update(goal_snapshot(user, active_goal(user_id)))

    _upsert_daily_row(values)
    row = (
        DailyNutrition.query
        .filter_by(user_id=user_id, date=day)
        .execution_options(populate_existing=True)
        .one()
    )
    logger.debug("Recomputed daily nutrition user=%s date=%s meals=%s", user_id, day, meal_count)
    return row


def recompute_dates(user_id: int, days: Iterable[date]) -> None:
    """Recompute each distinct day once, in date order."""
    for day in sorted(set(d for d in days if d is not None)):
        recompute_daily_nutrition(user_id, day)


def _tolerance(goal: Optional[NutritionGoal]) -> Tuple[int, int]:
    if goal is None:
        return 90, 110
    return goal.tolerance_lower, goal.tolerance_upper


def daily_summary(user_id: int, day: date) -> Dict[str, Any]:
    """Recompute, persist and describe one day including per meal totals."""
    try:
        row = recompute_daily_nutrition(user_id, day)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    goal = active_goal(user_id)
    lower, upper = _tolerance(goal)
    data = row.to_dict(include_progress=False)
    data["progress"] = row.progress(lower, upper)
    data["meals"] = [
        {
            "id": meal.id,
            "name": meal.name,
            "category": meal.category,
            "time": meal.time,
            "totals": serialize_totals(meal_nutrients(meal)),
        }
        for meal in meals_for_day(user_id, day)
    ]
    return data


def update_day_log(user_id: int, day: date, data: Dict[str, Any]) -> DailyNutrition:
    """Update water, exercise and notes for a day, creating the row if needed."""
    try:
        row = recompute_daily_nutrition(user_id, day)
        for field in DAY_LOG_FIELDS:
            if field in data:
                setattr(row, field, data[field])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("Updated day log user=%s date=%s", user_id, day)
    return row


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday..Sunday of the week containing ``day``."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def weekly_summary(user_id: int, day: date) -> Dict[str, Any]:
    """Per day totals and averages for the Monday-based week containing ``day``."""
    start, end = week_bounds(day)
    grouped = meals_between(user_id, start, end)
    week_totals = empty_totals()
    days = []
    logged_days = 0
    for offset in range(7):
        current = start + timedelta(days=offset)
        totals, count = day_totals(grouped.get(current, []))
        add_totals(week_totals, totals)
        if count:
            logged_days += 1
        days.append({"date": current.isoformat(), "meal_count": count, "totals": serialize_totals(totals)})

    averages = {
        name: round2(value / logged_days) if logged_days else 0.0
        for name, value in week_totals.items()
    }
    return {
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "days": days,
        "totals": serialize_totals(week_totals),
        "averages": averages,
        "logged_days": logged_days,
    }


def macro_calories(totals: Totals) -> Dict[str, Decimal]:
    return {
        "protein": totals["protein"] * CALORIES_PER_GRAM_PROTEIN,
        "carbs": totals["carbs"] * CALORIES_PER_GRAM_CARBS,
        "fat": totals["fat"] * CALORIES_PER_GRAM_FAT,
    }


def macro_percentages(totals: Totals) -> Dict[str, float]:
    """Share of macro calories from protein, carbs and fat (0 when empty)."""
    calories = macro_calories(totals)
    total = sum(calories.values(), ZERO)
    if total <= 0:
        return {name: 0.0 for name in calories}
    return {name: round2(value * 100 / total) for name, value in calories.items()}


def macro_breakdown(user_id: int, day: date) -> Dict[str, Any]:
    meals = meals_for_day(user_id, day)
    totals, meal_count = day_totals(meals)
    by_category = {category.value: empty_totals() for category in MealCategory}
    for meal in meals:
        add_totals(by_category[MealCategory(meal.category).value], meal_nutrients(meal))

    return {
        "date": day.isoformat(),
        "meal_count": meal_count,
        "grams": {name: round2(totals[name]) for name in ("protein", "carbs", "fat")},
        "calories": {name: round2(value) for name, value in macro_calories(totals).items()},
        "percentages": macro_percentages(totals),
        "by_category": {
            category: {
                "calories": round2(values["calories"]),
                "percentages": macro_percentages(values),
            }
            for category, values in by_category.items()
        },
    }

