"""
Meal Service

Meal and food entry CRUD. Every mutation recomputes the daily nutrition of
each affected date in the same transaction and commits once.
"""

import logging
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import desc

from foodtracker.errors import NotFoundError, ValidationError
from foodtracker.extensions import db
from foodtracker.models.food import Food
from foodtracker.models.food_entry import FoodEntry
from foodtracker.models.meal import Meal
from foodtracker.services.meal_categorizer import normalize_meal_time, parse_category, resolve_category
from foodtracker.services.nutrition_service import (
    day_totals,
    entry_nutrients,
    meal_nutrients,
    meals_between,
    recompute_dates,
    serialize_totals,
)
from foodtracker.services.units import parse_quantity, parse_unit, to_grams
from foodtracker.utils.enums import MealCategory
from foodtracker.utils.http import round2

logger = logging.getLogger(__name__)


def serialize_meal(meal: Meal, include_entries: bool = True) -> Dict[str, Any]:
    data = {
        "id": meal.id,
        "user_id": meal.user_id,
        "name": meal.name,
        "category": meal.category,
        "date": meal.date.isoformat(),
        "time": meal.time,
        "is_custom_category": bool(meal.is_custom_category),
        "notes": meal.notes,
        "totals": serialize_totals(meal_nutrients(meal)),
        "entry_count": len(meal.entries),
        "created_at": meal.created_at.isoformat() if meal.created_at else None,
        "updated_at": meal.updated_at.isoformat() if meal.updated_at else None,
    }
    if include_entries:
        data["entries"] = [entry.to_dict(entry_nutrients(entry)) for entry in meal.entries]
    return data


def _get_food(food_id: int) -> Food:
    food = db.session.get(Food, food_id)
    if food is None:
        raise NotFoundError(f"Food {food_id} not found", code="FOOD_NOT_FOUND")
    return food


def _build_entry(data: Dict[str, Any]) -> FoodEntry:
    """Validate an entry payload against its food and build the row."""
    food = _get_food(data["food_id"])
    quantity = parse_quantity(data.get("quantity"))
    unit = parse_unit(data.get("unit") or "g")
    # Fails early when a piece/slice is logged for a food without a serving weight
    to_grams(quantity, unit, food)
    food.usage_count = (food.usage_count or 0) + 1
    return FoodEntry(food=food, quantity=quantity, unit=unit.value)


def get_meal(user_id: int, meal_id: int) -> Meal:
    meal = Meal.query.filter_by(id=meal_id, user_id=user_id).first()
    if meal is None:
        raise NotFoundError(f"Meal {meal_id} not found", code="MEAL_NOT_FOUND")
    return meal


def list_meals(
    user_id: int,
    on_date: Optional[date] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    query = Meal.query.filter(Meal.user_id == user_id)
    if on_date is not None:
        query = query.filter(Meal.date == on_date)
    else:
        if start_date is not None:
            query = query.filter(Meal.date >= start_date)
        if end_date is not None:
            query = query.filter(Meal.date <= end_date)
    if category:
        query = query.filter(Meal.category == parse_category(category).value)

    total = query.count()
    meals = (
        query.order_by(desc(Meal.date), Meal.time, Meal.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "items": [serialize_meal(meal) for meal in meals],
        "page": page,
        "limit": limit,
        "total": total,
    }


def create_meal(user_id: int, data: Dict[str, Any]) -> Meal:
    """
    Create a meal, optionally with entries, and refresh that day's totals.

    An explicit ``category`` marks the meal as custom; otherwise the category
    comes from ``time`` (snack when there is no time).
    """
    time = normalize_meal_time(data.get("time"))
    category, is_custom = resolve_category(time, data.get("category"))

    try:
        meal = Meal(
            user_id=user_id,
            name=data["name"],
            date=data["date"],
            time=time,
            category=category.value,
            is_custom_category=is_custom,
            notes=data.get("notes"),
        )
        for entry_data in data.get("foods") or []:
            meal.entries.append(_build_entry(entry_data))
        db.session.add(meal)
        db.session.flush()
        recompute_dates(user_id, [meal.date])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Created meal %s for user %s on %s (%s)", meal.id, user_id, meal.date, meal.category)
    return meal


def update_meal(user_id: int, meal_id: int, data: Dict[str, Any]) -> Meal:
    """
    Update a meal.

    ``category: null`` switches the meal back to time based categorisation. A
    new time reclassifies the meal unless its category is custom.
    """
    meal = get_meal(user_id, meal_id)
    old_date = meal.date

    time = normalize_meal_time(data["time"]) if "time" in data else meal.time
    time_changed = "time" in data and time != meal.time

    if "category" in data:
        category, is_custom = resolve_category(time, data["category"])
    elif time_changed and not meal.is_custom_category:
        category, is_custom = resolve_category(time, None)
    else:
        category, is_custom = MealCategory(meal.category), bool(meal.is_custom_category)

    try:
        for field in ("name", "date", "notes"):
            if field in data:
                setattr(meal, field, data[field])
        meal.time = time
        meal.category = category.value
        meal.is_custom_category = is_custom
        db.session.flush()
        recompute_dates(user_id, [old_date, meal.date])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Updated meal %s for user %s", meal.id, user_id)
    return meal


def delete_meal(user_id: int, meal_id: int) -> None:
    meal = get_meal(user_id, meal_id)
    meal_date = meal.date
    try:
        db.session.delete(meal)
        db.session.flush()
        recompute_dates(user_id, [meal_date])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("Deleted meal %s for user %s", meal_id, user_id)


def _get_entry(user_id: int, entry_id: int) -> FoodEntry:
    entry = (
        FoodEntry.query
        .join(Meal, FoodEntry.meal_id == Meal.id)
        .filter(FoodEntry.id == entry_id, Meal.user_id == user_id)
        .first()
    )
    if entry is None:
        raise NotFoundError(f"Food entry {entry_id} not found", code="ENTRY_NOT_FOUND")
    return entry


def add_entry(user_id: int, meal_id: int, data: Dict[str, Any]) -> FoodEntry:
    meal = get_meal(user_id, meal_id)
    try:
        entry = _build_entry(data)
        meal.entries.append(entry)
        db.session.flush()
        recompute_dates(user_id, [meal.date])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("Added food %s to meal %s", entry.food_id, meal_id)
    return entry


def update_entry(user_id: int, entry_id: int, data: Dict[str, Any]) -> FoodEntry:
    entry = _get_entry(user_id, entry_id)
    food = _get_food(data["food_id"]) if data.get("food_id") is not None else entry.food
    if food is None:
        raise NotFoundError(f"Food {entry.food_id} not found", code="FOOD_NOT_FOUND")
    quantity = parse_quantity(data["quantity"]) if "quantity" in data else entry.quantity
    unit = parse_unit(data["unit"]) if data.get("unit") else parse_unit(entry.unit)
    to_grams(quantity, unit, food)

    try:
        entry.food = food
        entry.quantity = quantity
        entry.unit = unit.value
        db.session.flush()
        recompute_dates(user_id, [entry.meal.date])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return entry


def delete_entry(user_id: int, entry_id: int) -> None:
    entry = _get_entry(user_id, entry_id)
    meal = entry.meal
    try:
        meal.entries.remove(entry)
        db.session.flush()
        recompute_dates(user_id, [meal.date])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("Deleted food entry %s from meal %s", entry_id, meal.id)


def meal_stats(user_id: int, start_date: date, end_date: date) -> Dict[str, Any]:
    """Averages and the most common category over an inclusive date range."""
    if end_date < start_date:
        raise ValidationError("end_date must not be before start_date")
    grouped = meals_between(user_id, start_date, end_date)
    meals: List[Meal] = [meal for day in sorted(grouped) for meal in grouped[day]]
    totals, meal_count = day_totals(meals)

    categories = Counter(meal.category for meal in meals)
    most_common = categories.most_common(1)[0][0] if categories else MealCategory.SNACK.value
    days = (end_date - start_date).days + 1

    return {
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "total_meals": meal_count,
        "days_with_meals": len(grouped),
        "average_meals_per_day": round2(meal_count / days),
        "average_calories_per_meal": round2(totals["calories"] / meal_count) if meal_count else 0.0,
        "average_calories_per_day": round2(totals["calories"] / days),
        "most_common_category": most_common,
        "category_counts": {c.value: categories.get(c.value, 0) for c in MealCategory},
    }
