"""
Nutrition Goal Service

Goal CRUD, presets, profile based goal calculation (Harris-Benedict) and
per-day progress against a goal. At most one goal per period is active.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from foodtracker.errors import ConflictError, NotFoundError, ValidationError
from foodtracker.extensions import db
from foodtracker.models.daily_nutrition import progress_ratio, progress_status
from foodtracker.models.nutrition_goal import GOAL_FIELDS, NutritionGoal
from foodtracker.services.nutrition_service import recompute_daily_nutrition
from foodtracker.utils.enums import GoalPeriod, GoalType
from foodtracker.utils.http import round2

logger = logging.getLogger(__name__)

MACRO_TOLERANCE = Decimal("0.1")

GOAL_TEMPLATES = {
    GoalType.WEIGHT_LOSS: {
        "name": "Weight Loss Goals",
        "calorie_goal": 1500, "protein_goal": 120, "carb_goal": 150, "fat_goal": 50,
        "fiber_goal": 25, "sodium_goal": 2000, "water_goal": 2500,
    },
    GoalType.WEIGHT_GAIN: {
        "name": "Weight Gain Goals",
        "calorie_goal": 2500, "protein_goal": 150, "carb_goal": 300, "fat_goal": 90,
        "fiber_goal": 30, "water_goal": 3000,
    },
    GoalType.MAINTENANCE: {
        "name": "Maintenance Goals",
        "calorie_goal": 2000, "protein_goal": 130, "carb_goal": 250, "fat_goal": 70,
        "fiber_goal": 25, "water_goal": 2500,
    },
    GoalType.MUSCLE_GAIN: {
        "name": "Muscle Gain Goals",
        "calorie_goal": 2300, "protein_goal": 160, "carb_goal": 250, "fat_goal": 75,
        "fiber_goal": 25, "water_goal": 3000,
    },
    GoalType.ATHLETIC_PERFORMANCE: {
        "name": "Athletic Performance Goals",
        "calorie_goal": 2800, "protein_goal": 140, "carb_goal": 350, "fat_goal": 90,
        "fiber_goal": 30, "water_goal": 3500,
    },
    GoalType.CUSTOM: {
        "name": "Custom Goals",
        "calorie_goal": 2000, "protein_goal": 100, "carb_goal": 250, "fat_goal": 65,
    },
}

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

# goal type -> (calorie adjustment, protein g per kg body weight)
GOAL_ADJUSTMENTS = {
    GoalType.WEIGHT_LOSS: (-500, 1.2),
    GoalType.WEIGHT_GAIN: (500, 1.0),
    GoalType.MUSCLE_GAIN: (200, 1.6),
    GoalType.ATHLETIC_PERFORMANCE: (300, 1.4),
}

# goal column -> daily total key
PROGRESS_FIELDS = {
    "calorie_goal": "calories",
    "protein_goal": "protein",
    "carb_goal": "carbs",
    "fat_goal": "fat",
    "fiber_goal": "fiber",
    "sugar_goal": "sugar",
    "sodium_goal": "sodium",
}


def goal_templates() -> Dict[str, Dict[str, Any]]:
    return {goal_type.value: dict(values) for goal_type, values in GOAL_TEMPLATES.items()}


def check_macro_consistency(calories, protein, carbs, fat) -> None:
    """Macro calories (4/4/9) must be within 10% of the calorie goal."""
    if None in (calories, protein, carbs, fat):
        return
    calories = Decimal(str(calories))
    macro_calories = Decimal(str(protein)) * 4 + Decimal(str(carbs)) * 4 + Decimal(str(fat)) * 9
    difference = abs(calories - macro_calories)
    if difference > calories * MACRO_TOLERANCE:
        raise ValidationError(
            f"Macro calories ({macro_calories}) don't match calorie goal ({calories}). "
            f"Difference: {difference:.0f} calories.",
            code="MACRO_MISMATCH",
        )


def list_goals(user_id: int, period: Optional[str] = None, active: Optional[bool] = None) -> List[NutritionGoal]:
    query = NutritionGoal.query.filter_by(user_id=user_id)
    if period:
        query = query.filter_by(period=period)
    if active is not None:
        query = query.filter_by(is_active=active)
    return query.order_by(NutritionGoal.created_at.desc(), NutritionGoal.id.desc()).all()


def get_goal(user_id: int, goal_id: int) -> NutritionGoal:
    goal = NutritionGoal.query.filter_by(id=goal_id, user_id=user_id).first()
    if goal is None:
        raise NotFoundError("Nutrition goal not found", code="GOAL_NOT_FOUND")
    return goal


def get_active_goal(user_id: int, period: str = GoalPeriod.DAILY.value) -> Optional[NutritionGoal]:
    return NutritionGoal.query.filter_by(user_id=user_id, period=period, is_active=True).first()


def create_goal(user_id: int, data: Dict[str, Any]) -> NutritionGoal:
    period = data.get("period") or GoalPeriod.DAILY.value
    is_active = data.get("is_active", True)
    if is_active and get_active_goal(user_id, period):
        raise ConflictError(
            f"An active {period} goal already exists. Deactivate it first or create as inactive.",
            code="ACTIVE_GOAL_EXISTS",
        )
    check_macro_consistency(data.get("calorie_goal"), data.get("protein_goal"), data.get("carb_goal"), data.get("fat_goal"))

    goal = NutritionGoal(
        user_id=user_id,
        name=data["name"],
        description=data.get("description"),
        period=period,
        goal_type=data.get("goal_type") or GoalType.CUSTOM.value,
        is_active=is_active,
        tolerance_lower=data.get("tolerance_lower") or 90,
        tolerance_upper=data.get("tolerance_upper") or 110,
    )
    for field in GOAL_FIELDS:
        if data.get(field) is not None:
            setattr(goal, field, data[field])
    try:
        db.session.add(goal)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("User %s created %s goal %s", user_id, period, goal.id)
    return goal


def update_goal(user_id: int, goal_id: int, data: Dict[str, Any]) -> NutritionGoal:
    goal = get_goal(user_id, goal_id)
    merged = {f: data.get(f, getattr(goal, f)) for f in ("calorie_goal", "protein_goal", "carb_goal", "fat_goal")}
    if any(f in data for f in merged):
        check_macro_consistency(merged["calorie_goal"], merged["protein_goal"], merged["carb_goal"], merged["fat_goal"])

    for field in ("name", "description", "period", "goal_type", "tolerance_lower", "tolerance_upper") + GOAL_FIELDS:
        if field in data:
            setattr(goal, field, data[field])
    if goal.tolerance_lower > goal.tolerance_upper:
        raise ValidationError("tolerance_lower must not exceed tolerance_upper")
    if "is_active" in data:
        goal.is_active = bool(data["is_active"])
    if goal.is_active:
        _deactivate_others(goal)
    db.session.commit()
    return goal


def _deactivate_others(goal: NutritionGoal) -> None:
    (
        NutritionGoal.query
        .filter(
            NutritionGoal.user_id == goal.user_id,
            NutritionGoal.period == goal.period,
            NutritionGoal.is_active.is_(True),
            NutritionGoal.id != goal.id,
        )
        .update({"is_active": False}, synchronize_session="fetch")
    )


def activate_goal(user_id: int, goal_id: int) -> NutritionGoal:
    goal = get_goal(user_id, goal_id)
    _deactivate_others(goal)
    goal.is_active = True
    db.session.commit()
    logger.info("User %s activated goal %s", user_id, goal.id)
    return goal


def deactivate_goal(user_id: int, goal_id: int) -> NutritionGoal:
    goal = get_goal(user_id, goal_id)
    goal.is_active = False
    db.session.commit()
    return goal


def delete_goal(user_id: int, goal_id: int) -> None:
    goal = get_goal(user_id, goal_id)
    db.session.delete(goal)
    db.session.commit()


def calculate_goals_from_profile(profile: Dict[str, Any]) -> Dict[str, Any]:
    """
    Daily targets from a body profile using the Harris-Benedict BMR.

    Falls back to the preset of the goal type when weight, height, age or
    gender is missing.
    """
    goal_type = GoalType(profile["goal_type"])
    weight, height, age, gender = (profile.get(k) for k in ("weight", "height", "age", "gender"))
    if not (weight and height and age and gender):
        values = dict(GOAL_TEMPLATES[goal_type])
        values.pop("name", None)
        return values

    if gender == "male":
        bmr = 88.362 + (13.397 * weight) + (4.799 * height) - (5.677 * age)
    else:
        bmr = 447.593 + (9.247 * weight) + (3.098 * height) - (4.330 * age)

    tdee = bmr * ACTIVITY_MULTIPLIERS.get(profile.get("activity_level") or "moderate", 1.55)
    calorie_adjustment, protein_per_kg = GOAL_ADJUSTMENTS.get(goal_type, (0, 1.0))

    calories = round(tdee + calorie_adjustment)
    protein = round(weight * protein_per_kg)
    fat = round(calories * 0.25 / 9)
    carbs = round((calories - protein * 4 - fat * 9) / 4)
    return {
        "calorie_goal": calories,
        "protein_goal": protein,
        "carb_goal": carbs,
        "fat_goal": fat,
        "fiber_goal": 25,
        "sodium_goal": 2300,
        "water_goal": round(weight * 35),
    }


def create_from_template(user_id: int, profile: Dict[str, Any]) -> NutritionGoal:
    goal_type = GoalType(profile["goal_type"])
    data = calculate_goals_from_profile(profile)
    data.update({
        "name": f"{goal_type.value.replace('_', ' ').upper()} Goals",
        "description": f"Auto-generated goals for {goal_type.value}",
        "period": GoalPeriod.DAILY.value,
        "goal_type": goal_type.value,
    })
    return create_goal(user_id, data)


def goal_progress(user_id: int, goal_id: int, day: date) -> Dict[str, Any]:
    """
    Progress of one day against a goal. Fields the goal leaves empty report
    None for percent and status and are not counted as tracked.
    """
    goal = get_goal(user_id, goal_id)
    try:
        row = recompute_daily_nutrition(user_id, day)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    actual = row.totals()
    actual["water"] = Decimal(row.water_intake_ml or 0)
    percentages, statuses = {}, {}
    for column, nutrient in list(PROGRESS_FIELDS.items()) + [("water_goal", "water")]:
        ratio = progress_ratio(actual[nutrient], getattr(goal, column))
        percentages[nutrient] = round2(ratio * 100) if ratio is not None else None
        statuses[nutrient] = progress_status(ratio, goal.tolerance_lower, goal.tolerance_upper)

    tracked = [s for s in statuses.values() if s is not None]
    met = sum(1 for s in tracked if s == "met")
    return {
        "goal_id": goal.id,
        "goal_name": goal.name,
        "date": day.isoformat(),
        "period": goal.period,
        "nutrition": row.to_dict(include_progress=False),
        "goal": goal.to_dict(),
        "percentages": percentages,
        "status": statuses,
        "summary": {
            "total_goals_met": met,
            "total_goals_tracked": len(tracked),
            "overall_score": round(met * 100 / len(tracked)) if tracked else None,
        },
    }
