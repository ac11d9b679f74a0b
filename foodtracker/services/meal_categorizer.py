"""
Time-of-day meal classification.

Boundaries are minutes since midnight, inclusive lower and exclusive upper.
Any minute of the day falls in exactly one range.
"""

import re
from typing import Optional, Tuple, Union

from foodtracker.errors import ValidationError
from foodtracker.utils.enums import MealCategory

_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2})")

MEAL_TIME_RANGES = (
    (300, 660, MealCategory.BREAKFAST),
    (660, 900, MealCategory.LUNCH),
    (900, 1080, MealCategory.SNACK),
    (1080, 1140, MealCategory.DINNER),
    (1140, 1440, MealCategory.SNACK),
    (0, 300, MealCategory.SNACK),
)


def parse_meal_time(value: Optional[str]) -> Optional[int]:
    """Return minutes since midnight for an ``HH:MM`` string, None when empty."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("Meal time must be a HH:MM string", code="INVALID_TIME")
    match = _TIME_RE.fullmatch(value)
    if not match:
        raise ValidationError(f"Invalid meal time '{value}', expected HH:MM", code="INVALID_TIME")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid meal time '{value}', expected HH:MM", code="INVALID_TIME")
    return hours * 60 + minutes


def normalize_meal_time(value: Optional[str]) -> Optional[str]:
    """Validate and return the stored form of a meal time (None for empty)."""
    return value if parse_meal_time(value) is not None else None


def classify_minutes(minutes: int) -> MealCategory:
    for lower, upper, category in MEAL_TIME_RANGES:
        if lower <= minutes < upper:
            return category
    raise ValidationError(f"Minute of day out of range: {minutes}", code="INVALID_TIME")


def classify_meal_time(value: Optional[str]) -> MealCategory:
    minutes = parse_meal_time(value)
    if minutes is None:
        return MealCategory.SNACK
    return classify_minutes(minutes)


def parse_category(value: Union[str, MealCategory]) -> MealCategory:
    if isinstance(value, MealCategory):
        return value
    try:
        return MealCategory(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(c.value for c in MealCategory)
        raise ValidationError(f"Invalid category '{value}', expected one of: {allowed}", code="INVALID_CATEGORY")


def resolve_category(time: Optional[str], category=None) -> Tuple[MealCategory, bool]:
    """Return ``(category, is_custom_category)`` for a meal.

    An explicit category always wins and marks the meal as custom, even when it
    matches what the time would give. Without one the time decides.
    """
    minutes = parse_meal_time(time)
    if category is not None and category != "":
        return parse_category(category), True
    if minutes is None:
        return MealCategory.SNACK, False
    return classify_minutes(minutes), False


def categorization_ranges():
    """Describe the time ranges for clients."""
    def fmt(minutes):
        return f"{minutes // 60:02d}:{minutes % 60:02d}"

    return [
        {"category": category.value, "start": fmt(lower), "end": fmt(upper - 1)}
        for lower, upper, category in MEAL_TIME_RANGES
    ]
