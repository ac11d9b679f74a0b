import pytest

from foodtracker.errors import ValidationError
from foodtracker.services.meal_categorizer import (
    MEAL_TIME_RANGES,
    categorization_ranges,
    classify_meal_time,
    classify_minutes,
    parse_meal_time,
    resolve_category,
)
from foodtracker.utils.enums import MealCategory


@pytest.mark.parametrize("value,expected", [
    ("05:00", MealCategory.BREAKFAST),
    ("08:30", MealCategory.BREAKFAST),
    ("10:59", MealCategory.BREAKFAST),
    ("11:00", MealCategory.LUNCH),
    ("14:59", MealCategory.LUNCH),
    ("15:00", MealCategory.SNACK),
    ("17:59", MealCategory.SNACK),
    ("18:00", MealCategory.DINNER),
    ("18:59", MealCategory.DINNER),
    ("19:00", MealCategory.SNACK),
    ("23:59", MealCategory.SNACK),
    ("00:00", MealCategory.SNACK),
    ("04:59", MealCategory.SNACK),
])
def test_classify_boundaries(value, expected):
    assert classify_meal_time(value) == expected


def test_missing_time_is_snack():
    assert classify_meal_time(None) == MealCategory.SNACK
    assert classify_meal_time("") == MealCategory.SNACK


def test_ranges_cover_every_minute_once():
    for minute in range(24 * 60):
        hits = [c for lower, upper, c in MEAL_TIME_RANGES if lower <= minute < upper]
        assert len(hits) == 1
        assert classify_minutes(minute) == hits[0]


@pytest.mark.parametrize("value", [
    "8:30", "24:00", "12:60", "noon", "12:3", "12:30:00", " 12:30", "08:30\n", "\u0660\u0668:\u0663\u0660",
])
def test_malformed_time_is_rejected(value):
    with pytest.raises(ValidationError) as exc:
        parse_meal_time(value)
    assert exc.value.code == "INVALID_TIME"


def test_parse_meal_time_minutes():
    assert parse_meal_time("07:45") == 465


def test_explicit_category_is_custom():
    assert resolve_category("08:30", "dinner") == (MealCategory.DINNER, True)
    # matching the time based category still counts as custom
    assert resolve_category("08:30", "breakfast") == (MealCategory.BREAKFAST, True)


def test_time_decides_without_category():
    assert resolve_category("12:15", None) == (MealCategory.LUNCH, False)
    assert resolve_category(None, None) == (MealCategory.SNACK, False)


def test_bad_time_rejected_even_with_category():
    with pytest.raises(ValidationError):
        resolve_category("25:00", "lunch")


def test_unknown_category_rejected():
    with pytest.raises(ValidationError) as exc:
        resolve_category("08:30", "brunch")
    assert exc.value.code == "INVALID_CATEGORY"


def test_categorization_ranges_shape():
    ranges = categorization_ranges()
    assert ranges[0] == {"category": "breakfast", "start": "05:00", "end": "10:59"}
    assert len(ranges) == len(MEAL_TIME_RANGES)
