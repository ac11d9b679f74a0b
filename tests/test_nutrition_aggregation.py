from datetime import date
from decimal import Decimal

import pytest

from foodtracker.errors import ConflictError, DataIntegrityError, NotFoundError
from foodtracker.extensions import db
from foodtracker.models.daily_nutrition import DailyNutrition, progress_ratio, progress_status
from foodtracker.models.food_entry import FoodEntry
from foodtracker.models.meal import Meal
from foodtracker.services import meal_service, nutrition_service
from foodtracker.services.nutrition_service import recompute_daily_nutrition

DAY = date(2024, 1, 1)


@pytest.fixture()
def two_meals(user, food_factory):
    apple = food_factory(name="Apple", calories=52, protein=0.3, carbs=14, fat=0.2)
    pasta = food_factory(name="Pasta", calories=150, protein=5, carbs=30, fat=1)
    breakfast = meal_service.create_meal(user.id, {
        "name": "Breakfast", "date": DAY, "time": "08:00",
        "foods": [{"food_id": apple.id, "quantity": 100, "unit": "g"}],
    })
    lunch = meal_service.create_meal(user.id, {
        "name": "Lunch", "date": DAY, "time": "12:30",
        "foods": [{"food_id": pasta.id, "quantity": 200, "unit": "g"}],
    })
    return breakfast, lunch


def test_two_meals_sum(user, two_meals):
    row = recompute_daily_nutrition(user.id, DAY)
    db.session.commit()
    assert row.total_calories == Decimal("352.00")
    assert row.meal_count == 2
    assert row.total_carbs == Decimal("74.00")


def test_no_meals_gives_zero_row(user):
    row = recompute_daily_nutrition(user.id, date(2024, 2, 2))
    db.session.commit()
    assert row.total_calories == 0
    assert row.meal_count == 0


def test_recompute_is_idempotent(user, two_meals):
    first = recompute_daily_nutrition(user.id, DAY).to_dict(include_progress=False)
    second = recompute_daily_nutrition(user.id, DAY).to_dict(include_progress=False)
    db.session.commit()
    assert first == second
    assert DailyNutrition.query.filter_by(user_id=user.id, date=DAY).count() == 1


def test_totals_equal_sum_of_entries(user, two_meals):
    row = recompute_daily_nutrition(user.id, DAY)
    meals = nutrition_service.meals_for_day(user.id, DAY)
    expected = nutrition_service.empty_totals()
    for meal in meals:
        for entry in meal.entries:
            nutrition_service.add_totals(expected, nutrition_service.entry_nutrients(entry))
    for name, value in expected.items():
        assert row.totals()[name] == value.quantize(Decimal("0.01"))


def test_meal_mutations_keep_row_current(user, two_meals):
    breakfast, lunch = two_meals
    meal_service.delete_meal(user.id, lunch.id)
    row = DailyNutrition.query.filter_by(user_id=user.id, date=DAY).one()
    assert row.total_calories == Decimal("52.00")
    assert row.meal_count == 1

    meal_service.update_meal(user.id, breakfast.id, {"date": date(2024, 1, 2)})
    old = DailyNutrition.query.filter_by(user_id=user.id, date=DAY).one()
    new = DailyNutrition.query.filter_by(user_id=user.id, date=date(2024, 1, 2)).one()
    assert old.meal_count == 0 and old.total_calories == 0
    assert new.total_calories == Decimal("52.00")


def test_entry_quantity_change_updates_row(user, two_meals):
    breakfast, _ = two_meals
    entry = breakfast.entries[0]
    meal_service.update_entry(user.id, entry.id, {"quantity": Decimal("50")})
    row = DailyNutrition.query.filter_by(user_id=user.id, date=DAY).one()
    assert row.total_calories == Decimal("326.00")


def test_missing_food_raises_without_writing(user, two_meals):
    breakfast, _ = two_meals
    db.session.add(FoodEntry(meal_id=breakfast.id, food_id=9999, quantity=Decimal("100"), unit="g"))
    db.session.commit()

    with pytest.raises(DataIntegrityError) as exc:
        recompute_daily_nutrition(user.id, DAY)
    db.session.rollback()
    assert exc.value.code == "MISSING_FOOD"

    row = DailyNutrition.query.filter_by(user_id=user.id, date=DAY).one()
    assert row.total_calories == Decimal("352.00")


def test_missing_food_on_new_day_leaves_no_row(user):
    meal = Meal(user_id=user.id, name="Ghost", date=date(2024, 3, 3), category="snack")
    db.session.add(meal)
    db.session.flush()
    db.session.add(FoodEntry(meal_id=meal.id, food_id=4242, quantity=Decimal("1"), unit="g"))
    db.session.commit()

    with pytest.raises(DataIntegrityError):
        recompute_daily_nutrition(user.id, date(2024, 3, 3))
    db.session.rollback()
    assert DailyNutrition.query.filter_by(user_id=user.id, date=date(2024, 3, 3)).first() is None


def test_unknown_user_without_meals(app):
    with pytest.raises(NotFoundError):
        recompute_daily_nutrition(12345, DAY)


def test_progress_is_none_without_goal(user, two_meals):
    row = recompute_daily_nutrition(user.id, DAY)
    assert row.calorie_goal is None
    assert row.progress()["calories"] == {"ratio": None, "percent": None, "status": None}


def test_goal_preferences_snapshot(user, two_meals):
    user.daily_calorie_goal = Decimal("400")
    db.session.commit()
    row = recompute_daily_nutrition(user.id, DAY)
    progress = row.progress()
    assert row.calorie_goal == Decimal("400.00")
    assert progress["calories"]["percent"] == 88.0
    assert progress["calories"]["status"] == "under"
    assert progress["protein"]["status"] is None


def test_progress_helpers():
    assert progress_ratio(Decimal("50"), None) is None
    assert progress_ratio(Decimal("50"), 0) is None
    assert progress_ratio(Decimal("50"), Decimal("100")) == Decimal("0.5")
    assert progress_status(Decimal("0.95")) == "met"
    assert progress_status(Decimal("1.2")) == "over"
    assert progress_status(None) is None


def test_weekly_summary_is_monday_based(user, two_meals):
    summary = nutrition_service.weekly_summary(user.id, date(2024, 1, 3))
    assert summary["start_date"] == "2024-01-01"
    assert summary["end_date"] == "2024-01-07"
    assert summary["totals"]["calories"] == 352.0
    assert summary["logged_days"] == 1
    assert summary["averages"]["calories"] == 352.0


def test_macro_breakdown(user, two_meals):
    data = nutrition_service.macro_breakdown(user.id, DAY)
    # protein 10.3g, carbs 74g, fat 2.2g
    assert data["calories"] == {"protein": 41.2, "carbs": 296.0, "fat": 19.8}
    assert sum(data["percentages"].values()) == pytest.approx(100, abs=0.05)
    assert data["by_category"]["lunch"]["calories"] == 300.0
    assert data["by_category"]["dinner"]["percentages"] == {"protein": 0.0, "carbs": 0.0, "fat": 0.0}


@pytest.fixture()
def generic_dialect(monkeypatch):
    monkeypatch.setattr(nutrition_service, "_dialect_name", lambda: "mysql")


def test_select_then_write_upsert(user, food_factory, generic_dialect):
    apple = food_factory(name="Apple", calories=52, protein=0.3, carbs=14, fat=0.2)
    meal_service.create_meal(user.id, {
        "name": "Breakfast", "date": DAY, "time": "08:00",
        "foods": [{"food_id": apple.id, "quantity": 100, "unit": "g"}],
    })
    first = DailyNutrition.query.filter_by(user_id=user.id, date=DAY).one()
    first_id = first.id
    assert first.total_calories == Decimal("52.00")

    meal_service.create_meal(user.id, {
        "name": "Snack", "date": DAY, "time": "16:00",
        "foods": [{"food_id": apple.id, "quantity": 200, "unit": "g"}],
    })
    rows = DailyNutrition.query.filter_by(user_id=user.id, date=DAY).all()
    assert [r.id for r in rows] == [first_id]
    assert rows[0].total_calories == Decimal("156.00")
    assert rows[0].meal_count == 2


def test_select_then_write_collision_raises_conflict(user, two_meals, generic_dialect, monkeypatch):
    # Another writer inserted the row between our select and our insert
    monkeypatch.setattr(nutrition_service, "_find_daily_row", lambda user_id, day: None)

    with pytest.raises(ConflictError) as exc:
        recompute_daily_nutrition(user.id, DAY)
    db.session.rollback()
    assert exc.value.code == "DAILY_NUTRITION_CONFLICT"

    rows = DailyNutrition.query.filter_by(user_id=user.id, date=DAY).all()
    assert len(rows) == 1
    assert rows[0].total_calories == Decimal("352.00")
