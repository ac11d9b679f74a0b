from datetime import date

import pytest

from foodtracker.errors import ValidationError
from foodtracker.services import goal_service, meal_service
from foodtracker.utils.enums import GoalType

BALANCED = {"name": "Balanced", "calorie_goal": 2000, "protein_goal": 150, "carb_goal": 200, "fat_goal": 67}


def test_one_active_goal_per_period(client, auth_headers):
    r = client.post("/api/nutrition/goals", headers=auth_headers, json=BALANCED)
    assert r.status_code == 201
    first = r.get_json()["goal"]
    assert first["is_active"] is True

    r = client.post("/api/nutrition/goals", headers=auth_headers, json=dict(BALANCED, name="Second"))
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "ACTIVE_GOAL_EXISTS"

    r = client.post("/api/nutrition/goals", headers=auth_headers, json=dict(BALANCED, name="Second", is_active=False))
    second = r.get_json()["goal"]
    r = client.put(f"/api/nutrition/goals/{second['id']}/activate", headers=auth_headers)
    assert r.get_json()["goal"]["is_active"] is True

    r = client.get("/api/nutrition/goals/active", headers=auth_headers)
    assert r.get_json()["goal"]["id"] == second["id"]
    r = client.get(f"/api/nutrition/goals/{first['id']}", headers=auth_headers)
    assert r.get_json()["goal"]["is_active"] is False

    r = client.get("/api/nutrition/goals?active=false", headers=auth_headers)
    assert [g["id"] for g in r.get_json()["items"]] == [first["id"]]


def test_macro_mismatch(client, auth_headers):
    r = client.post("/api/nutrition/goals", headers=auth_headers, json=dict(BALANCED, fat_goal=200))
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "MACRO_MISMATCH"


def test_update_and_delete_goal(client, auth_headers):
    goal = client.post("/api/nutrition/goals", headers=auth_headers, json=BALANCED).get_json()["goal"]
    r = client.put(f"/api/nutrition/goals/{goal['id']}", headers=auth_headers, json={"name": "Renamed", "fiber_goal": 30})
    assert r.get_json()["goal"]["name"] == "Renamed"
    assert r.get_json()["goal"]["fiber_goal"] == 30.0

    r = client.put(f"/api/nutrition/goals/{goal['id']}", headers=auth_headers, json={"calorie_goal": 900})
    assert r.status_code == 400

    r = client.delete(f"/api/nutrition/goals/{goal['id']}", headers=auth_headers)
    assert r.status_code == 200
    r = client.get(f"/api/nutrition/goals/{goal['id']}", headers=auth_headers)
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == "GOAL_NOT_FOUND"


def test_active_goal_drives_daily_progress(client, auth_headers):
    client.put("/api/auth/me/goals", headers=auth_headers, json={"daily_calorie_goal": 3000})
    client.post("/api/nutrition/goals", headers=auth_headers, json=BALANCED)
    day = client.get("/api/nutrition/daily/2024-01-01", headers=auth_headers).get_json()
    assert day["goals"]["calories"] == 2000.0
    assert day["goals"]["protein"] == 150.0
    assert day["progress"]["calories"]["percent"] == 0.0
    assert day["progress"]["calories"]["status"] == "under"


def test_goal_progress(user, food_factory):
    apple = food_factory(name="Apple", calories=52, protein=0.3, carbs=14, fat=0.2)
    pasta = food_factory(name="Pasta", calories=150, protein=5, carbs=30, fat=1)
    meal_service.create_meal(user.id, {
        "name": "Lunch", "date": date(2024, 1, 1), "time": "12:00",
        "foods": [
            {"food_id": apple.id, "quantity": 100, "unit": "g"},
            {"food_id": pasta.id, "quantity": 200, "unit": "g"},
        ],
    })
    goal = goal_service.create_goal(user.id, {
        "name": "Small", "calorie_goal": 400, "protein_goal": 10, "carb_goal": 80, "fat_goal": 2,
    })

    progress = goal_service.goal_progress(user.id, goal.id, date(2024, 1, 1))
    assert progress["percentages"]["calories"] == 88.0
    assert progress["status"] == {
        "calories": "under",
        "protein": "met",
        "carbs": "met",
        "fat": "met",
        "fiber": None,
        "sugar": None,
        "sodium": None,
        "water": None,
    }
    assert progress["summary"] == {"total_goals_met": 3, "total_goals_tracked": 4, "overall_score": 75}


def test_templates(client, auth_headers):
    r = client.get("/api/nutrition/goals/templates", headers=auth_headers)
    templates = r.get_json()["templates"]
    assert set(templates) == {t.value for t in GoalType}
    for values in templates.values():
        goal_service.check_macro_consistency(
            values["calorie_goal"], values["protein_goal"], values["carb_goal"], values["fat_goal"]
        )


def test_calculate_goals_from_profile():
    values = goal_service.calculate_goals_from_profile({
        "goal_type": "weight_loss", "weight": 80, "height": 180, "age": 30,
        "gender": "male", "activity_level": "moderate",
    })
    assert values["calorie_goal"] == 2373
    assert values["protein_goal"] == 96
    assert values["fat_goal"] == 66
    assert values["carb_goal"] == 349
    assert values["water_goal"] == 2800


def test_profile_falls_back_to_preset():
    values = goal_service.calculate_goals_from_profile({"goal_type": "weight_loss"})
    assert values["calorie_goal"] == 1500
    assert "name" not in values


def test_create_from_template(client, auth_headers):
    r = client.post("/api/nutrition/goals/from-template", headers=auth_headers, json={"goal_type": "maintenance"})
    assert r.status_code == 201
    goal = r.get_json()["goal"]
    assert goal["goal_type"] == "maintenance"
    assert goal["calorie_goal"] == 2000.0

    r = client.post("/api/nutrition/goals/from-template", headers=auth_headers, json={"goal_type": "maintenance", "weight": 70})
    assert r.status_code == 400


def test_check_macro_consistency_skips_partial_goals():
    goal_service.check_macro_consistency(2000, None, 100, 50)
    with pytest.raises(ValidationError):
        goal_service.check_macro_consistency(2000, 10, 10, 10)
