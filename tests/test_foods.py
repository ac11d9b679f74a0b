from datetime import date

import pytest

from foodtracker.errors import NotFoundError, UpstreamError
from foodtracker.models.daily_nutrition import DailyNutrition
from foodtracker.models.food import Food
from foodtracker.services import food_service, meal_service
from foodtracker.utils.enums import FoodSource


class FakeOpenFoodFacts:
    def __init__(self, results=None, product=None, fail=False):
        self.results = results or []
        self.product = product
        self.fail = fail
        self.calls = []

    def search(self, query, page_size=10):
        self.calls.append(query)
        if self.fail:
            raise UpstreamError("connection refused")
        return self.results

    def lookup_barcode(self, barcode):
        if self.fail:
            raise UpstreamError("connection refused")
        return self.product


def external(name, barcode, calories=100, confidence=0.9):
    return {
        "name": name, "brand": "Acme", "barcode": barcode, "serving_size": "100g", "image_url": None,
        "is_from_cache": False, "confidence": confidence,
        "calories": calories, "protein": 1, "carbs": 2, "fat": 3, "fiber": 0, "sugar": 0, "sodium": 10,
    }


def test_create_and_get_food(client, auth_headers):
    r = client.post("/api/foods", headers=auth_headers, json={"name": "Granola", "calories": 450, "protein": 10})
    assert r.status_code == 201
    food = r.get_json()["food"]
    assert food["source"] == "manual"
    assert food["nutrient_basis_g"] == 100.0

    r = client.get(f"/api/foods/{food['id']}", headers=auth_headers)
    assert r.get_json()["food"]["calories"] == 450.0

    r = client.post("/api/foods", headers=auth_headers, json={"name": "No calories"})
    assert r.status_code == 400


def test_only_owner_can_edit_manual_food(client, auth_headers):
    food = client.post("/api/foods", headers=auth_headers, json={"name": "Granola", "calories": 450}).get_json()["food"]
    other = client.post("/api/auth/register", json={"email": "other@example.com", "password": "secret1"}).get_json()
    headers = {"Authorization": f"Bearer {other['access_token']}"}

    r = client.put(f"/api/foods/{food['id']}", headers=headers, json={"calories": 1})
    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "NOT_FOOD_OWNER"

    r = client.put(f"/api/foods/{food['id']}", headers=auth_headers, json={"calories": 400})
    assert r.status_code == 200
    assert r.get_json()["food"]["calories"] == 400.0


def test_cached_food_is_immutable(client, auth_headers, food_factory):
    food = food_factory(name="Cola", calories=42, source=FoodSource.OPENFOODFACTS.value, is_cached=True)
    r = client.put(f"/api/foods/{food.id}", headers=auth_headers, json={"calories": 0})
    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "FOOD_IMMUTABLE"
    r = client.delete(f"/api/foods/{food.id}", headers=auth_headers)
    assert r.status_code == 403


def test_food_in_use_cannot_be_deleted(client, auth_headers, user, food_factory):
    food = food_factory(name="Rice", calories=130, owner=user)
    meal_service.create_meal(user.id, {
        "name": "Lunch", "date": date(2024, 1, 1),
        "foods": [{"food_id": food.id, "quantity": 100}],
    })
    r = client.delete(f"/api/foods/{food.id}", headers=auth_headers)
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "FOOD_IN_USE"


def test_editing_food_refreshes_logged_days(user, food_factory):
    food = food_factory(name="Rice", calories=130, owner=user)
    meal_service.create_meal(user.id, {
        "name": "Lunch", "date": date(2024, 1, 1),
        "foods": [{"food_id": food.id, "quantity": 200}],
    })
    food_service.update_food(user.id, food.id, {"calories": 100})
    row = DailyNutrition.query.filter_by(user_id=user.id, date=date(2024, 1, 1)).one()
    assert float(row.total_calories) == 200.0


def test_usage_count_and_frequent(client, auth_headers, user, food_factory):
    rice = food_factory(name="Rice", calories=130)
    food_factory(name="Beans", calories=120)
    meal_service.create_meal(user.id, {
        "name": "Lunch", "date": date(2024, 1, 1),
        "foods": [{"food_id": rice.id, "quantity": 100}],
    })
    client.post(f"/api/foods/{rice.id}/mark-used", headers=auth_headers)
    r = client.get("/api/foods/frequent", headers=auth_headers)
    items = r.get_json()["items"]
    assert [f["name"] for f in items] == ["Rice"]
    assert items[0]["usage_count"] == 2


def test_search_requires_two_characters(client, auth_headers):
    r = client.get("/api/foods/search?q=a", headers=auth_headers)
    assert r.status_code == 400


def test_search_local_only_when_lookups_disabled(client, auth_headers, food_factory):
    food_factory(name="Banana bread", calories=326)
    r = client.get("/api/foods/search?q=banana", headers=auth_headers)
    body = r.get_json()
    assert body["total"] == 1
    assert body["items"][0]["is_from_cache"] is True


def test_search_tops_up_from_external(app, food_factory):
    food_factory(name="Banana", calories=89)
    client = FakeOpenFoodFacts(results=[
        external("Banana chips", "111", calories=519),
        external("Banana", "222", confidence=0.1),
        external("Unknown Product", "333"),
    ])
    results = food_service.search_foods("banana", client)

    assert client.calls == ["banana"]
    names = [r["name"] for r in results]
    assert "Banana chips" in names
    assert Food.query.filter_by(barcode="111").one().is_cached is True
    # low confidence results are returned but not stored
    assert Food.query.filter_by(barcode="222").first() is None
    assert results[0]["is_from_cache"] is True


def test_search_falls_back_to_local_on_upstream_error(app, food_factory):
    food_factory(name="Banana", calories=89)
    results = food_service.search_foods("banana", FakeOpenFoodFacts(fail=True))
    assert [r["name"] for r in results] == ["Banana"]


def test_search_skips_external_with_enough_local_hits(app, food_factory):
    for i in range(food_service.CACHE_THRESHOLD):
        food_factory(name=f"Apple {i}", calories=52)
    client = FakeOpenFoodFacts(results=[external("Apple pie", "999")])
    results = food_service.search_foods("apple", client)
    assert client.calls == []
    assert len(results) == food_service.CACHE_THRESHOLD


def test_cache_food_deduplicates_by_barcode(app):
    first = food_service.cache_food(external("Oat milk", "555"))
    second = food_service.cache_food(external("Oat milk (renamed)", "555"))
    assert first.id == second.id


def test_barcode_lookup(app, food_factory):
    food_factory(name="Local yogurt", calories=60, barcode="123")
    assert food_service.lookup_barcode("123")["name"] == "Local yogurt"

    fetched = food_service.lookup_barcode("456", FakeOpenFoodFacts(product=external("Granola", "456")))
    assert fetched["source"] == FoodSource.OPENFOODFACTS.value
    assert Food.query.filter_by(barcode="456").count() == 1

    with pytest.raises(NotFoundError) as exc:
        food_service.lookup_barcode("789", FakeOpenFoodFacts())
    assert exc.value.code == "BARCODE_NOT_FOUND"


def test_barcode_not_found_over_http(client, auth_headers):
    r = client.get("/api/foods/barcode/0000", headers=auth_headers)
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == "BARCODE_NOT_FOUND"


def test_deduplicate_results():
    results = food_service.deduplicate_results([
        {"name": "A", "brand": "x", "barcode": "1", "is_from_cache": False, "confidence": 0.5},
        {"name": "A", "brand": "x", "barcode": "1", "is_from_cache": True, "confidence": 1.0},
        {"name": "B", "brand": "y", "barcode": "", "is_from_cache": True, "confidence": 1.0},
    ])
    assert [r["name"] for r in results] == ["B", "A"]
