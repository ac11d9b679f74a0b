"""
Food Service

Local food catalogue: manual foods owned by their creator and foods cached
from Open Food Facts, which are read-only once stored.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, or_

from foodtracker.errors import ConflictError, ForbiddenError, NotFoundError, UpstreamError
from foodtracker.extensions import db
from foodtracker.models.food import Food, NUTRIENTS
from foodtracker.models.food_entry import FoodEntry
from foodtracker.models.meal import Meal
from foodtracker.services.nutrition_service import recompute_daily_nutrition
from foodtracker.services.open_food_facts import OpenFoodFactsClient, should_cache
from foodtracker.utils.enums import FoodSource

logger = logging.getLogger(__name__)

# Below this many local hits the search also asks Open Food Facts
CACHE_THRESHOLD = 5
MAX_EXTERNAL_RESULTS = 10
LOCAL_SEARCH_LIMIT = 20

EDITABLE_FIELDS = ("name", "brand", "barcode", "serving_size", "serving_size_g", "nutrient_basis_g", "image_url") + NUTRIENTS


def get_food(food_id: int) -> Food:
    food = db.session.get(Food, food_id)
    if food is None:
        raise NotFoundError(f"Food {food_id} not found", code="FOOD_NOT_FOUND")
    return food


def list_foods(page: int = 1, limit: int = 20, source: Optional[str] = None) -> Dict[str, Any]:
    query = Food.query
    if source:
        query = query.filter(Food.source == source)
    total = query.count()
    foods = query.order_by(Food.name, Food.id).offset((page - 1) * limit).limit(limit).all()
    return {"items": [f.to_dict() for f in foods], "page": page, "limit": limit, "total": total}


def create_food(user_id: int, data: Dict[str, Any]) -> Food:
    food = Food(source=FoodSource.MANUAL.value, created_by_id=user_id)
    for field in EDITABLE_FIELDS:
        if data.get(field) is not None:
            setattr(food, field, data[field])
    try:
        db.session.add(food)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("User %s created food %s (%s)", user_id, food.id, food.name)
    return food


def _check_editable(user_id: int, food: Food) -> None:
    if not food.is_manual:
        raise ForbiddenError(f"Food {food.id} comes from {food.source} and cannot be changed", code="FOOD_IMMUTABLE")
    if food.created_by_id != user_id:
        raise ForbiddenError("Only the creator can change this food", code="NOT_FOOD_OWNER")


def _affected_days(food_id: int):
    return (
        db.session.query(Meal.user_id, Meal.date)
        .join(FoodEntry, FoodEntry.meal_id == Meal.id)
        .filter(FoodEntry.food_id == food_id)
        .distinct()
        .all()
    )


def update_food(user_id: int, food_id: int, data: Dict[str, Any]) -> Food:
    """Update a manual food and refresh every day that logged it."""
    food = get_food(food_id)
    _check_editable(user_id, food)
    try:
        for field in EDITABLE_FIELDS:
            if field in data:
                setattr(food, field, data[field])
        db.session.flush()
        for owner_id, day in _affected_days(food.id):
            recompute_daily_nutrition(owner_id, day)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("User %s updated food %s", user_id, food.id)
    return food


def delete_food(user_id: int, food_id: int) -> None:
    food = get_food(food_id)
    _check_editable(user_id, food)
    in_use = FoodEntry.query.filter_by(food_id=food.id).count()
    if in_use:
        raise ConflictError(f"Food {food.id} is used by {in_use} meal entries", code="FOOD_IN_USE")
    try:
        db.session.delete(food)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("User %s deleted food %s", user_id, food_id)


def _local_result(food: Food, is_from_cache: bool = True, confidence: float = 1.0) -> Dict[str, Any]:
    data = food.to_dict()
    data["is_from_cache"] = is_from_cache
    data["confidence"] = confidence
    return data


def search_local(query: str) -> List[Food]:
    pattern = f"%{query.strip()}%"
    return (
        Food.query
        .filter(or_(Food.name.ilike(pattern), Food.brand.ilike(pattern)))
        .order_by(Food.name)
        .limit(LOCAL_SEARCH_LIMIT)
        .all()
    )


def cache_food(result: Dict[str, Any]) -> Food:
    """Store an external product unless it is already cached (by barcode, then name+brand)."""
    existing = None
    if result.get("barcode"):
        existing = Food.query.filter_by(barcode=result["barcode"]).first()
    if existing is None and result.get("name"):
        existing = Food.query.filter_by(name=result["name"], brand=result.get("brand") or "").first()
    if existing is not None:
        return existing

    food = Food(
        name=result.get("name") or "Unknown Product",
        brand=result.get("brand") or "",
        barcode=result.get("barcode") or None,
        external_id=result.get("barcode") or None,
        source=FoodSource.OPENFOODFACTS.value,
        serving_size=result.get("serving_size") or "100g",
        image_url=result.get("image_url"),
        is_cached=True,
        last_synced_at=datetime.utcnow(),
    )
    for name in ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium"):
        setattr(food, name, result.get(name) or 0)
    db.session.add(food)
    db.session.flush()
    logger.debug("Cached Open Food Facts product %s as food %s", food.barcode, food.id)
    return food


def _cache_external_results(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    payload = []
    for result in results[:MAX_EXTERNAL_RESULTS]:
        if not should_cache(result):
            payload.append(dict(result, id=None))
            continue
        food = cache_food(result)
        payload.append(_local_result(food, is_from_cache=False, confidence=result.get("confidence") or 0))
    return payload


def deduplicate_results(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop repeats by barcode (or name+brand); cached results first, then by confidence."""
    seen = set()
    unique = []
    for result in results:
        key = result.get("barcode") or f"{result.get('name')}-{result.get('brand')}"
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
    unique.sort(key=lambda r: (not r.get("is_from_cache"), -(r.get("confidence") or 0)))
    return unique


def search_foods(query: str, client: Optional[OpenFoodFactsClient] = None) -> List[Dict[str, Any]]:
    """
    Search local foods first and top up from Open Food Facts when there are
    fewer than CACHE_THRESHOLD local hits. External failures fall back to
    the local results.
    """
    local = [_local_result(food) for food in search_local(query)]
    if len(local) >= CACHE_THRESHOLD or client is None:
        return local

    try:
        external = client.search(query, page_size=MAX_EXTERNAL_RESULTS)
    except UpstreamError as e:
        logger.warning("External food search failed, returning local results only: %s", e.message)
        return local

    try:
        cached = _cache_external_results(external)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return deduplicate_results(local + cached)


def lookup_barcode(barcode: str, client: Optional[OpenFoodFactsClient] = None) -> Dict[str, Any]:
    food = Food.query.filter_by(barcode=barcode).first()
    if food is not None:
        return _local_result(food)

    product = client.lookup_barcode(barcode) if client is not None else None
    if product is None:
        raise NotFoundError(f"No food found for barcode {barcode}", code="BARCODE_NOT_FOUND")
    try:
        food = cache_food(product)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("Cached food %s from barcode %s", food.id, barcode)
    return _local_result(food, is_from_cache=False)


def frequent_foods(limit: int = 20) -> List[Food]:
    return (
        Food.query
        .filter(Food.usage_count > 0)
        .order_by(desc(Food.usage_count), desc(Food.updated_at))
        .limit(limit)
        .all()
    )


def mark_food_used(food_id: int) -> Food:
    food = get_food(food_id)
    food.usage_count = (food.usage_count or 0) + 1
    db.session.commit()
    return food
