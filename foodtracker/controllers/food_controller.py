from flask import request
from foodtracker.schemas.food_schema import FoodSchema, UpdateFoodSchema
from foodtracker.services import food_service
from foodtracker.services.open_food_facts import get_open_food_facts_client
from foodtracker.utils.http import ok, error, json_body, arg_int, arg_str, validate_schema


def search_foods_handler():
    query = (arg_str("q") or arg_str("query") or "").strip()
    if len(query) < 2:
        return error("VALIDATION_ERROR", "q must be at least 2 characters", 400)
    results = food_service.search_foods(query, get_open_food_facts_client())
    return ok({"items": results, "total": len(results), "query": query})


def barcode_handler(barcode):
    return ok({"food": food_service.lookup_barcode(barcode, get_open_food_facts_client())})


def list_foods_handler():
    page = arg_int("page", 1, min_value=1)
    limit = arg_int("limit", 20, min_value=1, max_value=100)
    return ok(food_service.list_foods(page, limit, source=arg_str("source")))


def get_food_handler(food_id):
    return ok({"food": food_service.get_food(food_id).to_dict()})


def create_food_handler():
    data, errors = validate_schema(FoodSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid food data", 400, details=errors)
    food = food_service.create_food(request.user_id, data)
    return ok({"food": food.to_dict()}, 201)


def update_food_handler(food_id):
    data, errors = validate_schema(UpdateFoodSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid food data", 400, details=errors)
    food = food_service.update_food(request.user_id, food_id, data)
    return ok({"food": food.to_dict()})


def delete_food_handler(food_id):
    food_service.delete_food(request.user_id, food_id)
    return ok({"message": "Food deleted"})


def frequent_foods_handler():
    limit = arg_int("limit", 20, min_value=1, max_value=100)
    return ok({"items": [f.to_dict() for f in food_service.frequent_foods(limit)]})


def mark_used_handler(food_id):
    food = food_service.mark_food_used(food_id)
    return ok({"food": food.to_dict()})
