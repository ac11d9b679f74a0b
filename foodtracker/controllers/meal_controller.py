from flask import request
from foodtracker.schemas.meal_schema import CreateMealSchema, FoodEntrySchema, UpdateFoodEntrySchema, UpdateMealSchema
from foodtracker.services import meal_service
from foodtracker.services.meal_categorizer import categorization_ranges
from foodtracker.services.nutrition_service import entry_nutrients
from foodtracker.utils.dates import date_arg
from foodtracker.utils.http import ok, error, json_body, arg_int, arg_str, validate_schema


def list_meals_handler():
    page = arg_int("page", 1, min_value=1)
    limit = arg_int("limit", 20, min_value=1, max_value=100)
    return ok(meal_service.list_meals(
        request.user_id,
        on_date=date_arg("date"),
        start_date=date_arg("start_date"),
        end_date=date_arg("end_date"),
        category=arg_str("category"),
        page=page,
        limit=limit,
    ))


def get_meal_handler(meal_id):
    meal = meal_service.get_meal(request.user_id, meal_id)
    return ok({"meal": meal_service.serialize_meal(meal)})


def create_meal_handler():
    data, errors = validate_schema(CreateMealSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid meal data", 400, details=errors)
    meal = meal_service.create_meal(request.user_id, data)
    return ok({"meal": meal_service.serialize_meal(meal)}, 201)


def update_meal_handler(meal_id):
    data, errors = validate_schema(UpdateMealSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid meal data", 400, details=errors)
    meal = meal_service.update_meal(request.user_id, meal_id, data)
    return ok({"meal": meal_service.serialize_meal(meal)})


def delete_meal_handler(meal_id):
    meal_service.delete_meal(request.user_id, meal_id)
    return ok({"message": "Meal deleted"})


def add_entry_handler(meal_id):
    data, errors = validate_schema(FoodEntrySchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid food entry", 400, details=errors)
    entry = meal_service.add_entry(request.user_id, meal_id, data)
    return ok({"entry": entry.to_dict(entry_nutrients(entry))}, 201)


def update_entry_handler(entry_id):
    data, errors = validate_schema(UpdateFoodEntrySchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid food entry", 400, details=errors)
    entry = meal_service.update_entry(request.user_id, entry_id, data)
    return ok({"entry": entry.to_dict(entry_nutrients(entry))})


def delete_entry_handler(entry_id):
    meal_service.delete_entry(request.user_id, entry_id)
    return ok({"message": "Food entry deleted"})


def categorization_handler():
    return ok({"ranges": categorization_ranges(), "default": "snack"})


def meal_stats_handler():
    start_date = date_arg("start_date")
    end_date = date_arg("end_date")
    if start_date is None or end_date is None:
        return error("VALIDATION_ERROR", "start_date and end_date are required", 400)
    return ok(meal_service.meal_stats(request.user_id, start_date, end_date))
