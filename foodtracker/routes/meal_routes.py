from flask import Blueprint
from foodtracker.utils.auth import require_auth
from foodtracker.controllers.meal_controller import (
    list_meals_handler,
    get_meal_handler,
    create_meal_handler,
    update_meal_handler,
    delete_meal_handler,
    add_entry_handler,
    update_entry_handler,
    delete_entry_handler,
    categorization_handler,
    meal_stats_handler,
)

meal_bp = Blueprint("meals", __name__, url_prefix="/api/meals")


@meal_bp.get("")
@require_auth
def list_meals():
    return list_meals_handler()


@meal_bp.post("")
@require_auth
def create_meal():
    return create_meal_handler()


@meal_bp.get("/categorization")
@require_auth
def categorization():
    return categorization_handler()


@meal_bp.get("/stats")
@require_auth
def meal_stats():
    return meal_stats_handler()


@meal_bp.get("/<int:meal_id>")
@require_auth
def get_meal(meal_id):
    return get_meal_handler(meal_id)


@meal_bp.put("/<int:meal_id>")
@require_auth
def update_meal(meal_id):
    return update_meal_handler(meal_id)


@meal_bp.delete("/<int:meal_id>")
@require_auth
def delete_meal(meal_id):
    return delete_meal_handler(meal_id)


@meal_bp.post("/<int:meal_id>/entries")
@require_auth
def add_entry(meal_id):
    return add_entry_handler(meal_id)


@meal_bp.put("/entries/<int:entry_id>")
@require_auth
def update_entry(entry_id):
    return update_entry_handler(entry_id)


@meal_bp.delete("/entries/<int:entry_id>")
@require_auth
def delete_entry(entry_id):
    return delete_entry_handler(entry_id)
