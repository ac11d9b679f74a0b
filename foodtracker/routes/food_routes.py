from flask import Blueprint
from foodtracker.utils.auth import require_auth
from foodtracker.controllers.food_controller import (
    search_foods_handler,
    barcode_handler,
    list_foods_handler,
    get_food_handler,
    create_food_handler,
    update_food_handler,
    delete_food_handler,
    frequent_foods_handler,
    mark_used_handler,
)

food_bp = Blueprint("foods", __name__, url_prefix="/api/foods")


@food_bp.get("/search")
@require_auth
def search_foods():
    return search_foods_handler()


@food_bp.get("/barcode/<barcode>")
@require_auth
def barcode(barcode):
    return barcode_handler(barcode)


@food_bp.get("/frequent")
@require_auth
def frequent_foods():
    return frequent_foods_handler()


@food_bp.get("")
@require_auth
def list_foods():
    return list_foods_handler()


@food_bp.post("")
@require_auth
def create_food():
    return create_food_handler()


@food_bp.get("/<int:food_id>")
@require_auth
def get_food(food_id):
    return get_food_handler(food_id)


@food_bp.put("/<int:food_id>")
@require_auth
def update_food(food_id):
    return update_food_handler(food_id)


@food_bp.delete("/<int:food_id>")
@require_auth
def delete_food(food_id):
    return delete_food_handler(food_id)


@food_bp.post("/<int:food_id>/mark-used")
@require_auth
def mark_used(food_id):
    return mark_used_handler(food_id)
