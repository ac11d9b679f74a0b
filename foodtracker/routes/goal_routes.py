from flask import Blueprint
from foodtracker.utils.auth import require_auth
from foodtracker.controllers.goal_controller import (
    list_goals_handler,
    templates_handler,
    active_goal_handler,
    get_goal_handler,
    create_goal_handler,
    create_from_template_handler,
    update_goal_handler,
    activate_goal_handler,
    deactivate_goal_handler,
    delete_goal_handler,
    goal_progress_handler,
)

goal_bp = Blueprint("goals", __name__, url_prefix="/api/nutrition/goals")


@goal_bp.get("")
@require_auth
def list_goals():
    return list_goals_handler()


@goal_bp.get("/templates")
@require_auth
def templates():
    return templates_handler()


@goal_bp.get("/active")
@require_auth
def active_goal():
    return active_goal_handler()


@goal_bp.post("")
@require_auth
def create_goal():
    return create_goal_handler()


@goal_bp.post("/from-template")
@require_auth
def create_from_template():
    return create_from_template_handler()


@goal_bp.get("/<int:goal_id>")
@require_auth
def get_goal(goal_id):
    return get_goal_handler(goal_id)


@goal_bp.put("/<int:goal_id>")
@require_auth
def update_goal(goal_id):
    return update_goal_handler(goal_id)


@goal_bp.put("/<int:goal_id>/activate")
@require_auth
def activate_goal(goal_id):
    return activate_goal_handler(goal_id)


@goal_bp.put("/<int:goal_id>/deactivate")
@require_auth
def deactivate_goal(goal_id):
    return deactivate_goal_handler(goal_id)


@goal_bp.delete("/<int:goal_id>")
@require_auth
def delete_goal(goal_id):
    return delete_goal_handler(goal_id)


@goal_bp.get("/<int:goal_id>/progress/<date_str>")
@require_auth
def goal_progress(goal_id, date_str):
    return goal_progress_handler(goal_id, date_str)
