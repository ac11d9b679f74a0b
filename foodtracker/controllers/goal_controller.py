from flask import request
from foodtracker.schemas.goal_schema import CreateGoalSchema, GoalTemplateSchema, UpdateGoalSchema
from foodtracker.services import goal_service
from foodtracker.utils.dates import require_date
from foodtracker.utils.http import ok, error, json_body, arg_str, validate_schema


def list_goals_handler():
    active = arg_str("active")
    goals = goal_service.list_goals(
        request.user_id,
        period=arg_str("period"),
        active=None if active is None else active.lower() in ("1", "true", "yes"),
    )
    return ok({"items": [g.to_dict() for g in goals]})


def templates_handler():
    return ok({"templates": goal_service.goal_templates()})


def active_goal_handler():
    goal = goal_service.get_active_goal(request.user_id, arg_str("period", "daily"))
    return ok({"goal": goal.to_dict() if goal else None})


def get_goal_handler(goal_id):
    return ok({"goal": goal_service.get_goal(request.user_id, goal_id).to_dict()})


def create_goal_handler():
    data, errors = validate_schema(CreateGoalSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid goal data", 400, details=errors)
    goal = goal_service.create_goal(request.user_id, data)
    return ok({"goal": goal.to_dict()}, 201)


def create_from_template_handler():
    data, errors = validate_schema(GoalTemplateSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid profile", 400, details=errors)
    goal = goal_service.create_from_template(request.user_id, data)
    return ok({"goal": goal.to_dict()}, 201)


def update_goal_handler(goal_id):
    data, errors = validate_schema(UpdateGoalSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid goal data", 400, details=errors)
    goal = goal_service.update_goal(request.user_id, goal_id, data)
    return ok({"goal": goal.to_dict()})


def activate_goal_handler(goal_id):
    return ok({"goal": goal_service.activate_goal(request.user_id, goal_id).to_dict()})


def deactivate_goal_handler(goal_id):
    return ok({"goal": goal_service.deactivate_goal(request.user_id, goal_id).to_dict()})


def delete_goal_handler(goal_id):
    goal_service.delete_goal(request.user_id, goal_id)
    return ok({"message": "Nutrition goal deleted"})


def goal_progress_handler(goal_id, date_str):
    day = require_date(date_str)
    return ok(goal_service.goal_progress(request.user_id, goal_id, day))
