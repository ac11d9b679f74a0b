from flask import request
from foodtracker.schemas.auth_schema import GoalPreferencesSchema, LoginSchema, RefreshSchema, RegisterSchema
from foodtracker.services import auth_service
from foodtracker.utils.http import ok, error, json_body, validate_schema


def register_handler():
    data, errors = validate_schema(RegisterSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid registration data", 400, details=errors)
    tokens = auth_service.register(data["name"], data["email"], data["password"])
    return ok(tokens, 201)


def login_handler():
    data, errors = validate_schema(LoginSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "email and password required", 400, details=errors)
    return ok(auth_service.login(data["email"], data["password"]))


def refresh_handler():
    data, errors = validate_schema(RefreshSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "refresh_token required", 400, details=errors)
    return ok(auth_service.refresh(data["refresh_token"]))


def logout_handler():
    revoked = auth_service.logout(request.user_id)
    return ok({"message": "Logged out successfully", "revoked_tokens": revoked})


def me_handler():
    return ok({"user": auth_service.get_user(request.user_id).to_dict()})


def update_goals_handler():
    data, errors = validate_schema(GoalPreferencesSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid goal preferences", 400, details=errors)
    user = auth_service.update_goal_preferences(request.user_id, data)
    return ok({"user": user.to_dict()})
