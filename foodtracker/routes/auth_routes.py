from flask import Blueprint
from foodtracker.utils.auth import require_auth
from foodtracker.controllers.auth_controller import (
    register_handler,
    login_handler,
    refresh_handler,
    logout_handler,
    me_handler,
    update_goals_handler,
)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register():
    return register_handler()


@auth_bp.post("/login")
def login():
    return login_handler()


@auth_bp.post("/refresh")
def refresh():
    return refresh_handler()


@auth_bp.post("/logout")
@require_auth
def logout():
    return logout_handler()


@auth_bp.get("/me")
@require_auth
def me():
    return me_handler()


@auth_bp.put("/me/goals")
@require_auth
def update_goals():
    return update_goals_handler()
