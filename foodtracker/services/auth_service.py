"""
Auth Service

Registration, login and refresh token rotation. Refresh tokens are random
strings handed to the client once and stored only as sha256 hashes.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict

from flask import current_app
from sqlalchemy.exc import IntegrityError

from foodtracker.errors import AuthenticationError, ConflictError, NotFoundError
from foodtracker.extensions import db
from foodtracker.models.refresh_token import RefreshToken
from foodtracker.models.role import Role
from foodtracker.models.user import User
from foodtracker.utils.auth import (
    check_password_hash,
    create_access_token,
    generate_refresh_token,
    hash_password,
    hash_refresh_token,
)
from foodtracker.utils.enums import UserRole

logger = logging.getLogger(__name__)

GOAL_PREFERENCE_FIELDS = ("daily_calorie_goal", "daily_protein_goal", "daily_carb_goal", "daily_fat_goal")


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return user


def _issue_tokens(user: User) -> Dict[str, Any]:
    """Create an access token and persist a new refresh token (caller commits)."""
    refresh_token = generate_refresh_token()
    days = current_app.config.get("REFRESH_TOKEN_DAYS", 7)
    db.session.add(RefreshToken(
        user_id=user.id,
        token_hash=hash_refresh_token(refresh_token),
        expires_at=datetime.utcnow() + timedelta(days=days),
    ))
    return {
        "access_token": create_access_token(user.id, user.email, user.roles),
        "refresh_token": refresh_token,
        "token_type": "Bearer",
        "expires_in": current_app.config.get("ACCESS_TOKEN_MINUTES", 15) * 60,
        "user": user.to_dict(),
    }


def register(name: str, email: str, password: str) -> Dict[str, Any]:
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise ConflictError("email already registered", code="EMAIL_IN_USE")

    try:
        role = Role.query.filter_by(name=UserRole.USER.value).first()
        user = User(name=(name or "").strip(), email=email, password=hash_password(password), role=role)
        db.session.add(user)
        db.session.flush()
        tokens = _issue_tokens(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("email already registered", code="EMAIL_IN_USE")
    except Exception:
        db.session.rollback()
        raise
    logger.info("Registered user %s", user.id)
    return tokens


def login(email: str, password: str) -> Dict[str, Any]:
    user = User.query.filter_by(email=(email or "").strip().lower()).first()
    if not user or not check_password_hash(user.password, password or ""):
        raise AuthenticationError("invalid email or password", code="INVALID_CREDENTIALS")
    try:
        tokens = _issue_tokens(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return tokens


def refresh(refresh_token: str) -> Dict[str, Any]:
    """Exchange a refresh token for a new pair; the presented token is revoked."""
    stored = RefreshToken.query.filter_by(token_hash=hash_refresh_token(refresh_token or "")).first()
    if stored is None or not stored.is_usable():
        raise AuthenticationError("invalid or expired refresh token", code="INVALID_REFRESH_TOKEN")
    user = db.session.get(User, stored.user_id)
    if user is None:
        raise AuthenticationError("invalid or expired refresh token", code="INVALID_REFRESH_TOKEN")

    try:
        stored.revoked_at = datetime.utcnow()
        tokens = _issue_tokens(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return tokens


def logout(user_id: int) -> int:
    """Revoke every live refresh token of the user, returns how many."""
    now = datetime.utcnow()
    tokens = RefreshToken.query.filter_by(user_id=user_id, revoked_at=None).all()
    for token in tokens:
        token.revoked_at = now
    db.session.commit()
    logger.info("Logged out user %s (%s refresh tokens revoked)", user_id, len(tokens))
    return len(tokens)


def update_goal_preferences(user_id: int, data: Dict[str, Any]) -> User:
    user = get_user(user_id)
    for field in GOAL_PREFERENCE_FIELDS:
        if field in data:
            setattr(user, field, data[field])
    if "timezone" in data:
        user.timezone = data["timezone"]
    db.session.commit()
    return user
