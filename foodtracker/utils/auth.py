import datetime as dt
import hashlib
import secrets
from functools import wraps
from typing import List
from flask import request, current_app
import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from foodtracker.utils.http import error


def hash_password(plain: str) -> str:
    return generate_password_hash(plain)


def _signing_key() -> str:
    return current_app.config.get("JWT_SECRET_KEY") or current_app.config["SECRET_KEY"]


def create_access_token(user_id: int, email: str, roles: List[str]) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    minutes = current_app.config.get("ACCESS_TOKEN_MINUTES", 15)
    payload = {
        "sub": str(user_id),
        "email": email,
        "roles": roles,
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + dt.timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, _signing_key(), algorithm="HS256")


def decode_token(token: str):
    payload = jwt.decode(token, _signing_key(), algorithms=["HS256"])
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("not an access token")
    return payload


def generate_refresh_token() -> str:
    return secrets.token_hex(32)


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def require_auth(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return error("UNAUTHORIZED", "Missing Bearer token", 401)
        token = auth_header.split(" ", 1)[1]
        try:
            payload = decode_token(token)
            request.user_id = int(payload["sub"])  # type: ignore
            request.user_roles = payload.get("roles") or []  # type: ignore
        except jwt.ExpiredSignatureError:
            return error("TOKEN_EXPIRED", "Access token expired", 401)
        except (jwt.InvalidTokenError, KeyError, ValueError):
            return error("UNAUTHORIZED", "Invalid token", 401)
        return f(*args, **kwargs)
    return wrapper


__all__ = [
    "hash_password",
    "check_password_hash",
    "create_access_token",
    "decode_token",
    "generate_refresh_token",
    "hash_refresh_token",
    "require_auth",
]
