"""
Error taxonomy

Services raise these exceptions; ``register_error_handlers`` turns them into
the JSON error envelope used across the API:

    {"error": {"code": "...", "message": "..."}}
"""

import logging

from foodtracker.extensions import db
from foodtracker.utils.http import error

logger = logging.getLogger(__name__)


class FoodTrackerError(Exception):
    status = 500
    code = "UNKNOWN_ERROR"

    def __init__(self, message: str, code: str = None, **extra):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.extra = extra


class ValidationError(FoodTrackerError):
    """Malformed input: bad time string, non-positive quantity, unknown unit."""
    status = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(FoodTrackerError):
    status = 401
    code = "UNAUTHORIZED"


class ForbiddenError(FoodTrackerError):
    status = 403
    code = "FORBIDDEN"


class NotFoundError(FoodTrackerError):
    status = 404
    code = "NOT_FOUND"


class ConflictError(FoodTrackerError):
    """Unique-key collisions the storage layer could not resolve silently."""
    status = 409
    code = "CONFLICT"


class DataIntegrityError(FoodTrackerError):
    """Stored rows reference rows that no longer exist."""
    status = 500
    code = "DATA_INTEGRITY_ERROR"


class UpstreamError(FoodTrackerError):
    status = 502
    code = "UPSTREAM_ERROR"


def register_error_handlers(app):
    @app.errorhandler(FoodTrackerError)
    def handle_foodtracker_error(exc):
        db.session.rollback()
        if isinstance(exc, DataIntegrityError):
            logger.error("%s: %s", exc.code, exc.message)
        return error(exc.code, exc.message, exc.status, **exc.extra)

    @app.errorhandler(404)
    def handle_not_found(exc):
        return error("NOT_FOUND", "Resource not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(exc):
        return error("METHOD_NOT_ALLOWED", "Method not allowed", 405)
