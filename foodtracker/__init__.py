from flask import Flask
from foodtracker.extensions import db, migrate, cors
from foodtracker.app_logging import configure_logging
from foodtracker.errors import register_error_handlers
from foodtracker.routes import register_routes
from foodtracker.models.role import Role  # noqa: F401
from foodtracker.models.user import User  # noqa: F401
from foodtracker.models.food import Food  # noqa: F401
from foodtracker.models.meal import Meal  # noqa: F401
from foodtracker.models.food_entry import FoodEntry  # noqa: F401
from foodtracker.models.daily_nutrition import DailyNutrition  # noqa: F401
from foodtracker.models.nutrition_goal import NutritionGoal  # noqa: F401
from foodtracker.models.refresh_token import RefreshToken  # noqa: F401


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object("config.Config")
    if overrides:
        app.config.update(overrides)

    uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if uri.startswith("postgres") and "SQLALCHEMY_ENGINE_OPTIONS" not in app.config:
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = app.config["POSTGRES_ENGINE_OPTIONS"]

    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)

    # CORS Configuration
    cors.init_app(app,
                  origins=app.config.get("CORS_ORIGINS"),
                  supports_credentials=True,
                  allow_headers=["Content-Type", "Authorization"],
                  methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                  expose_headers=["Content-Type", "Authorization"])

    register_error_handlers(app)
    register_routes(app)

    return app
