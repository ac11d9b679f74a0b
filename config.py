from dotenv import load_dotenv
import os

load_dotenv()


def _int_env(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY")
    # Falls back to SECRET_KEY when no dedicated signing key is configured
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///foodtracker.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Only applied to PostgreSQL URIs, see foodtracker.create_app
    POSTGRES_ENGINE_OPTIONS = {
        'pool_pre_ping': True,  # Test connection before use
        'pool_recycle': 300,    # Recycle connections every 5 minutes
        'pool_size': 5,
        'max_overflow': 10,
        'pool_timeout': 30,
    }

    ACCESS_TOKEN_MINUTES = _int_env("ACCESS_TOKEN_MINUTES", 15)
    REFRESH_TOKEN_DAYS = _int_env("REFRESH_TOKEN_DAYS", 7)

    OPEN_FOOD_FACTS_URL = os.getenv("OPEN_FOOD_FACTS_URL", "https://world.openfoodfacts.org")
    OPEN_FOOD_FACTS_TIMEOUT = _int_env("OPEN_FOOD_FACTS_TIMEOUT", 10)
    OPEN_FOOD_FACTS_ENABLED = os.getenv("OPEN_FOOD_FACTS_ENABLED", "1") not in ("0", "false", "False")

    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
