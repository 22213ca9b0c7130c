import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./meal_ledger.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./meal_ledger.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")
    CACHE_BACKEND = data.get("CACHE_BACKEND", "redis")

    # Cache lifetimes in seconds. Anything holding money figures stays short.
    CACHE_TTL_ACTIVE_PERIOD = data.get("CACHE_TTL_ACTIVE_PERIOD", 60)
    CACHE_TTL_BALANCES = data.get("CACHE_TTL_BALANCES", 180)
    CACHE_TTL_CLOSED_PERIOD = data.get("CACHE_TTL_CLOSED_PERIOD", 3600)

    # Room roles granted the privileged tier (period management, cross-user reads)
    PRIVILEGED_ROLES = data.get("PRIVILEGED_ROLES", ["ADMIN", "MANAGER", "MODERATOR", "ACCOUNTANT"])

    # Period mode of rooms that never chose one. MONTHLY rooms get the running
    # month's period provisioned when the current period is read.
    DEFAULT_PERIOD_MODE = data.get("DEFAULT_PERIOD_MODE", "CUSTOM")

    NOTIFICATION_WEBHOOK_URL = data.get("NOTIFICATION_WEBHOOK_URL", None)
