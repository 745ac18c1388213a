"""
Tortoise ORM configuration for database connection.
"""
import os
from dotenv import load_dotenv

from forecast_api.config import load_api_config

load_dotenv()

# Connection settings from the environment, pool and schema settings from config/api.yaml
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "forecast")
DB_USER = os.getenv("DB_USER", "forecast")
DB_PASSWORD = os.getenv("DB_PASSWORD", "forecast")

_database_config = load_api_config().get("database", {})
DB_POOL_MIN_SIZE = _database_config.get("pool_min_size", 2)
DB_POOL_MAX_SIZE = _database_config.get("pool_max_size", 10)

# Tortoise ORM configuration
TORTOISE_ORM = {
    "connections": {
        "default": {
            "engine": "tortoise.backends.asyncpg",
            "credentials": {
                "host": DB_HOST,
                "port": DB_PORT,
                "user": DB_USER,
                "password": DB_PASSWORD,
                "database": DB_NAME,
                "min_size": DB_POOL_MIN_SIZE,
                "max_size": DB_POOL_MAX_SIZE,
            }
        }
    },
    "apps": {
        "models": {
            "models": ["forecast_api.database.models"],
            "default_connection": "default",
        }
    },
    "use_tz": True,
    "timezone": "UTC",
}
