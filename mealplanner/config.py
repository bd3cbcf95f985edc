"""
Runtime configuration for the Meal Planner.

Values come from environment variables, optionally loaded from a .env file.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass
class Config:
    """Application settings."""

    db_dir: str = "data"
    log_dir: str = "logs"
    secret_key: str = "dev-secret-key-change-in-production"
    debug: bool = False
    port: int = 5000
    cors_origins: str = "*"
    shopping_list_key: str = "panier"
    testing: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Build a Config from the process environment (and .env if present)."""
        load_dotenv()
        return cls(
            db_dir=os.environ.get("MEALPLANNER_DB_DIR", "data"),
            log_dir=os.environ.get("MEALPLANNER_LOG_DIR", "logs"),
            secret_key=os.environ.get("FLASK_SECRET_KEY", "dev-secret-key-change-in-production"),
            debug=_env_bool("DEBUG"),
            port=int(os.environ.get("PORT", 5000)),
            cors_origins=os.environ.get("CORS_ORIGINS", "*"),
            shopping_list_key=os.environ.get("SHOPPING_LIST_KEY", "panier"),
        )
