"""
Flask application factory for the Meal Planner API.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from ..config import Config
from ..data.database import DatabaseInterface
from ..services.planning import PlanningService
from ..services.recipes import CustomRecipeService, RecipeService
from ..services.shopping import ShoppingService
from .api import api_bp
from .auth import auth_bp, error_response

logger = logging.getLogger(__name__)


def configure_logging(config: Config):
    """Console plus rotating file output under ``config.log_dir``."""
    os.makedirs(config.log_dir, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            RotatingFileHandler(
                os.path.join(config.log_dir, 'app.log'),
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5
            )
        ]
    )


@dataclass
class Services:
    """Everything the routes need, stored on ``app.extensions``."""
    config: Config
    db: DatabaseInterface
    recipes: RecipeService
    custom_recipes: CustomRecipeService
    planning: PlanningService
    shopping: ShoppingService

    @classmethod
    def build(cls, config: Config) -> "Services":
        db = DatabaseInterface(db_dir=config.db_dir)
        return cls(
            config=config,
            db=db,
            recipes=RecipeService(db),
            custom_recipes=CustomRecipeService(db),
            planning=PlanningService(db),
            shopping=ShoppingService(db, key=config.shopping_list_key),
        )


def create_app(config: Optional[Config] = None) -> Flask:
    """
    Build the Flask app.

    Args:
        config: Settings to use (defaults to Config.from_env())

    Returns:
        Configured Flask application
    """
    if config is None:
        config = Config.from_env()
        configure_logging(config)

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config["TESTING"] = config.testing
    app.config["DEBUG"] = config.debug

    origins = [o.strip() for o in config.cors_origins.split(",")] if config.cors_origins != "*" else "*"
    CORS(app, origins=origins, supports_credentials=True)

    app.extensions["mealplanner"] = Services.build(config)

    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "healthy", "timestamp": datetime.now().isoformat()})

    @app.errorhandler(404)
    def not_found(e):
        return error_response("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response("Method not allowed", 405)

    logger.info(f"Meal Planner app created (db_dir={config.db_dir}, testing={config.testing})")
    return app
