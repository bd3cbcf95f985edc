#!/usr/bin/env python3
"""
Command line entry point for the Meal Planner.

    mealplanner init-db
    mealplanner seed --file recipes.json
    mealplanner serve --port 5000 --debug
"""

import argparse
import logging
from pathlib import Path

from .config import Config
from .data.database import DatabaseInterface
from .data.seed import seed_recipes
from .web.app import configure_logging, create_app

logger = logging.getLogger(__name__)


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Meal Planner")
    parser.add_argument(
        "command",
        choices=["init-db", "seed", "serve"],
        help="Command to run",
    )
    parser.add_argument(
        "--db-dir",
        type=str,
        help="Database directory (overrides MEALPLANNER_DB_DIR)",
    )
    parser.add_argument(
        "--file",
        type=str,
        help="Recipe JSON file for seed (defaults to the bundled catalogue)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for serve (overrides PORT)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run the server in debug mode",
    )

    args = parser.parse_args(argv)

    config = Config.from_env()
    if args.db_dir:
        config.db_dir = args.db_dir
    if args.port:
        config.port = args.port
    if args.debug:
        config.debug = True

    configure_logging(config)

    if args.command == "init-db":
        DatabaseInterface(db_dir=config.db_dir)
        print(f"Database ready in {config.db_dir}")

    elif args.command == "seed":
        db = DatabaseInterface(db_dir=config.db_dir)
        count = seed_recipes(db, Path(args.file) if args.file else None)
        print(f"Seeded {count} recipes ({db.count_recipes()} in catalogue)")

    elif args.command == "serve":
        app = create_app(config)
        logger.info(f"Starting Meal Planner on port {config.port}")
        app.run(host="0.0.0.0", port=config.port, debug=config.debug)


if __name__ == "__main__":
    main()
