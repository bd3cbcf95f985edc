"""
Seed the predefined recipe catalogue from a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from .database import DatabaseInterface
from .models import Recipe

logger = logging.getLogger(__name__)

DEFAULT_RECIPES_FILE = Path(__file__).parent / "recipes.json"


def load_recipes_file(path: Optional[Path] = None) -> List[Recipe]:
    """
    Read catalogue recipes from JSON.

    Accepts either a bare list or an object with a "recipes" list.

    Args:
        path: JSON file (defaults to the bundled catalogue)

    Returns:
        List of Recipe objects
    """
    path = Path(path) if path else DEFAULT_RECIPES_FILE
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("recipes", [])

    return [Recipe.from_dict(r) for r in data]


def seed_recipes(db: DatabaseInterface, path: Optional[Path] = None) -> int:
    """
    Insert (or replace) every recipe from the catalogue file.

    Returns:
        Number of recipes written
    """
    recipes = load_recipes_file(path)
    for recipe in recipes:
        db.save_recipe(recipe)

    logger.info(f"Seeded {len(recipes)} recipes from {path or DEFAULT_RECIPES_FILE}")
    return len(recipes)
