"""
Recipe services: the predefined catalogue and user-owned custom recipes.
"""

import logging
from typing import Any, Dict, List, Optional

from ..data.database import DatabaseInterface
from ..data.models import Recipe, CustomRecipe

logger = logging.getLogger(__name__)


class RecipeService:
    """Read access to the predefined catalogue."""

    def __init__(self, db: DatabaseInterface):
        self.db = db

    def list_recipes(self, query: Optional[str] = None) -> List[Recipe]:
        """
        All catalogue recipes, optionally filtered.

        Args:
            query: Case-insensitive text matched against name, cuisine or type

        Returns:
            Matching recipes ordered by ID
        """
        recipes = self.db.list_recipes()
        if query:
            recipes = [r for r in recipes if r.matches(query)]
        return recipes

    def certified(self) -> List[Recipe]:
        """Recipes rated high enough to be certified."""
        return [r for r in self.db.list_recipes() if r.is_certified]

    def get(self, recipe_id: int) -> Optional[Recipe]:
        return self.db.get_recipe(recipe_id)

    def by_id(self) -> Dict[str, Recipe]:
        """Catalogue keyed by str(id), as planning entries store recipe IDs as text."""
        return {str(r.id): r for r in self.db.list_recipes()}


class CustomRecipeService:
    """CRUD on custom recipes, scoped to their owner."""

    def __init__(self, db: DatabaseInterface):
        self.db = db

    def get_all(self, user_id: int) -> List[CustomRecipe]:
        return self.db.list_custom_recipes(user_id)

    def get_by_id(self, recipe_id: str, user_id: int) -> Optional[CustomRecipe]:
        return self.db.get_custom_recipe(recipe_id, user_id=user_id)

    def create(self, user_id: int, data: Dict[str, Any]) -> CustomRecipe:
        return self.db.create_custom_recipe(user_id, data)

    def update(self, recipe_id: str, user_id: int, updates: Dict[str, Any]) -> Optional[CustomRecipe]:
        """
        Partially update a recipe the user owns.

        Returns:
            The updated recipe, or None if it does not exist or belongs to
            someone else
        """
        existing = self.db.get_custom_recipe(recipe_id, user_id=user_id)
        if not existing:
            logger.info(f"Custom recipe {recipe_id} not found for user {user_id}")
            return None
        if not updates:
            return existing
        return self.db.update_custom_recipe(recipe_id, updates)

    def delete(self, recipe_id: str, user_id: int) -> bool:
        existing = self.db.get_custom_recipe(recipe_id, user_id=user_id)
        if not existing:
            logger.info(f"Custom recipe {recipe_id} not found for user {user_id}")
            return False
        return self.db.delete_custom_recipe(recipe_id)
