"""
Shopping list service: one persisted list per user.
"""

import logging
from typing import Optional

from ..data.database import DatabaseInterface
from ..shopping.engine import ShoppingListEngine, RecipeGroup
from ..shopping.storage import SqliteStorage, DEFAULT_KEY

logger = logging.getLogger(__name__)


class ShoppingService:
    """Builds a user's engine and resolves recipes to add to it."""

    def __init__(self, db: DatabaseInterface, key: str = DEFAULT_KEY):
        self.db = db
        self.key = key

    def engine_for(self, user_id: int) -> ShoppingListEngine:
        """Engine over the user's stored list, already loaded."""
        return ShoppingListEngine(SqliteStorage(self.db, user_id, key=self.key)).load()

    def add_recipe(
        self,
        user_id: int,
        recipe_id: str,
        source: str = "predefined",
        servings: Optional[int] = None,
    ) -> Optional[RecipeGroup]:
        """
        Add a catalogue or custom recipe to the user's list.

        Args:
            user_id: Owner of the list (and of the custom recipe, if any)
            recipe_id: Catalogue ID or custom recipe UUID
            source: "predefined" or "custom"
            servings: Baseline servings overriding the recipe's own

        Returns:
            The new group, or None if the recipe cannot be found
        """
        if source == "custom":
            recipe = self.db.get_custom_recipe(recipe_id, user_id=user_id)
        else:
            try:
                recipe = self.db.get_recipe(int(recipe_id))
            except (TypeError, ValueError):
                recipe = None

        if recipe is None:
            logger.info(f"[SHOPPING] {source} recipe {recipe_id} not found for user {user_id}")
            return None

        return self.engine_for(user_id).add_recipe(recipe, declared_servings=servings)
