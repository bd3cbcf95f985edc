"""
Meal planning service: scheduled meals per user and the weekly grid.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from ..data.database import DatabaseInterface
from ..data.models import MealPlanning, DEFAULT_SLOT
from ..planning.week import build_week, meals_in_week, shift_week, week_dates, week_start
from .recipes import RecipeService

logger = logging.getLogger(__name__)


class PlanningService:
    """CRUD on planning entries, scoped to their owner."""

    def __init__(self, db: DatabaseInterface):
        self.db = db
        self.recipes = RecipeService(db)

    def get_user_planning(self, user_id: int) -> List[MealPlanning]:
        return self.db.list_meal_planning(user_id)

    def add_meal(
        self,
        user_id: int,
        date: str,
        recipe_id: str,
        source: str,
        slot: Optional[str] = None,
    ) -> MealPlanning:
        return self.db.add_meal_planning(
            user_id=user_id,
            date=date,
            recipe_id=recipe_id,
            source=source,
            slot=slot or DEFAULT_SLOT,
        )

    def update_meal(self, entry_id: str, user_id: int, updates: Dict[str, Any]) -> Optional[MealPlanning]:
        """Partially update an entry the user owns; None if missing or foreign."""
        existing = self.db.get_meal_planning(entry_id, user_id=user_id)
        if not existing:
            return None
        if not updates:
            return existing
        return self.db.update_meal_planning(entry_id, updates)

    def remove_meal(self, entry_id: str, user_id: int) -> bool:
        existing = self.db.get_meal_planning(entry_id, user_id=user_id)
        if not existing:
            return False
        return self.db.delete_meal_planning(entry_id)

    def get_week(self, user_id: int, start: Union[date, str, None] = None) -> Dict[str, Any]:
        """
        Weekly grid for a user.

        Args:
            user_id: Owner
            start: Any day of the wanted week (defaults to today)

        Returns:
            Dict with the week bounds, navigation targets, meal count and
            seven day plans
        """
        monday = week_start(start or date.today())
        entries = self.db.list_meal_planning(user_id)
        days = build_week(entries, self.recipes.by_id(), monday)
        dates = week_dates(monday)

        return {
            "weekStart": dates[0].isoformat(),
            "weekEnd": dates[-1].isoformat(),
            "previousWeek": shift_week(monday, -1).isoformat(),
            "nextWeek": shift_week(monday, 1).isoformat(),
            "mealCount": meals_in_week(entries, monday),
            "days": [day.to_dict() for day in days],
        }
