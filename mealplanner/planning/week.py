"""
Weekly planning grid.

Weeks run Monday to Sunday. Planning entries are bucketed into days by their
exact ``YYYY-MM-DD`` date string and into meal slots within a day.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..data.models import MealPlanning, Recipe, MEAL_SLOTS, DEFAULT_SLOT

SLOT_LABELS = {
    "petit-dejeuner": "Petit-déjeuner",
    "dejeuner": "Déjeuner",
    "diner": "Dîner",
    "collation": "Collation",
}

DAY_NAMES = ["Lundi", "Mardi", "Mercredi", "Jeudi", "Vendredi", "Samedi", "Dimanche"]


def to_date(value: Union[date, str]) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def week_start(day: Union[date, str]) -> date:
    """Monday of the week containing ``day``."""
    day = to_date(day)
    return day - timedelta(days=day.weekday())


def week_dates(start: Union[date, str]) -> List[date]:
    """The seven dates of the week containing ``start``, Monday first."""
    monday = week_start(start)
    return [monday + timedelta(days=i) for i in range(7)]


def shift_week(start: Union[date, str], weeks: int) -> date:
    """Monday ``weeks`` weeks away (negative for the past)."""
    return week_start(start) + timedelta(days=7 * weeks)


@dataclass
class PlannedSlot:
    """One filled slot: the planning entry and its recipe when resolvable."""
    planning: MealPlanning
    recipe: Optional[Recipe] = None

    def to_dict(self) -> Dict:
        return {
            "planning": self.planning.to_dict(),
            "recipe": self.recipe.to_dict() if self.recipe else None,
        }


@dataclass
class DayPlan:
    """Meals for one day keyed by slot."""
    date: date
    meals: Dict[str, PlannedSlot] = field(default_factory=dict)

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.date.weekday()]

    def to_dict(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "dayName": self.day_name,
            "meals": {
                slot: self.meals[slot].to_dict()
                for slot in MEAL_SLOTS
                if slot in self.meals
            },
        }


def build_week(
    entries: Iterable[MealPlanning],
    recipes_by_id: Mapping[str, Recipe],
    start: Union[date, str],
) -> List[DayPlan]:
    """
    Lay planning entries out on a Monday-to-Sunday grid.

    Args:
        entries: Planning entries (any week; others are ignored)
        recipes_by_id: Catalogue recipes keyed by str(id)
        start: Any day of the wanted week

    Returns:
        Seven DayPlan objects. A slot holds at most one meal; a later entry
        for the same day and slot replaces an earlier one. Only predefined
        recipes are resolved, custom ones are left as None.
    """
    entries = list(entries)
    week = []
    for day in week_dates(start):
        day_str = day.isoformat()
        plan = DayPlan(date=day)
        for entry in entries:
            if entry.date != day_str:
                continue
            slot = entry.slot or DEFAULT_SLOT
            recipe = None
            if entry.source == "predefined":
                recipe = recipes_by_id.get(str(entry.recipe_id))
            plan.meals[slot] = PlannedSlot(planning=entry, recipe=recipe)
        week.append(plan)
    return week


def meals_in_week(entries: Iterable[MealPlanning], start: Union[date, str]) -> int:
    """Number of entries dated within the week containing ``start``."""
    dates = week_dates(start)
    first, last = dates[0], dates[-1]
    return sum(1 for entry in entries if first <= to_date(entry.date) <= last)
