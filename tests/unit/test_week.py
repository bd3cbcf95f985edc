"""
Unit tests for the weekly planning grid.
"""

from datetime import date, datetime

import pytest

from mealplanner.data.models import MealPlanning, Recipe
from mealplanner.planning.week import (
    DayPlan,
    build_week,
    meals_in_week,
    shift_week,
    week_dates,
    week_start,
)


def entry(entry_id, day, recipe_id="1", slot="diner", source="predefined", created=0):
    return MealPlanning(
        id=entry_id,
        user_id=1,
        date=day,
        recipe_id=recipe_id,
        source=source,
        slot=slot,
        created_at=datetime(2025, 1, 1, 12, created),
    )


@pytest.fixture
def recipes():
    return {
        "1": Recipe(id=1, name="Risotto", servings=4),
        "2": Recipe(id=2, name="Blanquette", servings=6),
    }


class TestWeekMath:

    @pytest.mark.parametrize("day", ["2025-01-20", "2025-01-23", "2025-01-26"])
    def test_week_starts_on_monday(self, day):
        assert week_start(day) == date(2025, 1, 20)

    def test_week_dates(self):
        dates = week_dates(date(2025, 1, 22))
        assert len(dates) == 7
        assert dates[0] == date(2025, 1, 20)
        assert dates[-1] == date(2025, 1, 26)

    def test_week_crosses_year_boundary(self):
        assert week_start("2025-01-01") == date(2024, 12, 30)

    def test_shift_week(self):
        assert shift_week("2025-01-22", 1) == date(2025, 1, 27)
        assert shift_week("2025-01-22", -1) == date(2025, 1, 13)

    def test_invalid_date(self):
        with pytest.raises(ValueError):
            week_start("20-01-2025")


class TestBuildWeek:

    def test_entries_placed_by_day_and_slot(self, recipes):
        entries = [
            entry("a", "2025-01-20", "1", slot="dejeuner"),
            entry("b", "2025-01-20", "2", slot="diner"),
            entry("c", "2025-01-24", "1"),
        ]
        week = build_week(entries, recipes, "2025-01-20")

        assert len(week) == 7
        assert isinstance(week[0], DayPlan)
        monday = week[0]
        assert monday.day_name == "Lundi"
        assert monday.meals["dejeuner"].recipe.name == "Risotto"
        assert monday.meals["diner"].recipe.name == "Blanquette"
        assert week[4].meals["diner"].planning.id == "c"
        assert week[1].meals == {}

    def test_entries_outside_week_ignored(self, recipes):
        entries = [entry("a", "2025-01-19"), entry("b", "2025-01-27")]
        week = build_week(entries, recipes, "2025-01-22")
        assert all(not day.meals for day in week)

    def test_later_entry_wins_slot(self, recipes):
        entries = [
            entry("first", "2025-01-21", "1", created=0),
            entry("second", "2025-01-21", "2", created=5),
        ]
        week = build_week(entries, recipes, "2025-01-21")
        assert week[1].meals["diner"].planning.id == "second"

    def test_custom_recipes_not_resolved(self, recipes):
        week = build_week([entry("a", "2025-01-20", "1", source="custom")], recipes, "2025-01-20")
        assert week[0].meals["diner"].recipe is None

    def test_missing_slot_defaults_to_dinner(self, recipes):
        week = build_week([entry("a", "2025-01-20", slot=None)], recipes, "2025-01-20")
        assert "diner" in week[0].meals

    def test_day_dict_orders_slots(self, recipes):
        entries = [
            entry("a", "2025-01-20", slot="collation"),
            entry("b", "2025-01-20", slot="petit-dejeuner"),
        ]
        data = build_week(entries, recipes, "2025-01-20")[0].to_dict()
        assert data["date"] == "2025-01-20"
        assert list(data["meals"]) == ["petit-dejeuner", "collation"]
        assert data["meals"]["collation"]["recipe"]["name"] == "Risotto"


def test_meals_in_week():
    entries = [
        entry("a", "2025-01-19"),
        entry("b", "2025-01-20"),
        entry("c", "2025-01-26"),
        entry("d", "2025-01-27"),
    ]
    assert meals_in_week(entries, "2025-01-22") == 2
