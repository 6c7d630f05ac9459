import random
import unittest
from datetime import date, datetime

import pytest

from grocer.domain.HistoryEntry import HistoryEntry
from grocer.domain.Recipe import Recipe
from grocer.domain.WeeklyPlan import (
    DuplicateRecipeError, NoRecipesAvailableError, WeeklyPlan, get_week_start_date, navigate_week,
)
from grocer.logic.planning.selector import MealPlanResult


@pytest.mark.parametrize("day, week_start_day, expected", [
    (date(2024, 5, 15), 1, "2024-05-13"),
    (date(2024, 5, 15), 0, "2024-05-12"),
    (date(2024, 5, 15), 6, "2024-05-11"),
    (date(2024, 5, 13), 1, "2024-05-13"),
    (datetime(2024, 5, 12, 18, 30), 1, "2024-05-06"),
])
def test_get_week_start_date(day, week_start_day, expected):
    assert get_week_start_date(day, week_start_day) == expected


def test_navigate_week():
    assert navigate_week("2024-05-13", "next") == "2024-05-20"
    assert navigate_week("2024-01-01", "prev") == "2023-12-25"


class TestWeeklyPlan(unittest.TestCase):

    def setUp(self):
        self.recipes = [
            Recipe(name="Tacos", id="b1", category="beef"),
            Recipe(name="Chili", id="b2", category="beef"),
            Recipe(name="Curry", id="c1", category="chicken"),
        ]
        self.plan = WeeklyPlan.from_meal_plan("2024-05-13", MealPlanResult(self.recipes[:1] + self.recipes[2:], []))

    def test_from_meal_plan(self):
        self.assertEqual(self.plan.recipe_ids, ["b1", "c1"])
        self.assertEqual(self.plan.made_recipe_ids, [])

    def test_add_and_remove(self):
        self.plan.add_recipe("b2")
        with self.assertRaises(DuplicateRecipeError) as ctx:
            self.plan.add_recipe("b2")
        self.assertEqual(str(ctx.exception), "Recipe is already in this week's meal plan")
        self.plan.set_day("b2", 3)
        self.plan.remove_recipe("b2")
        self.assertEqual(self.plan.recipe_ids, ["b1", "c1"])
        self.assertNotIn("b2", self.plan.day_assignments)

    def test_unknown_recipe(self):
        with self.assertRaises(ValueError) as ctx:
            self.plan.remove_recipe("zz")
        self.assertEqual(str(ctx.exception), "Recipe is not in this week's meal plan")

    def test_swap_takes_over_day(self):
        self.plan.set_day("b1", 4)
        new = self.plan.swap_recipe("b1", "beef", self.recipes, rng=random.Random(3))
        self.assertEqual(new.id, "b2")
        self.assertEqual(self.plan.recipe_ids, ["b2", "c1"])
        self.assertEqual(self.plan.day_assignments, {"b2": 4})

    def test_swap_with_nothing_left(self):
        with self.assertRaises(NoRecipesAvailableError) as ctx:
            self.plan.swap_recipe("c1", "chicken", self.recipes)
        self.assertEqual(str(ctx.exception), "No more chicken recipes available")

    def test_toggle_made_records_history(self):
        history = [HistoryEntry("b1", "2024-04-01")]
        self.assertTrue(self.plan.toggle_made("b1", history, now=datetime(2024, 5, 14, 19, 0)))
        self.assertEqual(self.plan.made_recipe_ids, ["b1"])
        self.assertEqual(history[-1].to_dict(), {"recipe_id": "b1", "date_made": "2024-05-14T19:00:00"})

        self.assertFalse(self.plan.toggle_made("b1", history))
        self.assertEqual(self.plan.made_recipe_ids, [])
        # only the latest entry is undone
        self.assertEqual([e.raw_date for e in history], ["2024-04-01"])

    def test_toggle_made_without_history(self):
        self.assertTrue(self.plan.toggle_made("c1"))
        self.assertFalse(self.plan.toggle_made("c1"))

    def test_assign_days_keeps_pinned_days(self):
        self.plan.set_day("c1", 0)
        self.assertEqual(self.plan.assign_days(week_start_day=1), {"c1": 0, "b1": 1})

    def test_set_day_validation(self):
        with self.assertRaises(ValueError):
            self.plan.set_day("b1", 7)
        self.plan.set_day("b1", 2)
        self.plan.set_day("b1", None)
        self.assertEqual(self.plan.day_assignments, {})

    def test_stored_layout(self):
        self.plan.set_day("b1", 2)
        self.plan.toggle_made("c1")
        data = self.plan.to_dict()
        self.assertEqual(data, {
            "week_date": "2024-05-13",
            "recipe_ids": ["b1", "c1"],
            "made_recipe_ids": ["c1"],
            "scale": 1.0,
            "day_assignments": {"b1": 2},
        })
        self.assertEqual(WeeklyPlan.from_dict(data).to_dict(), data)
