import random
import unittest
from datetime import datetime

from grocer.domain.HistoryEntry import HistoryEntry
from grocer.domain.Recipe import Recipe
from grocer.logic.planning.selector import auto_assign_days, generate_meal_plan, get_swap_recipe, recent_recipe_ids

NOW = datetime(2024, 5, 15, 12, 0)


def _recipes():
    return [
        Recipe(name="Tacos", id="b1", category="beef"),
        Recipe(name="Chili", id="b2", category="beef"),
        Recipe(name="Meatloaf", id="b3", category="beef"),
        Recipe(name="Curry", id="c1", category="chicken"),
        Recipe(name="Wings", id="c2", category="chicken"),
        Recipe(name="Salmon", id="f1", category="fish"),
    ]


class TestRecentRecipeIds(unittest.TestCase):

    def test_cutoff_day_counts_as_recent(self):
        history = [HistoryEntry("b1", "2024-05-05T00:00:00"), HistoryEntry("b2", "2024-05-04T23:59:00")]
        self.assertEqual(recent_recipe_ids(history, 10, NOW), {"b1"})

    def test_unreadable_dates_are_skipped(self):
        history = [{"recipe_id": "b1", "date_made": "last tuesday"}, {"recipe_id": "b2", "date_made": "2024-05-14"}]
        self.assertEqual(recent_recipe_ids(history, 10, NOW), {"b2"})

    def test_utc_timestamps(self):
        self.assertEqual(recent_recipe_ids([HistoryEntry("c1", "2024-05-10T08:00:00Z")], 10, NOW), {"c1"})

    def test_zero_days_only_today(self):
        history = [HistoryEntry("b1", "2024-05-15T06:00:00"), HistoryEntry("b2", "2024-05-14T23:00:00")]
        self.assertEqual(recent_recipe_ids(history, 0, NOW), {"b1"})


class TestGenerateMealPlan(unittest.TestCase):

    def setUp(self):
        self.history = [HistoryEntry("b1", "2024-05-14")]
        self.rng = random.Random(42)

    def test_avoids_recent_recipes(self):
        result = generate_meal_plan(_recipes(), self.history, {"beef": 2}, 10, NOW, self.rng)
        self.assertEqual({r.id for r in result.recipes}, {"b2", "b3"})
        self.assertEqual(result.errors, [])

    def test_falls_back_to_recent_recipes(self):
        result = generate_meal_plan(_recipes(), self.history, {"beef": 3}, 10, NOW, self.rng)
        self.assertEqual(sorted(r.id for r in result.recipes), ["b1", "b2", "b3"])
        self.assertEqual(result.errors, ["Not enough non-recent beef recipes. Including some recently made."])

    def test_category_too_small(self):
        result = generate_meal_plan(_recipes(), [], {"fish": 2}, 10, NOW, self.rng)
        self.assertEqual([r.id for r in result.recipes], ["f1"])
        self.assertEqual(result.errors, ["Not enough fish recipes. Need 2, have 1."])

    def test_unknown_category(self):
        result = generate_meal_plan(_recipes(), [], {"tofu": 1}, 10, NOW, self.rng)
        self.assertEqual(result.recipes, [])
        self.assertEqual(result.errors, ["Not enough tofu recipes. Need 1, have 0."])

    def test_zero_counts_are_skipped(self):
        result = generate_meal_plan(_recipes(), [], {"beef": 0, "chicken": 1}, 10, NOW, self.rng)
        self.assertEqual(len(result.recipes), 1)
        self.assertEqual(result.recipes[0].category, "chicken")

    def test_no_duplicates_across_categories(self):
        selection = {"beef": 2, "chicken": 2, "fish": 1}
        for seed in range(20):
            result = generate_meal_plan(_recipes(), [], selection, 10, NOW, random.Random(seed))
            ids = [r.id for r in result.recipes]
            self.assertEqual(len(ids), 5)
            self.assertEqual(len(set(ids)), 5)

    def test_same_seed_same_plan(self):
        first = generate_meal_plan(_recipes(), [], {"beef": 2}, 10, NOW, random.Random(7))
        second = generate_meal_plan(_recipes(), [], {"beef": 2}, 10, NOW, random.Random(7))
        self.assertEqual([r.id for r in first.recipes], [r.id for r in second.recipes])

    def test_accepts_dict_records(self):
        recipes = [{"id": 1, "name": "Tacos", "category": "beef"}]
        history = [{"recipe_id": 1, "date_made": "2024-01-01"}]
        result = generate_meal_plan(recipes, history, {"beef": 1}, 10, NOW, self.rng)
        self.assertEqual([r.id for r in result.recipes], ["1"])

    def test_empty_inputs(self):
        result = generate_meal_plan([], [], {}, now=NOW)
        self.assertEqual((result.recipes, result.errors), ([], []))


class TestSwapRecipe(unittest.TestCase):

    def test_picks_from_category_outside_excluded(self):
        recipe = get_swap_recipe(_recipes(), "beef", ["b1", "b2"], random.Random(1))
        self.assertEqual(recipe.id, "b3")

    def test_none_when_exhausted(self):
        self.assertIsNone(get_swap_recipe(_recipes(), "fish", ["f1"]))
        self.assertIsNone(get_swap_recipe(_recipes(), "lamb", []))


class TestAutoAssignDays(unittest.TestCase):

    def test_week_order_from_start_day(self):
        self.assertEqual(auto_assign_days(["a", "b", "c"], week_start_day=1), {"a": 1, "b": 2, "c": 3})
        self.assertEqual(auto_assign_days(["a", "b"], week_start_day=6), {"a": 6, "b": 0})

    def test_excluded_days_are_skipped(self):
        self.assertEqual(auto_assign_days(["a", "b", "c"], excluded_days=[1, 2], week_start_day=1),
                         {"a": 3, "b": 4, "c": 5})

    def test_preferred_days_first(self):
        self.assertEqual(auto_assign_days(["a", "b", "c"], preferred_days=[5, 0], week_start_day=1),
                         {"a": 5, "b": 0, "c": 1})

    def test_excluded_preferred_day_is_ignored(self):
        self.assertEqual(auto_assign_days(["a"], excluded_days=[5], preferred_days=[5, 3]), {"a": 3})

    def test_existing_assignments_are_kept(self):
        self.assertEqual(auto_assign_days(["a", "b", "c"], existing_assignments={"a": 5}, week_start_day=1),
                         {"a": 5, "b": 1, "c": 2})

    def test_assignments_for_removed_recipes_are_dropped(self):
        self.assertEqual(auto_assign_days(["a"], existing_assignments={"gone": 2, "a": 4}), {"a": 4})

    def test_wraps_around_the_week(self):
        ids = [f"r{i}" for i in range(9)]
        assignments = auto_assign_days(ids, week_start_day=0)
        self.assertEqual([assignments[i] for i in ids], [0, 1, 2, 3, 4, 5, 6, 0, 1])

    def test_every_day_excluded(self):
        self.assertEqual(auto_assign_days(["a", "b"], excluded_days=range(7)), {})
        self.assertEqual(auto_assign_days(["a", "b"], excluded_days=range(7), existing_assignments={"a": 2}),
                         {"a": 2})
