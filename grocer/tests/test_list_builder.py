import unittest
from grocer.domain.Ingredient import Ingredient
from grocer.domain.Pantry import Pantry
from grocer.domain.Recipe import Recipe
from grocer.domain.ShoppingItem import ShoppingItem
from grocer.logic.shopping.list_builder import ensure_category_info, generate_shopping_list, sort_shopping_list


def _tacos():
    return Recipe(name="Tacos", id="r1", category="beef", servings=4, ingredients=[
        Ingredient("Ground Beef", 1, "lb"),
        Ingredient("Onion", 1),
        Ingredient("Salt"),
        Ingredient("Cilantro", 1, "bunch"),
    ])


def _chili():
    # servings missing: counts as 4
    return Recipe(name="Chili", id="r2", category="beef", servings=0, ingredients=[
        Ingredient("ground beef", 2, "lb"),
        Ingredient("onion", 2),
        Ingredient("Black Pepper", 1, "tsp"),
        Ingredient("Kidney beans", 1, "can", shopping_category="frozen"),
    ])


class TestGenerateShoppingList(unittest.TestCase):

    def setUp(self):
        self.result = generate_shopping_list([_tacos(), _chili()], ["salt"], ["black pepper"])

    def test_buckets(self):
        self.assertEqual([i.item for i in self.result.items], ["cilantro", "onion", "ground beef", "kidney beans"])
        self.assertEqual([i.item for i in self.result.already_have], ["salt"])
        self.assertEqual([i.item for i in self.result.excluded], ["black pepper"])

    def test_amounts_aggregate_across_recipes(self):
        beef = self.result.items[2]
        self.assertEqual((beef.amount, beef.unit), (3, "lb"))
        self.assertEqual([s.to_dict() for s in beef.sources],
                         [{"recipeName": "Tacos", "recipeId": "r1"}, {"recipeName": "Chili", "recipeId": "r2"}])

    def test_categories(self):
        beef = self.result.items[2]
        self.assertEqual((beef.category_key, beef.category_order), ("protein", 4))
        beans = self.result.items[3]
        self.assertEqual((beans.category_key, beans.category_order), ("frozen", 7))
        self.assertEqual(beans.shopping_category, "frozen")

    def test_missing_amount_is_none(self):
        self.assertIsNone(self.result.already_have[0].amount)

    def test_total_servings(self):
        self.assertEqual(self.result.total_servings, 8)
        self.assertEqual(self.result.scale, 1.0)

    def test_scale(self):
        result = generate_shopping_list([_tacos(), _chili()], [], [], scale=1.5)
        beef = [i for i in result.items if i.item == "ground beef"][0]
        self.assertEqual(beef.amount, 4.5)
        self.assertEqual(result.total_servings, 12)

    def test_total_servings_rounds_half_up(self):
        recipe = Recipe(name="Soup", servings=5, ingredients=[Ingredient("water", 1, "cup")])
        self.assertEqual(generate_shopping_list([recipe], [], [], scale=0.5).total_servings, 3)

    def test_pantry_wins_over_exclusion(self):
        result = generate_shopping_list([_chili()], Pantry(["Black Pepper"]), ["black pepper"])
        self.assertEqual([i.item for i in result.already_have], ["black pepper"])
        self.assertEqual(result.excluded, [])

    def test_excluded_keyword_matches_whole_name_only(self):
        recipe = Recipe(name="Fajitas", ingredients=[
            Ingredient("flour", 2, "cups"), Ingredient("garlic powder", 1, "tsp"),
            Ingredient("pepper", 1, "tsp"), Ingredient("poblano pepper", 2),
        ])
        result = generate_shopping_list([recipe], [], ["pepper"])
        self.assertEqual([i.item for i in result.excluded], ["pepper"])
        self.assertIn("poblano pepper", [i.item for i in result.items])

    def test_unit_spellings_are_kept_apart(self):
        recipe = Recipe(name="Bread", ingredients=[Ingredient("Flour", 1, "cup"), Ingredient("flour", 2, "cups")])
        result = generate_shopping_list([recipe], [], [])
        self.assertEqual(sorted(i.unit for i in result.items), ["cup", "cups"])

    def test_same_recipe_listed_once_per_row(self):
        recipe = Recipe(name="Garlic Bread", id="g1", ingredients=[Ingredient("garlic", 2), Ingredient("Garlic", 1)])
        row = generate_shopping_list([recipe], [], []).items[0]
        self.assertEqual(row.amount, 3)
        self.assertEqual(len(row.sources), 1)

    def test_first_category_override_wins(self):
        first = Recipe(name="A", ingredients=[Ingredient("tofu", 1, "", shopping_category="deli")])
        second = Recipe(name="B", ingredients=[Ingredient("tofu", 1, "", shopping_category="protein")])
        row = generate_shopping_list([first, second], [], []).items[0]
        self.assertEqual(row.category_key, "deli")

    def test_accepts_recipe_dicts(self):
        recipe = {"id": 7, "name": "Omelette", "ingredients": [{"item": "Eggs", "amount": 3, "unit": ""}]}
        row = generate_shopping_list([recipe], [{"item": "butter"}], []).items[0]
        self.assertEqual((row.item, row.amount), ("eggs", 3))
        self.assertEqual(row.sources[0].recipe_id, "7")

    def test_empty_input(self):
        result = generate_shopping_list([], [], [])
        self.assertEqual((result.items, result.total_servings), ([], 0))


class TestListHelpers(unittest.TestCase):

    def test_ensure_category_info_returns_categorized_copy(self):
        item = ShoppingItem("milk", 1, "gallon")
        categorized = ensure_category_info(item)
        self.assertEqual((categorized.category_key, categorized.category_order), ("dairy", 5))
        self.assertEqual(item.category_key, "")

    def test_ensure_category_info_keeps_existing(self):
        item = ShoppingItem("milk", category_key="frozen", category_order=7)
        self.assertIs(ensure_category_info(item), item)

    def test_ensure_category_info_uses_user_overrides(self):
        item = ShoppingItem("milk")
        self.assertEqual(ensure_category_info(item, {"milk": "pantry"}).category_key, "pantry")

    def test_sort_shopping_list(self):
        rows = [ShoppingItem("b", category_order=2), ShoppingItem("a", category_order=2),
                ShoppingItem("z", category_order=1)]
        self.assertEqual([r.item for r in sort_shopping_list(rows)], ["z", "a", "b"])
