import unittest
from grocer.domain.Ingredient import Ingredient
from grocer.domain.Recipe import Recipe


class TestRecipe(unittest.TestCase):

    def setUp(self):
        self.recipe_pancakes = Recipe(
            name="Pancakes",
            id="p1",
            category="vegetarian",
            servings=4,
            ingredients=[
                Ingredient("Flour", 2, "cups"),
                Ingredient("Milk", 1.5, "cups"),
                Ingredient("Eggs", 2),
            ],
            instructions=["Mix ingredients", "Cook on skillet"],
            tags=["breakfast"],
        )

    def test_effective_servings(self):
        self.assertEqual(self.recipe_pancakes.effective_servings, 4)
        self.assertEqual(Recipe(name="Mystery").effective_servings, 4)

    def test_from_dict(self):
        recipe = Recipe.from_dict({
            "id": 12,
            "name": "Omelette",
            "servings": None,
            "ingredients": [{"item": "Eggs", "amount": 3}, {"item": "Cheese", "shoppingCategory": "deli"}],
            "instructions": ["Beat eggs", "  ", "Cook with cheese"],
        })
        self.assertEqual(recipe.id, "12")
        self.assertEqual(recipe.servings, 0)
        self.assertEqual(recipe.ingredients[1].shopping_category, "deli")
        self.assertEqual(recipe.instructions, ["Beat eggs", "Cook with cheese"])

    def test_round_trip(self):
        data = self.recipe_pancakes.to_dict()
        self.assertEqual(Recipe.from_dict(data).to_dict(), data)
