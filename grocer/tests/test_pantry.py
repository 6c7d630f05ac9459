import unittest
from grocer.domain.Pantry import Pantry


class TestPantry(unittest.TestCase):

    def setUp(self):
        self.pantry = Pantry()

    def test_add_item(self):
        self.pantry.add_item("  Olive Oil ")
        self.assertIn("olive oil", self.pantry.get_items())
        self.assertIn("OLIVE OIL", self.pantry)

    def test_duplicates_are_ignored(self):
        self.pantry.add_item("Salt")
        self.pantry.add_item("salt")
        self.assertEqual(len(self.pantry), 1)

    def test_empty_name(self):
        with self.assertRaises(ValueError):
            self.pantry.add_item("   ")

    def test_remove_item(self):
        self.pantry.add_item("sugar")
        self.pantry.remove_item("Sugar")
        self.assertNotIn("sugar", self.pantry.get_items())
        with self.assertRaises(ValueError):
            self.pantry.remove_item("sugar")

    def test_get_items(self):
        self.pantry.add_item("Sugar")
        self.pantry.add_item("Flour")
        self.assertEqual(self.pantry.get_items(), ["sugar", "flour"])

    def test_stored_layout(self):
        pantry = Pantry.from_dict([{"item": "Salt"}, "pepper"])
        self.assertEqual(pantry.to_dict(), [{"item": "salt"}, {"item": "pepper"}])
