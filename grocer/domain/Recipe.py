"""Recipe domain entity: id, name, protein category, servings, ingredients, instructions, tags."""
from typing import List, Optional

from grocer.domain.Ingredient import Ingredient
from grocer.utilities import config
from grocer.utilities.validators import RecipeInput


class Recipe:
    def __init__(self, name: str = "", id: Optional[str] = None, category: str = "", servings: int = 0,
                 ingredients: Optional[List[Ingredient]] = None, instructions: Optional[List[str]] = None,
                 tags: Optional[List[str]] = None):
        self.id = id
        self.name = name
        self.category = category
        self.servings = servings
        self.ingredients = ingredients[:] if ingredients else []
        self.instructions = instructions[:] if instructions else []
        self.tags = tags[:] if tags else []

    def __str__(self) -> str:
        return f"{self.name} ({self.category or 'uncategorized'}) - {self.servings} servings - {len(self.ingredients)} ingredients"

    __repr__ = __str__

    @property
    def effective_servings(self) -> int:
        """Servings used for list totals; missing or zero counts as the default."""
        return self.servings or config.DEFAULT_SERVINGS

    @staticmethod
    def from_dict(data):
        validated = RecipeInput.model_validate(dict(data))
        return Recipe(
            id=validated.id,
            name=validated.name,
            category=validated.category,
            servings=validated.servings,
            ingredients=[Ingredient.from_dict(ing.model_dump(by_alias=True)) for ing in validated.ingredients],
            instructions=validated.instructions,
            tags=validated.tags,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "servings": self.servings,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "instructions": self.instructions,
            "tags": self.tags,
        }
