"""Ingredient domain entity: item name, optional quantity and unit, modifier, store category."""
from typing import Optional

from grocer.utilities.validators import IngredientInput


class Ingredient:
    def __init__(self, item: str = "", amount: Optional[float] = None, unit: str = "",
                 modifier: Optional[str] = None, shopping_category: Optional[str] = None):
        self.item = item
        # None means no quantity could be determined ("salt to taste")
        self.amount = amount
        self.unit = unit or ""
        self.modifier = modifier
        self.shopping_category = shopping_category

    def __str__(self) -> str:
        parts = []
        if self.amount is not None:
            parts.append(f"{self.amount:g}")
        if self.unit:
            parts.append(self.unit)
        parts.append(self.item)
        text = " ".join(parts)
        if self.modifier:
            text += f", {self.modifier}"
        return text

    __repr__ = __str__

    def __eq__(self, other):
        if not isinstance(other, Ingredient):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient from a stored record. Ignores unknown keys.'''
        validated = IngredientInput.model_validate(dict(data))
        return Ingredient(
            item=validated.item,
            amount=validated.amount,
            unit=validated.unit,
            modifier=validated.modifier,
            shopping_category=validated.shopping_category,
        )

    def to_dict(self):
        '''Converts the Ingredient to the stored record layout.'''
        d = {
            "item": self.item,
            "amount": self.amount,
            "unit": self.unit,
        }
        if self.modifier:
            d["modifier"] = self.modifier
        if self.shopping_category:
            d["shoppingCategory"] = self.shopping_category
        return d
