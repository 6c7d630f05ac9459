"""Shopping list row: one item to buy, where it is in the store and which recipes need it."""
from typing import Dict, List, Optional

from grocer.utilities.validators import ShoppingItemInput, SourceInput


class Source:
    """A recipe (or the user, for manual rows) that contributed to a shopping row."""

    def __init__(self, recipe_name: str = "", recipe_id: Optional[str] = None):
        self.recipe_id = recipe_id
        self.recipe_name = recipe_name

    @property
    def key(self) -> str:
        # Dedup key: id when present, else the name
        return self.recipe_id or self.recipe_name

    def __eq__(self, other):
        if not isinstance(other, Source):
            return NotImplemented
        return self.recipe_id == other.recipe_id and self.recipe_name == other.recipe_name

    def __hash__(self):
        return hash((self.recipe_id, self.recipe_name))

    def __repr__(self) -> str:
        return f"Source({self.recipe_name!r}, {self.recipe_id!r})"

    @staticmethod
    def from_dict(data):
        validated = SourceInput.model_validate(dict(data))
        return Source(recipe_name=validated.recipe_name, recipe_id=validated.recipe_id)

    def to_dict(self):
        d = {"recipeName": self.recipe_name}
        if self.recipe_id:
            d["recipeId"] = self.recipe_id
        return d


class ShoppingItem:
    def __init__(self, item: str, amount: Optional[float] = None, unit: str = "",
                 category_key: str = "", category_order: Optional[int] = None,
                 sources: Optional[List[Source]] = None,
                 additional_amounts: Optional[List[Dict]] = None,
                 checked: bool = False, shopping_category: Optional[str] = None):
        self.item = item
        self.amount = amount
        self.unit = unit or ""
        self.category_key = category_key
        self.category_order = category_order
        self.sources = sources[:] if sources else []
        # Quantities whose unit could not be merged into amount/unit: [{"amount", "unit"}]
        self.additional_amounts = [dict(a) for a in additional_amounts] if additional_amounts else None
        self.checked = checked
        self.shopping_category = shopping_category

    def __str__(self) -> str:
        qty = f"{self.amount:g} {self.unit}".strip() if self.amount is not None else ""
        mark = "[x]" if self.checked else "[ ]"
        return f"{mark} {self.item} {qty}".rstrip()

    __repr__ = __str__

    def copy(self) -> "ShoppingItem":
        return ShoppingItem(
            item=self.item,
            amount=self.amount,
            unit=self.unit,
            category_key=self.category_key,
            category_order=self.category_order,
            sources=[Source(s.recipe_name, s.recipe_id) for s in self.sources],
            additional_amounts=self.additional_amounts,
            checked=self.checked,
            shopping_category=self.shopping_category,
        )

    @staticmethod
    def from_dict(data):
        '''Creates a ShoppingItem from a stored row (camelCase keys).'''
        validated = ShoppingItemInput.model_validate(dict(data))
        additional = None
        if validated.additional_amounts:
            additional = [{"amount": a.amount, "unit": a.unit} for a in validated.additional_amounts]
        return ShoppingItem(
            item=validated.item,
            amount=validated.amount,
            unit=validated.unit,
            category_key=validated.category_key,
            category_order=validated.category_order,
            sources=[Source(s.recipe_name, s.recipe_id) for s in validated.sources],
            additional_amounts=additional,
            checked=validated.checked,
            shopping_category=validated.shopping_category,
        )

    def to_dict(self):
        d = {
            "item": self.item,
            "amount": self.amount,
            "unit": self.unit,
            "categoryKey": self.category_key,
            "categoryOrder": self.category_order,
            "sources": [s.to_dict() for s in self.sources],
        }
        if self.additional_amounts:
            d["additionalAmounts"] = [dict(a) for a in self.additional_amounts]
        if self.checked:
            d["checked"] = True
        if self.shopping_category:
            d["shoppingCategory"] = self.shopping_category
        return d
