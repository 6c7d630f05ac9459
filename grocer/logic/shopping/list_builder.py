"""Shopping list builder.

Provides generate_shopping_list(recipes, pantry_items, excluded_keywords, scale=1.0):
every ingredient of the selected recipes is scaled, aggregated and routed to one
of three buckets (to buy, already have, excluded).
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from grocer.domain.Recipe import Recipe
from grocer.domain.ShoppingItem import ShoppingItem, Source
from grocer.logic.shopping.categories import categorize_ingredient, is_excluded_ingredient
from grocer.logic.shopping.normalization import normalize_item_name
from grocer.logic.units.conversion import round_half_up
from grocer.utilities import config

logger = logging.getLogger(__name__)


class ShoppingListResult:
    """Output of generate_shopping_list; each bucket sorted by (category order, item)."""

    def __init__(self, items: List[ShoppingItem], already_have: List[ShoppingItem],
                 excluded: List[ShoppingItem], scale: float, total_servings: int):
        self.items = items
        self.already_have = already_have
        self.excluded = excluded
        self.scale = scale
        self.total_servings = total_servings

    def __repr__(self) -> str:
        return (f"ShoppingListResult(items={len(self.items)}, already_have={len(self.already_have)}, "
                f"excluded={len(self.excluded)}, scale={self.scale}, total_servings={self.total_servings})")

    def to_dict(self):
        return {
            "items": [i.to_dict() for i in self.items],
            "alreadyHave": [i.to_dict() for i in self.already_have],
            "excluded": [i.to_dict() for i in self.excluded],
            "scale": self.scale,
            "totalServings": self.total_servings,
        }


def _sort_key(item: ShoppingItem):
    order = item.category_order if item.category_order is not None else 999
    return order, item.item


def sort_shopping_list(items: Iterable[ShoppingItem]) -> List[ShoppingItem]:
    """Return a new list sorted by category order, then item name."""
    return sorted(items, key=_sort_key)


def ensure_category_info(item: ShoppingItem,
                         user_overrides: Optional[Mapping[str, str]] = None) -> ShoppingItem:
    """Return the item unchanged if it is categorized, else a categorized copy."""
    if item.category_key and item.category_order is not None:
        return item
    key, order = categorize_ingredient(item.item, item.shopping_category, user_overrides)
    categorized = item.copy()
    categorized.category_key = key
    categorized.category_order = order
    return categorized


def _pantry_names(pantry_items) -> set:
    names = set()
    for entry in pantry_items or ():
        if isinstance(entry, Mapping):
            entry = entry.get("item", "")
        names.add(normalize_item_name(entry))
    return names


def generate_shopping_list(recipes: Iterable[Any], pantry_items: Iterable[Any],
                           excluded_keywords: Iterable[str], scale: float = config.DEFAULT_SCALE,
                           user_overrides: Optional[Mapping[str, str]] = None) -> ShoppingListResult:
    """Aggregate the ingredients of ``recipes`` into a shopping list.

    Args:
        recipes: Recipe objects (or recipe dicts) to shop for.
        pantry_items: Pantry, pantry names or {"item": name} records.
        excluded_keywords: items whose name contains one of these words are set aside.
        scale: multiplier applied to every amount and to the servings total.
        user_overrides: normalized item name -> category key, applied when categorizing.

    Returns:
        ShoppingListResult. Ingredients are grouped by normalized name and the unit
        exactly as written; merging across unit spellings happens in merging.py.
    """
    pantry = _pantry_names(pantry_items)
    excluded_keywords = list(excluded_keywords or [])

    aggregated: Dict[str, Dict[str, Any]] = {}
    total_base_servings = 0

    for recipe in recipes or []:
        if isinstance(recipe, Mapping):
            recipe = Recipe.from_dict(recipe)
        total_base_servings += recipe.effective_servings
        source = Source(recipe_name=recipe.name, recipe_id=recipe.id)
        for ing in recipe.ingredients:
            name = normalize_item_name(ing.item)
            if not name:
                continue
            unit = ing.unit or ""
            amount = (ing.amount or 0) * scale
            key = f"{name}|{unit}"
            entry = aggregated.get(key)
            if entry is None:
                aggregated[key] = {
                    "item": name,
                    "amount": amount,
                    "unit": unit,
                    "shopping_category": ing.shopping_category,
                    "sources": [source],
                }
                continue
            entry["amount"] += amount
            if all(s.key != source.key for s in entry["sources"]):
                entry["sources"].append(source)
            # first override wins
            if ing.shopping_category and not entry["shopping_category"]:
                entry["shopping_category"] = ing.shopping_category

    items: List[ShoppingItem] = []
    already_have: List[ShoppingItem] = []
    excluded: List[ShoppingItem] = []

    for entry in aggregated.values():
        cat_key, cat_order = categorize_ingredient(entry["item"], entry["shopping_category"], user_overrides)
        shopping_item = ShoppingItem(
            item=entry["item"],
            amount=entry["amount"] if entry["amount"] > 0 else None,
            unit=entry["unit"],
            category_key=cat_key,
            category_order=cat_order,
            sources=entry["sources"],
            shopping_category=entry["shopping_category"],
        )
        if entry["item"] in pantry:
            already_have.append(shopping_item)
        elif is_excluded_ingredient(entry["item"], excluded_keywords):
            excluded.append(shopping_item)
        else:
            items.append(shopping_item)

    result = ShoppingListResult(
        items=sort_shopping_list(items),
        already_have=sort_shopping_list(already_have),
        excluded=sort_shopping_list(excluded),
        scale=scale,
        total_servings=round_half_up(total_base_servings * scale),
    )
    logger.debug("Generated shopping list: %r", result)
    return result


__all__ = ['ShoppingListResult', 'generate_shopping_list', 'sort_shopping_list', 'ensure_category_info']
