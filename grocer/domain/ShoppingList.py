"""ShoppingList aggregate: the user's current list with its three buckets.

``items`` is what to buy, ``already_have`` holds pantry matches and ``excluded``
holds rows set aside by excluded keywords. Every mutation the app offers on a
stored list goes through a method here.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from grocer.domain.ShoppingItem import ShoppingItem, Source
from grocer.logic.shopping.categories import FALLBACK_CATEGORY, categorize_ingredient, get_category_by_key
from grocer.logic.shopping.list_builder import ShoppingListResult, sort_shopping_list
from grocer.logic.shopping.merging import (
    merge_shopping_items, remove_recipe_by_name_from_items, remove_recipe_from_items,
)
from grocer.logic.shopping.normalization import normalize_item_name, normalize_unit
from grocer.logic.units.conversion import merge_amounts, round_for_display
from grocer.utilities import config
from grocer.utilities.constants import MANUAL_SOURCE

logger = logging.getLogger(__name__)


class DuplicateItemError(ValueError):
    pass


class ItemNotFoundError(ValueError):
    pass


def _insert_by_category(existing: List[ShoppingItem], new: List[ShoppingItem]) -> List[ShoppingItem]:
    """Place each new row right after the last existing row of its category."""
    new_by_category: Dict[str, List[ShoppingItem]] = {}
    for item in new:
        new_by_category.setdefault(item.category_key, []).append(item)

    last_index = {item.category_key: idx for idx, item in enumerate(existing)}
    ordered: List[ShoppingItem] = []
    for idx, item in enumerate(existing):
        ordered.append(item)
        if last_index[item.category_key] == idx:
            ordered.extend(new_by_category.pop(item.category_key, []))
    # categories not on the list yet go to the end
    for rows in new_by_category.values():
        ordered.extend(rows)
    return ordered


class ShoppingList:
    def __init__(self, items: Optional[List[ShoppingItem]] = None,
                 already_have: Optional[List[ShoppingItem]] = None,
                 excluded: Optional[List[ShoppingItem]] = None,
                 source_recipes: Optional[List[str]] = None,
                 scale: float = config.DEFAULT_SCALE, total_servings: int = 0,
                 custom_order: bool = False):
        self.items: List[ShoppingItem] = items[:] if items else []
        self.already_have: List[ShoppingItem] = already_have[:] if already_have else []
        self.excluded: List[ShoppingItem] = excluded[:] if excluded else []
        self.source_recipes: List[str] = source_recipes[:] if source_recipes else []
        self.scale = scale
        self.total_servings = total_servings
        # True once the user reorders rows by hand; disables automatic sorting
        self.custom_order = custom_order

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Shopping List ({len(self.items)} items, {self.total_servings} servings):\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    def __len__(self) -> int:
        return len(self.items)

    # --- building ----------------------------------------------------------
    @staticmethod
    def from_result(result: ShoppingListResult, recipe_ids: Iterable[str]) -> "ShoppingList":
        '''
        Starts a fresh list from a generator result, replacing whatever was there.
        '''
        return ShoppingList(
            items=result.items,
            already_have=result.already_have,
            excluded=result.excluded,
            source_recipes=list(dict.fromkeys(str(r) for r in recipe_ids)),
            scale=result.scale,
            total_servings=result.total_servings,
            custom_order=False,
        )

    def add_recipes(self, result: ShoppingListResult, recipe_ids: Iterable[str],
                    user_category_overrides: Optional[Mapping[str, str]] = None) -> Tuple[int, int]:
        '''
        Merges a generator result into the list without duplicating rows.
        Rows already on the list keep their category and checked state.
        Returns (added, merged) counts for the to-buy bucket.
        '''
        existing_keys = {normalize_item_name(item.item) for item in self.items}
        merged_items = merge_shopping_items(
            self.items, result.items,
            preserve_user_overrides=True,
            preserve_custom_order=self.custom_order,
            user_category_overrides=user_category_overrides,
        )
        new_rows = [item for item in merged_items if normalize_item_name(item.item) not in existing_keys]
        if self.custom_order and new_rows:
            kept = [item for item in merged_items if normalize_item_name(item.item) in existing_keys]
            merged_items = _insert_by_category(kept, new_rows)

        incoming_keys = {normalize_item_name(item.item) for item in result.items}
        added = len(new_rows)
        merged = len(incoming_keys & existing_keys)

        self.items = merged_items
        self.already_have = merge_shopping_items(self.already_have, result.already_have,
                                                 preserve_user_overrides=True,
                                                 user_category_overrides=user_category_overrides)
        self.excluded = merge_shopping_items(self.excluded, result.excluded,
                                             preserve_user_overrides=True,
                                             user_category_overrides=user_category_overrides)
        for recipe_id in recipe_ids:
            if str(recipe_id) not in self.source_recipes:
                self.source_recipes.append(str(recipe_id))
        self.scale = result.scale
        self.total_servings = (self.total_servings or 0) + result.total_servings
        logger.info("Added recipes to shopping list: %d new rows, %d merged", added, merged)
        return added, merged

    # --- single rows -------------------------------------------------------
    def _index_of(self, name: str) -> int:
        key = normalize_item_name(name)
        for idx, item in enumerate(self.items):
            if normalize_item_name(item.item) == key:
                return idx
        raise ItemNotFoundError(f"Item '{name}' not found in shopping list")

    def get_item(self, name: str) -> ShoppingItem:
        return self.items[self._index_of(name)]

    def __contains__(self, name) -> bool:
        key = normalize_item_name(name)
        return any(normalize_item_name(item.item) == key for item in self.items)

    def _resort(self):
        if not self.custom_order:
            self.items = sort_shopping_list(self.items)

    def add_item(self, name: str, amount: Optional[float] = None, unit: str = "",
                 user_category_overrides: Optional[Mapping[str, str]] = None) -> ShoppingItem:
        '''
        Adds a row typed in by the user. Raises DuplicateItemError if the item is already listed.
        '''
        item_name = normalize_item_name(name)
        if not item_name:
            raise ValueError("Item name cannot be empty")
        if item_name in self:
            raise DuplicateItemError("Item already in shopping list")
        key, order = categorize_ingredient(item_name, None, user_category_overrides)
        row = ShoppingItem(
            item=item_name,
            amount=amount if amount and amount > 0 else None,
            unit=normalize_unit(unit),
            category_key=key,
            category_order=order,
            sources=[Source(recipe_name=MANUAL_SOURCE)],
        )
        self.items.append(row)
        self._resort()
        logger.debug("Added manual item %r", item_name)
        return row

    def remove_item(self, name: str):
        '''
        Removes a row from the to-buy bucket.
        '''
        del self.items[self._index_of(name)]

    def toggle_checked(self, name: str) -> bool:
        '''
        Flips the checked state of a row and returns the new state.
        '''
        item = self.get_item(name)
        item.checked = not item.checked
        return item.checked

    def check_items(self, names: Iterable[str]) -> int:
        '''
        Marks several rows as checked. Unknown names are ignored; returns how many rows matched.
        '''
        wanted = {normalize_item_name(n) for n in names}
        count = 0
        for item in self.items:
            if normalize_item_name(item.item) in wanted:
                item.checked = True
                count += 1
        return count

    def move_item_to_category(self, name: str, category_key: str,
                              custom_categories: Optional[Iterable] = None) -> ShoppingItem:
        '''
        Moves a row to another store section. The list keeps its order from now on.
        '''
        item = self.get_item(name)
        category = get_category_by_key(category_key, custom_categories)
        item.category_key = category_key
        item.category_order = category["order"] if category else FALLBACK_CATEGORY.order
        self.custom_order = True
        return item

    def reorder(self, names: List[str]):
        '''
        Puts rows in the given order. Rows not named keep their relative order after the named ones.
        '''
        positions = [self._index_of(name) for name in names]
        named = list(dict.fromkeys(positions))
        seen = set(named)
        rest = [idx for idx in range(len(self.items)) if idx not in seen]
        self.items = [self.items[idx] for idx in named + rest]
        self.custom_order = True

    # --- moving rows between buckets -----------------------------------------
    @staticmethod
    def _take(bucket: List[ShoppingItem], name: str, label: str) -> Tuple[List[ShoppingItem], List[ShoppingItem]]:
        key = normalize_item_name(name)
        taken = [item for item in bucket if normalize_item_name(item.item) == key]
        if not taken:
            raise ItemNotFoundError(f"Item '{name}' not found in {label}")
        return taken, [item for item in bucket if normalize_item_name(item.item) != key]

    def _put_back(self, row: ShoppingItem):
        if row.item not in self:
            self.items.append(row)
            self._resort()

    def move_to_items(self, name: str) -> ShoppingItem:
        '''
        Moves an "already have" item back onto the list. Rows of the same name
        are combined first; quantities in units that do not combine keep the first one.
        '''
        taken, self.already_have = self._take(self.already_have, name, "already have")
        row = taken[0].copy()
        for other in taken[1:]:
            for source in other.sources:
                if all(s.key != source.key for s in row.sources):
                    row.sources.append(source)
            combined = merge_amounts(row.amount, row.unit, other.amount, other.unit)
            if combined is not None:
                row.amount, row.unit = round_for_display(combined[0]), combined[1]
        self._put_back(row)
        return row

    def move_excluded_to_items(self, name: str) -> ShoppingItem:
        '''
        Moves an excluded item onto the list. Nothing is added if the list already has it.
        '''
        taken, self.excluded = self._take(self.excluded, name, "excluded items")
        row = taken[0]
        self._put_back(row)
        return row

    def move_to_already_have(self, name: str, pantry=None) -> ShoppingItem:
        '''
        Takes an item off the list and files it under "already have". With a
        pantry, the item is also remembered there.
        '''
        taken, self.items = self._take(self.items, name, "shopping list")
        row = taken[0]
        key = normalize_item_name(row.item)
        if all(normalize_item_name(i.item) != key for i in self.already_have):
            self.already_have.append(row)
        if pantry is not None and key not in pantry:
            pantry.add_item(key)
        return row

    def remove_recipe(self, recipe_name: str, recipe_id: Optional[str] = None):
        '''
        Removes a recipe's contribution from every bucket. Rows left with no
        source are dropped; manual rows stay.
        '''
        buckets = []
        for bucket in (self.items, self.already_have, self.excluded):
            bucket = remove_recipe_by_name_from_items(bucket, recipe_name)
            if recipe_id:
                bucket = remove_recipe_from_items(bucket, str(recipe_id))
            buckets.append(bucket)
        self.items, self.already_have, self.excluded = buckets

        if recipe_id:
            still_used = any(
                s.recipe_name == recipe_name or s.recipe_id == str(recipe_id)
                for bucket in buckets for item in bucket for s in item.sources
            )
            if not still_used and str(recipe_id) in self.source_recipes:
                self.source_recipes.remove(str(recipe_id))
        logger.info("Removed recipe %r from shopping list", recipe_name)

    def clear(self):
        self.items = []
        self.already_have = []
        self.excluded = []
        self.source_recipes = []
        self.scale = config.DEFAULT_SCALE
        self.total_servings = 0
        self.custom_order = False

    # --- persistence shape -------------------------------------------------
    @staticmethod
    def from_dict(data):
        '''
        Builds a ShoppingList from its stored record.
        '''
        data = data or {}
        return ShoppingList(
            items=[ShoppingItem.from_dict(i) for i in data.get("items") or []],
            already_have=[ShoppingItem.from_dict(i) for i in data.get("already_have") or []],
            excluded=[ShoppingItem.from_dict(i) for i in data.get("excluded") or []],
            source_recipes=[str(r) for r in data.get("source_recipes") or []],
            scale=data.get("scale") or config.DEFAULT_SCALE,
            total_servings=data.get("total_servings") or 0,
            custom_order=bool(data.get("custom_order")),
        )

    def to_dict(self):
        return {
            "items": [i.to_dict() for i in self.items],
            "already_have": [i.to_dict() for i in self.already_have],
            "excluded": [i.to_dict() for i in self.excluded],
            "source_recipes": self.source_recipes,
            "scale": self.scale,
            "total_servings": self.total_servings,
            "custom_order": self.custom_order,
        }
