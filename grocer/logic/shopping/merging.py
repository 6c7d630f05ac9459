"""Merging shopping rows into an existing list.

Rows are matched by normalized item name. Quantities in compatible units are
summed and rounded for display; a quantity whose unit cannot be reconciled is
kept in ``additional_amounts`` so nothing the recipes asked for is dropped.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Optional

from grocer.domain.ShoppingItem import ShoppingItem
from grocer.logic.shopping.categories import categorize_ingredient
from grocer.logic.shopping.list_builder import ensure_category_info, sort_shopping_list
from grocer.logic.shopping.normalization import normalize_item_name, normalize_unit
from grocer.logic.units.conversion import merge_amounts, round_for_display
from grocer.utilities.constants import MANUAL_SOURCE

logger = logging.getLogger(__name__)

__all__ = [
    "merge_shopping_items", "merge_two_items",
    "remove_recipe_from_items", "remove_recipe_by_name_from_items",
]


def _normalized(item: ShoppingItem) -> ShoppingItem:
    copy = item.copy()
    copy.item = normalize_item_name(item.item)
    copy.unit = normalize_unit(item.unit)
    return copy


def merge_two_items(item1: ShoppingItem, item2: ShoppingItem,
                    user_category_overrides: Optional[Mapping[str, str]] = None,
                    preserve_user_overrides: bool = False) -> ShoppingItem:
    """Combine two rows for the same item into a new row.

    ``item1`` is the row already on the list. Its quantity is the one kept when
    the units do not reconcile. ``preserve_user_overrides`` makes item1 the base
    for every other field (category, checked state); otherwise item2 is.
    """
    first = _normalized(item1)
    second = _normalized(item2)

    sources = [s for s in first.sources]
    for source in second.sources:
        if all(s.key != source.key for s in sources):
            sources.append(source)

    base = first if preserve_user_overrides else second
    merged = base.copy()
    merged.item = first.item
    merged.sources = sources

    if user_category_overrides and user_category_overrides.get(first.item):
        merged.category_key, merged.category_order = categorize_ingredient(
            first.item, user_category_overrides[first.item], user_category_overrides)

    combined = merge_amounts(first.amount, first.unit, second.amount, second.unit)
    if combined is not None:
        amount, unit = combined
        merged.amount = round_for_display(amount)
        merged.unit = unit
        merged.additional_amounts = None
        return merged

    overflow = list(first.additional_amounts or [])
    if second.amount:
        overflow.append({"amount": second.amount, "unit": second.unit})
    overflow.extend(second.additional_amounts or [])
    merged.amount = first.amount
    merged.unit = first.unit
    merged.additional_amounts = overflow or None
    logger.debug("Units %r and %r for %r do not combine; kept as additional amounts",
                 first.unit, second.unit, first.item)
    return merged


def merge_shopping_items(existing: Iterable[ShoppingItem], new_items: Iterable[ShoppingItem],
                         preserve_user_overrides: bool = False, preserve_custom_order: bool = False,
                         user_category_overrides: Optional[Mapping[str, str]] = None) -> List[ShoppingItem]:
    """Merge ``new_items`` into ``existing`` and return the combined rows.

    Neither input is modified. Duplicate names already present in ``existing``
    are collapsed first. Unless ``preserve_custom_order`` is set the result is
    sorted by (category order, item).
    """
    by_name: Dict[str, ShoppingItem] = {}
    for item in existing or []:
        key = normalize_item_name(item.item)
        if key in by_name:
            by_name[key] = merge_two_items(by_name[key], item, user_category_overrides)
        else:
            by_name[key] = item

    for new_item in new_items or []:
        key = normalize_item_name(new_item.item)
        if key in by_name:
            by_name[key] = merge_two_items(by_name[key], new_item, user_category_overrides,
                                           preserve_user_overrides)
        else:
            by_name[key] = _normalized(ensure_category_info(new_item, user_category_overrides))

    merged = list(by_name.values())
    if preserve_custom_order:
        return merged
    return sort_shopping_list(merged)


def _drop_orphans(items: List[ShoppingItem]) -> List[ShoppingItem]:
    return [item for item in items if item.sources]


def remove_recipe_from_items(items: Iterable[ShoppingItem], recipe_id: str) -> List[ShoppingItem]:
    """Strip a recipe (by id) from every row's sources; rows left without sources are dropped,
    so a row with a manual source always stays.

    Sources recorded without an id are left alone; use remove_recipe_by_name_from_items for those.
    """
    updated = []
    for item in items or []:
        copy = item.copy()
        copy.sources = [s for s in item.sources if not s.recipe_id or s.recipe_id != recipe_id]
        updated.append(copy)
    return _drop_orphans(updated)


def remove_recipe_by_name_from_items(items: Iterable[ShoppingItem], recipe_name: str) -> List[ShoppingItem]:
    updated = []
    for item in items or []:
        copy = item.copy()
        # the manual source is never stripped
        copy.sources = [s for s in item.sources
                        if s.recipe_name == MANUAL_SOURCE or s.recipe_name != recipe_name]
        updated.append(copy)
    return _drop_orphans(updated)
