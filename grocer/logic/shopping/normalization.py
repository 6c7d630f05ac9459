"""Canonical item names and unit tokens for comparing shopping rows across sources."""
from typing import Dict, Optional

__all__ = ["UNIT_SYNONYMS", "normalize_unit", "normalize_item_name", "create_item_key"]

# Spelling -> canonical unit. Count words map to "" because a count carries no
# unit semantics when merging ("2 cloves" + "1" garlic = 3 garlic).
UNIT_SYNONYMS: Dict[str, str] = {
    # Volume
    'milliliter': 'ml', 'milliliters': 'ml',
    'liter': 'l', 'liters': 'l',
    'teaspoon': 'tsp', 'teaspoons': 'tsp',
    'tablespoon': 'tbsp', 'tablespoons': 'tbsp', 'tbs': 'tbsp',
    'c': 'cup', 'cups': 'cup',
    'fluid ounce': 'fl oz', 'fluid ounces': 'fl oz',
    'pt': 'pint', 'pints': 'pint',
    'qt': 'quart', 'quarts': 'quart',
    'gal': 'gallon', 'gallons': 'gallon',
    # Weight
    'gram': 'g', 'grams': 'g',
    'kilogram': 'kg', 'kilograms': 'kg',
    'ounce': 'oz', 'ounces': 'oz',
    'pound': 'lb', 'pounds': 'lb', 'lbs': 'lb',
    # Count
    'count': '', 'whole': '',
    'piece': '', 'pieces': '', 'pc': '', 'pcs': '',
    'clove': '', 'cloves': '',
    'slice': '', 'slices': '',
    'strip': '', 'strips': '',
    'can': '', 'cans': '',
    'bunch': '', 'bunches': '',
    'head': '', 'heads': '',
    'stalk': '', 'stalks': '',
    'sprig': '', 'sprigs': '',
    'package': '', 'packages': '', 'pkg': '', 'pkgs': '',
    'bag': '', 'bags': '',
    'box': '', 'boxes': '',
    'jar': '', 'jars': '',
    'bottle': '', 'bottles': '',
}


def normalize_unit(unit: Optional[str]) -> str:
    """Lowercase, trim and collapse spelling variants ('Tablespoons' -> 'tbsp')."""
    normalized = (unit or "").lower().strip()
    return UNIT_SYNONYMS.get(normalized, normalized)


def normalize_item_name(item: Optional[str]) -> str:
    return (item or "").lower().strip()


def create_item_key(item: Optional[str], unit: Optional[str]) -> str:
    """Dedup key at unit granularity: 'flour|cup' and 'flour|lb' stay apart."""
    return f"{normalize_item_name(item)}|{normalize_unit(unit)}"
