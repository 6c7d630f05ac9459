"""Unit conversion for merging shopping list quantities.

Units are grouped into families (volume, weight, count). Within a family every
spelling converts to a base unit (ml, g, count) so that quantities written in
different units can be summed and re-expressed in a readable unit.
"""
from __future__ import annotations
import math
from typing import Dict, List, Optional, Tuple

__all__ = [
    "VOLUME", "WEIGHT", "COUNT", "UNKNOWN",
    "get_unit_family", "are_units_compatible", "convert_to_base", "convert_from_base",
    "get_best_display_unit", "merge_amounts", "round_for_display", "round_half_up",
]

VOLUME = "volume"
WEIGHT = "weight"
COUNT = "count"
UNKNOWN = "unknown"

BASE_UNITS: Dict[str, str] = {VOLUME: "ml", WEIGHT: "g", COUNT: "count", UNKNOWN: "unknown"}

# spelling -> (family, factor to base unit)
UNIT_CONVERSIONS: Dict[str, Tuple[str, float]] = {
    # Volume -> ml
    "ml": (VOLUME, 1), "milliliter": (VOLUME, 1), "milliliters": (VOLUME, 1),
    "l": (VOLUME, 1000), "liter": (VOLUME, 1000), "liters": (VOLUME, 1000),
    "tsp": (VOLUME, 4.929), "teaspoon": (VOLUME, 4.929), "teaspoons": (VOLUME, 4.929),
    "tbsp": (VOLUME, 14.787), "tbs": (VOLUME, 14.787),
    "tablespoon": (VOLUME, 14.787), "tablespoons": (VOLUME, 14.787),
    "c": (VOLUME, 236.588), "cup": (VOLUME, 236.588), "cups": (VOLUME, 236.588),
    "fl oz": (VOLUME, 29.574), "fluid ounce": (VOLUME, 29.574), "fluid ounces": (VOLUME, 29.574),
    "pt": (VOLUME, 473.176), "pint": (VOLUME, 473.176), "pints": (VOLUME, 473.176),
    "qt": (VOLUME, 946.353), "quart": (VOLUME, 946.353), "quarts": (VOLUME, 946.353),
    "gal": (VOLUME, 3785.41), "gallon": (VOLUME, 3785.41), "gallons": (VOLUME, 3785.41),
    # Weight -> g
    "g": (WEIGHT, 1), "gram": (WEIGHT, 1), "grams": (WEIGHT, 1),
    "kg": (WEIGHT, 1000), "kilogram": (WEIGHT, 1000), "kilograms": (WEIGHT, 1000),
    "oz": (WEIGHT, 28.3495), "ounce": (WEIGHT, 28.3495), "ounces": (WEIGHT, 28.3495),
    "lb": (WEIGHT, 453.592), "lbs": (WEIGHT, 453.592),
    "pound": (WEIGHT, 453.592), "pounds": (WEIGHT, 453.592),
    # Count
    "": (COUNT, 1), "count": (COUNT, 1), "whole": (COUNT, 1),
    "piece": (COUNT, 1), "pieces": (COUNT, 1), "pc": (COUNT, 1), "pcs": (COUNT, 1),
    "clove": (COUNT, 1), "cloves": (COUNT, 1),
    "slice": (COUNT, 1), "slices": (COUNT, 1),
    "strip": (COUNT, 1), "strips": (COUNT, 1),
    "can": (COUNT, 1), "cans": (COUNT, 1),
    "bunch": (COUNT, 1), "bunches": (COUNT, 1),
    "head": (COUNT, 1), "heads": (COUNT, 1),
    "stalk": (COUNT, 1), "stalks": (COUNT, 1),
    "sprig": (COUNT, 1), "sprigs": (COUNT, 1),
    "package": (COUNT, 1), "packages": (COUNT, 1), "pkg": (COUNT, 1), "pkgs": (COUNT, 1),
    "bag": (COUNT, 1), "bags": (COUNT, 1),
    "box": (COUNT, 1), "boxes": (COUNT, 1),
    "jar": (COUNT, 1), "jars": (COUNT, 1),
    "bottle": (COUNT, 1), "bottles": (COUNT, 1),
}

# Display preference per family, largest first: (unit, minimum base value)
PREFERRED_UNITS: Dict[str, List[Tuple[str, float]]] = {
    VOLUME: [
        ("gallon", 3785.41),   # 1 gallon
        ("quart", 946.353),    # 1 quart
        ("cup", 59.147),       # 1/4 cup
        ("tbsp", 14.787),
        ("tsp", 4.929),
        ("ml", 0),
    ],
    WEIGHT: [
        ("lb", 226.796),       # 1/2 lb
        ("oz", 28.3495),
        ("g", 0),
    ],
    COUNT: [("", 0)],
    UNKNOWN: [("", 0)],
}


def _canonical(unit: Optional[str]) -> str:
    return (unit or "").lower().strip()


def get_unit_family(unit: Optional[str]) -> str:
    """Return the family ('volume', 'weight', 'count' or 'unknown') of a unit spelling."""
    conversion = UNIT_CONVERSIONS.get(_canonical(unit))
    return conversion[0] if conversion else UNKNOWN


def are_units_compatible(unit1: Optional[str], unit2: Optional[str]) -> bool:
    """True when both units belong to the same known family.

    Unrecognised units only match themselves (same text after lowercasing and trimming).
    """
    family1 = get_unit_family(unit1)
    family2 = get_unit_family(unit2)
    if family1 == UNKNOWN or family2 == UNKNOWN:
        return _canonical(unit1) == _canonical(unit2)
    return family1 == family2


def convert_to_base(amount: float, unit: Optional[str]) -> Optional[Tuple[float, str]]:
    """Convert to the family base unit. Returns (value, family) or None for unknown units."""
    conversion = UNIT_CONVERSIONS.get(_canonical(unit))
    if conversion is None:
        return None
    family, factor = conversion
    return amount * factor, family


def convert_from_base(base_value: float, target_unit: Optional[str]) -> Optional[float]:
    conversion = UNIT_CONVERSIONS.get(_canonical(target_unit))
    if conversion is None:
        return None
    return base_value / conversion[1]


def get_best_display_unit(base_value: float, family: str) -> Tuple[str, float]:
    """Pick the largest preferred unit whose threshold the base value reaches.

    Returns (unit, value expressed in that unit).
    """
    for unit, min_value in PREFERRED_UNITS.get(family, PREFERRED_UNITS[UNKNOWN]):
        if base_value >= min_value:
            factor = UNIT_CONVERSIONS.get(unit, UNIT_CONVERSIONS[""])[1]
            return unit, base_value / factor
    # Negative totals fall through every threshold
    return "", base_value


def merge_amounts(amount1: Optional[float], unit1: Optional[str],
                  amount2: Optional[float], unit2: Optional[str]) -> Optional[Tuple[float, str]]:
    """Sum two quantities. Returns (amount, unit), or None when they cannot be combined.

    A missing or zero amount yields the other quantity unchanged. Identical units
    add directly; compatible units are summed in the base unit and re-expressed
    through get_best_display_unit.
    """
    unit1 = unit1 or ""
    unit2 = unit2 or ""
    if not amount1:
        return (amount2, unit2) if amount2 else None
    if not amount2:
        return amount1, unit1

    if _canonical(unit1) == _canonical(unit2):
        return amount1 + amount2, unit1

    if not are_units_compatible(unit1, unit2):
        return None

    base1 = convert_to_base(amount1, unit1)
    base2 = convert_to_base(amount2, unit2)
    if base1 is None or base2 is None:
        return None

    unit, value = get_best_display_unit(base1[0] + base2[0], base1[1])
    return value, unit


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def round_for_display(value: float) -> float:
    """Round to recipe-friendly steps: wholes from 10, quarters from 1, eighths below."""
    if value >= 10:
        return round_half_up(value)
    if value >= 1:
        return round_half_up(value * 4) / 4
    return round_half_up(value * 8) / 8
