"""Display helpers for shopping rows: kitchen fractions instead of decimals."""
from typing import Optional

from grocer.domain.ShoppingItem import ShoppingItem

COMMON_FRACTIONS = {
    0.125: '1/8', 0.25: '1/4', 1 / 3: '1/3', 0.375: '3/8',
    0.5: '1/2', 0.625: '5/8', 2 / 3: '2/3', 0.75: '3/4', 0.875: '7/8'
}


def float_to_fraction(value: Optional[float]) -> str:
    """Convert float to fraction string for display (1.5 -> '1 1/2')."""
    if value is None or value == 0:
        return '0'
    if value == int(value):
        return str(int(value))
    whole = int(value)
    decimal = value - whole
    for dec, frac in COMMON_FRACTIONS.items():
        if abs(decimal - dec) < 0.02:
            if whole > 0:
                return f"{whole} {frac}"
            return frac
    # Fall back to decimal
    return f"{value:.2f}".rstrip('0').rstrip('.')


def _quantity(amount: Optional[float], unit: str) -> str:
    if amount is None:
        return (unit or "").strip()
    return f"{float_to_fraction(amount)} {unit or ''}".strip()


def format_item_quantity(item: ShoppingItem) -> str:
    """'2 cup + 1 lb' for a row holding 2 cups plus an unmergeable pound."""
    parts = [_quantity(item.amount, item.unit)]
    for extra in item.additional_amounts or []:
        parts.append(_quantity(extra.get("amount"), extra.get("unit", "")))
    return " + ".join(p for p in parts if p)
