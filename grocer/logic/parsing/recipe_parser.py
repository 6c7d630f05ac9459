"""Free-text recipe parsing.

An ingredient line goes through a fixed pipeline of small functions:

    strip_list_marker -> normalize_unicode -> extract_amount -> extract_unit -> extract_modifier

Each step takes text and returns text (plus what it pulled out), so every
heuristic can be exercised on its own. ``parse_recipe_text`` splits a pasted
recipe into name, ingredients and instructions and reports what looked off.
"""
from __future__ import annotations
import logging
import re
from typing import List, Optional, Tuple

from grocer.domain.Ingredient import Ingredient
from grocer.utilities import config

logger = logging.getLogger(__name__)

__all__ = [
    "ParsedRecipe", "UNICODE_FRACTIONS", "UNIT_WORDS",
    "strip_list_marker", "normalize_unicode", "parse_amount", "extract_amount",
    "extract_unit", "extract_modifier", "parse_ingredient_line", "parse_recipe_text",
]

UNICODE_FRACTIONS = {
    "½": 1 / 2, "⅓": 1 / 3, "⅔": 2 / 3, "¼": 1 / 4, "¾": 3 / 4,
    "⅕": 1 / 5, "⅖": 2 / 5, "⅗": 3 / 5, "⅘": 4 / 5, "⅙": 1 / 6, "⅚": 5 / 6,
    "⅛": 1 / 8, "⅜": 3 / 8, "⅝": 5 / 8, "⅞": 7 / 8,
}

UNIT_WORDS = (
    "tsp", "tbsp", "tablespoon", "teaspoon", "tablespoons", "teaspoons",
    "cup", "cups", "c",
    "oz", "ounce", "ounces", "lb", "lbs", "pound", "pounds",
    "g", "gram", "grams", "kg", "kilogram", "kilograms",
    "ml", "milliliter", "milliliters", "l", "liter", "liters",
    "fl oz", "fluid ounce", "fluid ounces",
    "pt", "pint", "pints", "qt", "quart", "quarts", "gal", "gallon", "gallons",
    "can", "cans", "package", "packages", "pkg", "pkgs",
    "clove", "cloves", "head", "heads",
    "piece", "pieces", "pc", "pcs",
    "slice", "slices", "strip", "strips",
)

# Longest first so "fluid ounces" wins over "fluid ounce"
_UNIT_PATTERNS = tuple(
    re.compile(r"^(" + re.escape(unit) + r")(\s+|$)", re.IGNORECASE)
    for unit in sorted(UNIT_WORDS, key=len, reverse=True)
)

_NUMBER = r"(?:\d+\s+\d+/\d+|\d+/\d+|\d+\.\d+|\d+)"
_AMOUNT_RE = re.compile(r"^(" + _NUMBER + r")(\s*-\s*(" + _NUMBER + r"))?(\s+|$)")
_LIST_MARKER_RE = re.compile(r"^[-*•.]\s+")
_PAREN_RE = re.compile(r"^(\([^)]+\))\s*")
_PREP_WORDS_RE = re.compile(
    r"(rinsed|chopped|minced|diced|sliced|peeled|grated|shredded|crushed|mashed|optional|"
    r"drained|dried|toasted|roasted|fresh|frozen|thawed|cooked|uncooked|raw|whole|halved|"
    r"quartered|cubed|julienned|spiralized|zested|juiced|pitted|seeded|stemmed|trimmed|"
    r"cleaned|washed|blanched|parboiled|steamed|boiled|fried|sautéed|grilled|baked|broiled|"
    r"smoked|cured|marinated|brined|seasoned|salted|peppered|floured|breaded|battered|glazed|"
    r"frosted|garnished|to taste|as needed)",
    re.IGNORECASE,
)
SHORT_MODIFIER_LENGTH = 25

INGREDIENT_HEADERS = ("ingredients", "ingredient")
INSTRUCTION_HEADERS = ("instructions", "instruction", "directions", "direction", "method", "steps", "step")
OTHER_SECTIONS = ("optional", "serve", "garnish", "topping", "note", "tips")
UNTITLED = "Untitled Recipe"

_NAME_PREFIX_RE = re.compile(r"^(recipe|title|name):\s*", re.IGNORECASE)
_SERVINGS_RE = re.compile(r"(\d+)\s*(servings?|people|portions?)", re.IGNORECASE)
_SERVINGS_STRIP_RE = re.compile(r"\s*\(?\d+\s*(servings?|people|portions?)\)?", re.IGNORECASE)
_STEP_MARKER_RE = re.compile(r"^(\d+[.)]?|[-*•.)])\s+")


class ParsedRecipe:
    """Result of parse_recipe_text. ``warnings`` are advisory, never fatal."""

    def __init__(self, name: str, ingredients: List[Ingredient], instructions: List[str],
                 servings: Optional[int] = None, warnings: Optional[List[str]] = None):
        self.name = name
        self.ingredients = ingredients
        self.instructions = instructions
        self.servings = servings
        self.warnings = warnings or []

    def __repr__(self) -> str:
        return (f"ParsedRecipe({self.name!r}, {len(self.ingredients)} ingredients, "
                f"{len(self.instructions)} steps, warnings={self.warnings!r})")

    def to_dict(self):
        d = {
            "name": self.name,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "instructions": self.instructions,
            "warnings": self.warnings,
        }
        if self.servings is not None:
            d["servings"] = self.servings
        return d


# --- ingredient line pipeline ---------------------------------------------

def strip_list_marker(line: str) -> str:
    """Drop a leading bullet, dash, dot or asterisk. Leading numbers are kept."""
    return _LIST_MARKER_RE.sub("", (line or "").strip()).strip()


def _fraction_text(value: float) -> str:
    return repr(value)


def normalize_unicode(text: str) -> str:
    """Turn vulgar fraction glyphs into decimals and en/em dashes into '-'.

    A digit right before a glyph makes a mixed number: '1½' -> '1.5'.
    """
    for glyph, value in UNICODE_FRACTIONS.items():
        if glyph not in text:
            continue
        text = re.sub(r"(\d+) ?" + re.escape(glyph),
                      lambda m, v=value: _fraction_text(int(m.group(1)) + v), text)
        text = text.replace(glyph, _fraction_text(value))
    return re.sub("[–—]", "-", text)


def parse_amount(text: str) -> float:
    """'1/2' -> 0.5, '1 1/2' -> 1.5, '2.25' -> 2.25. Division by zero reads as 0."""
    text = text.strip()
    parts = text.split()
    if len(parts) == 2:
        return parse_amount(parts[0]) + parse_amount(parts[1])
    if "/" in text:
        numerator, denominator = text.split("/", 1)
        if float(denominator) == 0:
            return 0.0
        return float(numerator) / float(denominator)
    return float(text)


def extract_amount(text: str) -> Tuple[Optional[float], Optional[str], str]:
    """Pull a leading amount off ``text``.

    Returns (amount, range_text, remainder). ``range_text`` is the verbatim
    amount token when it was a range such as '3-4', else None. Without a
    leading amount the result is (None, None, text).
    """
    match = _AMOUNT_RE.match(text)
    if not match:
        return None, None, text
    amount = parse_amount(match.group(1))
    range_text = match.group(0).strip() if match.group(3) else None
    return amount, range_text, text[match.end():].strip()


def _match_unit_word(text: str) -> Optional[Tuple[str, int]]:
    for pattern in _UNIT_PATTERNS:
        match = pattern.match(text)
        if match:
            # keep the casing as written
            return match.group(1), match.end()
    return None


def extract_unit(text: str) -> Tuple[str, str]:
    """Pull a unit off the front of ``text``; returns (unit, remainder).

    '(28 oz) can crushed tomatoes' -> ('can (28 oz)', 'crushed tomatoes').
    No unit gives ('', text).
    """
    if not text:
        return "", text
    paren = _PAREN_RE.match(text)
    if paren:
        after = text[paren.end():].strip()
        word = _match_unit_word(after)
        if word:
            return f"{word[0]} {paren.group(1)}", after[word[1]:].strip()
        return paren.group(1), after
    word = _match_unit_word(text)
    if word:
        return word[0], text[word[1]:].strip()
    return "", text


def _last_top_level_comma(text: str) -> int:
    depth = 0
    for idx in range(len(text) - 1, -1, -1):
        char = text[idx]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
        elif char == "," and depth == 0:
            return idx
    return -1


def _looks_like_modifier(tail: str) -> bool:
    if not tail or len(tail) >= config.MODIFIER_MAX_LENGTH:
        return False
    if tail[0].isdigit():
        return False
    return len(tail) < SHORT_MODIFIER_LENGTH or bool(_PREP_WORDS_RE.search(tail))


def extract_modifier(item: str) -> Tuple[str, Optional[str]]:
    """Split a preparation note after the last comma outside parentheses.

    'lentils, rinsed and drained' -> ('lentils', 'rinsed and drained').
    """
    if not item:
        return "", None
    comma = _last_top_level_comma(item)
    if comma == -1:
        return item, None
    base = item[:comma].strip()
    tail = item[comma + 1:].strip()
    if base and _looks_like_modifier(tail):
        return base, tail
    return item, None


def parse_ingredient_line(line: str) -> Ingredient:
    """Parse one free-text ingredient line. Never raises; unparsable text becomes the item."""
    cleaned = strip_list_marker(line)
    if not cleaned or "ingredients" in cleaned.lower():
        return Ingredient(item="", amount=None, unit="")

    cleaned = normalize_unicode(cleaned)
    amount, range_text, remaining = extract_amount(cleaned)
    if amount is None:
        item, modifier = extract_modifier(cleaned)
        return Ingredient(item=item, amount=None, unit="", modifier=modifier)

    unit, remaining = extract_unit(remaining)
    if range_text:
        unit = f"{range_text} {unit}".strip()
    item, modifier = extract_modifier(remaining)
    return Ingredient(item=item or cleaned, amount=amount, unit=unit, modifier=modifier)


# --- whole recipe ----------------------------------------------------------

def _find_section(lines: List[str], keywords) -> int:
    for idx, line in enumerate(lines):
        lower = line.lower()
        if any(keyword in lower for keyword in keywords):
            return idx
    return -1


def _missing_amount_warning(ingredients: List[Ingredient]) -> Optional[str]:
    missing = [ing.item for ing in ingredients if ing.amount is None and ing.item]
    if not missing:
        return None
    if len(missing) == 1:
        return f'"{missing[0]}" has no amount'
    if len(missing) <= 3:
        return f"{len(missing)} ingredients have no amounts: {', '.join(missing)}"
    return f"{len(missing)} ingredients have no amounts"


def parse_recipe_text(text: str) -> ParsedRecipe:
    """Split pasted recipe text into name, ingredients and instructions.

    Section headers ('Ingredients', 'Directions', ...) are optional. Problems
    are reported in ``warnings``; the function never raises.
    """
    lines = [line.strip() for line in (text or "").split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        return ParsedRecipe(name="", ingredients=[], instructions=[], warnings=["No text to parse"])

    ingredients_idx = _find_section(lines, INGREDIENT_HEADERS)
    instructions_idx = _find_section(lines, INSTRUCTION_HEADERS)

    if ingredients_idx > 0:
        name = " ".join(lines[:ingredients_idx]).strip()
        name = _NAME_PREFIX_RE.sub("", name).strip()
    else:
        name = lines[0]

    servings = None
    servings_match = _SERVINGS_RE.search(name)
    if servings_match:
        servings = int(servings_match.group(1))
        name = _SERVINGS_STRIP_RE.sub("", name, count=1).strip()

    start = ingredients_idx + 1 if ingredients_idx >= 0 else 0
    end = instructions_idx if instructions_idx >= 0 else len(lines)
    for idx in range(start, end):
        lower = lines[idx].lower()
        if len(lower) < 30 and any(section in lower for section in OTHER_SECTIONS):
            end = idx
            break

    ingredients: List[Ingredient] = []
    if start < end:
        parsed = (parse_ingredient_line(line) for line in lines[start:end])
        ingredients = [ing for ing in parsed if ing.item]

    if instructions_idx >= 0:
        instructions = lines[instructions_idx + 1:]
    elif ingredients_idx >= 0:
        instructions = lines[end:]
    else:
        instructions = [line for line in lines[1:] if _STEP_MARKER_RE.match(line) or len(line) > 50]
    instructions = [_STEP_MARKER_RE.sub("", line).strip() for line in instructions]
    instructions = [line for line in instructions if line]

    warnings: List[str] = []
    if not name or name == UNTITLED:
        warnings.append("No recipe name found - using placeholder")
    if not ingredients:
        warnings.append("No ingredients found")
    else:
        missing = _missing_amount_warning(ingredients)
        if missing:
            warnings.append(missing)
    if not instructions:
        warnings.append("No instructions found")

    logger.debug("Parsed recipe %r: %d ingredients, %d steps, %d warnings",
                 name, len(ingredients), len(instructions), len(warnings))
    return ParsedRecipe(name=name or UNTITLED, ingredients=ingredients, instructions=instructions,
                        servings=servings, warnings=warnings)
