"""Shopping categories for ingredient categorization.

Categories follow a typical grocery store walk. The table is an ordered list so
that ties between equally specific keywords resolve the same way every run.
"""
from __future__ import annotations
import re
from collections import namedtuple
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import uuid4

from grocer.utilities.constants import CUSTOM_CATEGORY_PREFIX

__all__ = [
    "ShoppingCategory", "CATEGORY_TABLE", "SHOPPING_CATEGORIES", "FALLBACK_CATEGORY",
    "categorize_ingredient", "is_excluded_ingredient", "get_excluded_keyword",
    "get_shopping_categories", "get_all_shopping_categories", "get_category_by_key",
    "get_next_category_order", "generate_category_id",
]

ShoppingCategory = namedtuple("ShoppingCategory", ["key", "order", "name", "keywords"])

CATEGORY_TABLE: Tuple[ShoppingCategory, ...] = (
    ShoppingCategory("produce", 1, "Fresh Produce", (
        # Vegetables
        "lettuce", "spinach", "kale", "arugula", "cabbage", "bok choy",
        "tomato", "tomatoes", "cherry tomatoes", "grape tomatoes",
        "onion", "onions", "red onion", "yellow onion", "white onion", "shallot", "shallots",
        "garlic", "ginger", "scallion", "scallions", "green onion", "green onions",
        "pepper", "peppers", "bell pepper", "bell peppers", "jalapeno", "jalapenos", "serrano",
        "cucumber", "cucumbers", "zucchini", "squash", "eggplant",
        "carrot", "carrots", "celery", "broccoli", "cauliflower", "asparagus",
        "mushroom", "mushrooms", "portobello", "shiitake", "cremini",
        "potato", "potatoes", "sweet potato", "sweet potatoes", "yam", "yams",
        "corn", "peas", "green beans", "snap peas", "snow peas",
        "avocado", "avocados",
        # Fruits
        "apple", "apples", "banana", "bananas", "orange", "oranges",
        "lemon", "lemons", "lime", "limes", "grapefruit",
        "strawberry", "strawberries", "blueberry", "blueberries", "raspberry", "raspberries",
        "blackberry", "blackberries", "grape", "grapes",
        "mango", "mangoes", "pineapple", "watermelon", "cantaloupe", "honeydew",
        "peach", "peaches", "plum", "plums", "nectarine", "nectarines",
        "pear", "pears", "kiwi", "cherry", "cherries", "pomegranate",
        # Fresh herbs
        "cilantro", "parsley", "basil", "mint", "dill", "chives",
        "rosemary", "thyme", "sage", "oregano", "tarragon",
    )),
    ShoppingCategory("deli", 2, "Deli", (
        "ham", "turkey breast", "roast beef", "pastrami", "salami", "pepperoni",
        "prosciutto", "pancetta", "bacon", "sausage", "chorizo",
        "deli meat", "lunch meat", "cold cuts",
        "cheese", "cheddar", "mozzarella", "parmesan", "swiss", "provolone",
        "gouda", "brie", "camembert", "feta", "goat cheese", "blue cheese",
        "cream cheese", "ricotta", "cottage cheese", "mascarpone",
        "american cheese", "pepper jack", "monterey jack", "colby",
    )),
    ShoppingCategory("bakery", 3, "Bakery", (
        "bread", "loaf", "baguette", "ciabatta", "sourdough", "focaccia",
        "rolls", "dinner rolls", "hamburger buns", "hot dog buns",
        "tortilla", "tortillas", "wrap", "wraps", "pita", "naan", "flatbread",
        "croissant", "croissants", "bagel", "bagels", "english muffin", "english muffins",
        "muffin", "muffins", "scone", "scones", "danish", "pastry", "pastries",
    )),
    ShoppingCategory("protein", 4, "Protein", (
        "chicken", "chicken breast", "chicken thigh", "chicken thighs", "chicken wings",
        "chicken drumsticks", "whole chicken", "ground chicken",
        "turkey", "ground turkey", "duck", "cornish hen",
        "beef", "ground beef", "steak", "sirloin", "ribeye", "filet mignon", "flank steak",
        "skirt steak", "chuck roast", "brisket", "short ribs", "beef ribs",
        "pork", "pork chop", "pork chops", "pork loin", "pork tenderloin",
        "ground pork", "pork shoulder", "pork belly", "ribs", "spare ribs",
        "lamb", "lamb chop", "lamb chops", "ground lamb", "lamb shank", "leg of lamb",
        "veal", "venison", "bison", "goat",
        "fish", "salmon", "tuna", "cod", "tilapia", "halibut", "mahi mahi", "sea bass",
        "trout", "snapper", "swordfish", "catfish", "sardines", "anchovies",
        "shrimp", "prawns", "lobster", "crab", "crab meat", "scallops",
        "mussels", "clams", "oysters", "calamari", "squid", "octopus",
    )),
    ShoppingCategory("dairy", 5, "Dairy", (
        "milk", "whole milk", "skim milk", "2% milk", "half and half", "heavy cream",
        "whipping cream", "sour cream", "buttermilk",
        "egg", "eggs",
        "butter", "unsalted butter", "salted butter", "margarine",
        "yogurt", "greek yogurt", "plain yogurt", "vanilla yogurt",
        "kefir", "creme fraiche",
    )),
    ShoppingCategory("pantry", 6, "Pantry", (
        # Canned goods
        "canned", "can of", "diced tomatoes", "crushed tomatoes", "tomato paste", "tomato sauce",
        "sun dried tomatoes", "sun-dried tomatoes", "sundried tomatoes",
        "beans", "black beans", "kidney beans", "chickpeas", "lentils",
        # Pasta & grains
        "pasta", "spaghetti", "penne", "rigatoni", "fettuccine", "linguine", "macaroni",
        "rice", "brown rice", "white rice", "jasmine rice", "basmati", "arborio",
        "quinoa", "couscous", "orzo", "farro", "barley", "oats", "oatmeal",
        "breadcrumbs", "panko", "croutons",
        "tortilla chips", "chips", "crackers",
        # Sauces & condiments
        "sauce", "marinara", "alfredo", "pesto", "salsa",
        "ketchup", "mustard", "mayonnaise", "mayo", "relish",
        "soy sauce", "teriyaki", "hoisin", "fish sauce", "oyster sauce",
        "vinegar", "balsamic", "red wine vinegar", "white wine vinegar", "rice vinegar",
        "olive oil", "vegetable oil", "canola oil", "sesame oil", "coconut oil",
        # Baking
        "flour", "sugar", "brown sugar", "powdered sugar", "baking powder", "baking soda",
        "yeast", "cornstarch", "vanilla", "vanilla extract", "cocoa", "chocolate chips",
        # Spices & seasonings
        "salt", "cumin", "paprika", "chili powder", "cayenne",
        "cinnamon", "nutmeg", "ginger powder", "turmeric", "curry powder",
        "garlic powder", "onion powder", "italian seasoning", "herbs de provence",
        "black pepper", "bay leaf", "bay leaves",
        # Nuts & dried
        "almonds", "walnuts", "pecans", "cashews", "peanuts", "pine nuts",
        "raisins", "dried cranberries", "dates", "dried apricots",
        # Stocks & broths
        "broth", "stock", "chicken broth", "beef broth", "vegetable broth",
        "bouillon", "chicken stock", "beef stock",
        "honey", "maple syrup", "molasses", "agave",
        "peanut butter", "almond butter", "tahini",
        "coconut milk", "evaporated milk", "condensed milk",
    )),
    ShoppingCategory("frozen", 7, "Frozen", (
        "frozen", "ice cream", "frozen pizza", "frozen vegetables", "frozen fruit",
        "frozen berries", "frozen peas", "frozen corn", "frozen spinach",
        "frozen yogurt", "popsicle", "popsicles", "ice pops",
        "frozen waffles", "frozen pancakes", "frozen fries", "french fries",
        "tater tots", "frozen fish", "fish sticks", "frozen shrimp",
        "frozen chicken", "frozen dinner", "tv dinner",
    )),
    ShoppingCategory("misc", 8, "Miscellaneous", (
        # Kitchen supplies
        "tinfoil", "tin foil", "aluminum foil", "foil", "plastic wrap", "saran wrap",
        "cling wrap", "parchment paper", "wax paper", "paper towels", "paper towel",
        "napkins", "napkin", "paper plates", "plastic plates", "plastic cups",
        "plastic utensils", "disposable", "ziplock", "zip lock", "storage bags",
        "freezer bags", "sandwich bags", "trash bags", "garbage bags",
        # Cleaning supplies
        "dish soap", "dishwasher detergent", "dishwasher pods", "sponge", "sponges",
        "scrub brush", "cleaning", "cleaner", "bleach", "disinfectant",
        "laundry detergent", "fabric softener", "dryer sheets",
        # Personal care
        "toilet paper", "tissues", "tissue", "toothpaste", "toothbrush",
        "shampoo", "conditioner", "soap", "hand soap", "body wash",
        # Pet supplies
        "dog food", "cat food", "pet food", "cat litter", "dog treats", "cat treats",
        "batteries", "light bulb", "light bulbs", "candles", "matches", "lighter",
    )),
)

SHOPPING_CATEGORIES: Dict[str, ShoppingCategory] = {cat.key: cat for cat in CATEGORY_TABLE}
FALLBACK_CATEGORY = SHOPPING_CATEGORIES["misc"]


def _word_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(keyword.lower().strip()) + r"\b")


def _build_keyword_index() -> List[Tuple[re.Pattern, str, int]]:
    # Longest keyword first so "sun dried tomatoes" is tried before "tomatoes";
    # sorted() is stable, so equal lengths keep table order.
    entries = [(kw, cat.key, cat.order) for cat in CATEGORY_TABLE for kw in cat.keywords]
    entries = sorted(entries, key=lambda e: -len(e[0]))
    return [(_word_pattern(kw), key, order) for kw, key, order in entries]


# Built once at import; never mutated.
_KEYWORD_INDEX: Tuple[Tuple[re.Pattern, str, int], ...] = tuple(_build_keyword_index())


def categorize_ingredient(item_name: str, override_category: Optional[str] = None,
                          user_overrides: Optional[Mapping[str, str]] = None) -> Tuple[str, int]:
    """Return (category_key, category_order) for an ingredient name.

    Priority: the user's override for this item name, then an explicit category
    override (e.g. set on the recipe ingredient), then keyword inference. Keys
    that are not in the table are ignored. Unmatched names go to 'misc'.
    """
    item_lower = (item_name or "").lower().strip()

    if user_overrides and item_lower in user_overrides:
        user_key = user_overrides[item_lower]
        if user_key in SHOPPING_CATEGORIES:
            return user_key, SHOPPING_CATEGORIES[user_key].order

    if override_category and override_category in SHOPPING_CATEGORIES:
        return override_category, SHOPPING_CATEGORIES[override_category].order

    for pattern, key, order in _KEYWORD_INDEX:
        if pattern.search(item_lower):
            return key, order

    return FALLBACK_CATEGORY.key, FALLBACK_CATEGORY.order


def get_excluded_keyword(item_name: str, excluded_keywords: Iterable[str]) -> Optional[str]:
    """Return the first excluded keyword equal to the whole item name, ignoring case.

    'pepper' excludes 'pepper' only, never 'poblano pepper' or 'black pepper'.
    """
    item_lower = (item_name or "").lower().strip()
    for keyword in excluded_keywords or ():
        if not keyword or not keyword.strip():
            continue
        if item_lower == keyword.lower().strip():
            return keyword
    return None


def is_excluded_ingredient(item_name: str, excluded_keywords: Iterable[str]) -> bool:
    return get_excluded_keyword(item_name, excluded_keywords) is not None


def get_shopping_categories() -> List[Dict[str, Any]]:
    """Built-in categories for a category picker, in store order."""
    return [{"key": cat.key, "name": cat.name, "order": cat.order} for cat in CATEGORY_TABLE]


def _custom_field(category, field):
    if isinstance(category, Mapping):
        return category.get(field)
    return getattr(category, field, None)


def get_all_shopping_categories(custom_categories: Optional[Iterable[Any]] = None,
                                category_order: Optional[List[str]] = None) -> List[Dict[str, Any]]:
    """Built-in plus user-defined categories.

    With ``category_order`` (a list of keys) the listed keys come first in that
    order; unlisted categories follow by their own order value.
    """
    categories = [dict(entry, is_custom=False) for entry in get_shopping_categories()]
    for custom in custom_categories or ():
        categories.append({
            "key": f"{CUSTOM_CATEGORY_PREFIX}{_custom_field(custom, 'id')}",
            "name": _custom_field(custom, "name"),
            "order": _custom_field(custom, "order"),
            "is_custom": True,
        })

    if category_order:
        positions = {key: idx for idx, key in enumerate(category_order)}
        categories.sort(key=lambda c: positions.get(c["key"], 999 + c["order"]))
    else:
        categories.sort(key=lambda c: c["order"])
    return categories


def get_category_by_key(key: str, custom_categories: Optional[Iterable[Any]] = None) -> Optional[Dict[str, Any]]:
    if key in SHOPPING_CATEGORIES:
        cat = SHOPPING_CATEGORIES[key]
        return {"name": cat.name, "order": cat.order, "is_custom": False}
    if key and key.startswith(CUSTOM_CATEGORY_PREFIX) and custom_categories:
        custom_id = key[len(CUSTOM_CATEGORY_PREFIX):]
        for custom in custom_categories:
            if str(_custom_field(custom, "id")) == custom_id:
                return {"name": _custom_field(custom, "name"),
                        "order": _custom_field(custom, "order"),
                        "is_custom": True}
    return None


def get_next_category_order(custom_categories: Optional[Iterable[Any]] = None) -> int:
    default_max = max(cat.order for cat in CATEGORY_TABLE)
    orders = [_custom_field(c, "order") for c in custom_categories or ()]
    if not orders:
        return default_max + 1
    return max(default_max, max(orders)) + 1


def generate_category_id() -> str:
    return str(uuid4())
