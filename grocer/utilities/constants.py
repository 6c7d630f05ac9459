from typing import Final

# Source name for items typed in by the user rather than generated from a recipe
MANUAL_SOURCE: Final[str] = "Manual"

DEFAULT_RECIPE_CATEGORIES: Final[list[str]] = ["chicken", "turkey", "steak", "beef", "lamb", "vegetarian"]
DEFAULT_SELECTION: Final[dict[str, int]] = {"chicken": 2, "turkey": 1, "steak": 1}

# Prefix used for user-defined shopping category keys
CUSTOM_CATEGORY_PREFIX: Final[str] = "custom_"
