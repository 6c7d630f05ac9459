"""UserConfig domain entity: planner and shopping settings for one user."""
from typing import Any, Dict, List, Optional

from grocer.logic.shopping.categories import (
    generate_category_id, get_all_shopping_categories, get_next_category_order,
)
from grocer.logic.shopping.normalization import normalize_item_name
from grocer.utilities.constants import CUSTOM_CATEGORY_PREFIX
from grocer.utilities.validators import CustomCategoryInput, UserConfigInput


class UserConfig:
    def __init__(self, settings: Optional[UserConfigInput] = None):
        settings = settings or UserConfigInput()
        self.categories: List[str] = list(settings.categories)
        self.default_selection: Dict[str, int] = dict(settings.default_selection)
        # normalized item name -> shopping category key
        self.category_overrides: Dict[str, str] = dict(settings.category_overrides)
        self.excluded_keywords: List[str] = list(settings.excluded_keywords)
        self.history_exclusion_days = settings.history_exclusion_days
        self.week_start_day = settings.week_start_day
        self.excluded_days: List[int] = list(settings.excluded_days)
        self.preferred_days: Optional[List[int]] = (list(settings.preferred_days)
                                                    if settings.preferred_days is not None else None)
        self.auto_assign_days = settings.auto_assign_days
        self.custom_categories: List[Dict[str, Any]] = [c.model_dump() for c in settings.custom_categories]
        self.category_order: Optional[List[str]] = (list(settings.category_order)
                                                    if settings.category_order is not None else None)

    def __repr__(self) -> str:
        return (f"UserConfig(selection={self.default_selection}, overrides={len(self.category_overrides)}, "
                f"excluded={self.excluded_keywords})")

    def set_category_override(self, item_name: str, category_key: str):
        '''Remembers the store section the user chose for an item.'''
        self.category_overrides[normalize_item_name(item_name)] = category_key

    def remove_category_override(self, item_name: str):
        self.category_overrides.pop(normalize_item_name(item_name), None)

    def add_excluded_keyword(self, keyword: str):
        keyword = (keyword or "").strip()
        if not keyword:
            raise ValueError("Keyword cannot be empty")
        if keyword.lower() not in (k.lower() for k in self.excluded_keywords):
            self.excluded_keywords.append(keyword)

    def remove_excluded_keyword(self, keyword: str):
        self.excluded_keywords = [k for k in self.excluded_keywords if k.lower() != (keyword or "").strip().lower()]

    def add_custom_category(self, name: str) -> Dict[str, Any]:
        '''Creates a user-defined store section placed after every existing one.'''
        category = CustomCategoryInput(
            id=generate_category_id(),
            name=(name or "").strip(),
            order=get_next_category_order(self.custom_categories),
        ).model_dump()
        self.custom_categories.append(category)
        return category

    def remove_custom_category(self, category_id: str):
        '''Deletes a custom section and forgets overrides that pointed at it.'''
        self.custom_categories = [c for c in self.custom_categories if c["id"] != category_id]
        key = f"{CUSTOM_CATEGORY_PREFIX}{category_id}"
        self.category_overrides = {item: cat for item, cat in self.category_overrides.items() if cat != key}
        if self.category_order:
            self.category_order = [k for k in self.category_order if k != key]

    def shopping_categories(self) -> List[Dict[str, Any]]:
        return get_all_shopping_categories(self.custom_categories, self.category_order)

    @staticmethod
    def from_dict(data):
        '''Missing settings fall back to the defaults in grocer.utilities.config.'''
        return UserConfig(UserConfigInput.model_validate(dict(data or {})))

    def to_dict(self):
        return {
            "categories": self.categories,
            "default_selection": self.default_selection,
            "category_overrides": self.category_overrides,
            "excluded_keywords": self.excluded_keywords,
            "history_exclusion_days": self.history_exclusion_days,
            "week_start_day": self.week_start_day,
            "excluded_days": self.excluded_days,
            "preferred_days": self.preferred_days,
            "auto_assign_days": self.auto_assign_days,
            "custom_categories": self.custom_categories,
            "category_order": self.category_order,
        }
