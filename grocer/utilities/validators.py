"""
Input validation schemas using Pydantic for data handed over by the recipe,
pantry, config and list storage collaborators.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional

from grocer.utilities import config
from grocer.utilities.constants import DEFAULT_RECIPE_CATEGORIES, DEFAULT_SELECTION


class IngredientInput(BaseModel):
    """Schema for a recipe ingredient record."""
    model_config = ConfigDict(populate_by_name=True)

    item: str = Field(..., max_length=200)
    amount: Optional[float] = None
    unit: str = Field("", max_length=50)
    modifier: Optional[str] = None
    shopping_category: Optional[str] = Field(None, alias="shoppingCategory")

    @field_validator('item', 'unit', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace; treat null as empty."""
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('shopping_category')
    @classmethod
    def blank_category_is_none(cls, v):
        return v.strip() or None if isinstance(v, str) else v


class RecipeInput(BaseModel):
    """Schema for recipe input validation."""
    id: Optional[str] = None
    name: str = Field(..., max_length=200)
    category: str = ""
    servings: int = Field(0, ge=0, le=500)
    ingredients: List[IngredientInput] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v):
        """Storage may hand out integer ids; keys are compared as strings."""
        return str(v) if v is not None else None

    @field_validator('servings', mode='before')
    @classmethod
    def null_servings(cls, v):
        return 0 if v is None else v

    @field_validator('instructions')
    @classmethod
    def validate_instructions(cls, v):
        """Filter out empty steps."""
        return [step.strip() for step in v if step and step.strip()]


class PantryItemInput(BaseModel):
    """Schema for a pantry entry (name only, no quantity)."""
    item: str = Field(..., min_length=1, max_length=200)

    @field_validator('item')
    @classmethod
    def normalize(cls, v):
        v = v.strip().lower()
        if not v:
            raise ValueError('Pantry item cannot be empty')
        return v


class SourceInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_id: Optional[str] = Field(None, alias="recipeId")
    recipe_name: str = Field("", alias="recipeName")

    @field_validator('recipe_id', mode='before')
    @classmethod
    def stringify_id(cls, v):
        # "" is how stored lists spell a missing id
        if v is None or v == "":
            return None
        return str(v)


class AmountInput(BaseModel):
    amount: Optional[float] = None
    unit: str = ""


class ShoppingItemInput(BaseModel):
    """Schema for a stored shopping list row."""
    model_config = ConfigDict(populate_by_name=True)

    item: str = Field(..., min_length=1, max_length=200)
    amount: Optional[float] = None
    unit: str = ""
    category_key: str = Field("", alias="categoryKey")
    category_order: Optional[int] = Field(None, alias="categoryOrder")
    sources: List[SourceInput] = Field(default_factory=list)
    additional_amounts: Optional[List[AmountInput]] = Field(None, alias="additionalAmounts")
    checked: bool = False
    shopping_category: Optional[str] = Field(None, alias="shoppingCategory")

    @field_validator('unit', 'category_key', mode='before')
    @classmethod
    def null_is_empty(cls, v):
        return "" if v is None else v

    @field_validator('sources', mode='before')
    @classmethod
    def null_sources(cls, v):
        return [] if v is None else v


class HistoryEntryInput(BaseModel):
    """Schema for a 'recipe was made on' record. Dates are parsed leniently later."""
    recipe_id: str
    date_made: str

    @field_validator('recipe_id', 'date_made', mode='before')
    @classmethod
    def stringify(cls, v):
        if hasattr(v, 'isoformat'):
            return v.isoformat()
        return str(v) if v is not None else v


class CustomCategoryInput(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    order: int = Field(..., ge=0)


class UserConfigInput(BaseModel):
    """Schema for the planner / shopping settings of one user."""
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_RECIPE_CATEGORIES))
    default_selection: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_SELECTION))
    category_overrides: Dict[str, str] = Field(default_factory=dict)
    excluded_keywords: List[str] = Field(default_factory=list)
    history_exclusion_days: int = Field(config.HISTORY_EXCLUSION_DAYS, ge=0, le=365)
    week_start_day: int = Field(config.WEEK_START_DAY, ge=0, le=6)
    excluded_days: List[int] = Field(default_factory=list)
    preferred_days: Optional[List[int]] = None
    auto_assign_days: bool = True
    custom_categories: List[CustomCategoryInput] = Field(default_factory=list)
    category_order: Optional[List[str]] = None

    @field_validator('category_overrides')
    @classmethod
    def normalize_override_keys(cls, v):
        """Overrides are looked up by normalized item name."""
        return {k.strip().lower(): cat for k, cat in v.items() if k and k.strip()}

    @field_validator('excluded_keywords')
    @classmethod
    def validate_keywords(cls, v):
        """Ensure keywords are non-empty strings."""
        return [kw.strip() for kw in v if kw and kw.strip()]

    @field_validator('default_selection')
    @classmethod
    def validate_selection(cls, v):
        for category, count in v.items():
            if count < 0:
                raise ValueError(f'Selection count for {category} cannot be negative')
        return v

    @field_validator('excluded_days', 'preferred_days')
    @classmethod
    def validate_days(cls, v):
        """Day indices run 0 (Sunday) to 6 (Saturday)."""
        if v is None:
            return v
        for day in v:
            if not 0 <= day <= 6:
                raise ValueError(f'Invalid day index: {day}')
        return v
