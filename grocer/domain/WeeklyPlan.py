"""WeeklyPlan domain entity: the recipes picked for one week and the day each is cooked."""
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from grocer.domain.HistoryEntry import HistoryEntry
from grocer.logic.planning.selector import MealPlanResult, auto_assign_days, get_swap_recipe
from grocer.utilities import config

logger = logging.getLogger(__name__)


class DuplicateRecipeError(ValueError):
    pass


class NoRecipesAvailableError(ValueError):
    pass


def get_week_start_date(day: date, week_start_day: int = config.WEEK_START_DAY) -> str:
    """ISO date of the first day of the week containing ``day`` (0 = Sunday start)."""
    if isinstance(day, datetime):
        day = day.date()
    # date.weekday() is 0 for Monday; plans count from Sunday
    day_index = (day.weekday() + 1) % 7
    diff = (day_index - week_start_day) % 7
    return (day - timedelta(days=diff)).isoformat()


def navigate_week(week_date: str, direction: str) -> str:
    """Week start one week later ('next') or earlier ('prev')."""
    step = 7 if direction == "next" else -7
    return (date.fromisoformat(week_date) + timedelta(days=step)).isoformat()


class WeeklyPlan:
    def __init__(self, week_date: str, recipe_ids: Optional[List[str]] = None,
                 made_recipe_ids: Optional[List[str]] = None, scale: float = config.DEFAULT_SCALE,
                 day_assignments: Optional[Dict[str, int]] = None):
        self.week_date = week_date
        self.recipe_ids = [str(r) for r in recipe_ids] if recipe_ids else []
        self.made_recipe_ids = [str(r) for r in made_recipe_ids] if made_recipe_ids else []
        self.scale = scale
        self.day_assignments: Dict[str, int] = dict(day_assignments) if day_assignments else {}

    def __str__(self) -> str:
        return f"Week of {self.week_date}: {len(self.recipe_ids)} recipes, {len(self.made_recipe_ids)} made"

    __repr__ = __str__

    @staticmethod
    def from_meal_plan(week_date: str, result: MealPlanResult, scale: float = config.DEFAULT_SCALE) -> "WeeklyPlan":
        return WeeklyPlan(week_date, recipe_ids=[r.id for r in result.recipes], scale=scale)

    def _require(self, recipe_id: str) -> str:
        recipe_id = str(recipe_id)
        if recipe_id not in self.recipe_ids:
            raise ValueError("Recipe is not in this week's meal plan")
        return recipe_id

    def add_recipe(self, recipe_id: str):
        recipe_id = str(recipe_id)
        if recipe_id in self.recipe_ids:
            raise DuplicateRecipeError("Recipe is already in this week's meal plan")
        self.recipe_ids.append(recipe_id)

    def remove_recipe(self, recipe_id: str):
        recipe_id = self._require(recipe_id)
        self.recipe_ids.remove(recipe_id)
        if recipe_id in self.made_recipe_ids:
            self.made_recipe_ids.remove(recipe_id)
        self.day_assignments.pop(recipe_id, None)

    def swap_recipe(self, old_recipe_id: str, category: str, all_recipes: Iterable[Any],
                    exclude_ids: Optional[Iterable[str]] = None, rng=None):
        '''
        Replaces a recipe with a random one of the same category that is not in the plan.
        The replacement takes over the old recipe's day. Returns the new recipe.
        '''
        old_recipe_id = self._require(old_recipe_id)
        excluded = set(self.recipe_ids) | {str(i) for i in exclude_ids or []}
        new_recipe = get_swap_recipe(all_recipes, category, excluded, rng=rng)
        if new_recipe is None:
            raise NoRecipesAvailableError(f"No more {category} recipes available")

        self.recipe_ids = [new_recipe.id if rid == old_recipe_id else rid for rid in self.recipe_ids]
        if old_recipe_id in self.made_recipe_ids:
            self.made_recipe_ids.remove(old_recipe_id)
        if old_recipe_id in self.day_assignments:
            self.day_assignments[new_recipe.id] = self.day_assignments.pop(old_recipe_id)
        logger.info("Swapped recipe %s for %s in week %s", old_recipe_id, new_recipe.id, self.week_date)
        return new_recipe

    def toggle_made(self, recipe_id: str, history: Optional[List[HistoryEntry]] = None,
                    now: Optional[datetime] = None) -> bool:
        '''
        Marks a recipe as made this week, or undoes the mark. When a history list
        is given, marking appends an entry and undoing drops the latest entry for
        the recipe. Returns True when the recipe is now marked as made.
        '''
        recipe_id = self._require(recipe_id)
        if recipe_id in self.made_recipe_ids:
            self.made_recipe_ids.remove(recipe_id)
            if history is not None:
                entries = [e for e in history if e.recipe_id == recipe_id]
                if entries:
                    latest = max(entries, key=lambda e: e.date_made or datetime.min)
                    history.remove(latest)
            return False

        self.made_recipe_ids.append(recipe_id)
        if history is not None:
            made_at = now or datetime.now()
            history.append(HistoryEntry(recipe_id, made_at.isoformat()))
        return True

    def assign_days(self, excluded_days: Iterable[int] = (), preferred_days: Optional[Iterable[int]] = None,
                    week_start_day: int = config.WEEK_START_DAY) -> Dict[str, int]:
        '''
        Gives every recipe without a day one, keeping existing choices.
        '''
        self.day_assignments = auto_assign_days(self.recipe_ids, excluded_days, preferred_days,
                                                self.day_assignments, week_start_day)
        return self.day_assignments

    def set_day(self, recipe_id: str, day: Optional[int]):
        '''Pins a recipe to a day, or clears its day with None.'''
        recipe_id = self._require(recipe_id)
        if day is None:
            self.day_assignments.pop(recipe_id, None)
            return
        if not 0 <= day <= 6:
            raise ValueError(f"Invalid day index: {day}")
        self.day_assignments[recipe_id] = day

    @staticmethod
    def from_dict(data):
        return WeeklyPlan(
            week_date=data["week_date"],
            recipe_ids=data.get("recipe_ids") or [],
            made_recipe_ids=data.get("made_recipe_ids") or [],
            scale=data.get("scale") or config.DEFAULT_SCALE,
            day_assignments={str(k): int(v) for k, v in (data.get("day_assignments") or {}).items()},
        )

    def to_dict(self):
        return {
            "week_date": self.week_date,
            "recipe_ids": self.recipe_ids,
            "made_recipe_ids": self.made_recipe_ids,
            "scale": self.scale,
            "day_assignments": self.day_assignments,
        }
