"""Weekly meal plan selection.

Picks random recipes per protein category while avoiding recipes cooked in the
last few days, and spreads the picked recipes over the days of the week.
"""
from __future__ import annotations
import logging
import random
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

from grocer.domain.HistoryEntry import HistoryEntry
from grocer.domain.Recipe import Recipe
from grocer.utilities import config

logger = logging.getLogger(__name__)

__all__ = ["MealPlanResult", "generate_meal_plan", "get_swap_recipe", "auto_assign_days", "recent_recipe_ids"]


class MealPlanResult:
    """Selected recipes plus human-readable shortfall messages (empty when none)."""

    def __init__(self, recipes: List[Recipe], errors: List[str]):
        self.recipes = recipes
        self.errors = errors

    def __repr__(self) -> str:
        return f"MealPlanResult({[r.name for r in self.recipes]!r}, errors={self.errors!r})"


def _as_recipe(recipe) -> Recipe:
    return Recipe.from_dict(recipe) if isinstance(recipe, Mapping) else recipe


def _as_history(entry) -> HistoryEntry:
    return HistoryEntry.from_dict(entry) if isinstance(entry, Mapping) else entry


def recent_recipe_ids(history: Iterable[Any], history_exclusion_days: int,
                      now: Optional[datetime] = None) -> set:
    """Ids of recipes made on or after the cutoff day. Unreadable dates are skipped."""
    now = now or datetime.now()
    cutoff = (now - timedelta(days=history_exclusion_days)).date()
    recent = set()
    for entry in history or []:
        entry = _as_history(entry)
        if entry.made_on_or_after(cutoff):
            recent.add(entry.recipe_id)
    return recent


def _shuffled(items: List[Any], rng) -> List[Any]:
    items = list(items)
    rng.shuffle(items)
    return items


def generate_meal_plan(all_recipes: Iterable[Any], history: Iterable[Any], selection: Mapping[str, int],
                       history_exclusion_days: int = config.HISTORY_EXCLUSION_DAYS,
                       now: Optional[datetime] = None, rng=None) -> MealPlanResult:
    """Select ``selection[category]`` random recipes for each category.

    Recently made recipes are avoided. When a category runs short the plan is
    filled with recent recipes, or with the whole category when even that is
    not enough; each shortfall adds a message to ``errors``. Never raises.
    """
    rng = rng or random
    recipes = [_as_recipe(r) for r in all_recipes or []]
    recent = recent_recipe_ids(history, history_exclusion_days, now)

    selected: List[Recipe] = []
    errors: List[str] = []

    for category, count in (selection or {}).items():
        if count <= 0:
            continue
        in_category = [r for r in recipes if r.category == category]
        fresh = [r for r in in_category if r.id not in recent]

        if len(fresh) >= count:
            selected.extend(_shuffled(fresh, rng)[:count])
            continue

        if len(in_category) < count:
            errors.append(f"Not enough {category} recipes. Need {count}, have {len(in_category)}.")
            selected.extend(in_category)
        else:
            errors.append(f"Not enough non-recent {category} recipes. Including some recently made.")
            selected.extend(fresh)
            recent_in_category = [r for r in in_category if r.id in recent]
            selected.extend(_shuffled(recent_in_category, rng)[:count - len(fresh)])
        logger.info("Selection fallback for %s: wanted %d, %d not recently made", category, count, len(fresh))

    return MealPlanResult(recipes=selected, errors=errors)


def get_swap_recipe(all_recipes: Iterable[Any], category: str, exclude_ids: Iterable[str],
                    rng=None) -> Optional[Recipe]:
    """Random recipe of ``category`` whose id is not in ``exclude_ids``; None if none is left."""
    rng = rng or random
    excluded = {str(i) for i in exclude_ids or []}
    available = [r for r in (_as_recipe(r) for r in all_recipes or [])
                 if r.category == category and r.id not in excluded]
    if not available:
        return None
    return rng.choice(available)


def _day_priority(excluded_days: Iterable[int], preferred_days: Optional[Iterable[int]],
                  week_start_day: int) -> List[int]:
    excluded = set(excluded_days or [])
    priority: List[int] = []
    for day in preferred_days or []:
        if day not in excluded and day not in priority:
            priority.append(day)
    for offset in range(7):
        day = (week_start_day + offset) % 7
        if day not in excluded and day not in priority:
            priority.append(day)
    return priority


def auto_assign_days(recipe_ids: Iterable[str], excluded_days: Iterable[int] = (),
                     preferred_days: Optional[Iterable[int]] = None,
                     existing_assignments: Optional[Mapping[str, int]] = None,
                     week_start_day: int = config.WEEK_START_DAY) -> Dict[str, int]:
    """Map recipe ids to day indices (0 = Sunday).

    Existing assignments are kept. Unassigned recipes take days in priority
    order (preferred days, then the rest of the week from ``week_start_day``,
    never an excluded day), wrapping around when there are more recipes than
    days. With every day excluded nothing new is assigned.
    """
    existing = dict(existing_assignments or {})
    ids = [str(i) for i in recipe_ids or []]
    assignments = {rid: existing[rid] for rid in ids if rid in existing}

    priority = _day_priority(excluded_days, preferred_days, week_start_day)
    if not priority:
        return assignments

    unassigned = [rid for rid in ids if rid not in assignments]
    for idx, rid in enumerate(unassigned):
        assignments[rid] = priority[idx % len(priority)]
    return assignments
