"""Configuration management for the grocer engine."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR: Final[Path] = Path(__file__).parent.parent

# Load environment variables from .env file if it exists
env_path = BASE_DIR / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Meal planning defaults
HISTORY_EXCLUSION_DAYS: Final[int] = int(os.getenv('GROCER_HISTORY_EXCLUSION_DAYS', '10'))
WEEK_START_DAY: Final[int] = int(os.getenv('GROCER_WEEK_START_DAY', '1'))

# Shopping list defaults
DEFAULT_SCALE: Final[float] = float(os.getenv('GROCER_DEFAULT_SCALE', '1.0'))
DEFAULT_SERVINGS: Final[int] = int(os.getenv('GROCER_DEFAULT_SERVINGS', '4'))

# Ingredient parsing
MODIFIER_MAX_LENGTH: Final[int] = int(os.getenv('GROCER_MODIFIER_MAX_LENGTH', '60'))
