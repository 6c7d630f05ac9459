"""History record: a recipe was made on a date."""
from datetime import date, datetime, timezone
from typing import Optional

from grocer.utilities.validators import HistoryEntryInput


def parse_date(value) -> Optional[datetime]:
    """Parse an ISO date or datetime; returns None for anything unreadable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif not isinstance(value, str) or not value.strip():
        return None
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        # stored as UTC; compared as naive datetimes
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class HistoryEntry:
    def __init__(self, recipe_id: str, date_made):
        self.recipe_id = str(recipe_id)
        self.raw_date = date_made
        self.date_made: Optional[datetime] = parse_date(date_made)

    def __repr__(self) -> str:
        return f"HistoryEntry({self.recipe_id!r}, {self.raw_date!r})"

    def made_on_or_after(self, cutoff: date) -> bool:
        '''False when the date could not be parsed.'''
        if self.date_made is None:
            return False
        return self.date_made.date() >= cutoff

    @staticmethod
    def from_dict(data):
        validated = HistoryEntryInput.model_validate(dict(data))
        return HistoryEntry(validated.recipe_id, validated.date_made)

    def to_dict(self):
        if self.date_made is not None:
            made = self.date_made.isoformat()
        else:
            made = self.raw_date if isinstance(self.raw_date, str) else ""
        return {"recipe_id": self.recipe_id, "date_made": made}
