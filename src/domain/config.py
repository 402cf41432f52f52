"""Configuration domain models."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_PLANNED_UNITS = 5
DEFAULT_ROUND_LIMIT = 5

UNITS_PLANNED_DEFAULT_KEY = "units_planned_default"
TOTAL_ROUND_LIMIT_KEY = "total_round_limit"


def round_units_planned_key(round_id: str) -> str:
    """Config key holding the planned pizza count of a single round."""
    return f"round_{round_id}_units_planned"


@dataclass
class ConfigEntry:
    """Single configuration entry."""

    key: str
    value: str
    description: str | None = None
    updated_at: datetime | None = None
    updated_by: str = "system"

    def as_positive_int(self) -> int | None:
        """Parse value as a positive integer, None if it is not one."""
        try:
            number = int(self.value.strip())
        except (AttributeError, ValueError):
            return None
        return number if number > 0 else None
