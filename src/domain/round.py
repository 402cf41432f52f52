"""Round domain models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RoundStatus(str, Enum):
    """Lifecycle status of a game round."""

    CREATED = "created"
    IN_PROGRESS = "in_progress"
    FINALIZED = "finalized"


@dataclass
class Round:
    """Single game round as stored in the rounds table."""

    number: int
    status: str = RoundStatus.CREATED.value

    def is_finalized(self) -> bool:
        """Check if the round has been finalized."""
        return self.status == RoundStatus.FINALIZED.value


@dataclass
class RoundConfig:
    """
    Resolved configuration of a round.

    per_unit_time_limit is always 0 here; the time budget per pizza is
    derived from the round time limit by the game itself.
    """

    planned_units: int
    per_unit_time_limit: int = 0


@dataclass
class RoundLimitStatus:
    """Result of checking finalized rounds against the configured limit."""

    exceeded: bool
    finalized_count: int
    limit: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "exceeded": self.exceeded,
            "finalized_count": self.finalized_count,
            "limit": self.limit,
        }
