"""Round configuration resolution and persistence.

Planned pizza count of a round is resolved through an ordered chain of
sources, the first one that yields a value wins:

1. per-round entry ``round_{id}_units_planned``
2. global entry ``units_planned_default``
3. highest ``ordem`` in the round's flavor history
4. the hardcoded default

Reads never raise and fall back to defaults. Writes log and re-raise.
"""

from collections.abc import Callable

from src.domain.config import (
    DEFAULT_PLANNED_UNITS,
    DEFAULT_ROUND_LIMIT,
    TOTAL_ROUND_LIMIT_KEY,
    UNITS_PLANNED_DEFAULT_KEY,
    round_units_planned_key,
)
from src.domain.round import RoundConfig, RoundLimitStatus
from src.logger.logger import get_logger
from src.logger.types import Category, category, param
from src.repository.config_repository import ConfigRepository
from src.repository.flavor_history_repository import FlavorHistoryRepository
from src.repository.round_repository import RoundRepository

# A source returns the planned count, or None when it has nothing to say
UnitsSource = Callable[[str], int | None]


class ConfigResolver:
    """Resolves and stores planned pizza counts and the total round limit."""

    def __init__(
        self,
        config_repository: ConfigRepository,
        round_repository: RoundRepository,
        flavor_history_repository: FlavorHistoryRepository,
        default_planned_units: int = DEFAULT_PLANNED_UNITS,
        default_round_limit: int = DEFAULT_ROUND_LIMIT,
    ) -> None:
        """
        Initialize ConfigResolver.

        Args:
            config_repository: Key/value settings store
            round_repository: Rounds table access
            flavor_history_repository: Per-round flavor history access
            default_planned_units: Count used when no source has a value
            default_round_limit: Limit used when none is stored
        """
        self.config_repo = config_repository
        self.round_repo = round_repository
        self.flavor_history_repo = flavor_history_repository
        self.default_planned_units = default_planned_units
        self.default_round_limit = default_round_limit
        self.logger = get_logger().with_category(Category.CONFIG)

        self._units_sources: list[tuple[str, UnitsSource]] = [
            ("round_entry", self._units_from_round_entry),
            ("global_default", self._units_from_global_default),
            ("flavor_history", self._units_from_flavor_history),
        ]

    async def get_round_config(self, round_id: str) -> RoundConfig:
        """
        Resolve the planned pizza count for a round.

        Args:
            round_id: Round identifier

        Returns:
            RoundConfig, never None
        """
        logger = self.logger.with_fields(param("round_id", round_id))
        try:
            for source_name, source in self._units_sources:
                units = self._try_source(source_name, source, round_id)
                if units is not None:
                    logger.info(
                        "Planned units resolved",
                        param("source", source_name),
                        param("planned_units", units),
                    )
                    return RoundConfig(planned_units=units)
        except Exception as e:
            logger.error("Failed to resolve round config, using default", e)
            return RoundConfig(planned_units=self.default_planned_units)

        logger.info(
            "No planned units configured, using default",
            param("planned_units", self.default_planned_units),
        )
        return RoundConfig(planned_units=self.default_planned_units)

    async def save_round_config(self, round_id: str, planned_units: int) -> None:
        """
        Store the planned pizza count of a round.

        Raises:
            Exception: Whatever the store raised, after logging it
        """
        try:
            self.config_repo.set(
                round_units_planned_key(round_id),
                str(planned_units),
                description=f"Planned pizza count for round {round_id}",
            )
        except Exception as e:
            self.logger.error(
                "Failed to save round config",
                e,
                param("round_id", round_id),
                param("planned_units", planned_units),
            )
            raise

        self.logger.info(
            "Round config saved",
            param("round_id", round_id),
            param("planned_units", planned_units),
        )

    async def save_round_limit(self, max_rounds: int) -> None:
        """
        Store the maximum number of rounds of the game.

        Raises:
            Exception: Whatever the store raised, after logging it
        """
        try:
            self.config_repo.set(
                TOTAL_ROUND_LIMIT_KEY,
                str(max_rounds),
                description="Maximum number of rounds allowed in the game",
            )
        except Exception as e:
            self.logger.error(
                "Failed to save round limit",
                e,
                param("max_rounds", max_rounds),
            )
            raise

        self.logger.info("Round limit saved", param("max_rounds", max_rounds))

    async def get_round_limit(self) -> int:
        """Get the configured round limit, default when absent or broken."""
        try:
            entry = self.config_repo.get(TOTAL_ROUND_LIMIT_KEY)
        except Exception as e:
            self.logger.error("Failed to read round limit, using default", e)
            return self.default_round_limit

        if entry is None:
            self.logger.info(
                "No round limit configured, using default",
                param("limit", self.default_round_limit),
            )
            return self.default_round_limit

        limit = entry.as_positive_int()
        if limit is None:
            self.logger.warn(
                "Invalid round limit value, using default",
                param("key", TOTAL_ROUND_LIMIT_KEY),
                param("value", entry.value),
            )
            return self.default_round_limit

        self.logger.debug("Round limit loaded", param("limit", limit))
        return limit

    async def check_round_limit_exceeded(self) -> RoundLimitStatus:
        """
        Compare finalized rounds with the configured limit.

        Only finalized rounds count toward the limit; rounds that were merely
        created are logged but not returned.
        """
        try:
            limit = await self.get_round_limit()
            rounds = self.round_repo.list_by_number_desc()

            total_created = len(rounds)
            finalized = sum(1 for r in rounds if r.is_finalized())
            exceeded = finalized >= limit

            self.logger.info(
                "Round limit checked",
                category(Category.ROUNDS),
                param("finalized", finalized),
                param("limit", limit),
                param("total_created", total_created),
                param("exceeded", exceeded),
            )
            return RoundLimitStatus(
                exceeded=exceeded, finalized_count=finalized, limit=limit
            )
        except Exception as e:
            self.logger.error(
                "Failed to check round limit",
                e,
                category(Category.ROUNDS),
            )
            return RoundLimitStatus(
                exceeded=False, finalized_count=0, limit=self.default_round_limit
            )

    def _try_source(
        self, source_name: str, source: UnitsSource, round_id: str
    ) -> int | None:
        """Run one source, a storage failure counts as 'not found'."""
        try:
            return source(round_id)
        except Exception as e:
            self.logger.error(
                f"Planned units source failed: {source_name}",
                e,
                param("round_id", round_id),
            )
            return None

    def _units_from_round_entry(self, round_id: str) -> int | None:
        return self._units_from_entry(round_units_planned_key(round_id))

    def _units_from_global_default(self, round_id: str) -> int | None:
        return self._units_from_entry(UNITS_PLANNED_DEFAULT_KEY)

    def _units_from_entry(self, key: str) -> int | None:
        entry = self.config_repo.get(key)
        if entry is None:
            return None
        units = entry.as_positive_int()
        if units is None:
            self.logger.warn(
                "Invalid planned units value, skipping",
                param("key", key),
                param("value", entry.value),
            )
        return units

    def _units_from_flavor_history(self, round_id: str) -> int | None:
        max_order = self.flavor_history_repo.get_max_order(round_id)
        if max_order is None or max_order <= 0:
            return None
        return max_order
