"""Per-round flavor history repository for PostgreSQL."""

from src.database.postgres import PostgresClient


class FlavorHistoryRepository:
    """Read access to round_flavor_history, the flavors served in each round."""

    def __init__(self, postgres_client: PostgresClient) -> None:
        self.postgres = postgres_client

    def get_max_order(self, round_id: str) -> int | None:
        """
        Get the highest sequence number (ordem) recorded for a round.

        Args:
            round_id: Round identifier

        Returns:
            Highest ordem, or None when the round has no history
        """
        row = self.postgres.fetch_one(
            """
            SELECT ordem
            FROM round_flavor_history
            WHERE round_id = %s
            ORDER BY ordem DESC
            LIMIT 1
            """,
            (round_id,),
        )
        if row is None or row["ordem"] is None:
            return None
        return int(row["ordem"])
