"""Round repository for PostgreSQL."""

from src.database.postgres import PostgresClient
from src.domain.round import Round


class RoundRepository:
    """Read access to the rounds table."""

    def __init__(self, postgres_client: PostgresClient) -> None:
        self.postgres = postgres_client

    def list_by_number_desc(self) -> list[Round]:
        """
        Get all rounds, most recent number first.

        Returns:
            List of Round, empty if no round was ever created
        """
        rows = self.postgres.fetch_all(
            """
            SELECT number, status
            FROM rounds
            ORDER BY number DESC
            """
        )
        return [Round(number=row["number"], status=row["status"]) for row in rows]
