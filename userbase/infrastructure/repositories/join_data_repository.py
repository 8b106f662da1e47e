"""Join data repository - onboarding form submissions."""
from .base import Repository, new_id, utc_now


class JoinDataRepository(Repository):
    """Repository for join (onboarding) submissions.

    A submission document is ``{userId, intro: {...}, timestamp}``.
    """

    def add(self, data: dict) -> str:
        """Store a submission.

        Args:
            data: Dict with ``userId`` and ``intro``

        Returns:
            New submission ID
        """
        join_id = new_id()
        timestamp = data.get("timestamp") or utc_now()
        document = {"userId": data["userId"], "intro": data.get("intro", {}), "timestamp": timestamp}
        self._execute(
            "INSERT INTO join_data (id, user_id, data, timestamp) VALUES (?, ?, ?, ?)",
            (join_id, data["userId"], self._dumps(document), timestamp)
        )
        self._commit()
        return join_id

    def get_by_user_id(self, user_id: str) -> list[dict]:
        cursor = self._execute(
            "SELECT * FROM join_data WHERE user_id = ? ORDER BY timestamp",
            (user_id,)
        )
        return [self._row_to_document(row) for row in cursor.fetchall()]
