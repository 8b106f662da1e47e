"""Photo verification repository - pending/verified image checks per user."""
from .base import Repository, deep_merge, new_id


class PhotoVerificationRepository(Repository):
    """Repository for photo verification records.

    Records are returned exactly as stored (no ``id`` key), since clients
    compare them to what was submitted.
    """

    def add(self, data: dict) -> str:
        """Store a record for ``data["userId"]``, replacing any previous one.

        Returns:
            Record ID
        """
        record_id = new_id()
        self._execute(
            """INSERT INTO photo_verification (id, user_id, data) VALUES (?, ?, ?)
               ON CONFLICT(user_id) DO UPDATE SET data = excluded.data""",
            (record_id, data["userId"], self._dumps(data))
        )
        self._commit()
        return record_id

    def get_by_user_id(self, user_id: str) -> dict | None:
        cursor = self._execute(
            "SELECT * FROM photo_verification WHERE user_id = ?",
            (user_id,)
        )
        return self._row_to_document(cursor.fetchone(), id_field=None)

    def update(self, user_id: str, data: dict) -> bool:
        """Merge ``data`` into the user's record.

        Returns:
            True if a record existed
        """
        existing = self.get_by_user_id(user_id)
        if existing is None:
            return False

        self._execute(
            "UPDATE photo_verification SET data = ? WHERE user_id = ?",
            (self._dumps(deep_merge(existing, data)), user_id)
        )
        self._commit()
        return True
