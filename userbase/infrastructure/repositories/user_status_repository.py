"""User status repository - availability state and committed hours."""
from .base import Repository, deep_merge, new_id


class UserStatusRepository(Repository):
    """Repository for the one-per-user status document.

    Examples:
        >>> repo = UserStatusRepository(db)
        >>> repo.update_user_status(user_id, {"currentStatus": {"state": "ONBOARDING"}})
        {'id': '...', 'userStatusExists': False}
    """

    def get_by_user_id(self, user_id: str) -> dict | None:
        cursor = self._execute("SELECT * FROM users_status WHERE user_id = ?", (user_id,))
        return self._row_to_document(cursor.fetchone())

    def get_by_id(self, status_id: str) -> dict | None:
        cursor = self._execute("SELECT * FROM users_status WHERE id = ?", (status_id,))
        return self._row_to_document(cursor.fetchone())

    def update_user_status(self, user_id: str, data: dict) -> dict:
        """Create the status document or merge ``data`` into it.

        Args:
            user_id: User ID
            data: Status fields; ``currentStatus`` and ``monthlyHours`` are merged

        Returns:
            Dict with the status ``id`` and whether it already existed
        """
        existing = self.get_by_user_id(user_id)
        if existing:
            status_id = existing.pop("id")
            document = deep_merge(existing, data)
            self._execute(
                "UPDATE users_status SET data = ? WHERE id = ?",
                (self._dumps(document), status_id)
            )
            self._commit()
            return {"id": status_id, "userStatusExists": True}

        status_id = new_id()
        document = {"userId": user_id, **data}
        self._execute(
            "INSERT INTO users_status (id, user_id, data) VALUES (?, ?, ?)",
            (status_id, user_id, self._dumps(document))
        )
        self._commit()
        return {"id": status_id, "userStatusExists": False}
