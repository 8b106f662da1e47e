"""Profile diff repository - proposed profile edits awaiting review."""
from .base import Repository, new_id, utc_now

PENDING = "PENDING"
APPROVED = "APPROVED"
REJECTED = "REJECTED"


class ProfileDiffRepository(Repository):
    """Repository for profile diffs.

    A diff document holds the proposed profile fields plus ``userId``,
    ``approval`` and ``timestamp``. Review metadata (``reason``) is kept in the
    same document.

    Examples:
        >>> repo = ProfileDiffRepository(db)
        >>> diff_id = repo.add({"userId": user_id, "first_name": "Ankur"})
        >>> repo.update(diff_id, {"approval": "REJECTED", "reason": "typo"})
    """

    def add(self, data: dict) -> str:
        """Store a new diff (PENDING unless ``approval`` is given).

        Args:
            data: Diff document, must contain ``userId``

        Returns:
            New diff ID
        """
        diff_id = new_id()
        fields = {k: v for k, v in data.items() if k not in ("userId", "approval", "timestamp")}
        self._execute(
            """INSERT INTO profile_diffs (id, user_id, approval, data, timestamp)
               VALUES (?, ?, ?, ?, ?)""",
            (diff_id, data["userId"], data.get("approval", PENDING), self._dumps(fields), utc_now())
        )
        self._commit()
        return diff_id

    def get_by_id(self, diff_id: str) -> dict | None:
        cursor = self._execute("SELECT * FROM profile_diffs WHERE id = ?", (diff_id,))
        return self._to_document(cursor.fetchone())

    def get_pending_for_user(self, user_id: str) -> dict | None:
        """Latest pending diff of a user, if any."""
        cursor = self._execute(
            """SELECT * FROM profile_diffs
               WHERE user_id = ? AND approval = ?
               ORDER BY timestamp DESC LIMIT 1""",
            (user_id, PENDING)
        )
        return self._to_document(cursor.fetchone())

    def update(self, diff_id: str, data: dict) -> bool:
        """Update approval state and/or fields of a diff.

        Args:
            diff_id: Diff ID
            data: ``approval`` and any fields to merge into the document

        Returns:
            True if the diff existed
        """
        existing = self.get_by_id(diff_id)
        if not existing:
            return False

        approval = data.get("approval", existing["approval"])
        fields = {
            k: v for k, v in {**existing, **data}.items()
            if k not in ("id", "userId", "approval", "timestamp")
        }
        self._execute(
            "UPDATE profile_diffs SET approval = ?, data = ?, timestamp = ? WHERE id = ?",
            (approval, self._dumps(fields), utc_now(), diff_id)
        )
        self._commit()
        return True

    def _to_document(self, row) -> dict | None:
        document = self._row_to_document(row)
        if document is None:
            return None
        document["userId"] = row["user_id"]
        document["approval"] = row["approval"]
        document["timestamp"] = row["timestamp"]
        return document
