"""Log repository - audit entries for reviewed actions."""
from .base import Repository, new_id, utc_now

PROFILE_DIFF_APPROVAL = "PROFILE_DIFF_APPROVAL"
PROFILE_DIFF_REJECTION = "PROFILE_DIFF_REJECTION"


class LogRepository(Repository):
    """Repository for audit logs.

    Examples:
        >>> repo = LogRepository(db)
        >>> repo.add(PROFILE_DIFF_REJECTION, {"approvedBy": admin_id}, {"profileDiffId": diff_id})
    """

    def add(self, log_type: str, meta: dict, body: dict) -> str:
        log_id = new_id()
        self._execute(
            "INSERT INTO logs (id, type, data, timestamp) VALUES (?, ?, ?, ?)",
            (log_id, log_type, self._dumps({"meta": meta, "body": body}), utc_now())
        )
        self._commit()
        return log_id

    def list_by_type(self, log_type: str) -> list[dict]:
        cursor = self._execute(
            "SELECT * FROM logs WHERE type = ? ORDER BY timestamp",
            (log_type,)
        )
        logs = []
        for row in cursor.fetchall():
            document = self._row_to_document(row)
            document["type"] = row["type"]
            document["timestamp"] = row["timestamp"]
            logs.append(document)
        return logs
