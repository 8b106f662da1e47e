"""User repository - handles all user-related database operations."""
import sqlite3

from .base import Repository, deep_merge, new_id, utc_now


class UserRepository(Repository):
    """Repository for user documents.

    The full document lives in ``data``; ``username``, ``github_id`` and the
    archived flag are mirrored into columns so they can be queried.

    Examples:
        >>> repo = UserRepository(db)
        >>> result = repo.add_or_update({"username": "ankur", "github_id": "ankur1337"})
        >>> user = repo.get_by_id(result["userId"])
        >>> repo.is_username_available("ankur")
        False
    """

    DEFAULT_ROLES = {"archived": False, "in_discord": False}

    def get_by_id(self, user_id: str) -> dict | None:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User document (with ``id``) or None if not found
        """
        cursor = self._execute("SELECT * FROM users WHERE id = ?", (user_id,))
        return self._row_to_document(cursor.fetchone())

    def get_by_username(self, username: str) -> dict | None:
        """Get user by username (case-insensitive).

        Args:
            username: Username to search

        Returns:
            User document or None if not found
        """
        cursor = self._execute(
            "SELECT * FROM users WHERE username = ?",
            (username.lower().strip(),)
        )
        return self._row_to_document(cursor.fetchone())

    def get_by_github_id(self, github_id: str) -> dict | None:
        cursor = self._execute("SELECT * FROM users WHERE github_id = ?", (github_id,))
        return self._row_to_document(cursor.fetchone())

    def is_username_available(self, username: str) -> bool:
        return self.get_by_username(username) is None

    def add_or_update(self, data: dict, user_id: str | None = None) -> dict:
        """Create a user, or merge ``data`` into an existing one.

        An existing user is found by ``user_id`` when given, otherwise by
        ``github_id``. Nested objects such as ``roles`` are merged key by key.

        Args:
            data: User fields
            user_id: Existing user ID (optional)

        Returns:
            Dict with ``isNewUser`` and ``userId``
        """
        existing = None
        if user_id:
            existing = self.get_by_id(user_id)
        elif data.get("github_id"):
            existing = self.get_by_github_id(data["github_id"])

        if existing:
            self.update(existing["id"], data)
            return {"isNewUser": False, "userId": existing["id"]}

        user_id = user_id or new_id()
        document = deep_merge(
            {"incompleteUserDetails": True, "roles": dict(self.DEFAULT_ROLES)},
            data
        )
        document["created_at"] = document["updated_at"] = utc_now()
        if document.get("username"):
            document["username"] = document["username"].lower().strip()

        self._execute(
            """INSERT INTO users (id, username, github_id, archived, data)
               VALUES (?, ?, ?, ?, ?)""",
            (
                user_id,
                document.get("username"),
                document.get("github_id"),
                int(bool(document["roles"].get("archived"))),
                self._dumps(document),
            )
        )
        self._commit()
        return {"isNewUser": True, "userId": user_id}

    def update(self, user_id: str, data: dict) -> bool:
        """Merge fields into a user document.

        Args:
            user_id: User ID
            data: Fields to set (nested dicts are merged)

        Returns:
            True if user existed and was updated

        Raises:
            sqlite3.IntegrityError: The username belongs to another user
        """
        existing = self.get_by_id(user_id)
        if not existing:
            return False

        existing.pop("id")
        document = deep_merge(existing, data)
        if document.get("username"):
            document["username"] = document["username"].lower().strip()
        document["updated_at"] = utc_now()
        try:
            self._save(user_id, document)
        except sqlite3.IntegrityError:
            self._rollback()
            raise
        self._commit()
        return True

    def list_page(
        self,
        size: int,
        search: str | None = None,
        offset: int = 0,
        after: str | None = None,
        before: str | None = None
    ) -> list[dict]:
        """List non-archived users ordered by username.

        Args:
            size: Maximum number of users
            search: Case-insensitive username prefix
            offset: Rows to skip (page based listing)
            after: Only usernames strictly after this one
            before: Only the ``size`` usernames strictly before this one

        Returns:
            User documents in ascending username order
        """
        clauses = ["archived = 0", "username IS NOT NULL"]
        params: list = []

        if search:
            escaped = search.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            clauses.append("username LIKE ? ESCAPE '\\'")
            params.append(f"{escaped}%")

        order = "ASC"
        if after is not None:
            clauses.append("username > ?")
            params.append(after)
        elif before is not None:
            clauses.append("username < ?")
            params.append(before)
            order = "DESC"

        sql = f"""SELECT * FROM users WHERE {' AND '.join(clauses)}
                  ORDER BY username {order} LIMIT ? OFFSET ?"""
        cursor = self._execute(sql, (*params, size, offset))
        users = [self._row_to_document(row) for row in cursor.fetchall()]

        if order == "DESC":
            users.reverse()
        return users

    def list_all(self) -> list[dict]:
        """All users, archived included."""
        cursor = self._execute("SELECT * FROM users ORDER BY created_at")
        return [self._row_to_document(row) for row in cursor.fetchall()]

    def set_in_discord_false_for_all(self) -> int:
        """Set ``roles.in_discord`` to False on every user.

        Returns:
            Number of users updated
        """
        count = 0
        for user in self.list_all():
            user_id = user.pop("id")
            self._save(user_id, deep_merge(user, {"roles": {"in_discord": False}}))
            count += 1
        self._commit()
        return count

    def _save(self, user_id: str, document: dict) -> None:
        roles = document.get("roles") or {}
        self._execute(
            """UPDATE users SET username = ?, github_id = ?, archived = ?, data = ?
               WHERE id = ?""",
            (
                document.get("username"),
                document.get("github_id"),
                int(bool(roles.get("archived"))),
                self._dumps(document),
                user_id,
            )
        )
