"""User service - profile reads, listing and self-service updates.

This service encapsulates business logic for:
- Public and private views of a user document
- Paginated, searchable listing
- Self-service profile edits (direct fields vs. reviewed profile diffs)
- Chaincodes and profile URLs
"""
import logging
import sqlite3
from typing import Iterable, Tuple

from ... import config
from ...errors import Conflict, Forbidden, NotFound, USER_NOT_FOUND
from ...infrastructure.repositories import (
    UserRepository, ProfileDiffRepository, ChaincodeRepository
)
from ...schemas import UpdateSelf, UserListQuery
from .pagination import build_links

logger = logging.getLogger(__name__)

# Applied straight to the user document; everything else needs review
DIRECT_UPDATE_FIELDS = {"status", "username"}


def sanitize_user(user: dict, include_private: bool = False) -> dict:
    """Strip fields that must not leave the API.

    Args:
        user: User document
        include_private: Keep ``phone`` and ``email`` (owner's own view)

    Returns:
        New dict without sensitive fields
    """
    hidden = set(config.SENSITIVE_USER_FIELDS)
    if not include_private:
        hidden.update(config.PRIVATE_USER_FIELDS)
    return {key: value for key, value in user.items() if key not in hidden}


class UserService:
    """Service for user profiles.

    Responsibilities:
    - Lookups by id and username (404 when missing)
    - Listing with cursor pagination
    - Self updates and profile diffs
    """

    def __init__(
        self,
        user_repository: UserRepository,
        profile_diff_repository: ProfileDiffRepository = None,
        chaincode_repository: ChaincodeRepository = None
    ):
        self.user_repo = user_repository
        self.diff_repo = profile_diff_repository
        self.chaincode_repo = chaincode_repository

    # =========================================================================
    # Reads
    # =========================================================================

    def get_user(self, user_id: str) -> dict:
        """Get user by ID.

        Raises:
            HTTPException: 404 if the user doesn't exist
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFound(USER_NOT_FOUND)
        return user

    def get_user_by_username(self, username: str) -> dict:
        user = self.user_repo.get_by_username(username)
        if not user:
            raise NotFound(USER_NOT_FOUND)
        return user

    def is_username_available(self, username: str) -> bool:
        return self.user_repo.is_username_available(username)

    def list_users(self, query: UserListQuery, params: Iterable[Tuple[str, str]]) -> dict:
        """One page of non-archived users.

        Args:
            query: Validated listing query
            params: Raw query parameters, used to build the links

        Returns:
            Dict with sanitized ``users`` and ``links``

        Raises:
            HTTPException: 404 if a ``next``/``prev`` cursor doesn't exist
        """
        size = query.size or config.DEFAULT_PAGE_SIZE
        after = before = None
        offset = 0

        if query.next:
            after = self._cursor_username(query.next)
        elif query.prev:
            before = self._cursor_username(query.prev)
        elif query.page is not None:
            offset = query.page * size

        users = self.user_repo.list_page(
            size,
            search=query.search,
            offset=offset,
            after=after,
            before=before
        )
        return {
            "users": [sanitize_user(user) for user in users],
            "links": build_links(params, users),
        }

    def _cursor_username(self, user_id: str) -> str:
        user = self.user_repo.get_by_id(user_id)
        if not user or not user.get("username"):
            raise NotFound(USER_NOT_FOUND)
        return user["username"]

    # =========================================================================
    # Self service
    # =========================================================================

    def update_self(self, user_id: str, data: UpdateSelf) -> None:
        """Apply a self-service edit.

        ``status`` is applied directly. ``username`` can be set once, while the
        account still has ``incompleteUserDetails``. All other profile fields
        go into the user's pending profile diff (created or refreshed).

        Raises:
            HTTPException: 403 if the username was already set, 409 if taken
        """
        fields = data.model_dump(exclude_unset=True)
        user = self.get_user(user_id)

        direct = {key: fields.pop(key) for key in list(fields) if key in DIRECT_UPDATE_FIELDS}

        username = direct.get("username")
        if username is not None:
            username = username.lower()
            if username != user.get("username"):
                if not user.get("incompleteUserDetails"):
                    raise Forbidden("Cannot update username again")
                if not self.user_repo.is_username_available(username):
                    raise Conflict("Username is not available")
            direct["username"] = username
            direct["incompleteUserDetails"] = False

        if direct:
            try:
                self.user_repo.update(user_id, direct)
            except sqlite3.IntegrityError:
                # Username claimed between the availability check and the write
                raise Conflict("Username is not available")

        if fields:
            pending = self.diff_repo.get_pending_for_user(user_id)
            if pending:
                self.diff_repo.update(pending["id"], fields)
            else:
                self.diff_repo.add({"userId": user_id, **fields})
            logger.info(
                "Profile diff submitted",
                extra={"context": {"user_id": user_id, "fields": sorted(fields)}}
            )

    def update_profile_url(self, user_id: str, profile_url: str) -> None:
        self.get_user(user_id)
        self.user_repo.update(user_id, {"profileURL": profile_url})

    def generate_chaincode(self, user_id: str) -> str:
        """Create a chaincode and remember it on the user document.

        Returns:
            The chaincode
        """
        chaincode = self.chaincode_repo.create(user_id)
        self.user_repo.update(user_id, {"chaincode": chaincode})
        return chaincode

    def reset_in_discord(self) -> int:
        """Mark every user as not in the Discord server."""
        count = self.user_repo.set_in_discord_false_for_all()
        logger.info("Reset in_discord flag", extra={"context": {"users": count}})
        return count
