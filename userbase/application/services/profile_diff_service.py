"""Profile diff service - review of self-service profile edits."""
import logging

from ...errors import Conflict, NotFound, USER_NOT_FOUND
from ...infrastructure.repositories import (
    LogRepository, ProfileDiffRepository, UserRepository
)
from ...infrastructure.repositories.log_repository import (
    PROFILE_DIFF_APPROVAL, PROFILE_DIFF_REJECTION
)
from ...infrastructure.repositories.profile_diff_repository import (
    APPROVED, PENDING, REJECTED
)

logger = logging.getLogger(__name__)

PROFILE_DIFF_NOT_FOUND = "Profile Diff doesn't exist"

# Keys of a diff document that are not profile fields
DIFF_METADATA = {"id", "userId", "approval", "timestamp", "reason"}


class ProfileDiffService:
    """Service for approving and rejecting profile diffs.

    Responsibilities:
    - Apply an approved diff to the user document
    - Record the review outcome on the diff
    - Write an audit log entry for each review
    """

    def __init__(
        self,
        profile_diff_repository: ProfileDiffRepository,
        user_repository: UserRepository,
        log_repository: LogRepository
    ):
        self.diff_repo = profile_diff_repository
        self.user_repo = user_repository
        self.log_repo = log_repository

    def _get_pending(self, diff_id: str) -> dict:
        diff = self.diff_repo.get_by_id(diff_id)
        if not diff:
            raise NotFound(PROFILE_DIFF_NOT_FOUND)
        if diff["approval"] != PENDING:
            raise Conflict("Profile Diff has already been reviewed")
        return diff

    def approve(
        self,
        user_id: str,
        diff_id: str,
        reviewer_id: str,
        message: str = "",
        edits: dict | None = None
    ) -> dict:
        """Apply a pending diff to its user.

        Args:
            user_id: User the diff must belong to
            diff_id: Profile diff ID
            reviewer_id: Super user approving the diff
            message: Optional review note
            edits: Reviewer corrections, applied over the stored diff fields

        Returns:
            The fields that were applied

        Raises:
            HTTPException: 404 if diff or user is missing, 409 if already reviewed
        """
        diff = self._get_pending(diff_id)
        if diff["userId"] != user_id:
            raise NotFound(PROFILE_DIFF_NOT_FOUND)
        if not self.user_repo.get_by_id(user_id):
            raise NotFound(USER_NOT_FOUND)

        fields = {key: value for key, value in diff.items() if key not in DIFF_METADATA}
        fields.update(edits or {})

        self.diff_repo.update(diff_id, {"approval": APPROVED, "reason": message})
        self.user_repo.update(user_id, fields)
        self.log_repo.add(
            PROFILE_DIFF_APPROVAL,
            {"approvedBy": reviewer_id, "userId": user_id},
            {"profileDiffId": diff_id, "message": message}
        )
        logger.info(
            "Profile diff approved",
            extra={"context": {"diff_id": diff_id, "user_id": user_id, "reviewer": reviewer_id}}
        )
        return fields

    def reject(self, diff_id: str, reviewer_id: str, message: str = "") -> None:
        """Mark a pending diff as rejected.

        Raises:
            HTTPException: 404 if the diff is missing, 409 if already reviewed
        """
        diff = self._get_pending(diff_id)

        self.diff_repo.update(diff_id, {"approval": REJECTED, "reason": message})
        self.log_repo.add(
            PROFILE_DIFF_REJECTION,
            {"rejectedBy": reviewer_id, "userId": diff["userId"]},
            {"profileDiffId": diff_id, "message": message}
        )
        logger.info(
            "Profile diff rejected",
            extra={"context": {"diff_id": diff_id, "reviewer": reviewer_id}}
        )
