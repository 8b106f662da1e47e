"""Verification service - photo checks and identity verification requests."""
import logging
from datetime import datetime, timezone

from ...errors import BadRequest
from ...infrastructure.repositories import PhotoVerificationRepository, UserRepository

logger = logging.getLogger(__name__)

VERIFICATION_TYPES = ("discord", "profile")
PROFILE_STATUS_PENDING = "PENDING"


class PhotoVerificationNotFound(LookupError):
    """No photo verification record exists for the user."""


class VerificationService:
    """Service for user verification.

    Responsibilities:
    - Read and approve photo verification records
    - Flag profiles as pending identity verification
    """

    def __init__(
        self,
        photo_verification_repository: PhotoVerificationRepository,
        user_repository: UserRepository = None
    ):
        self.photo_repo = photo_verification_repository
        self.user_repo = user_repository

    def get_photo_verification(self, user_id: str) -> dict:
        """Get the user's photo verification record.

        Raises:
            PhotoVerificationNotFound: No record for the user
        """
        record = self.photo_repo.get_by_user_id(user_id)
        if record is None:
            raise PhotoVerificationNotFound(f"No photo verification record for user {user_id}")
        return record

    def verify_photo(self, user_id: str, image_type: str) -> str:
        """Approve the ``discord`` or ``profile`` image of a user.

        Returns:
            Confirmation message

        Raises:
            HTTPException: 400 for an unknown verification type
            PhotoVerificationNotFound: No record for the user
        """
        if image_type not in VERIFICATION_TYPES:
            raise BadRequest("Invalid verification type was provided!")

        self.get_photo_verification(user_id)
        self.photo_repo.update(user_id, {
            image_type: {
                "approved": True,
                "date": datetime.now(timezone.utc).isoformat(),
            }
        })
        logger.info(
            "Photo verified",
            extra={"context": {"user_id": user_id, "type": image_type}}
        )
        return f"{image_type} image was verified successfully!"

    def mark_profile_pending(self, user_id: str) -> None:
        """Flag the user's profile as waiting for identity verification."""
        self.user_repo.update(user_id, {"profileStatus": PROFILE_STATUS_PENDING})
