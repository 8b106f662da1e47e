"""Onboarding service - join form and the ONBOARDING status transition."""
import time

from ...errors import Conflict, NotFound
from ...infrastructure.repositories import JoinDataRepository, UserStatusRepository
from ...schemas import JoinData

ONBOARDING = "ONBOARDING"
# Committed monthly hours are four weeks of the weekly hours on the form
WEEKS_PER_MONTH = 4


class OnboardingService:

    def __init__(
        self,
        join_data_repository: JoinDataRepository,
        user_status_repository: UserStatusRepository
    ):
        self.join_repo = join_data_repository
        self.status_repo = user_status_repository

    def ensure_not_joined(self, user_id: str) -> None:
        """Raise 409 if the user already submitted the join form."""
        if self.join_repo.get_by_user_id(user_id):
            raise Conflict("User data is already present!")

    def submit(self, user_id: str, data: JoinData) -> dict:
        """Store the join form and move the user to ONBOARDING.

        Args:
            user_id: User ID
            data: Validated join form

        Returns:
            The user's status document after the update

        Raises:
            HTTPException: 409 if the form was already submitted
        """
        self.ensure_not_joined(user_id)

        now_ms = int(time.time() * 1000)
        self.join_repo.add({"userId": user_id, "intro": data.model_dump(exclude_none=True)})
        result = self.status_repo.update_user_status(user_id, {
            "currentStatus": {
                "state": ONBOARDING,
                "message": "",
                "from": now_ms,
                "until": "",
                "updatedAt": now_ms,
            },
            "monthlyHours": {
                "committed": WEEKS_PER_MONTH * data.numberOfHours,
                "updatedAt": now_ms,
            },
        })
        return self.status_repo.get_by_id(result["id"])

    def get_intro(self, user_id: str) -> list[dict]:
        """All join submissions of a user.

        Raises:
            HTTPException: 404 if there are none
        """
        data = self.join_repo.get_by_user_id(user_id)
        if not data:
            raise NotFound("User data not found")
        return data
