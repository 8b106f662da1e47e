"""Unit tests for OnboardingService."""
import pytest
from unittest.mock import Mock
from fastapi import HTTPException

from userbase.schemas import JoinData

LONG_TEXT = "x" * 100


def join_data(**overrides) -> JoinData:
    data = {
        "firstName": "Ankur", "lastName": "N", "city": "Pune", "state": "MH",
        "country": "India", "foundFrom": "friend", "introduction": LONG_TEXT,
        "skills": "python", "college": "COEP", "forFun": LONG_TEXT,
        "funFact": LONG_TEXT, "whyRds": LONG_TEXT, "numberOfHours": 5,
    }
    data.update(overrides)
    return JoinData(**data)


class TestSubmit:

    @pytest.fixture
    def mock_join_repo(self):
        repo = Mock()
        repo.get_by_user_id.return_value = []
        return repo

    @pytest.fixture
    def mock_status_repo(self):
        repo = Mock()
        repo.update_user_status.return_value = {"id": "status-1", "userStatusExists": False}
        return repo

    @pytest.fixture
    def onboarding(self, mock_join_repo, mock_status_repo):
        from userbase.application.services import OnboardingService
        return OnboardingService(
            join_data_repository=mock_join_repo,
            user_status_repository=mock_status_repo
        )

    def test_committed_hours_are_monthly(self, onboarding, mock_status_repo):
        onboarding.submit("user-1", join_data(numberOfHours=7))

        status = mock_status_repo.update_user_status.call_args[0][1]
        assert status["currentStatus"]["state"] == "ONBOARDING"
        assert status["monthlyHours"]["committed"] == 28

    def test_join_data_is_stored(self, onboarding, mock_join_repo):
        onboarding.submit("user-1", join_data())

        stored = mock_join_repo.add.call_args[0][0]
        assert stored["userId"] == "user-1"
        assert stored["intro"]["city"] == "Pune"
        assert "flowSkills" not in stored["intro"]

    def test_returns_status_document(self, onboarding, mock_status_repo):
        mock_status_repo.get_by_id.return_value = {"id": "status-1"}

        assert onboarding.submit("user-1", join_data()) == {"id": "status-1"}
        mock_status_repo.get_by_id.assert_called_once_with("status-1")

    def test_already_joined(self, onboarding, mock_join_repo, mock_status_repo):
        mock_join_repo.get_by_user_id.return_value = [{"id": "join-1"}]

        with pytest.raises(HTTPException) as exc_info:
            onboarding.submit("user-1", join_data())

        assert exc_info.value.status_code == 409
        mock_status_repo.update_user_status.assert_not_called()

    def test_intro_not_found(self, onboarding):
        with pytest.raises(HTTPException) as exc_info:
            onboarding.get_intro("user-1")

        assert exc_info.value.detail == "User data not found"
