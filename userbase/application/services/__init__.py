"""Application services - business logic layer."""

from .auth_service import AuthService
from .user_service import UserService
from .profile_diff_service import ProfileDiffService
from .onboarding_service import OnboardingService
from .verification_service import VerificationService, PhotoVerificationNotFound
from .discord_role_service import DiscordRoleService

__all__ = [
    "AuthService",
    "UserService",
    "ProfileDiffService",
    "OnboardingService",
    "VerificationService",
    "PhotoVerificationNotFound",
    "DiscordRoleService",
]
