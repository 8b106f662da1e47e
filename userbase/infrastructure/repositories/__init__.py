# Repository Pattern Implementation
"""
Repositories abstract database operations.
Each collection has its own repository.

Usage:
    from userbase.infrastructure.repositories import UserRepository

    repo = UserRepository(get_db())
    repo.get_by_id(user_id)
"""
from .base import Repository, ConnectionProtocol
from .user_repository import UserRepository
from .profile_diff_repository import ProfileDiffRepository
from .user_status_repository import UserStatusRepository
from .photo_verification_repository import PhotoVerificationRepository
from .join_data_repository import JoinDataRepository
from .chaincode_repository import ChaincodeRepository
from .log_repository import LogRepository

__all__ = [
    "Repository",
    "ConnectionProtocol",
    "UserRepository",
    "ProfileDiffRepository",
    "UserStatusRepository",
    "PhotoVerificationRepository",
    "JoinDataRepository",
    "ChaincodeRepository",
    "LogRepository",
]
