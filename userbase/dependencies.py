"""Shared FastAPI dependencies."""
import logging

import jwt
from fastapi import Depends, Request, Response

from . import config
from .application.services import (
    AuthService, DiscordRoleService, OnboardingService, ProfileDiffService,
    UserService, VerificationService
)
from .database import get_db
from .errors import Forbidden, Unauthorized, UNAUTHORIZED
from .infrastructure.clients import DiscordClient, IdentityClient
from .infrastructure.repositories import (
    ChaincodeRepository, JoinDataRepository, LogRepository,
    PhotoVerificationRepository, ProfileDiffRepository, UserRepository,
    UserStatusRepository
)

logger = logging.getLogger(__name__)

SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}


# === Service factories ===
# Call these from the route body, not through Depends: the sqlite connection
# is bound to the thread running the route.

def get_auth_service() -> AuthService:
    return AuthService()


def get_user_service() -> UserService:
    """Create UserService with repositories."""
    db = get_db()
    return UserService(
        user_repository=UserRepository(db),
        profile_diff_repository=ProfileDiffRepository(db),
        chaincode_repository=ChaincodeRepository(db)
    )


def get_profile_diff_service() -> ProfileDiffService:
    db = get_db()
    return ProfileDiffService(
        profile_diff_repository=ProfileDiffRepository(db),
        user_repository=UserRepository(db),
        log_repository=LogRepository(db)
    )


def get_onboarding_service() -> OnboardingService:
    db = get_db()
    return OnboardingService(
        join_data_repository=JoinDataRepository(db),
        user_status_repository=UserStatusRepository(db)
    )


def get_verification_service() -> VerificationService:
    db = get_db()
    return VerificationService(
        photo_verification_repository=PhotoVerificationRepository(db),
        user_repository=UserRepository(db)
    )


def get_discord_client() -> DiscordClient:
    return DiscordClient()


def get_identity_client() -> IdentityClient:
    return IdentityClient()


def get_discord_role_service(discord_client: DiscordClient) -> DiscordRoleService:
    return DiscordRoleService(UserRepository(get_db()), discord_client)


# === Authentication ===

def set_auth_cookie(response: Response, token: str) -> None:
    """Attach the auth token cookie to a response."""
    response.set_cookie(
        key=config.COOKIE_NAME,
        value=token,
        max_age=config.JWT_TTL,
        domain=config.COOKIE_DOMAIN,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax"
    )


def authenticate(
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service)
) -> dict:
    """Require a valid auth cookie and return the user it belongs to.

    An expired token is renewed when it was issued within the refresh window;
    the new token is sent back as a cookie.

    Raises:
        HTTPException: 401 if the cookie is missing/invalid or the user is gone,
            403 if a restricted user attempts a write
    """
    token = request.cookies.get(config.COOKIE_NAME)
    if not token:
        raise Unauthorized()

    try:
        payload = auth.decode_token(token)
    except jwt.ExpiredSignatureError:
        try:
            payload = auth.decode_expired_token(token)
        except jwt.PyJWTError:
            raise Unauthorized()
        if not auth.can_refresh(payload):
            raise Unauthorized()
        set_auth_cookie(response, auth.generate_token(payload["userId"]))
        logger.info("Refreshed auth token", extra={"context": {"user_id": payload["userId"]}})
    except jwt.PyJWTError:
        raise Unauthorized()

    user = UserRepository(get_db()).get_by_id(payload.get("userId", ""))
    if not user:
        raise Unauthorized()

    roles = user.get("roles") or {}
    if roles.get("restricted") and request.method not in SAFE_METHODS:
        raise Forbidden("You are restricted from performing this action")

    request.state.user = user
    return user


def authorize_roles(*roles: str):
    """Dependency factory requiring at least one of ``roles``.

    Usage:
        @router.patch("/rejectDiff")
        def reject(user: dict = Depends(authorize_roles(config.SUPERUSER))): ...
    """
    def require_roles(user: dict = Depends(authenticate)) -> dict:
        user_roles = user.get("roles") or {}
        if not any(user_roles.get(role) for role in roles):
            raise Unauthorized(UNAUTHORIZED)
        return user

    return require_roles