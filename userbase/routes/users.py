"""User routes.

Literal paths are registered before ``/{userId}`` and ``/{username}`` so
they are not swallowed by the parameterised routes.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Request

from .. import config
from ..application.services import PhotoVerificationNotFound
from ..application.services.user_service import sanitize_user
from ..dependencies import (
    authenticate, authorize_roles, get_discord_client, get_discord_role_service,
    get_identity_client, get_onboarding_service, get_profile_diff_service,
    get_user_service, get_verification_service
)
from ..errors import InternalServerError
from ..infrastructure.clients import DiscordClient, DiscordError, IdentityClient
from ..schemas import (
    ApproveDiff, JoinData, ProfileURLUpdate, RejectDiff, UpdateSelf, UserListQuery
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

require_super_user = authorize_roles(config.SUPERUSER)


@router.get("")
def list_users(request: Request):
    """List non-archived users, or fetch one with ``?id=``.

    Supports ``search`` (username prefix), ``size``, ``page`` and the
    ``next``/``prev`` cursors returned in ``links``.
    """
    query = UserListQuery.model_validate(dict(request.query_params))
    users = get_user_service()

    if query.id:
        user = users.get_user(query.id)
        return {"message": "User returned successfully!", "user": sanitize_user(user)}

    page = users.list_users(query, request.query_params.multi_items())
    return {"message": "Users returned successfully!", **page}


# =============================================================================
# Self service
# =============================================================================

@router.patch("/self", status_code=204)
def update_self(data: UpdateSelf, user: dict = Depends(authenticate)):
    """Update own profile. Profile fields wait for review as a profile diff."""
    get_user_service().update_self(user["id"], data)


@router.get("/self")
def get_self(private: bool = False, user: dict = Depends(authenticate)):
    return sanitize_user(user, include_private=private)


@router.put("/self/intro", status_code=201)
def add_intro(payload: dict = Body(default={}), user: dict = Depends(authenticate)):
    """Submit the join form and move the user to ONBOARDING.

    A second submission is a 409 whatever the body contains.
    """
    onboarding = get_onboarding_service()
    onboarding.ensure_not_joined(user["id"])
    data = JoinData.model_validate(payload)
    onboarding.submit(user["id"], data)
    return {"message": "User join data and newstatus data added and updated successfully"}


@router.get("/chaincode")
def generate_chaincode(user: dict = Depends(authenticate)):
    chaincode = get_user_service().generate_chaincode(user["id"])
    return {"message": "Chaincode returned successfully", "chaincode": chaincode}


@router.patch("/profileURL")
def update_profile_url(data: ProfileURLUpdate, user: dict = Depends(authenticate)):
    get_user_service().update_profile_url(user["id"], str(data.profileURL))
    return {"message": "updated profile URL!!"}


@router.post("/verify")
def request_verification(
    background_tasks: BackgroundTasks,
    user: dict = Depends(authenticate),
    identity: IdentityClient = Depends(get_identity_client)
):
    """Queue identity verification of the user's profile.

    The identity service is called after the response has been sent.
    """
    get_verification_service().mark_profile_pending(user["id"])
    background_tasks.add_task(identity.request_verification, user["id"])
    return {"message": "Your request has been queued successfully"}


# =============================================================================
# Review and lookups
# =============================================================================

@router.patch("/rejectDiff")
def reject_profile_diff(data: RejectDiff, user: dict = Depends(require_super_user)):
    get_profile_diff_service().reject(data.profileDiffId, user["id"], data.message)
    return {"message": "Profile Diff Rejected successfully!"}


@router.get("/isUsernameAvailable/{username}")
def is_username_available(username: str, user: dict = Depends(authenticate)):
    return {"isUsernameAvailable": get_user_service().is_username_available(username)}


@router.get("/userId/{id}")
def get_user_by_id(id: str, user: dict = Depends(authenticate)):
    found = get_user_service().get_user(id)
    return {"message": "User returned successfully!", "user": sanitize_user(found)}


@router.get("/picture/{userId}")
def get_picture_verification(userId: str, user: dict = Depends(require_super_user)):
    try:
        data = get_verification_service().get_photo_verification(userId)
    except PhotoVerificationNotFound:
        logger.error("Photo verification record missing", extra={"context": {"user_id": userId}})
        raise InternalServerError()
    return {"message": "User image verification record fetched successfully!", "data": data}


@router.patch("/picture/verify/{userId}")
def verify_picture(userId: str, type: str = "", user: dict = Depends(require_super_user)):
    """Approve the ``discord`` or ``profile`` picture of a user."""
    try:
        message = get_verification_service().verify_photo(userId, type)
    except PhotoVerificationNotFound:
        logger.error("Photo verification record missing", extra={"context": {"user_id": userId}})
        raise InternalServerError()
    return {"message": message}


# =============================================================================
# Discord
# =============================================================================

@router.post("/update-in-discord")
def reset_in_discord(user: dict = Depends(require_super_user)):
    get_user_service().reset_in_discord()
    return {"message": "Successfully added the in_discord field to false for all users"}


@router.post("")
def apply_unverified_role(
    user: dict = Depends(require_super_user),
    discord_client: DiscordClient = Depends(get_discord_client)
):
    """Give the unverified role to Discord members with no linked user."""
    try:
        get_discord_role_service(discord_client).apply_unverified_role(
            config.DISCORD_UNVERIFIED_ROLE_ID
        )
    except DiscordError:
        logger.exception("Applying the unverified role failed")
        raise InternalServerError()
    return {"message": "ROLES APPLIED SUCCESSFULLY"}


# =============================================================================
# Parameterised paths (keep last)
# =============================================================================

@router.get("/{userId}/intro")
def get_intro(userId: str, user: dict = Depends(require_super_user)):
    return {"message": "User data returned", "data": get_onboarding_service().get_intro(userId)}


@router.patch("/{userId}")
def approve_profile_diff(
    userId: str,
    data: ApproveDiff,
    user: dict = Depends(require_super_user)
):
    """Approve a pending profile diff and apply it to the user.

    Profile fields sent with the approval override the stored diff values.
    """
    edits = data.model_dump(exclude_unset=True, exclude={"id", "message"})
    get_profile_diff_service().approve(userId, data.id, user["id"], data.message, edits=edits)
    return {"message": "Updated user's data successfully!"}


@router.get("/{username}")
def get_user_by_username(username: str):
    user = get_user_service().get_user_by_username(username)
    return {"message": "User returned successfully!", "user": sanitize_user(user)}
