"""Request models.

Validation messages are produced from these models by
``userbase.errors.describe_error``; custom messages are raised with
``PydanticCustomError`` so they reach the client unchanged.
"""
from typing import Literal, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from . import config


# === Listing ===

class UserListQuery(BaseModel):
    """Query parameters of ``GET /users``."""
    model_config = ConfigDict(extra="forbid")

    size: Optional[int] = None
    page: Optional[int] = Field(default=None, ge=0)
    search: Optional[str] = Field(default=None, min_length=1)
    next: Optional[str] = Field(default=None, min_length=1)
    prev: Optional[str] = Field(default=None, min_length=1)
    id: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="before")
    @classmethod
    def reject_unknown_params(cls, data):
        if isinstance(data, dict):
            unknown = set(data) - set(cls.model_fields)
            if unknown:
                raise PydanticCustomError("invalid_query", "Invalid query param")
        return data

    @field_validator("size")
    @classmethod
    def size_in_range(cls, value):
        if value is not None and not 1 <= value <= config.MAX_PAGE_SIZE:
            raise PydanticCustomError(
                "size_range",
                "size must be in range 1-{max_size}",
                {"max_size": config.MAX_PAGE_SIZE}
            )
        return value

    @model_validator(mode="after")
    def single_cursor(self):
        if self.next and self.prev:
            raise PydanticCustomError("cursor_conflict", "Both prev and next can't be passed")
        if self.page is not None and self.next:
            raise PydanticCustomError("cursor_conflict", "Both page and next can't be passed")
        if self.page is not None and self.prev:
            raise PydanticCustomError("cursor_conflict", "Both page and prev can't be passed")
        return self


# === Self service ===

class ProfileFields(BaseModel):
    """Profile fields that go through review."""
    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    yoe: Optional[int] = Field(default=None, ge=0)
    company: Optional[str] = None
    designation: Optional[str] = None
    img: Optional[str] = None
    linkedin_id: Optional[str] = None
    twitter_id: Optional[str] = None
    instagram_id: Optional[str] = None
    website: Optional[str] = None
    github_display_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    discordId: Optional[str] = None


class UpdateSelf(ProfileFields):
    """Fields a user may change on their own profile."""
    username: Optional[str] = Field(default=None, min_length=4, max_length=20, pattern=r"^[a-zA-Z0-9-]+$")
    status: Optional[Literal["ooo", "idle", "active"]] = None


class ProfileURLUpdate(BaseModel):
    profileURL: AnyUrl


class JoinData(BaseModel):
    """Onboarding form."""
    model_config = ConfigDict(extra="forbid")

    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    country: str = Field(min_length=1)
    foundFrom: str = Field(min_length=1)
    introduction: str = Field(min_length=100)
    skills: str = Field(min_length=5)
    college: str = Field(min_length=1)
    forFun: str = Field(min_length=100)
    funFact: str = Field(min_length=100)
    whyRds: str = Field(min_length=100)
    flowSkills: Optional[list[str]] = None
    numberOfHours: int = Field(ge=1, le=100)


# === Review (super user) ===

class RejectDiff(BaseModel):
    profileDiffId: str = Field(min_length=1)
    message: str = ""


class ApproveDiff(ProfileFields):
    """Approval payload.

    Profile fields sent by the reviewer replace the stored diff values;
    anything else is rejected.
    """
    id: str = Field(min_length=1)
    message: str = ""
