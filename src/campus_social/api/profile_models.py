"""Pydantic models for the profile API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from campus_social.domain.models import ProfileView, UserRecord, UserSummary


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LinkedUser(_CamelModel):
    """A followed or following user."""

    id: str
    username: str

    @classmethod
    def from_summary(cls, summary: UserSummary) -> "LinkedUser":
        return cls(id=summary.id, username=summary.username)


class ProfileResponse(_CamelModel):
    """A user profile without the credential hash."""

    id: str
    first_name: str
    last_name: str
    email: str
    username: str
    age: int | None = None
    college: str | None = None
    year_level: str | None = None
    bio: str | None = None
    profile_image: str | None = None
    custom_interests: list[str] = Field(default_factory=list)
    categorized_interests: list[str] = Field(default_factory=list)
    role: str
    following: list[str] = Field(default_factory=list)
    followers: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "ProfileResponse":
        """Build a response from a user record."""
        return cls(**_profile_fields(user))


class ProfileDetailResponse(ProfileResponse):
    """A user profile with following/followers resolved."""

    following: list[LinkedUser] = Field(default_factory=list)
    followers: list[LinkedUser] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: ProfileView) -> "ProfileDetailResponse":
        """Build a response from a resolved profile view."""
        return cls(
            **{
                **_profile_fields(view.user),
                "following": [LinkedUser.from_summary(s) for s in view.following],
                "followers": [LinkedUser.from_summary(s) for s in view.followers],
            }
        )


class FollowRequest(_CamelModel):
    """Body of follow and unfollow requests."""

    follow_id: str | None = None


class FollowResponse(_CamelModel):
    """Outcome of a follow request."""

    message: str
    notification_sent: bool


class MessageResponse(_CamelModel):
    """Plain acknowledgement."""

    message: str


def _profile_fields(user: UserRecord) -> dict[str, object]:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "username": user.username,
        "age": user.age,
        "college": user.college,
        "year_level": user.year_level,
        "bio": user.bio,
        "profile_image": user.profile_image,
        "custom_interests": user.custom_interests,
        "categorized_interests": user.categorized_interests,
        "role": user.role,
        "following": user.following,
        "followers": user.followers,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
