"""Domain models for users and profiles."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: str
    first_name: str
    last_name: str
    email: str
    password_hash: str
    username: str
    age: int | None = None
    college: str | None = None
    year_level: str | None = None
    bio: str | None = None
    profile_image: str | None = None
    custom_interests: list[str] = field(default_factory=list)
    categorized_interests: list[str] = field(default_factory=list)
    role: str = "student"
    following: list[str] = field(default_factory=list)
    followers: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """Return the name shown to other users."""
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class NewUser:
    """Validated fields for a user that is about to be created."""

    first_name: str
    last_name: str
    email: str
    password_hash: str
    username: str
    age: int | None
    college: str | None
    year_level: str | None
    profile_image: str | None = None
    custom_interests: list[str] = field(default_factory=list)
    categorized_interests: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RegistrationForm:
    """Raw registration input; every field may be missing."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None
    username: str | None = None
    age: str | None = None
    college: str | None = None
    year_level: str | None = None
    custom_interests: list[str] | None = None
    categorized_interests: list[str] | None = None


@dataclass(frozen=True)
class ProfileUpdate:
    """Partial profile update. ``None`` keeps the stored value."""

    username: str | None = None
    age: str | None = None
    college: str | None = None
    year_level: str | None = None
    bio: str | None = None
    custom_interests: list[str] | None = None
    categorized_interests: list[str] | None = None


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded profile image."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class UserSummary:
    """Minimal view of a linked user."""

    id: str
    username: str


@dataclass(frozen=True)
class ProfileView:
    """A user with following/followers resolved to summaries."""

    user: UserRecord
    following: list[UserSummary]
    followers: list[UserSummary]
