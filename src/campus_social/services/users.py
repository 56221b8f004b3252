"""User profile business logic."""

import logging
from dataclasses import dataclass, fields, replace
from typing import Protocol

from campus_social.domain.errors import NotFoundError, SocialError, ValidationError
from campus_social.domain.models import (
    ImageUpload,
    NewUser,
    ProfileUpdate,
    ProfileView,
    RegistrationForm,
    UserRecord,
    UserSummary,
)
from campus_social.services.images import ImageStorage
from campus_social.services.passwords import DEFAULT_ROUNDS, hash_password

logger = logging.getLogger(__name__)

REQUIRED_REGISTRATION_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "password",
    "username",
    "age",
    "college",
    "year_level",
)

_FIELD_LABELS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "year_level": "yearLevel",
}

_OPTIONAL_TEXT_FIELDS = {"college", "year_level", "bio"}


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_id(self, user_id: str) -> UserRecord | None:
        """Return the user for an id, if present."""

    def get_many(self, user_ids: list[str]) -> list[UserRecord]:
        """Return the users that exist among the given ids."""

    def create_user(self, new_user: NewUser) -> UserRecord:
        """Create and return a new user record."""

    def save(self, user: UserRecord) -> UserRecord:
        """Persist profile fields of an existing user and return it."""

    def add_following(self, user_id: str, target_id: str) -> bool:
        """Add target to the user's following list if absent."""

    def add_follower(self, user_id: str, follower_id: str) -> bool:
        """Add follower to the user's followers list if absent."""

    def remove_following(self, user_id: str, target_id: str) -> bool:
        """Remove target from the user's following list."""

    def remove_follower(self, user_id: str, follower_id: str) -> bool:
        """Remove follower from the user's followers list."""


@dataclass
class ProfileService:
    """Application service for registration and profile management."""

    repository: UserRepository
    image_storage: ImageStorage
    bcrypt_rounds: int = DEFAULT_ROUNDS

    def register(
        self, form: RegistrationForm, image: ImageUpload | None = None
    ) -> UserRecord:
        """Validate the form, hash the password and create the user."""
        missing = [
            name
            for name in REQUIRED_REGISTRATION_FIELDS
            if not _has_text(getattr(form, name))
        ]
        if missing:
            labels = [_FIELD_LABELS.get(name, name) for name in missing]
            for label in labels:
                logger.warning("Registration field missing", extra={"field": label})
            raise ValidationError(
                f"All fields are required; missing: {', '.join(labels)}",
                fields=labels,
            )

        new_user = NewUser(
            first_name=form.first_name.strip(),
            last_name=form.last_name.strip(),
            email=form.email.strip(),
            password_hash=hash_password(form.password, rounds=self.bcrypt_rounds),
            username=form.username.strip(),
            age=_parse_age(form.age),
            college=form.college.strip(),
            year_level=form.year_level.strip(),
            custom_interests=list(form.custom_interests or []),
            categorized_interests=list(form.categorized_interests or []),
        )
        profile_image = self._store_image(image)
        try:
            user = self.repository.create_user(
                replace(new_user, profile_image=profile_image)
            )
        except SocialError:
            if profile_image is not None:
                self.image_storage.delete(profile_image)
            raise
        logger.info("User registered", extra={"user_id": user.id})
        return user

    def get_profile(self, user_id: str) -> ProfileView:
        """Return a user with following/followers resolved to summaries."""
        user = self._require_user(user_id)
        linked = {
            linked_user.id: linked_user
            for linked_user in self.repository.get_many(
                [*user.following, *user.followers]
            )
        }
        return ProfileView(
            user=user,
            following=_summaries(user.following, linked),
            followers=_summaries(user.followers, linked),
        )

    def update_profile(
        self,
        user_id: str,
        update: ProfileUpdate,
        image: ImageUpload | None = None,
    ) -> UserRecord:
        """Apply a partial update; omitted fields keep their prior value."""
        user = self._require_user(user_id)
        changes: dict[str, object] = {}
        for update_field in fields(update):
            value = getattr(update, update_field.name)
            if value is None:
                continue
            if update_field.name == "username":
                if not value.strip():
                    raise ValidationError("username cannot be blank", ["username"])
                value = value.strip()
            elif update_field.name == "age":
                value = _parse_age(value) if value.strip() else None
            elif update_field.name in _OPTIONAL_TEXT_FIELDS:
                value = value.strip() or None
            else:
                value = list(value)
            changes[update_field.name] = value

        stored_image = self._store_image(image)
        if stored_image is not None:
            changes["profile_image"] = stored_image
        if not changes:
            return user
        return self.repository.save(replace(user, **changes))

    def _require_user(self, user_id: str) -> UserRecord:
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def _store_image(self, image: ImageUpload | None) -> str | None:
        if image is None or not image.content:
            return None
        return self.image_storage.store(
            image.filename, image.content, image.content_type
        )


def _has_text(value: str | None) -> bool:
    return value is not None and bool(value.strip())


def _parse_age(raw: str) -> int:
    """Parse a non-negative integer age."""
    value = raw.strip()
    if not value.isdigit():
        raise ValidationError("age must be a non-negative whole number", ["age"])
    return int(value)


def _summaries(user_ids: list[str], linked: dict[str, UserRecord]) -> list[UserSummary]:
    return [
        UserSummary(id=user_id, username=linked[user_id].username)
        for user_id in user_ids
        if user_id in linked
    ]
