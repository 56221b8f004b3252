"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from campus_social.config import Settings
from campus_social.containers import AppContainer
from campus_social.domain.errors import ConflictError, NotFoundError, UnavailableError
from campus_social.domain.models import NewUser, UserRecord
from campus_social.domain.notifications import NotificationRecord
from campus_social.services.follows import FollowService
from campus_social.services.images import ImageStorage
from campus_social.services.notifications import (
    NotificationRepository,
    NotificationService,
)
from campus_social.services.users import ProfileService, UserRepository


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests.

    Edge operations hold a lock so they behave like the store's atomic
    set updates. Method names in ``failing`` raise ``UnavailableError``.
    """

    users: dict[str, UserRecord] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def add(self, **overrides: object) -> UserRecord:
        """Insert a user directly, bypassing validation."""
        values: dict[str, object] = {
            "id": uuid4().hex,
            "first_name": "Test",
            "last_name": "User",
            "email": f"{uuid4().hex[:8]}@example.edu",
            "password_hash": "hashed",
            "username": "tester",
        }
        values.update(overrides)
        user = UserRecord(**values)
        self.users[user.id] = user
        return user

    def get_by_id(self, user_id: str) -> UserRecord | None:
        self._maybe_fail("get_by_id")
        return self.users.get(user_id)

    def get_many(self, user_ids: list[str]) -> list[UserRecord]:
        self._maybe_fail("get_many")
        return [self.users[user_id] for user_id in user_ids if user_id in self.users]

    def create_user(self, new_user: NewUser) -> UserRecord:
        self._maybe_fail("create_user")
        if any(user.email == new_user.email for user in self.users.values()):
            raise ConflictError("Duplicate value while creating user")
        now = datetime.now(tz=UTC)
        user = UserRecord(
            id=uuid4().hex,
            first_name=new_user.first_name,
            last_name=new_user.last_name,
            email=new_user.email,
            password_hash=new_user.password_hash,
            username=new_user.username,
            age=new_user.age,
            college=new_user.college,
            year_level=new_user.year_level,
            profile_image=new_user.profile_image,
            custom_interests=list(new_user.custom_interests),
            categorized_interests=list(new_user.categorized_interests),
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        return user

    def save(self, user: UserRecord) -> UserRecord:
        self._maybe_fail("save")
        with self.lock:
            stored = self.users.get(user.id)
            if stored is None:
                raise NotFoundError("User", user.id)
            saved = replace(
                user,
                following=stored.following,
                followers=stored.followers,
                updated_at=datetime.now(tz=UTC),
            )
            self.users[user.id] = saved
            return saved

    def add_following(self, user_id: str, target_id: str) -> bool:
        return self._add(user_id, "following", target_id)

    def add_follower(self, user_id: str, follower_id: str) -> bool:
        return self._add(user_id, "followers", follower_id)

    def remove_following(self, user_id: str, target_id: str) -> bool:
        return self._remove(user_id, "following", target_id)

    def remove_follower(self, user_id: str, follower_id: str) -> bool:
        return self._remove(user_id, "followers", follower_id)

    def _add(self, user_id: str, list_field: str, member_id: str) -> bool:
        self._maybe_fail(f"add_{list_field.removesuffix('s')}")
        with self.lock:
            user = self.users.get(user_id)
            if user is None or member_id in getattr(user, list_field):
                return False
            members = [*getattr(user, list_field), member_id]
            self.users[user_id] = replace(user, **{list_field: members})
            return True

    def _remove(self, user_id: str, list_field: str, member_id: str) -> bool:
        self._maybe_fail(f"remove_{list_field.removesuffix('s')}")
        with self.lock:
            user = self.users.get(user_id)
            if user is None or member_id not in getattr(user, list_field):
                return False
            members = [uid for uid in getattr(user, list_field) if uid != member_id]
            self.users[user_id] = replace(user, **{list_field: members})
            return True

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failing:
            raise UnavailableError(f"Database unavailable during {operation}")


@dataclass
class InMemoryNotificationRepository(NotificationRepository):
    """In-memory notification repository for tests."""

    notifications: list[NotificationRecord] = field(default_factory=list)
    fail: bool = False

    def create_notification(
        self,
        notification_type: str,
        sender_id: str,
        receiver_id: str,
        message: str,
    ) -> NotificationRecord:
        if self.fail:
            raise UnavailableError("Database unavailable while creating notification")
        notification = NotificationRecord(
            id=uuid4().hex,
            type=notification_type,
            sender_id=sender_id,
            receiver_id=receiver_id,
            message=message,
            created_at=datetime.now(tz=UTC),
        )
        self.notifications.append(notification)
        return notification


@dataclass
class InMemoryImageStorage(ImageStorage):
    """Image storage that keeps uploads in memory."""

    objects: dict[str, bytes] = field(default_factory=dict)

    def store(self, filename: str, content: bytes, content_type: str | None) -> str:
        handle = f"memory/{len(self.objects)}-{filename}"
        self.objects[handle] = content
        return handle

    def delete(self, handle: str) -> None:
        self.objects.pop(handle, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        mongo_database="campus_social_test",
        bcrypt_rounds=4,
        request_timeout_seconds=5.0,
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def notification_repository() -> InMemoryNotificationRepository:
    return InMemoryNotificationRepository()


@pytest.fixture
def image_storage() -> InMemoryImageStorage:
    return InMemoryImageStorage()


@pytest.fixture
def profile_service(
    settings: Settings,
    user_repository: InMemoryUserRepository,
    image_storage: InMemoryImageStorage,
) -> ProfileService:
    return ProfileService(
        repository=user_repository,
        image_storage=image_storage,
        bcrypt_rounds=settings.bcrypt_rounds,
    )


@pytest.fixture
def follow_service(
    user_repository: InMemoryUserRepository,
    notification_repository: InMemoryNotificationRepository,
) -> FollowService:
    return FollowService(
        user_repository=user_repository,
        notification_service=NotificationService(notification_repository),
    )


@pytest.fixture
def container(
    settings: Settings,
    profile_service: ProfileService,
    follow_service: FollowService,
) -> AppContainer:
    def ensure_indexes() -> None:
        return None

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=profile_service,
        follow_service=follow_service,
        notification_service=follow_service.notification_service,
        ensure_indexes=ensure_indexes,
        close_resources=close_resources,
    )
