"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from pymongo import MongoClient
from supabase import create_client

from campus_social.adapters.mongo_notification_repository import (
    MongoNotificationRepository,
)
from campus_social.adapters.mongo_user_repository import MongoUserRepository
from campus_social.adapters.supabase_image_storage import SupabaseImageStorage
from campus_social.config import Settings
from campus_social.services.follows import FollowService
from campus_social.services.images import ImageStorage, LocalImageStorage
from campus_social.services.notifications import NotificationService
from campus_social.services.users import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    follow_service: FollowService
    notification_service: NotificationService
    ensure_indexes: Callable[[], None]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    mongo_client: MongoClient = MongoClient(
        resolved_settings.mongo_uri,
        serverSelectionTimeoutMS=resolved_settings.mongo_timeout_ms,
        connectTimeoutMS=resolved_settings.mongo_timeout_ms,
        socketTimeoutMS=resolved_settings.mongo_timeout_ms,
        tz_aware=True,
    )
    database = mongo_client[resolved_settings.mongo_database]
    user_repository = MongoUserRepository(database["users"])
    notification_repository = MongoNotificationRepository(database["notifications"])
    notification_service = NotificationService(notification_repository)
    profile_service = ProfileService(
        repository=user_repository,
        image_storage=build_image_storage(resolved_settings),
        bcrypt_rounds=resolved_settings.bcrypt_rounds,
    )
    follow_service = FollowService(
        user_repository=user_repository,
        notification_service=notification_service,
    )

    def ensure_indexes() -> None:
        user_repository.ensure_indexes()
        notification_repository.ensure_indexes()

    async def close_resources() -> None:
        mongo_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        follow_service=follow_service,
        notification_service=notification_service,
        ensure_indexes=ensure_indexes,
        close_resources=close_resources,
    )


def build_image_storage(settings: Settings) -> ImageStorage:
    """Use Supabase Storage when configured, the local upload dir otherwise."""
    if settings.uses_supabase_storage:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseImageStorage(client=client, bucket=settings.supabase_bucket)
    return LocalImageStorage(Path(settings.upload_dir))
