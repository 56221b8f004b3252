"""Notification emitter."""

from dataclasses import dataclass
from typing import Protocol

from campus_social.domain.notifications import FOLLOW_NOTIFICATION, NotificationRecord


class NotificationRepository(Protocol):
    """Persistence interface for notifications."""

    def create_notification(
        self,
        notification_type: str,
        sender_id: str,
        receiver_id: str,
        message: str,
    ) -> NotificationRecord:
        """Create and return a notification record."""


@dataclass
class NotificationService:
    """Records social events for the receiver's inbox."""

    repository: NotificationRepository

    def emit_follow(
        self, actor_id: str, target_id: str, actor_display_name: str
    ) -> NotificationRecord:
        """Record that the actor started following the target."""
        return self.repository.create_notification(
            notification_type=FOLLOW_NOTIFICATION,
            sender_id=actor_id,
            receiver_id=target_id,
            message=f"{actor_display_name} started following you.",
        )
