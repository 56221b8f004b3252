"""MongoDB-backed notification repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection

from campus_social.adapters.mongo_errors import store_errors
from campus_social.domain.notifications import NotificationRecord
from campus_social.services.notifications import NotificationRepository


@dataclass
class MongoNotificationRepository(NotificationRepository):
    """MongoDB implementation for notification persistence."""

    collection: Collection

    def ensure_indexes(self) -> None:
        """Index notifications by receiver, newest first."""
        with store_errors("creating notification indexes"):
            self.collection.create_index(
                [("receiverId", ASCENDING), ("createdAt", DESCENDING)]
            )

    def create_notification(
        self,
        notification_type: str,
        sender_id: str,
        receiver_id: str,
        message: str,
    ) -> NotificationRecord:
        """Insert a notification document and return it.

        Sender and receiver are stored as ObjectIds like the user edges.
        """
        created_at = datetime.now(tz=UTC)
        with store_errors("creating notification"):
            result = self.collection.insert_one(
                {
                    "type": notification_type,
                    "senderId": ObjectId(sender_id),
                    "receiverId": ObjectId(receiver_id),
                    "message": message,
                    "createdAt": created_at,
                }
            )
        return NotificationRecord(
            id=str(result.inserted_id),
            type=notification_type,
            sender_id=sender_id,
            receiver_id=receiver_id,
            message=message,
            created_at=created_at,
        )
