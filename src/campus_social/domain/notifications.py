"""Domain models for notifications."""

from dataclasses import dataclass
from datetime import datetime

FOLLOW_NOTIFICATION = "follow"


@dataclass(frozen=True)
class NotificationRecord:
    """Represents a persisted notification."""

    id: str
    type: str
    sender_id: str
    receiver_id: str
    message: str
    created_at: datetime
