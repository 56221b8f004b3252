"""Follow and unfollow transitions between two users.

Both user documents are written independently; there is no cross-document
transaction. The edge writes use the store's atomic set primitives, so two
concurrent follows of the same pair cannot both add an edge: the loser's
actor-side add reports no change and it fails with ``AlreadyFollowingError``.

Write order is always actor, then target, then notification. If the target
write fails the actor write is not rolled back and the caller sees
``UnavailableError``.
"""

import logging
from dataclasses import dataclass, replace

from campus_social.domain.errors import (
    AlreadyFollowingError,
    InvalidOperationError,
    NotFollowingError,
    NotFoundError,
)
from campus_social.domain.models import UserRecord
from campus_social.domain.notifications import NotificationRecord
from campus_social.services.notifications import NotificationService
from campus_social.services.users import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FollowResult:
    """Outcome of a follow transition.

    ``actor`` and ``target`` carry the post-transition lists as computed in
    memory; they are not re-read from the store.
    """

    actor: UserRecord
    target: UserRecord
    notification: NotificationRecord | None = None

    @property
    def notification_sent(self) -> bool:
        """Return True when the follow notification was recorded."""
        return self.notification is not None


@dataclass
class FollowService:
    """Application service for the follow graph."""

    user_repository: UserRepository
    notification_service: NotificationService

    def follow(self, actor_id: str, target_id: str) -> FollowResult:
        """Make the actor follow the target and notify the target."""
        actor, target = self._load_pair(actor_id, target_id, action="follow")
        actor_id, target_id = actor.id, target.id
        if actor_id in target.followers or target_id in actor.following:
            raise AlreadyFollowingError(actor_id, target_id)

        if not self.user_repository.add_following(actor_id, target_id):
            raise AlreadyFollowingError(actor_id, target_id)
        self.user_repository.add_follower(target_id, actor_id)

        actor = replace(actor, following=[*actor.following, target_id])
        target = replace(target, followers=[*target.followers, actor_id])
        logger.info(
            "User followed", extra={"actor_id": actor_id, "target_id": target_id}
        )
        notification = self._notify_follow(actor, target)
        return FollowResult(actor=actor, target=target, notification=notification)

    def unfollow(self, actor_id: str, target_id: str) -> FollowResult:
        """Remove the follow edge from the actor to the target."""
        actor, target = self._load_pair(actor_id, target_id, action="unfollow")
        actor_id, target_id = actor.id, target.id
        if actor_id not in target.followers and target_id not in actor.following:
            raise NotFollowingError(actor_id, target_id)

        removed_following = self.user_repository.remove_following(actor_id, target_id)
        removed_follower = self.user_repository.remove_follower(target_id, actor_id)
        if not (removed_following or removed_follower):
            raise NotFollowingError(actor_id, target_id)

        actor = replace(
            actor, following=[uid for uid in actor.following if uid != target_id]
        )
        target = replace(
            target, followers=[uid for uid in target.followers if uid != actor_id]
        )
        logger.info(
            "User unfollowed", extra={"actor_id": actor_id, "target_id": target_id}
        )
        return FollowResult(actor=actor, target=target)

    def _load_pair(
        self, actor_id: str, target_id: str, action: str
    ) -> tuple[UserRecord, UserRecord]:
        if actor_id == target_id:
            raise InvalidOperationError(f"Users cannot {action} themselves")
        actor = self.user_repository.get_by_id(actor_id)
        if actor is None:
            raise NotFoundError("User", actor_id)
        target = self.user_repository.get_by_id(target_id)
        if target is None:
            raise NotFoundError("User", target_id)
        # Different spellings of one id resolve to the same stored user.
        if actor.id == target.id:
            raise InvalidOperationError(f"Users cannot {action} themselves")
        return actor, target

    def _notify_follow(
        self, actor: UserRecord, target: UserRecord
    ) -> NotificationRecord | None:
        """Emit the follow notification; failures leave the edge in place."""
        try:
            return self.notification_service.emit_follow(
                actor.id, target.id, actor.display_name
            )
        except Exception:
            logger.exception(
                "Failed to record follow notification",
                extra={"actor_id": actor.id, "target_id": target.id},
            )
            return None
