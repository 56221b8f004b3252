"""Error taxonomy shared by services and adapters.

Every error carries a stable ``kind`` tag that the HTTP layer exposes to
clients together with the human-readable message.
"""


class SocialError(Exception):
    """Base class for expected application errors."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SocialError):
    """Bad or missing input. Raised before any state is touched."""

    kind = "validation_error"

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class InvalidOperationError(SocialError):
    """The request is well-formed but makes no sense, e.g. self-follow."""

    kind = "invalid_operation"


class NotFoundError(SocialError):
    """A referenced record does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, identifier: str) -> None:
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


class AlreadyFollowingError(SocialError):
    """The follow edge already exists."""

    kind = "already_following"

    def __init__(self, actor_id: str, target_id: str) -> None:
        super().__init__("Already following this user")
        self.actor_id = actor_id
        self.target_id = target_id


class NotFollowingError(SocialError):
    """The follow edge does not exist."""

    kind = "not_following"

    def __init__(self, actor_id: str, target_id: str) -> None:
        super().__init__("Not following this user")
        self.actor_id = actor_id
        self.target_id = target_id


class ConflictError(SocialError):
    """A store-level uniqueness constraint was violated."""

    kind = "conflict"


class UnavailableError(SocialError):
    """The store could not be reached or timed out. Safe to retry."""

    kind = "unavailable"
