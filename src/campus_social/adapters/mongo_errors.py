"""Translate pymongo failures into application errors."""

from collections.abc import Iterator
from contextlib import contextmanager

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError, PyMongoError

from campus_social.domain.errors import ConflictError, UnavailableError


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Re-raise store errors as ``ConflictError`` or ``UnavailableError``."""
    try:
        yield
    except DuplicateKeyError as exc:
        raise ConflictError(f"Duplicate value while {action}") from exc
    except PyMongoError as exc:
        raise UnavailableError(f"Database unavailable while {action}") from exc


def parse_object_id(value: str) -> ObjectId | None:
    """Return an ObjectId for a string id, or None if it is malformed."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
