"""MongoDB-backed user repository."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.collection import Collection

from campus_social.adapters.mongo_errors import parse_object_id, store_errors
from campus_social.domain.errors import NotFoundError
from campus_social.domain.models import NewUser, UserRecord
from campus_social.services.users import UserRepository

# Profile fields written by ``save``. Relationship lists are only changed by
# the atomic edge operations.
_PROFILE_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "password_hash": "password",
    "username": "username",
    "age": "age",
    "college": "college",
    "year_level": "yearLevel",
    "bio": "bio",
    "profile_image": "profileImage",
    "custom_interests": "customInterests",
    "categorized_interests": "categorizedInterests",
    "role": "role",
}


@dataclass
class MongoUserRepository(UserRepository):
    """MongoDB implementation for user persistence."""

    collection: Collection

    def ensure_indexes(self) -> None:
        """Create the unique email index."""
        with store_errors("creating user indexes"):
            self.collection.create_index([("email", ASCENDING)], unique=True)

    def get_by_id(self, user_id: str) -> UserRecord | None:
        """Return the user for an id, if present."""
        object_id = parse_object_id(user_id)
        if object_id is None:
            return None
        with store_errors("loading user"):
            document = self.collection.find_one({"_id": object_id})
        return _document_to_user(document) if document else None

    def get_many(self, user_ids: list[str]) -> list[UserRecord]:
        """Return the users that exist among the given ids, in input order."""
        object_ids = [oid for oid in map(parse_object_id, user_ids) if oid]
        if not object_ids:
            return []
        with store_errors("loading users"):
            documents = list(self.collection.find({"_id": {"$in": object_ids}}))
        by_id = {str(doc["_id"]): _document_to_user(doc) for doc in documents}
        return [
            by_id[user_id] for user_id in dict.fromkeys(user_ids) if user_id in by_id
        ]

    def create_user(self, new_user: NewUser) -> UserRecord:
        """Insert a new user document and return it."""
        now = datetime.now(tz=UTC)
        document = {
            "firstName": new_user.first_name,
            "lastName": new_user.last_name,
            "email": new_user.email,
            "password": new_user.password_hash,
            "username": new_user.username,
            "age": new_user.age,
            "college": new_user.college,
            "yearLevel": new_user.year_level,
            "bio": None,
            "profileImage": new_user.profile_image,
            "customInterests": list(new_user.custom_interests),
            "categorizedInterests": list(new_user.categorized_interests),
            "role": "student",
            "following": [],
            "followers": [],
            "createdAt": now,
            "updatedAt": now,
        }
        with store_errors("creating user"):
            result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _document_to_user(document)

    def save(self, user: UserRecord) -> UserRecord:
        """Persist the profile fields of an existing user."""
        object_id = parse_object_id(user.id)
        if object_id is None:
            raise NotFoundError("User", user.id)
        now = datetime.now(tz=UTC)
        updates: dict[str, object] = {
            key: getattr(user, attr) for attr, key in _PROFILE_FIELDS.items()
        }
        updates["updatedAt"] = now
        with store_errors("saving user"):
            result = self.collection.update_one({"_id": object_id}, {"$set": updates})
        if result.matched_count == 0:
            raise NotFoundError("User", user.id)
        return replace(user, updated_at=now)

    def add_following(self, user_id: str, target_id: str) -> bool:
        """Add target to the user's following list if absent."""
        return self._add_to_set(user_id, "following", target_id)

    def add_follower(self, user_id: str, follower_id: str) -> bool:
        """Add follower to the user's followers list if absent."""
        return self._add_to_set(user_id, "followers", follower_id)

    def remove_following(self, user_id: str, target_id: str) -> bool:
        """Remove target from the user's following list."""
        return self._pull(user_id, "following", target_id)

    def remove_follower(self, user_id: str, follower_id: str) -> bool:
        """Remove follower from the user's followers list."""
        return self._pull(user_id, "followers", follower_id)

    def _add_to_set(self, user_id: str, list_field: str, member_id: str) -> bool:
        object_id = parse_object_id(user_id)
        member = parse_object_id(member_id)
        if object_id is None or member is None:
            return False
        # The $ne filter makes modified_count report whether the member was
        # actually added, despite the updatedAt $set.
        with store_errors(f"updating {list_field}"):
            result = self.collection.update_one(
                {"_id": object_id, list_field: {"$ne": member}},
                {
                    "$addToSet": {list_field: member},
                    "$set": {"updatedAt": datetime.now(tz=UTC)},
                },
            )
        return result.modified_count == 1

    def _pull(self, user_id: str, list_field: str, member_id: str) -> bool:
        object_id = parse_object_id(user_id)
        member = parse_object_id(member_id)
        if object_id is None or member is None:
            return False
        with store_errors(f"updating {list_field}"):
            result = self.collection.update_one(
                {"_id": object_id, list_field: member},
                {
                    "$pull": {list_field: member},
                    "$set": {"updatedAt": datetime.now(tz=UTC)},
                },
            )
        return result.modified_count == 1


def _document_to_user(document: dict) -> UserRecord:
    return UserRecord(
        id=str(document["_id"]),
        first_name=document.get("firstName", ""),
        last_name=document.get("lastName", ""),
        email=document.get("email", ""),
        password_hash=document.get("password", ""),
        username=document.get("username", ""),
        age=document.get("age"),
        college=document.get("college") or None,
        year_level=document.get("yearLevel") or None,
        bio=document.get("bio") or None,
        profile_image=document.get("profileImage") or None,
        custom_interests=list(document.get("customInterests") or []),
        categorized_interests=list(document.get("categorizedInterests") or []),
        role=document.get("role") or "student",
        following=_ids(document.get("following")),
        followers=_ids(document.get("followers")),
        created_at=document.get("createdAt"),
        updated_at=document.get("updatedAt"),
    )


def _ids(values: list[ObjectId] | None) -> list[str]:
    return list(dict.fromkeys(str(value) for value in values or []))
