"""User repositories backed by a MongoDB ``users`` collection."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, List, Tuple

from agora.errors import InvalidInputError
from agora.mongo_documents import (
    document_to_read_model,
    document_to_user,
    user_to_document,
)
from agora.read_models import GetUsersOptions, UpdateFn, UserReadModel
from agora.user import EmailAlreadyExistsError, User, UserNotFoundError

COLLECTION_NAME = "users"

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


def _parse_timestamp(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise InvalidInputError(f"invalid timestamp: {text}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = timezone(sign * offset)
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), micro, tzinfo=tz,
        )
    except ValueError as exc:
        raise InvalidInputError(f"invalid timestamp: {text}") from exc


class MongoUserRepository:
    """Write-side user storage in MongoDB."""

    def __init__(self, db: Any) -> None:
        self._collection = db.get_collection(COLLECTION_NAME)

    def register(self, user: User) -> None:
        """Insert ``user``; its e-mail address must be unused."""
        if self._collection.find_one({"email": user.email}) is not None:
            raise EmailAlreadyExistsError()
        self._collection.insert_one(user_to_document(user))

    def make_moderator(self, user_id: str, update_fn: UpdateFn) -> None:
        self._get_and_update(user_id, update_fn)

    def award_badge(self, user_id: str, update_fn: UpdateFn) -> None:
        self._get_and_update(user_id, update_fn)

    def revoke_awarded_badge(self, user_id: str, update_fn: UpdateFn) -> None:
        self._get_and_update(user_id, update_fn)

    def change_username(self, user_id: str, update_fn: UpdateFn) -> None:
        self._get_and_update(user_id, update_fn)

    def ban_user(self, user_id: str, update_fn: UpdateFn) -> None:
        self._get_and_update(user_id, update_fn)

    def unban_user(self, user_id: str, update_fn: UpdateFn) -> None:
        self._get_and_update(user_id, update_fn)

    def get_user_by(self, field_name: str, value: Any) -> User:
        """Return the user whose ``field_name`` equals ``value``."""
        doc = self._collection.find_one({field_name: value})
        if doc is None:
            raise UserNotFoundError()
        return document_to_user(doc)

    def user_exists(self, email: str, username: str) -> bool:
        """Tell whether any user holds ``email`` or ``username``."""
        query = {"$or": [{"email": email}, {"username": username}]}
        return self._collection.find_one(query) is not None

    def _get_and_update(self, user_id: str, update_fn: UpdateFn) -> None:
        doc = self._collection.find_one({"_id": user_id})
        if doc is None:
            raise UserNotFoundError()
        user = document_to_user(doc)
        update_fn(user)
        self._collection.replace_one({"_id": user_id}, user_to_document(user))


class MongoUserReadModelRepository:
    """Read-side user views served from MongoDB."""

    def __init__(self, db: Any) -> None:
        self._collection = db.get_collection(COLLECTION_NAME)

    def get_user_by_email(self, email: str) -> UserReadModel:
        return document_to_read_model(self._find("email", email))

    def get_user_by_id(self, user_id: str) -> UserReadModel:
        return document_to_read_model(self._find("_id", user_id))

    def get_users(self, opts: GetUsersOptions) -> Tuple[List[UserReadModel], bool]:
        """A page of users, newest first; ``opts.after`` is an RFC 3339 creation time."""
        query: dict = {}
        if opts.after:
            query = {"createdAt": {"$lt": _parse_timestamp(opts.after)}}
        # One extra document tells whether another page follows.
        cursor = self._collection.find(
            query, sort=[("createdAt", -1)], limit=opts.first + 1
        )
        docs = list(cursor)
        has_next = len(docs) > opts.first
        if has_next:
            docs = docs[: opts.first]
        return [document_to_read_model(doc) for doc in docs], has_next

    def _find(self, field_name: str, value: Any) -> dict:
        doc = self._collection.find_one({field_name: value})
        if doc is None:
            raise UserNotFoundError()
        return doc