"""A user store kept in process memory, for tests and local runs."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Tuple

from agora.errors import InvalidInputError
from agora.read_models import GetUsersOptions, UpdateFn, UserReadModel
from agora.user import EmailOrUsernameAlreadyExistsError, User, UserNotFoundError

_LOOKUP_FIELDS = {"id": "id", "_id": "id", "email": "email", "username": "username"}


class MemoryUserRepository:
    """Keeps users in a dictionary; serves both the write and the read side."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    # Write side

    def register(self, user: User) -> None:
        """Store a new user; the e-mail address and username must be unused."""
        taken = user.id in self._users or any(
            stored.email == user.email or stored.username == user.username
            for stored in self._users.values()
        )
        if taken:
            raise EmailOrUsernameAlreadyExistsError(
                "user with email or username already exists"
            )
        self._users[user.id] = copy.deepcopy(user)

    def _update(self, user_id: str, update_fn: UpdateFn) -> None:
        working = copy.deepcopy(self._stored(user_id))
        update_fn(working)
        self._users[user_id] = working

    def make_moderator(self, user_id: str, update_fn: UpdateFn) -> None:
        self._update(user_id, update_fn)

    def award_badge(self, user_id: str, update_fn: UpdateFn) -> None:
        self._update(user_id, update_fn)

    def revoke_awarded_badge(self, user_id: str, update_fn: UpdateFn) -> None:
        self._update(user_id, update_fn)

    def change_username(self, user_id: str, update_fn: UpdateFn) -> None:
        self._update(user_id, update_fn)

    def ban_user(self, user_id: str, update_fn: UpdateFn) -> None:
        self._update(user_id, update_fn)

    def unban_user(self, user_id: str, update_fn: UpdateFn) -> None:
        self._update(user_id, update_fn)

    def user_exists(self, email: str, username: str) -> bool:
        """Tell whether any user holds ``email`` or ``username``."""
        return any(
            stored.email == email or stored.username == username
            for stored in self._users.values()
        )

    def get_user_by(self, field_name: str, value: Any) -> User:
        """Return a copy of the first user whose ``field_name`` equals ``value``."""
        attribute = _LOOKUP_FIELDS.get(field_name)
        if attribute is None:
            raise InvalidInputError(f"unknown user field: {field_name}")
        match = next(
            (u for u in self._users.values() if getattr(u, attribute) == value), None
        )
        if match is None:
            raise UserNotFoundError()
        return copy.deepcopy(match)

    # Read side

    def get_user_by_id(self, user_id: str) -> UserReadModel:
        return UserReadModel.from_user(self._stored(user_id))

    def get_user_by_email(self, email: str) -> UserReadModel:
        match = next((u for u in self._users.values() if u.email == email), None)
        if match is None:
            raise UserNotFoundError(f"user with email {email} does not exist")
        return UserReadModel.from_user(match)

    def get_users(
        self, opts: Optional[GetUsersOptions] = None
    ) -> Tuple[List[UserReadModel], bool]:
        """List users in registration order; ``opts.first`` above zero caps the page."""
        views = [UserReadModel.from_user(u) for u in self._users.values()]
        first = opts.first if opts is not None else 0
        has_next = 0 < first < len(views)
        if has_next:
            views = views[:first]
        return views, has_next

    def _stored(self, user_id: str) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise UserNotFoundError(f"user with id {user_id} does not exist") from None