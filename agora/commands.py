"""Commands that change users, and the handlers that carry them out."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from agora.auth import AuthenticatedUser, current_user
from agora.errors import InternalServerError
from agora.guards import Guards
from agora.rbac import Permission, UserRole
from agora.read_models import UserRepository
from agora.user import (
    BanTimeline,
    EmailOrUsernameAlreadyExistsError,
    User,
    UserNotFoundError,
)


@dataclass(frozen=True)
class AwardBadge:
    """Award ``badge`` to the user with ``id``."""

    id: str
    badge: str


@dataclass(frozen=True)
class BanUser:
    """Ban the user with ``id``, indefinitely or for ``timeline``."""

    id: str
    reason: str = ""
    is_indefinitely: bool = False
    timeline: Optional[BanTimeline] = None


@dataclass(frozen=True)
class ChangeUsername:
    """Rename the user with ``id`` to ``username``."""

    id: str
    username: str


@dataclass(frozen=True)
class MakeModerator:
    """Promote the user with ``id`` to moderator."""

    id: str


@dataclass(frozen=True)
class RegisterUser:
    """Create a new regular account."""

    email: str
    username: str


@dataclass(frozen=True)
class RevokeAwardedBadge:
    """Take ``badge`` away from the user with ``id``."""

    id: str
    badge: str


@dataclass(frozen=True)
class UnbanUser:
    """Lift the ban on the user with ``id``."""

    id: str


def _acting_user() -> AuthenticatedUser:
    user = current_user()
    return user if user is not None else AuthenticatedUser()


def _new_user_id() -> str:
    return uuid.uuid4().hex


class _UserCommandHandler:
    def __init__(self, user_repo: UserRepository, guard: Guards) -> None:
        if user_repo is None or guard is None:
            raise ValueError("user repository and guard are required")
        self._user_repo = user_repo
        self._guard = guard

    def _authorize(self, perm: Permission) -> AuthenticatedUser:
        user = _acting_user()
        self._guard.authorize(user.role, perm)
        return user

    def _ensure_unused(self, email: str, username: str) -> None:
        try:
            exists = self._user_repo.user_exists(email, username)
        except UserNotFoundError:
            exists = False
        except Exception as exc:
            raise InternalServerError() from exc
        if exists:
            raise EmailOrUsernameAlreadyExistsError()


class AwardBadgeHandler(_UserCommandHandler):
    """Awards badges; needs the award-badge permission."""

    def handle(self, cmd: AwardBadge) -> None:
        self._authorize(Permission.AWARD_BADGE)
        self._user_repo.award_badge(cmd.id, lambda user: user.award_badge(cmd.badge))


class BanUserHandler(_UserCommandHandler):
    """Bans users; needs the ban-user permission."""

    def handle(self, cmd: BanUser) -> None:
        self._authorize(Permission.BAN_USER)
        self._user_repo.ban_user(
            cmd.id,
            lambda user: user.ban(cmd.reason, cmd.is_indefinitely, cmd.timeline),
        )


class ChangeUsernameHandler(_UserCommandHandler):
    """Renames users when the name is free and the actor may rename them."""

    def handle(self, cmd: ChangeUsername) -> None:
        acting = _acting_user()
        self._ensure_unused("", cmd.username)
        self._guard.can_change_username(cmd.id, acting)
        self._user_repo.change_username(
            cmd.id, lambda user: user.change_username(cmd.username)
        )


class MakeModeratorHandler(_UserCommandHandler):
    """Promotes users to moderator; needs the make-moderator permission."""

    def handle(self, cmd: MakeModerator) -> None:
        self._authorize(Permission.MAKE_MODERATOR)
        self._user_repo.make_moderator(cmd.id, lambda user: user.make_moderator())


class RegisterUserHandler(_UserCommandHandler):
    """Creates regular accounts with unused e-mail addresses and usernames."""

    def handle(self, cmd: RegisterUser) -> None:
        self._authorize(Permission.CREATE_ACCOUNT)
        self._ensure_unused(cmd.email, cmd.username)
        now = datetime.now(timezone.utc)
        user = User(
            id=_new_user_id(),
            email=cmd.email,
            username=cmd.username,
            role=UserRole.REGULAR,
            joined_at=now,
            updated_at=now,
        )
        self._user_repo.register(user)


class RevokeAwardedBadgeHandler(_UserCommandHandler):
    """Revokes badges; needs the revoke-badge permission."""

    def handle(self, cmd: RevokeAwardedBadge) -> None:
        self._authorize(Permission.REVOKE_BADGE)
        self._user_repo.revoke_awarded_badge(
            cmd.id, lambda user: user.revoke_awarded_badge(cmd.badge)
        )


class UnbanUserHandler(_UserCommandHandler):
    """Lifts bans; needs the unban-user permission."""

    def handle(self, cmd: UnbanUser) -> None:
        self._authorize(Permission.UNBAN_USER)
        self._user_repo.unban_user(cmd.id, lambda user: user.unban())