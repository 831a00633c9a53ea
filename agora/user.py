"""The user aggregate: identity, reputation, role and ban state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union

from agora.rbac import UserRole

_VALID_ROLES = (UserRole.MODERATOR, UserRole.ADMIN, UserRole.REGULAR)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UserError(ValueError):
    """A rule of the user aggregate was broken."""


class UserNotFoundError(UserError):
    """No user matches the lookup."""

    def __init__(self, message: str = "user not found") -> None:
        super().__init__(message)


class EmailAlreadyExistsError(UserError):
    """Another user already holds the e-mail address."""

    def __init__(self, message: str = "email already exists") -> None:
        super().__init__(message)


class EmailOrUsernameAlreadyExistsError(UserError):
    """Another user already holds the e-mail address or the username."""

    def __init__(self, message: str = "email or username already exists") -> None:
        super().__init__(message)


@dataclass
class Reputation:
    """A user's reputation score and the badges awarded to them."""

    score: int = 0
    badges: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.score < 0:
            raise UserError("invalid reputation score")
        self.badges = list(self.badges) if self.badges is not None else []


@dataclass
class BanStatus:
    """Whether, why and for how long a user is banned."""

    is_banned: bool = False
    reason: str = ""
    is_indefinite: bool = False
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    banned_at: Optional[datetime] = None


@dataclass
class BanTimeline:
    """The period a temporary ban runs for."""

    start: datetime
    end: datetime


@dataclass
class User:
    """A member of the board."""

    id: str
    email: str
    username: str
    role: Union[UserRole, str]
    joined_at: datetime
    updated_at: datetime
    reputation: Reputation = field(default_factory=Reputation)
    ban_status: BanStatus = field(default_factory=BanStatus)

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise UserError("user id cannot be empty")
        if not self.email.strip():
            raise UserError("user email cannot be empty")
        if not self.username.strip():
            raise UserError("username cannot be empty")
        if self.role is None or not str(self.role).strip():
            raise UserError("user role cannot be empty")
        try:
            role = UserRole(self.role)
        except ValueError:
            role = None
        if role not in _VALID_ROLES:
            raise UserError(
                "invalid user role. Valid user roles are "
                f"{UserRole.ADMIN}, {UserRole.MODERATOR} and {UserRole.REGULAR}"
            )
        self.role = role
        if self.reputation is None:
            self.reputation = Reputation()
        if self.ban_status is None:
            self.ban_status = BanStatus()

    # Reputation

    @property
    def reputation_score(self) -> int:
        return self.reputation.score

    @property
    def badges(self) -> List[str]:
        return self.reputation.badges

    def change_username(self, new_username: str) -> None:
        """Rename the user."""
        if not new_username.strip():
            raise UserError("username cannot be empty")
        self.username = new_username
        self.updated_at = _now()

    def award_badge(self, badge: str) -> None:
        """Add ``badge`` to the user's badges."""
        if not badge.strip():
            raise UserError("badge cannot be empty")
        self.reputation.badges.append(badge)
        self.updated_at = _now()

    def revoke_awarded_badge(self, badge: str) -> None:
        """Remove every copy of a previously awarded ``badge``."""
        if not badge.strip():
            raise UserError("badge cannot be empty")
        if badge not in self.reputation.badges:
            raise UserError(
                f"the badge {badge} you want to revoke hasn't been awarded "
                f"to the user {self.username} previously"
            )
        self.reputation.badges = [b for b in self.reputation.badges if b != badge]
        self.updated_at = _now()

    def increment_reputation_score_by(self, value: int) -> None:
        """Raise the reputation score by a positive ``value``."""
        if value < 1:
            raise UserError(
                "you cannot increment user reputation by a value less than one"
            )
        self.reputation.score += value
        self.updated_at = _now()

    def decrement_reputation_score_by(self, value: int) -> None:
        """Lower the reputation score by a positive ``value``."""
        if value < 1:
            raise UserError(
                "you cannot decrement user reputation by a value less than one"
            )
        self.reputation.score -= value
        self.updated_at = _now()

    # Banning

    @property
    def is_banned(self) -> bool:
        return self.ban_status.is_banned

    @property
    def reason_for_ban(self) -> str:
        return self.ban_status.reason

    @property
    def is_ban_indefinite(self) -> bool:
        return self.ban_status.is_indefinite

    @property
    def ban_start_date(self) -> Optional[datetime]:
        return self.ban_status.start

    @property
    def ban_end_date(self) -> Optional[datetime]:
        return self.ban_status.end

    @property
    def banned_at(self) -> Optional[datetime]:
        return self.ban_status.banned_at

    def ban(
        self, reason: str, is_indefinite: bool, timeline: Optional[BanTimeline] = None
    ) -> None:
        """Ban the user, either indefinitely or for ``timeline``."""
        if not reason.strip():
            raise UserError("reason to ban a user can't be empty")
        if self.ban_status.is_banned:
            raise UserError("user is already banned")
        if not is_indefinite and timeline is None:
            raise UserError(
                "you must pass correct ban timeline if user ban is not indefinitely"
            )
        status = self.ban_status
        status.is_banned = True
        status.reason = reason
        status.is_indefinite = is_indefinite
        status.banned_at = _now()
        if timeline is not None:
            status.start = timeline.start
            status.end = timeline.end
            status.is_indefinite = False

    def unban(self) -> None:
        """Lift the user's ban."""
        status = self.ban_status
        if not status.is_banned:
            raise UserError("user you are trying to unban is not banned")
        status.is_banned = False
        status.reason = ""
        status.is_indefinite = False
        status.start = None
        status.end = None

    # Roles

    def is_moderator(self) -> bool:
        return self.role == UserRole.MODERATOR

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def is_regular(self) -> bool:
        return self.role == UserRole.REGULAR

    def make_moderator(self) -> None:
        """Promote the user to moderator."""
        if self.role == UserRole.MODERATOR:
            raise UserError(f"the user {self.username} is already a moderator")
        self.role = UserRole.MODERATOR

    def make_regular(self) -> None:
        """Return the user to the regular role."""
        if self.role == UserRole.REGULAR:
            raise UserError(f"the user {self.username} is already a regular")
        self.role = UserRole.REGULAR