"""Read-side views of users and the contracts repositories and handlers fulfil."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, TypeVar, Union

from agora.rbac import UserRole
from agora.user import User


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return None if value is None else value.isoformat()


@dataclass
class ReputationView:
    """Reputation as shown to readers."""

    reputation_score: int = 0
    badges: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"reputationScore": self.reputation_score, "badges": list(self.badges)}


@dataclass
class BanStatusView:
    """Ban state as shown to readers."""

    is_banned: bool = False
    banned_at: Optional[datetime] = None
    ban_start_date: Optional[datetime] = None
    ban_end_date: Optional[datetime] = None
    reason_for_ban: str = ""
    is_ban_indefinite: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isBanned": self.is_banned,
            "bannedAt": _timestamp(self.banned_at),
            "banStartDate": _timestamp(self.ban_start_date),
            "banEndDate": _timestamp(self.ban_end_date),
            "reasonForBan": self.reason_for_ban,
            "isBanIndefinite": self.is_ban_indefinite,
        }


@dataclass
class UserReadModel:
    """A flattened, read-only picture of a user."""

    username: str = ""
    email: str = ""
    role: Union[UserRole, str] = ""
    id: str = ""
    reputation: ReputationView = field(default_factory=ReputationView)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ban_status: BanStatusView = field(default_factory=BanStatusView)

    def to_dict(self) -> Dict[str, Any]:
        """The JSON-ready form of the view."""
        return {
            "username": self.username,
            "email": self.email,
            "role": str(self.role),
            "id": self.id,
            "reputation": self.reputation.to_dict(),
            "createdAt": _timestamp(self.created_at),
            "updatedAt": _timestamp(self.updated_at),
            "banStatus": self.ban_status.to_dict(),
        }

    @classmethod
    def from_user(cls, user: User) -> "UserReadModel":
        """Build the view of a domain user."""
        return cls(
            username=user.username,
            email=user.email,
            role=user.role,
            id=user.id,
            reputation=ReputationView(user.reputation_score, list(user.badges)),
            created_at=user.joined_at,
            updated_at=user.updated_at,
            ban_status=BanStatusView(
                is_banned=user.is_banned,
                banned_at=user.banned_at,
                ban_start_date=user.ban_start_date,
                ban_end_date=user.ban_end_date,
                reason_for_ban=user.reason_for_ban,
                is_ban_indefinite=user.is_ban_indefinite,
            ),
        )


@dataclass
class GetUsersOptions:
    """Paging options for listing users."""

    first: int = 0
    after: str = ""
    sort_direction: str = ""  # "ASC" or "DESC"


UpdateFn = Callable[[User], None]


class UserRepository(Protocol):
    """Write-side storage of users; updates go through ``update_fn``."""

    def register(self, user: User) -> None: ...

    def make_moderator(self, user_id: str, update_fn: UpdateFn) -> None: ...

    def award_badge(self, user_id: str, update_fn: UpdateFn) -> None: ...

    def revoke_awarded_badge(self, user_id: str, update_fn: UpdateFn) -> None: ...

    def change_username(self, user_id: str, update_fn: UpdateFn) -> None: ...

    def unban_user(self, user_id: str, update_fn: UpdateFn) -> None: ...

    def ban_user(self, user_id: str, update_fn: UpdateFn) -> None: ...

    def get_user_by(self, field_name: str, value: Any) -> User: ...

    def user_exists(self, email: str, username: str) -> bool: ...


class UserReadModelRepository(Protocol):
    """Read-side storage of user views."""

    def get_users(self, opts: GetUsersOptions) -> Tuple[List[UserReadModel], bool]: ...

    def get_user_by_id(self, user_id: str) -> UserReadModel: ...

    def get_user_by_email(self, email: str) -> UserReadModel: ...


C_contra = TypeVar("C_contra", contravariant=True)
R_co = TypeVar("R_co", covariant=True)


class CommandHandler(Protocol[C_contra]):
    """Carries out a command; failures are raised."""

    def handle(self, cmd: C_contra) -> None: ...


class QueryHandler(Protocol[C_contra, R_co]):
    """Answers a query; failures are raised."""

    def handle(self, query: C_contra) -> R_co: ...