"""Role-based access control: roles, permissions and the policy linking them."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Mapping, Optional, Protocol


class UserRole(str, Enum):
    """The role a user holds on the board."""

    ADMIN = "ADMIN"
    REGULAR = "REGULAR"
    MODERATOR = "MODERATOR"
    GUEST = "GUEST"

    def __str__(self) -> str:
        return self.value


class Permission(str, Enum):
    """An action that a role may be allowed to perform."""

    BAN_USER = "ban:user"
    UNBAN_USER = "unban:user"
    CREATE_POST = "create:post"
    DELETE_POST = "delete:post"
    UPDATE_POST = "update:post"
    DELETE_USER = "delete:user"
    AWARD_BADGE = "award:badge"
    REVOKE_BADGE = "revoke:badge"
    MAKE_MODERATOR = "make:moderator"
    MAKE_REGULAR = "make:regular"
    CREATE_ACCOUNT = "create:account"
    VIEW_USER = "view:user"
    LIST_USERS = "list:users"

    def __str__(self) -> str:
        return self.value


class UnauthorizedError(Exception):
    """Raised when the acting user may not perform an action."""

    def __init__(self, message: str = "unauthorized") -> None:
        super().__init__(message)


_DEFAULT_RULES: Mapping[UserRole, Iterable[Permission]] = {
    UserRole.REGULAR: (Permission.VIEW_USER,),
    UserRole.ADMIN: (Permission.VIEW_USER,),
    UserRole.MODERATOR: (
        Permission.VIEW_USER,
        Permission.LIST_USERS,
        Permission.BAN_USER,
        Permission.UNBAN_USER,
    ),
    UserRole.GUEST: (Permission.CREATE_ACCOUNT,),
}


def _as_role(role: object) -> Optional[UserRole]:
    try:
        return UserRole(role)
    except ValueError:
        return None


def _as_permission(perm: object) -> Optional[Permission]:
    try:
        return Permission(perm)
    except ValueError:
        return None


class _PolicyLike(Protocol):
    def is_allowed(self, role: object, perm: object) -> bool: ...


class Policy:
    """Maps each role to the permissions it holds; admins hold every one."""

    def __init__(
        self, rules: Optional[Mapping[UserRole, Iterable[Permission]]] = None
    ) -> None:
        source = _DEFAULT_RULES if rules is None else rules
        self._rules = {
            UserRole(role): frozenset(Permission(p) for p in perms)
            for role, perms in source.items()
        }

    def is_allowed(self, role: object, perm: object) -> bool:
        """Tell whether ``role`` holds ``perm``."""
        known_role = _as_role(role)
        if known_role is UserRole.ADMIN:
            return True
        if known_role is None:
            return False
        perms = self._rules.get(known_role)
        if perms is None:
            return False
        known_perm = _as_permission(perm)
        return known_perm is not None and known_perm in perms


class RoleBasedGuard:
    """Checks role permissions against a policy."""

    def __init__(self, policy: Optional[_PolicyLike] = None) -> None:
        self._policy = policy if policy is not None else Policy()

    def authorize(self, role: object, perm: object) -> None:
        """Raise :class:`UnauthorizedError` unless ``role`` holds ``perm``."""
        if not self._policy.is_allowed(role, perm):
            raise UnauthorizedError()