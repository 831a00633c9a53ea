"""Attribute-based access control: decisions that depend on who is acting on whom."""

from __future__ import annotations

from agora.auth import AuthenticatedUser
from agora.rbac import UnauthorizedError, UserRole


class AttributeBasedGuard:
    """Checks that look at the acting user's attributes as well as their role."""

    def can_change_username(self, user_id: str, auth_user: AuthenticatedUser) -> None:
        """Admins may rename anyone; regulars and moderators only themselves."""
        role = auth_user.role
        if role == UserRole.ADMIN:
            return
        if role in (UserRole.REGULAR, UserRole.MODERATOR) and user_id == auth_user.id:
            return
        raise UnauthorizedError()