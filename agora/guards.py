"""The combined guard handed to application handlers."""

from __future__ import annotations

from typing import Optional

from agora.abac import AttributeBasedGuard
from agora.auth import AuthenticatedUser
from agora.rbac import RoleBasedGuard


class Guards:
    """Role-based and attribute-based checks behind one object."""

    def __init__(
        self,
        role_guard: Optional[RoleBasedGuard] = None,
        attribute_guard: Optional[AttributeBasedGuard] = None,
    ) -> None:
        self._role_guard = role_guard if role_guard is not None else RoleBasedGuard()
        self._attribute_guard = (
            attribute_guard if attribute_guard is not None else AttributeBasedGuard()
        )

    def authorize(self, role: object, perm: object) -> None:
        """Raise ``UnauthorizedError`` unless ``role`` holds ``perm``."""
        self._role_guard.authorize(role, perm)

    def can_change_username(self, user_id: str, auth_user: AuthenticatedUser) -> None:
        """Raise ``UnauthorizedError`` unless ``auth_user`` may rename ``user_id``."""
        self._attribute_guard.can_change_username(user_id, auth_user)