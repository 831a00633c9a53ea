"""Queries that read users, and the handlers that answer them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from agora.auth import AuthenticatedUser, current_user
from agora.guards import Guards
from agora.pagination import PaginatedResult, PaginationInfo
from agora.rbac import Permission
from agora.read_models import GetUsersOptions, UserReadModel, UserReadModelRepository

GetUsers = GetUsersOptions
UsersResult = PaginatedResult[List[UserReadModel]]


@dataclass(frozen=True)
class GetUserByEmail:
    """Look a user up by e-mail address."""

    email: str


@dataclass(frozen=True)
class GetUserById:
    """Look a user up by id."""

    id: str


def _acting_user() -> AuthenticatedUser:
    user = current_user()
    return user if user is not None else AuthenticatedUser()


class _UserQueryHandler:
    def __init__(self, query_repo: UserReadModelRepository, guard: Guards) -> None:
        if query_repo is None or guard is None:
            raise ValueError("user repository and guard are required")
        self._query_repo = query_repo
        self._guard = guard

    def _authorize(self, perm: Permission) -> None:
        self._guard.authorize(_acting_user().role, perm)


class GetUserByEmailHandler(_UserQueryHandler):
    """Answers lookups by e-mail; needs the view-user permission."""

    def handle(self, query: GetUserByEmail) -> UserReadModel:
        self._authorize(Permission.VIEW_USER)
        return self._query_repo.get_user_by_email(query.email)


class GetUserByIdHandler(_UserQueryHandler):
    """Answers lookups by id; needs the view-user permission."""

    def handle(self, query: GetUserById) -> UserReadModel:
        self._authorize(Permission.VIEW_USER)
        return self._query_repo.get_user_by_id(query.id)


class GetUsersHandler(_UserQueryHandler):
    """Lists users a page at a time; needs the list-users permission."""

    def handle(self, query: GetUsersOptions) -> UsersResult:
        self._authorize(Permission.LIST_USERS)
        users, has_next = self._query_repo.get_users(query)
        return PaginatedResult(data=users, pagination_info=PaginationInfo(has_next=has_next))