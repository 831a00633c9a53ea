"""The user application layer: every command and query handler wired together."""

from __future__ import annotations

from dataclasses import dataclass

from agora.commands import (
    AwardBadgeHandler,
    BanUserHandler,
    ChangeUsernameHandler,
    MakeModeratorHandler,
    RegisterUserHandler,
    RevokeAwardedBadgeHandler,
    UnbanUserHandler,
)
from agora.guards import Guards
from agora.queries import GetUserByEmailHandler, GetUserByIdHandler, GetUsersHandler
from agora.read_models import UserReadModelRepository, UserRepository


@dataclass(frozen=True)
class UserCommands:
    """Handlers for the commands that change users."""

    register_user: RegisterUserHandler
    revoke_awarded_badge: RevokeAwardedBadgeHandler
    award_badge: AwardBadgeHandler
    make_moderator: MakeModeratorHandler
    change_username: ChangeUsernameHandler
    ban_user: BanUserHandler
    unban_user: UnbanUserHandler


@dataclass(frozen=True)
class UserQueries:
    """Handlers for the queries that read users."""

    get_user_by_id: GetUserByIdHandler
    get_users: GetUsersHandler
    get_user_by_email: GetUserByEmailHandler


@dataclass(frozen=True)
class Application:
    """The user application: its commands and its queries."""

    commands: UserCommands
    queries: UserQueries


@dataclass
class Services:
    """The application services available to the transport layer."""

    user_service: Application


def new_application(
    user_repo: UserRepository,
    read_model_repo: UserReadModelRepository,
    guard: Guards,
) -> Application:
    """Build the user application over the given repositories and guard."""
    return Application(
        commands=UserCommands(
            register_user=RegisterUserHandler(user_repo, guard),
            revoke_awarded_badge=RevokeAwardedBadgeHandler(user_repo, guard),
            award_badge=AwardBadgeHandler(user_repo, guard),
            make_moderator=MakeModeratorHandler(user_repo, guard),
            change_username=ChangeUsernameHandler(user_repo, guard),
            ban_user=BanUserHandler(user_repo, guard),
            unban_user=UnbanUserHandler(user_repo, guard),
        ),
        queries=UserQueries(
            get_user_by_id=GetUserByIdHandler(read_model_repo, guard),
            get_users=GetUsersHandler(read_model_repo, guard),
            get_user_by_email=GetUserByEmailHandler(read_model_repo, guard),
        ),
    )