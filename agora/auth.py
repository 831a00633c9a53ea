"""Bearer-token authentication and the per-request current user."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterator, Optional, Union

import jwt

from agora.config import Environment, Settings, load_settings
from agora.rbac import UserRole

_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]
_FAKE_USER_ID = "userId-123"
_FAKE_USER_EMAIL = "johndoe@example.com"

RoleValue = Union[UserRole, str]


def _coerce_role(value: object) -> RoleValue:
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(value)
    except ValueError:
        return "" if value is None else str(value)


def _role_text(role: RoleValue) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


@dataclass
class AuthenticatedUser:
    """The user on whose behalf a request runs."""

    email: str = ""
    id: str = ""
    role: RoleValue = ""

    def is_zero(self) -> bool:
        return self == AuthenticatedUser()

    def is_authenticated(self) -> bool:
        return not self.is_zero()


@dataclass
class AuthClaims:
    """Claims carried by an authentication token."""

    user_id: str = ""
    email: str = ""
    role: RoleValue = ""
    expires_at: Optional[datetime] = None

    def is_zero(self) -> bool:
        return self.email == "" or self.user_id == "" or self.role == UserRole.GUEST


def _zero_claims() -> AuthClaims:
    return AuthClaims(role=UserRole.GUEST)


def parse_token_from_header(
    authorization: Optional[str], secret: Union[str, bytes]
) -> AuthClaims:
    """Read claims from an ``Authorization: Bearer`` value; guest claims if invalid."""
    if authorization is None or not authorization.strip():
        return _zero_claims()

    parts = authorization.split("Bearer ")
    if len(parts) != 2:
        return _zero_claims()

    try:
        payload = jwt.decode(parts[1], secret, algorithms=_HMAC_ALGORITHMS)
    except jwt.PyJWTError:
        return _zero_claims()

    fields = {name: payload.get(name, "") for name in ("sub", "email", "role")}
    if not all(isinstance(value, str) for value in fields.values()):
        return _zero_claims()

    expires_at = None
    if "exp" in payload:
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

    return AuthClaims(
        user_id=fields["sub"],
        email=fields["email"],
        role=_coerce_role(fields["role"]),
        expires_at=expires_at,
    )


_current_user: ContextVar[Optional[AuthenticatedUser]] = ContextVar(
    "agora_current_user", default=None
)


def current_user() -> Optional[AuthenticatedUser]:
    """Return the user bound to the running context, if any."""
    return _current_user.get()


@contextmanager
def user_context(user: AuthenticatedUser) -> Iterator[AuthenticatedUser]:
    """Bind ``user`` as the current user for the duration of the block."""
    reset_handle = _current_user.set(user)
    try:
        yield user
    finally:
        _current_user.reset(reset_handle)


WsgiApp = Callable[[dict, Callable[..., Any]], Any]


def auth_middleware(app: WsgiApp, settings: Optional[Settings] = None) -> WsgiApp:
    """Wrap a WSGI app so each request runs with its authenticated user bound.

    The user is also stored in the WSGI environ under ``agora.user``.
    """

    def middleware(environ: dict, start_response: Callable[..., Any]) -> Any:
        current = settings if settings is not None else load_settings()
        if current.environment == Environment.TEST:
            user = fake_user(UserRole.ADMIN)
        else:
            claims = parse_token_from_header(
                environ.get("HTTP_AUTHORIZATION", ""), current.auth_secret
            )
            user = AuthenticatedUser()
            if not claims.is_zero():
                user = AuthenticatedUser(
                    email=claims.email, id=claims.user_id, role=claims.role
                )
        environ["agora.user"] = user
        with user_context(user):
            return app(environ, start_response)

    return middleware


def fake_user(role: Optional[RoleValue] = None) -> AuthenticatedUser:
    """A fixed user for tests and local runs; moderator when no role is given."""
    chosen: RoleValue = role if role is not None and str(role).strip() else UserRole.MODERATOR
    return AuthenticatedUser(email=_FAKE_USER_EMAIL, id=_FAKE_USER_ID, role=chosen)


def generate_test_token(user: AuthenticatedUser, secret: Union[str, bytes]) -> str:
    """Sign an HS256 token for ``user`` that expires in 24 hours."""
    claims = {
        "sub": user.id,
        "email": user.email,
        "role": _role_text(user.role),
        "exp": datetime.now(timezone.utc) + timedelta(hours=24),
    }
    return jwt.encode(claims, secret, algorithm="HS256")