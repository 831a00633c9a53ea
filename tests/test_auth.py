from datetime import datetime, timedelta, timezone

import jwt
import pytest

from agora.auth import (
    AuthClaims,
    AuthenticatedUser,
    auth_middleware,
    current_user,
    fake_user,
    generate_test_token,
    parse_token_from_header,
    user_context,
)
from agora.config import Environment, Settings
from agora.rbac import UserRole

SECRET = "secret"


def test_invalid_token_gives_zero_claims():
    claims = parse_token_from_header("Bearer token", SECRET)
    assert claims.is_zero()
    assert claims.role is UserRole.GUEST


def test_valid_token_gives_claims():
    user = fake_user(UserRole.MODERATOR)
    signed = generate_test_token(user, SECRET)
    claims = parse_token_from_header(f"Bearer {signed}", SECRET)
    assert not claims.is_zero()
    assert claims.email == user.email
    assert claims.role == user.role
    assert claims.user_id == user.id
    assert claims.expires_at is not None
    assert claims.expires_at > datetime.now(timezone.utc)


@pytest.mark.parametrize("header", ["", "   ", None, "Basic abc", "token"])
def test_missing_or_malformed_header_gives_guest_claims(header):
    claims = parse_token_from_header(header, SECRET)
    assert claims == AuthClaims(role=UserRole.GUEST)


def test_token_signed_with_other_key_is_rejected():
    signed = generate_test_token(fake_user(UserRole.ADMIN), "other")
    assert parse_token_from_header(f"Bearer {signed}", SECRET).is_zero()


def test_expired_token_is_rejected():
    expired = jwt.encode(
        {
            "sub": "userId-123",
            "email": "johndoe@example.com",
            "role": "ADMIN",
            "exp": datetime.now(timezone.utc) - timedelta(hours=1),
        },
        SECRET,
        algorithm="HS256",
    )
    assert parse_token_from_header(f"Bearer {expired}", SECRET).is_zero()


def test_guest_role_token_counts_as_zero():
    guest = AuthenticatedUser(email="guest@example.com", id="guest-1", role=UserRole.GUEST)
    signed = generate_test_token(guest, SECRET)
    claims = parse_token_from_header(f"Bearer {signed}", SECRET)
    assert claims.email == "guest@example.com"
    assert claims.is_zero()


def test_fake_user_defaults_to_moderator():
    assert fake_user().role is UserRole.MODERATOR
    assert fake_user("  ").role is UserRole.MODERATOR
    admin = fake_user(UserRole.ADMIN)
    assert admin.role is UserRole.ADMIN
    assert admin.email == "johndoe@example.com"
    assert admin.id == "userId-123"


def test_authenticated_user_zero_state():
    assert AuthenticatedUser().is_zero()
    assert not AuthenticatedUser().is_authenticated()
    assert fake_user().is_authenticated()


def test_user_context_binds_and_restores():
    user = fake_user(UserRole.REGULAR)
    assert current_user() is None
    with user_context(user) as bound:
        assert bound is user
        assert current_user() is user
    assert current_user() is None


def _run(middleware, headers):
    seen = []

    def app(environ, start_response):
        seen.append(current_user())
        start_response("200 OK", [])
        return [b"ok"]

    environ = dict(headers)
    body = auth_middleware(app, middleware)(environ, lambda status, hdrs: None)
    return seen[0], environ, body


def test_middleware_binds_token_user():
    settings = Settings(auth_secret=SECRET, environment=Environment.PRODUCTION)
    user = AuthenticatedUser(email="user1@example.com", id="user1", role=UserRole.REGULAR)
    signed = generate_test_token(user, SECRET)
    seen, environ, body = _run(settings, {"HTTP_AUTHORIZATION": f"Bearer {signed}"})
    assert seen == user
    assert environ["agora.user"] == user
    assert body == [b"ok"]


def test_middleware_without_token_binds_empty_user():
    settings = Settings(auth_secret=SECRET, environment=Environment.DEVELOPMENT)
    seen, _, _ = _run(settings, {})
    assert seen == AuthenticatedUser()
    assert seen.is_zero()


def test_middleware_in_test_environment_uses_fake_admin():
    settings = Settings(auth_secret=SECRET, environment=Environment.TEST)
    seen, _, _ = _run(settings, {})
    assert seen == fake_user(UserRole.ADMIN)