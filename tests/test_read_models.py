from datetime import datetime, timedelta, timezone

from agora.rbac import UserRole
from agora.read_models import UserReadModel
from agora.user import BanTimeline, Reputation, User


def _user():
    joined = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return User("userId-123", "user@example.com", "username", UserRole.REGULAR,
                joined, joined, Reputation(5, ["5-stars"]), None)


def test_from_user_copies_identity_and_reputation():
    user = _user()
    model = UserReadModel.from_user(user)
    assert model.id == user.id
    assert model.email == user.email
    assert model.username == user.username
    assert model.role == user.role
    assert model.reputation.reputation_score == user.reputation_score
    assert model.reputation.badges == user.badges
    assert model.created_at == user.joined_at


def test_from_user_copies_ban_status():
    user = _user()
    start = user.joined_at
    user.ban("abuse", False, BanTimeline(start, start + timedelta(hours=24)))
    model = UserReadModel.from_user(user)
    assert model.ban_status.is_banned
    assert model.ban_status.reason_for_ban == "abuse"
    assert model.ban_status.ban_start_date == user.ban_start_date
    assert model.ban_status.ban_end_date == user.ban_end_date
    assert not model.ban_status.is_ban_indefinite


def test_from_user_does_not_share_badges():
    user = _user()
    model = UserReadModel.from_user(user)
    user.award_badge("gold")
    assert "gold" not in model.reputation.badges


def test_to_dict_uses_wire_names():
    user = _user()
    data = UserReadModel.from_user(user).to_dict()
    assert data["role"] == "REGULAR"
    assert data["reputation"]["reputationScore"] == user.reputation_score
    assert data["reputation"]["badges"] == user.badges
    assert data["createdAt"] == user.joined_at.isoformat()
    assert data["banStatus"]["isBanned"] is False
    assert data["banStatus"]["banStartDate"] is None