"""Conversions between users and the documents that store them in MongoDB."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from agora.rbac import UserRole
from agora.read_models import BanStatusView, ReputationView, UserReadModel
from agora.user import BanStatus, Reputation, User

Document = Dict[str, Any]


def _role_text(role: object) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


def _section(doc: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = doc.get(name)
    return value if isinstance(value, Mapping) else {}


def _badges(reputation: Mapping[str, Any]) -> list:
    badges = reputation.get("badges")
    return list(badges) if badges is not None else []


def user_to_document(user: User) -> Document:
    """The MongoDB document that stores ``user``."""
    return {
        "_id": user.id,
        "email": user.email,
        "username": user.username,
        "role": _role_text(user.role),
        "reputation": {
            "reputationScore": user.reputation_score,
            "badges": list(user.badges),
        },
        "createdAt": user.joined_at,
        "updatedAt": user.updated_at,
        "banStatus": {
            "isBanned": user.is_banned,
            "bannedAt": user.banned_at,
            "banStartDate": user.ban_start_date,
            "banEndDate": user.ban_end_date,
            "reasonForBan": user.reason_for_ban,
            "isBanIndefinite": user.is_ban_indefinite,
        },
    }


def document_to_user(doc: Mapping[str, Any]) -> User:
    """Rebuild the domain user stored in ``doc``; raises ``UserError`` if it is invalid."""
    reputation = _section(doc, "reputation")
    ban = _section(doc, "banStatus")
    return User(
        id=doc.get("_id", ""),
        email=doc.get("email", ""),
        username=doc.get("username", ""),
        role=doc.get("role", ""),
        joined_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
        reputation=Reputation(
            score=reputation.get("reputationScore", 0), badges=_badges(reputation)
        ),
        ban_status=BanStatus(
            is_banned=bool(ban.get("isBanned", False)),
            reason=ban.get("reasonForBan", "") or "",
            is_indefinite=bool(ban.get("isBanIndefinite", False)),
            start=ban.get("banStartDate"),
            end=ban.get("banEndDate"),
            banned_at=ban.get("bannedAt"),
        ),
    )


def _read_role(value: object) -> object:
    try:
        return UserRole(value)
    except ValueError:
        return "" if value is None else str(value)


def document_to_read_model(doc: Mapping[str, Any]) -> UserReadModel:
    """The read-side view of the user stored in ``doc``."""
    reputation = _section(doc, "reputation")
    ban = _section(doc, "banStatus")
    return UserReadModel(
        username=doc.get("username", ""),
        email=doc.get("email", ""),
        id=doc.get("_id", ""),
        role=_read_role(doc.get("role", "")),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
        reputation=ReputationView(
            reputation_score=reputation.get("reputationScore", 0),
            badges=_badges(reputation),
        ),
        ban_status=BanStatusView(
            is_banned=bool(ban.get("isBanned", False)),
            banned_at=ban.get("bannedAt"),
            ban_start_date=ban.get("banStartDate"),
            ban_end_date=ban.get("banEndDate"),
            reason_for_ban=ban.get("reasonForBan", "") or "",
            is_ban_indefinite=bool(ban.get("isBanIndefinite", False)),
        ),
    )