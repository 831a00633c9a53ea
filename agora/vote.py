"""Votes cast by users on posts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class VoteType(str, Enum):
    """Direction of a vote."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"

    def __str__(self) -> str:
        return self.value


def _type_name(vote_type: Union[VoteType, str]) -> str:
    return vote_type.value if isinstance(vote_type, VoteType) else str(vote_type)


@dataclass
class Vote:
    """A vote by one user on one post."""

    user_id: str
    post_id: str
    type: Union[VoteType, str]


@dataclass
class VoteReadModel:
    """Vote as presented to readers."""

    user_id: str
    post_id: str
    type: Union[VoteType, str]

    def to_dict(self) -> Dict[str, str]:
        """Return the vote keyed by its serialised field names."""
        return {
            "user_id": self.user_id,
            "post_id": self.post_id,
            "type": _type_name(self.type),
        }