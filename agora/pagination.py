"""Cursor helpers and result shapes for paginated listings."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class PageInfo:
    """Relay-style page information."""

    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: str = ""
    end_cursor: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
            "startCursor": self.start_cursor,
            "endCursor": self.end_cursor,
        }


@dataclass
class PaginationInfo:
    """Whether more results follow the current page."""

    has_next: bool = False


@dataclass
class PaginatedResult(Generic[T]):
    """A page of data along with its pagination info."""

    data: T
    pagination_info: Optional[PaginationInfo] = None


@dataclass
class Edge(Generic[T]):
    """One node of a connection and the cursor that points at it."""

    cursor: str
    node: Optional[T] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"cursor": self.cursor, "Node": self.node}


@dataclass
class Connection(Generic[T]):
    """A list of edges with page information."""

    edges: List[Edge[T]] = field(default_factory=list)
    page_info: Optional[PageInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edges": [edge.to_dict() for edge in self.edges],
            "pageInfo": None if self.page_info is None else self.page_info.to_dict(),
        }


def encode_cursor(value: str) -> str:
    """Encode ``value`` as an opaque standard-base64 cursor."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> str:
    """Decode a cursor made by :func:`encode_cursor`; raise ``ValueError`` if malformed."""
    return base64.b64decode(cursor, validate=True).decode("utf-8")