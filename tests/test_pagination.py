from datetime import datetime, timezone

import pytest

from agora.pagination import (
    Connection,
    Edge,
    PageInfo,
    PaginatedResult,
    PaginationInfo,
    decode_cursor,
    encode_cursor,
)


def test_encode_decode_round_trip():
    value = datetime.now(timezone.utc).isoformat()
    assert decode_cursor(encode_cursor(value)) == value


def test_encoding_is_standard_base64():
    assert encode_cursor("abc") == "YWJj"
    assert decode_cursor("YWJj") == "abc"


@pytest.mark.parametrize("bad", ["%%%", "YWJ", "a"])
def test_malformed_cursor_raises(bad):
    with pytest.raises(ValueError):
        decode_cursor(bad)


def test_page_info_uses_camel_case_keys():
    info = PageInfo(has_next_page=True, start_cursor="YQ==", end_cursor="Yg==")
    assert info.to_dict() == {
        "hasNextPage": True,
        "hasPreviousPage": False,
        "startCursor": "YQ==",
        "endCursor": "Yg==",
    }


def test_connection_serialises_edges_and_page_info():
    connection = Connection(
        edges=[Edge(cursor=encode_cursor("1"), node={"id": "1"})],
        page_info=PageInfo(end_cursor=encode_cursor("1")),
    )
    data = connection.to_dict()
    assert data["edges"] == [{"cursor": encode_cursor("1"), "Node": {"id": "1"}}]
    assert data["pageInfo"]["endCursor"] == encode_cursor("1")


def test_paginated_result_holds_data():
    result = PaginatedResult(data=["a", "b"], pagination_info=PaginationInfo(has_next=True))
    assert result.data == ["a", "b"]
    assert result.pagination_info.has_next is True