"""Tests for response envelopes."""
from fitnlitt.utils.response import paginated_response


def test_paginated_response_last_page():
    result = paginated_response(["a"] * 13, total=37, page=2, limit=24)
    assert result["meta"] == {
        "page": 2,
        "limit": 24,
        "total": 37,
        "totalPages": 2,
        "hasMore": False,
    }
    assert "facets" not in result


def test_paginated_response_has_more():
    result = paginated_response([], total=37, page=1, limit=24, facets={"sizes": []})
    assert result["meta"]["hasMore"] is True
    assert result["facets"] == {"sizes": []}


def test_paginated_response_empty():
    result = paginated_response([], total=0, page=1, limit=24, facets={})
    assert result["items"] == []
    assert result["meta"]["totalPages"] == 0
    assert result["meta"]["hasMore"] is False
    assert result["facets"] == {}
