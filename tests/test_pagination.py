"""Pagination envelope shared by list endpoints."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.views import PaginatedResponse, PaginationParams


def test_envelope_for_middle_page():
    page = PaginatedResponse[int].build(
        list(range(10)),
        25,
        PaginationParams(page=2, limit=10),
    )

    assert page.total_pages == 3
    assert page.has_next is True
    assert page.has_prev is True


def test_envelope_serialises_camel_case_keys():
    page = PaginatedResponse[int].build([1], 1, PaginationParams())

    dumped = page.model_dump(by_alias=True)

    assert set(dumped) == {"data", "total", "page", "limit", "totalPages", "hasNext", "hasPrev"}


def test_empty_collection_has_no_pages():
    page = PaginatedResponse[int].build([], 0, PaginationParams())

    assert page.total_pages == 0
    assert page.has_next is False
    assert page.has_prev is False


def test_offset_follows_page_and_limit():
    assert PaginationParams(page=3, limit=20).offset == 40


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
def test_out_of_range_parameters_are_rejected(params):
    with pytest.raises(ValidationError):
        PaginationParams(**params)
