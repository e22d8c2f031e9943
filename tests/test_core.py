import string

import pytest

from logmonitor.filters import Page
from logmonitor.memory.core import (
    ascending,
    matches_search,
    new_id,
    normalize_offset,
    paged,
    paginate,
)
from logmonitor.models import LogType


def test_new_id_has_prefix_and_hex_suffix():
    value = new_id("log")
    prefix, _, suffix = value.partition("_")
    assert prefix == "log"
    assert len(suffix) == 16
    assert set(suffix) <= set(string.hexdigits.lower())


def test_new_id_is_unique():
    ids = {new_id("entry") for _ in range(200)}
    assert len(ids) == 200


def test_paginate_slices_window():
    items = list(range(10))
    assert paginate(items, 2, 3) == items[2:5]


def test_paginate_non_positive_limit_returns_rest():
    items = list(range(6))
    assert paginate(items, 2, 0) == items[2:]
    assert paginate(items, 2, -5) == items[2:]


def test_paginate_limit_beyond_end_is_clipped():
    items = list(range(4))
    assert paginate(items, 1, 100) == items[1:]


def test_paginate_negative_offset_starts_at_zero():
    items = ["a", "b", "c"]
    assert paginate(items, -3, 2) == items[:2]


def test_paginate_offset_past_end_is_empty():
    assert paginate([1, 2], 2, 1) == []
    assert paginate([], 0, 0) == []


def test_paginate_returns_detached_list():
    items = [1, 2, 3]
    result = paginate(items, 0, 0)
    result.append(4)
    assert items == [1, 2, 3]


def test_paged_reports_total_and_normalized_offset():
    items = list(range(7))
    page = paged(items, -1, 3)
    assert page == Page(items=items[:3], total=len(items), offset=0, limit=3)


def test_paged_keeps_given_limit_even_when_zero():
    items = ["x", "y"]
    page = paged(items, 1, 0)
    assert page.items == ["y"]
    assert page.limit == 0
    assert page.total == len(items)


@pytest.mark.parametrize("offset", [-10, -1, 0])
def test_normalize_offset_clamps_negative(offset):
    assert normalize_offset(offset) == 0


def test_normalize_offset_keeps_positive():
    assert normalize_offset(7) == 7


def test_matches_search_blank_query_matches_everything():
    assert matches_search("   ", "anything")
    assert matches_search("")


def test_matches_search_is_case_insensitive_and_trims():
    assert matches_search("  AUTH ", "/var/log/auth.log")
    assert not matches_search("kern", "/var/log/auth.log", "syslog")


def test_matches_search_accepts_enums_and_none():
    assert matches_search("sys", None, LogType.SYSLOG)
    assert not matches_search("sys", None)


@pytest.mark.parametrize("order", ["asc", "ASC", " Asc "])
def test_ascending_true(order):
    assert ascending(order)


@pytest.mark.parametrize("order", ["", "desc", "ascending"])
def test_ascending_false(order):
    assert not ascending(order)