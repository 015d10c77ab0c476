import pytest

from equipment_tracker.core.pagination import MAX_OFFSET, describe, normalize, offset


def test_normalize_clamps_both_ends():
    assert normalize(0, 500).model_dump() == {"page": 1, "limit": 100}
    assert normalize(-5, 0).model_dump() == {"page": 1, "limit": 1}


def test_normalize_falls_back_on_missing_or_garbage():
    assert normalize(None, None).model_dump() == {"page": 1, "limit": 10}
    assert normalize("abc", "xyz").model_dump() == {"page": 1, "limit": 10}
    assert normalize("3", "25").model_dump() == {"page": 3, "limit": 25}
    assert normalize("2abc", " 7 ").model_dump() == {"page": 2, "limit": 7}


@pytest.mark.parametrize("raw", ["\u00b2", "1\u00b2", "-\u00b2", "9" * 5000, "12" + "9" * 5000])
def test_normalize_survives_hostile_strings(raw):
    req = normalize(raw, raw)
    assert req.page >= 1
    assert 1 <= req.limit <= 100


def test_normalize_keeps_leading_ascii_digits_only():
    assert normalize("1\u00b2", "5\u00b2").model_dump() == {"page": 1, "limit": 5}


def test_normalize_caps_page_so_offset_fits_in_64_bits():
    req = normalize("99999999999999999999", "10")
    assert req.limit == 10
    assert offset(req.page, req.limit) <= MAX_OFFSET
    assert normalize(req.page, req.limit) == req


def test_normalize_respects_custom_bounds():
    assert normalize(1, None, max_limit=50, default_limit=20).limit == 20
    assert normalize(1, 80, max_limit=50).limit == 50


@pytest.mark.parametrize(
    "raw_page, raw_limit",
    [(None, None), (0, 500), (-5, 0), ("7", "33"), ("x", "-1"), (4, 100), (2.9, 3.2), (10**30, 7)],
)
def test_normalize_is_a_fixed_point(raw_page, raw_limit):
    once = normalize(raw_page, raw_limit)
    assert normalize(once.page, once.limit) == once


def test_offset():
    assert offset(1, 20) == 0
    assert offset(3, 20) == 40


def test_describe():
    meta = describe(total=95, page=1, limit=20)
    assert (meta.total, meta.page, meta.limit, meta.total_pages) == (95, 1, 20, 5)
    assert describe(total=0, page=1, limit=20).total_pages == 0
    assert describe(total=20, page=1, limit=20).total_pages == 1


def test_describe_serializes_camel_case_page_count():
    assert describe(total=21, page=2, limit=10).model_dump(by_alias=True)["totalPages"] == 3
