import pytest

from app.services.pagination import PAGE_SIZE, build_pagination, offset_for, parse_page


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 1), ("", 1), ("0", 1), ("-3", 1), ("abc", 1), ("2.5", 1), (True, 1), ("3", 3), (" 2 ", 2), (4, 4)],
)
def test_parse_page_is_lenient(raw, expected):
    assert parse_page(raw) == expected


def test_offset_for():
    assert offset_for(1) == 0
    assert offset_for(3) == 2 * PAGE_SIZE


@pytest.mark.parametrize("total, pages", [(0, 1), (1, 1), (10, 1), (11, 2), (25, 3)])
def test_total_pages(total, pages):
    p = build_pagination(1, total)
    assert p.page_size == PAGE_SIZE == 10
    assert p.total == total
    assert p.total_pages == pages
