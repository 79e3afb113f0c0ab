from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

PAGE_SIZE = 10


@dataclass(frozen=True)
class Pagination:
    page: int
    page_size: int
    total: int
    total_pages: int


def parse_page(value: Any) -> int:
    """Lenient page parsing: anything non-numeric or below 1 becomes 1."""

    if value is None or isinstance(value, bool):
        return 1
    try:
        page = int(str(value).strip())
    except ValueError:
        return 1
    return max(page, 1)


def offset_for(page: int, page_size: int = PAGE_SIZE) -> int:
    return (page - 1) * page_size


def build_pagination(page: int, total: int, page_size: int = PAGE_SIZE) -> Pagination:
    total_pages = max(1, math.ceil(total / page_size))
    return Pagination(page=page, page_size=page_size, total=total, total_pages=total_pages)
