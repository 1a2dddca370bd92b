from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: List[T]
    total_pages: int


def total_pages(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[T], page: int, page_size: int) -> PageResult[T]:
    """
    Slice the 1-based `page` out of `items`.

    A page past the end returns an empty window; callers decide whether to
    clamp (see `clamp_page`).
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    start = (page - 1) * page_size
    return PageResult(
        items=list(items[start:start + page_size]),
        total_pages=total_pages(len(items), page_size),
    )


def clamp_page(page: int, n_pages: int) -> int:
    return min(max(1, page), max(1, n_pages))
