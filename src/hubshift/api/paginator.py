"""Pagination over HAL collection responses."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 100


@dataclass
class Page(Generic[T]):
    """One page of a collection.

    Attributes:
        items: Entities on this page
        number: Zero-based page number
        total_pages: Total pages reported by the server
    """

    items: list[T] = field(default_factory=list)
    number: int = 0
    total_pages: int = 1

    @classmethod
    def from_hal(
        cls, data: dict[str, Any], embedded_key: str, parse: Callable[[Any], T]
    ) -> Page[T]:
        embedded = data.get("_embedded") or {}
        page_info = data.get("page") or {}
        return cls(
            items=[parse(raw) for raw in embedded.get(embedded_key, [])],
            number=int(page_info.get("number", 0)),
            total_pages=int(page_info.get("totalPages", 1)),
        )


async def paginate(fetch_page: Callable[[int], Awaitable[Page[T]]]) -> list[T]:
    """Fetch every page in order and concatenate the items.

    Args:
        fetch_page: Coroutine function returning the page with a given number

    Returns:
        All items across pages, in server order
    """
    items: list[T] = []
    number = 0
    while True:
        page = await fetch_page(number)
        items.extend(page.items)
        number = page.number + 1
        if number >= page.total_pages or not page.items:
            return items
