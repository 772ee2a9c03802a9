"""Batching and pagination helpers for the Spotify playlist endpoints.

Spotify caps the number of items per playlist request; writes are split
into batches and reads are walked page by page.
"""

from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

BATCH_SIZE = 50
PAGE_SIZE = 50


def iter_batches(items: Sequence[T], size: int = BATCH_SIZE) -> Iterator[list[T]]:
    """Yield consecutive slices of ``items`` holding at most ``size`` elements.

    Args:
        items: Sequence to split
        size: Maximum batch length

    Raises:
        ValueError: If size is smaller than 1
    """
    if size < 1:
        raise ValueError("batch size must be at least 1")

    offset = 0
    while offset < len(items):
        yield list(items[offset : offset + size])
        offset += size


def paginate(
    fetch_page: Callable[[int, int], dict[str, Any]],
    page_size: int = PAGE_SIZE,
) -> Iterator[Any]:
    """Yield every item of a paginated Spotify listing.

    ``fetch_page(offset, limit)`` must return a Spotify paging object
    (``items``, ``total`` and ``next``). Walking stops when the service
    reports no next page, a page comes back empty, or ``total`` is reached.

    Args:
        fetch_page: Callable issuing one page request
        page_size: Items requested per page
    """
    if page_size < 1:
        raise ValueError("page size must be at least 1")

    offset = 0
    while True:
        page = fetch_page(offset, page_size)
        items = page.get("items") or []
        yield from items

        offset += len(items)
        total = page.get("total")
        if not items or not page.get("next"):
            break
        if total is not None and offset >= total:
            break
