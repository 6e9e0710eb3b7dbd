"""
Marker-following pagination loop shared by every RDS collector.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (items, next_marker)
Page = Tuple[Sequence[T], Optional[str]]


def paginate(fetch_page: Callable[[Optional[str]], Optional[Page]]) -> List[T]:
    """
    Follow a paged data source until it runs out of pages.

    The first call receives ``None``; every later call receives the marker
    returned by the previous page. The marker is passed back untouched.

    Args:
        fetch_page: Callable returning ``(items, next_marker)`` or ``None``

    Returns:
        All items in page order

    Raises:
        Whatever ``fetch_page`` raises. Items gathered so far are discarded.
    """
    items: List[T] = []
    marker: Optional[str] = None
    pages = 0

    while True:
        page = fetch_page(marker)
        if page is None:
            break

        page_items, marker = page
        items.extend(page_items)
        pages += 1
        logger.debug(f"Fetched page {pages} with {len(page_items)} item(s)")

        if not marker:
            break

    return items
