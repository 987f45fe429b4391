"""Iterate continuation-token paginated listings as one lazy sequence."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from fabriclink._client.context import CancellationToken
    from fabriclink.models import Page

_T = TypeVar("_T")


def iter_pages(
    fetch_page: Callable[[str | None], Page[_T]],
    *,
    cancel: CancellationToken | None = None,
) -> Iterator[Page[_T]]:
    """Yield pages from *fetch_page* until one comes without a token.

    *fetch_page* is called with ``None`` first, then with each page's
    continuation token, passed back unmodified.  The next page is requested
    only after the current one has been consumed.  A cancelled *cancel*
    token stops the iteration before the next request.
    """
    token: str | None = None
    page_no = 0
    while True:
        if cancel is not None and cancel.cancelled:
            logger.debug(f"Pagination cancelled after {page_no} page(s)")
            return
        page = fetch_page(token)
        page_no += 1
        logger.trace(
            f"Page {page_no}: {len(page.items)} item(s), "
            f"more={page.continuation_token is not None}"
        )
        yield page
        if page.continuation_token is None:
            return
        token = page.continuation_token


def list_all(
    fetch_page: Callable[[str | None], Page[_T]],
    *,
    cancel: CancellationToken | None = None,
) -> Iterator[_T]:
    """Yield every item of a paginated listing, page by page, in server order.

    Errors raised by *fetch_page* (e.g. a rejected token) abort the
    sequence; items already yielded are not retracted.
    """
    for page in iter_pages(fetch_page, cancel=cancel):
        yield from page.items
