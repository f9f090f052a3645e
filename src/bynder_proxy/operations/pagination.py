# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Accumulate records from a paged upstream listing.

:func:`fetch_all` walks consecutive pages of a listing callable until the
requested number of records is collected or the listing runs dry. Pages are
requested strictly one after another.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..core.config import PageErrorPolicy
from ..core.errors import UpstreamRequestError

logger = logging.getLogger(__name__)

#: Query keys owned by the pagination loop; caller filters with these names are dropped.
RESERVED_FILTER_KEYS = frozenset({"page", "limit", "size", "total"})

#: ``list_page(page, size, total=..., filters=...) -> list[dict]``
ListPage = Callable[..., List[Dict[str, Any]]]


def clean_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Drop unspecified and reserved entries from a filter mapping.

    A value of ``None`` or ``""`` means "not specified". Reserved keys
    (``page``, ``limit``, ``size``, ``total``) are overridden by the
    pagination parameters, so they are removed here.

    :param filters: Caller-supplied filters; not modified.
    :return: A new dict holding the filters that will be forwarded upstream.
    """
    cleaned: Dict[str, Any] = {}
    for key, value in (filters or {}).items():
        if value is None or value == "":
            logger.debug("Removing empty parameter: %s", key)
            continue
        if key in RESERVED_FILTER_KEYS:
            logger.debug("Ignoring reserved filter key %r; pagination controls it", key)
            continue
        cleaned[key] = value
    return cleaned


def fetch_all(
    list_page: ListPage,
    limit: int,
    filters: Optional[Mapping[str, Any]] = None,
    *,
    page_size: int = 100,
    offset: int = 0,
    on_page_error: PageErrorPolicy = PageErrorPolicy.STOP,
) -> List[Dict[str, Any]]:
    """
    Collect up to ``limit`` records from a paged listing.

    Every page is requested with the same size, ``min(page_size, limit)``, so
    page numbers map to stable upstream offsets. Only the first request asks
    the upstream for a total count. A page that is empty, or shorter than the
    size requested, ends the walk. The result never holds more than ``limit``
    records even if the last page overshoots.

    ``offset`` is counted in records: the walk starts on the upstream page
    holding record ``offset`` and drops the records before it on that page.

    :param list_page: Callable fetching one page, invoked as
        ``list_page(page, size, total=bool, filters=dict)``.
    :param limit: Maximum number of records to return. ``limit <= 0`` returns
        an empty list without calling the upstream.
    :param filters: Filters forwarded with every page request, see :func:`clean_filters`.
    :param page_size: Largest page the upstream accepts.
    :param offset: Number of leading records to skip.
    :param on_page_error: ``STOP`` returns what was collected before a failing
        page; ``PROPAGATE`` re-raises the page failure.
    :return: Records in upstream order.
    :raises ~bynder_proxy.core.errors.UpstreamRequestError: A page failed and
        ``on_page_error`` is ``PROPAGATE``.
    :raises ~bynder_proxy.core.errors.UpstreamUnavailableError: Always propagated.
    """
    if limit <= 0:
        return []
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    query = clean_filters(filters)
    size = min(page_size, limit)
    offset = max(offset, 0)
    skip = offset % size
    wanted = skip + limit
    collected: List[Dict[str, Any]] = []
    page = offset // size + 1
    first_page = page

    while len(collected) < wanted:
        logger.debug("Fetching page %d with limit %d", page, size)
        try:
            items = list_page(page, size, total=page == first_page, filters=dict(query))
        except UpstreamRequestError as exc:
            if on_page_error is PageErrorPolicy.PROPAGATE:
                raise
            logger.warning(
                "Error fetching page %d from Bynder, returning %d items collected so far: %s",
                page,
                len(collected),
                exc,
            )
            break

        if not items:
            logger.debug("No more items found or empty response")
            break
        collected.extend(items)
        if len(items) < size:
            break
        page += 1

    result = collected[skip:wanted]
    logger.info("Fetched a total of %d items from Bynder", len(result))
    return result


__all__ = ["RESERVED_FILTER_KEYS", "clean_filters", "fetch_all"]
