# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Media listing, lookup and export namespace."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING

from ..core._error_codes import VALIDATION_MISSING_PARAMETER
from ..core.errors import InvalidParameterError, NotFoundError
from ..core.results import MediaExportResult
from ..utils.flatten import flatten_records
from .pagination import fetch_all

if TYPE_CHECKING:
    from ..client import BynderProxyClient

logger = logging.getLogger(__name__)

MEDIA_SHEET_NAME = "Bynder Media"


class MediaOperations:
    """
    Media operations.

    Accessed via ``client.media``.

    Example::

        with BynderProxyClient(config) as client:
            items = client.media.list(limit=250, filters={"type": "image"})
            item = client.media.get(items[0]["id"])
            result = client.media.export(limit=1000)
            if result is not None:
                print(result.download_url)
    """

    def __init__(self, client: "BynderProxyClient") -> None:
        self._client = client

    def fetch_all(
        self,
        limit: int,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Collect up to ``limit`` media items across upstream pages.

        :param limit: Maximum number of items; ``<= 0`` returns ``[]`` without an upstream call.
        :param filters: Bynder media filters (``type``, ``orientation``, ``limited``,
            ``orderBy``, ``property_<name>``...). Empty values are ignored.
        :param offset: Number of leading media items to skip.
        :return: Media records as returned by Bynder.
        """
        config = self._client._config
        upstream = self._client._get_upstream()
        logger.debug("Fetching media with parameters: limit=%s offset=%s filters=%s", limit, offset, dict(filters or {}))
        return fetch_all(
            upstream._list_media,
            limit,
            filters,
            page_size=config.page_size,
            offset=offset,
            on_page_error=config.on_page_error,
        )

    def list(
        self,
        limit: int = 100,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        page: int = 1,
    ) -> List[Dict[str, Any]]:
        """
        List one page of media items.

        ``limit`` is capped at the configured maximum (1000 by default) and is
        also the page size: page ``n`` starts at item ``(n - 1) * limit``.
        """
        capped = min(limit, self._client._config.list_max_limit)
        offset = (max(page, 1) - 1) * max(capped, 0)
        items = self.fetch_all(capped, filters, offset=offset)
        logger.info("Retrieved %d media items to return to client", len(items))
        return items

    def get(self, media_id: str) -> Dict[str, Any]:
        """
        Retrieve a single media item.

        :raises ~bynder_proxy.core.errors.InvalidParameterError: If ``media_id`` is empty.
        :raises ~bynder_proxy.core.errors.NotFoundError: If Bynder has no such item.
        """
        if not media_id or not str(media_id).strip():
            raise InvalidParameterError("Media ID is required", subcode=VALIDATION_MISSING_PARAMETER)
        logger.info("Fetching media item with ID: %s", media_id)
        item = self._client._get_upstream()._get_media(str(media_id).strip())
        if not item:
            raise NotFoundError(f"Media item with ID {media_id} not found")
        return item

    def export(
        self,
        limit: Optional[int] = None,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        filename: Optional[str] = None,
    ) -> Optional[MediaExportResult]:
        """
        Export media to a single-sheet spreadsheet.

        :param limit: Maximum number of items (default: ``export_default_limit``).
        :param filters: Bynder media filters.
        :param filename: Artifact name; defaults to ``media-<instance>-<epoch-ms>.xlsx``.
        :return: The artifact reference, or ``None`` when there is nothing to export.
        """
        config = self._client._config
        store = self._client.store
        limit = config.export_default_limit if limit is None else limit
        if filename:
            store.path_for(filename)
        logger.info("Starting media export with parameters: limit=%s filters=%s", limit, dict(filters or {}))

        items = self.fetch_all(limit, filters)
        logger.info("Retrieved %d media items", len(items))
        if not items:
            return None

        table = flatten_records(items)
        name = filename or store.default_filename("media", config.domain)
        path = store.write(name, [(MEDIA_SHEET_NAME, table)])
        return MediaExportResult(
            filename=path.name,
            download_url=store.download_url(path.name),
            path=path,
            total_items=len(items),
        )


__all__ = ["MediaOperations"]
