# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .core.config import ProxyConfig
from .data._bynder import _BynderClient
from .data._mock import _MockBynderClient
from .export import ExportStore
from .operations.media import MediaOperations
from .operations.metaproperties import MetapropertyOperations

logger = logging.getLogger(__name__)


class BynderProxyClient:
    """
    High-level client for the Bynder asset bank.

    This client exposes the operations the proxy serves over HTTP. Upstream
    calls are delegated to an internal
    :class:`~bynder_proxy.data._bynder._BynderClient`, or to the in-memory
    :class:`~bynder_proxy.data._mock._MockBynderClient` when
    ``config.use_mock_data`` is set. Any object with the same underscore
    methods can be injected through ``upstream``.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager enables connection pooling and
        releases it on exit::

            with BynderProxyClient(config) as client:
                items = client.media.list(limit=50)

    Operations are organized under namespaces:

    - ``client.media``: media listing, lookup and export
    - ``client.metaproperties``: metaproperty listing and export

    :param config: Proxy configuration. Defaults to :meth:`ProxyConfig.from_env`.
    :type config: ~bynder_proxy.core.config.ProxyConfig or None
    :param upstream: Upstream implementation to use instead of the one selected from ``config``.
    :param store: Artifact store. Defaults to an :class:`~bynder_proxy.export.ExportStore`
        on ``config.output_dir``.
    :type store: ~bynder_proxy.export.ExportStore or None

    .. note::
        The upstream client is created lazily on first use, so constructing a
        client performs no network call.
    """

    def __init__(
        self,
        config: Optional[ProxyConfig] = None,
        *,
        upstream: Any = None,
        store: Optional[ExportStore] = None,
    ) -> None:
        self._config = config or ProxyConfig.from_env()
        self._upstream = upstream
        self._owns_upstream = upstream is None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False
        self.store = store or ExportStore(self._config.output_dir)

        self.media = MediaOperations(self)
        self.metaproperties = MetapropertyOperations(self)

    @property
    def config(self) -> ProxyConfig:
        return self._config

    def __enter__(self) -> "BynderProxyClient":
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Release the upstream client and the pooled session.

        Safe to call multiple times. Injected upstreams are left untouched.
        """
        if self._upstream is not None and self._owns_upstream:
            self._upstream.close()
            self._upstream = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_upstream(self) -> Any:
        """
        Get or create the upstream client.

        :return: The injected upstream, the mock upstream, or a lazily-built
            :class:`~bynder_proxy.data._bynder._BynderClient`.
        """
        if self._upstream is None:
            if self._config.use_mock_data:
                logger.info("Using mock Bynder data")
                self._upstream = _MockBynderClient()
            else:
                self._upstream = _BynderClient(self._config, session=self._session)
        return self._upstream


__all__ = ["BynderProxyClient"]
