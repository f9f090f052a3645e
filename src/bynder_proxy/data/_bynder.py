# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Low-level Bynder Web API client: paged media listing, lookups and metaproperties."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..core._auth import _AuthManager
from ..core._error_codes import (
    HTTP_404,
    UPSTREAM_INVALID_RESPONSE,
    UPSTREAM_NETWORK_ERROR,
    http_subcode,
)
from ..core._http import _HttpClient
from ..core.config import ProxyConfig
from ..core.errors import UpstreamRequestError

logger = logging.getLogger(__name__)

_BODY_EXCERPT_LIMIT = 512


class _BynderClient:
    """
    Bynder Web API client.

    Every public-facing capability of the proxy is backed by one of the
    underscore methods below. Each call is a single HTTP request; paging
    across calls is the caller's concern.

    :param config: Proxy configuration (base URL, credentials, timeout).
    :param session: Optional requests.Session for connection pooling.
    """

    def __init__(self, config: ProxyConfig, session: Optional[requests.Session] = None) -> None:
        self.base_url = (config.base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("base_url is required.")
        self.api = f"{self.base_url}/api"
        self.config = config
        self._http = _HttpClient(timeout=config.http_timeout, session=session)
        self.auth = _AuthManager(
            self.base_url,
            config.client_id,
            config.client_secret,
            config.scope,
            self._http,
        )

    def _headers(self) -> Dict[str, str]:
        token = self.auth._acquire_token().access_token
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        headers = self._headers()
        headers.update(kwargs.pop("headers", None) or {})
        try:
            r = self._http._request(method, url, headers=headers, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise UpstreamRequestError(
                f"Bynder request failed: {exc}",
                502,
                subcode=UPSTREAM_NETWORK_ERROR,
                url=url,
            ) from exc
        if r.status_code >= 400:
            body = getattr(r, "text", "") or ""
            message = _error_message(r) or f"Bynder API request failed with status {r.status_code}"
            raise UpstreamRequestError(
                message,
                r.status_code,
                subcode=http_subcode(r.status_code),
                url=url,
                body_excerpt=body[:_BODY_EXCERPT_LIMIT] or None,
            )
        return r

    def _json(self, r: requests.Response, url: str) -> Any:
        if not getattr(r, "text", ""):
            return None
        try:
            return r.json()
        except ValueError as exc:
            raise UpstreamRequestError(
                "Bynder returned a response that is not JSON",
                502,
                subcode=UPSTREAM_INVALID_RESPONSE,
                url=url,
                body_excerpt=r.text[:_BODY_EXCERPT_LIMIT],
            ) from exc

    # ----------------------------- Media ---------------------------------
    def _list_media(
        self,
        page: int,
        size: int,
        total: bool = False,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch one page of media.

        Parameters
        ----------
        page : int
            1-based page number.
        size : int
            Page size (sent as ``limit``, the Bynder parameter name).
        total : bool
            Ask the server to include a total count in the response.
        filters : Mapping | None
            Extra query parameters forwarded verbatim.

        Returns
        -------
        list[dict]
            The media items of this page; empty when the listing is exhausted.
        """
        params: Dict[str, Any] = dict(filters or {})
        params.update({"page": page, "limit": size, "total": 1 if total else 0})
        url = f"{self.api}/v4/media/"
        r = self._request("get", url, params=_encode_params(params))
        body = self._json(r, url)
        # With total=1 the listing is wrapped: {"total": {"count": n}, "media": [...]}
        if isinstance(body, dict):
            total_info = body.get("total")
            if isinstance(total_info, dict) and "count" in total_info:
                logger.debug("Bynder reports %s media items in total", total_info["count"])
            body = body.get("media", [])
        if not isinstance(body, list):
            return []
        return [item for item in body if isinstance(item, dict)]

    def _get_media(self, media_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve one media item; ``None`` when Bynder answers 404."""
        url = f"{self.api}/v4/media/{media_id}/"
        try:
            r = self._request("get", url)
        except UpstreamRequestError as exc:
            if exc.subcode == HTTP_404:
                return None
            raise
        body = self._json(r, url)
        return body if isinstance(body, dict) and body else None

    # ----------------------------- Metaproperties ------------------------
    def _list_metaproperties(self, options: int = 1, count: int = 1) -> Dict[str, Dict[str, Any]]:
        """Fetch all metaproperties keyed by name, optionally with options and usage counts."""
        url = f"{self.api}/v4/metaproperties/"
        r = self._request("get", url, params={"options": options, "count": count})
        body = self._json(r, url)
        if isinstance(body, list):
            # Some portals answer with a list; key it the same way as the dict form.
            return {str(mp.get("name") or mp.get("id")): mp for mp in body if isinstance(mp, dict)}
        return body if isinstance(body, dict) else {}

    def _list_content_access_metaproperties(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        url = f"{self.api}/content_access/metaproperties"
        r = self._request("get", url, params=_encode_params(dict(params or {})))
        return self._json(r, url)

    def _get_content_access_metaproperty(self, metaproperty_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        url = f"{self.api}/content_access/metaproperties/{metaproperty_id}"
        try:
            r = self._request("get", url, params=_encode_params(dict(params or {})))
        except UpstreamRequestError as exc:
            if exc.subcode == HTTP_404:
                return None
            raise
        return self._json(r, url)

    def close(self) -> None:
        self._http.close()


def _encode_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Render booleans the way Bynder expects them in a query string."""
    return {k: ("true" if v is True else "false" if v is False else v) for k, v in params.items()}


def _error_message(r: requests.Response) -> Optional[str]:
    try:
        body = r.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error_description") or body.get("error")
        if isinstance(msg, str) and msg:
            return msg
    return None
