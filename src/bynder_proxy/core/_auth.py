# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""OAuth2 client-credentials token acquisition for the Bynder API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests

from ._error_codes import UPSTREAM_AUTH_FAILED, UPSTREAM_NOT_CONFIGURED
from ._http import _HttpClient
from .errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)

# Refresh a little before the server-side expiry.
_EXPIRY_MARGIN_SECONDS = 60


@dataclass
class _TokenPair:
    access_token: str
    expires_at: float

    def is_valid(self, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        return bool(self.access_token) and now < self.expires_at


class _AuthManager:
    """
    Client-credentials token helper.

    The token is requested lazily on first use and cached until shortly
    before it expires.

    :param base_url: Bynder portal URL.
    :param client_id: OAuth2 client id.
    :param client_secret: OAuth2 client secret.
    :param scope: Space-separated scopes.
    :param http: HTTP client used for the token request.
    """

    def __init__(
        self,
        base_url: str,
        client_id: Optional[str],
        client_secret: Optional[str],
        scope: str,
        http: _HttpClient,
    ) -> None:
        self._token_url = f"{base_url.rstrip('/')}/v6/authentication/oauth2/token"
        self._client_id = client_id
        self._client_secret = client_secret
        self._scope = scope
        self._http = http
        self._token: Optional[_TokenPair] = None

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def _acquire_token(self) -> _TokenPair:
        """
        Return a valid access token, requesting a new one when needed.

        :raises ~bynder_proxy.core.errors.UpstreamUnavailableError: If credentials are
            missing or the token endpoint rejects them.
        """
        if self._token is not None and self._token.is_valid():
            return self._token
        if not self.is_configured:
            raise UpstreamUnavailableError(
                "Bynder client credentials are not configured",
                subcode=UPSTREAM_NOT_CONFIGURED,
            )

        logger.info("Authenticating with Bynder using client credentials")
        try:
            r = self._http._request(
                "post",
                self._token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "scope": self._scope,
                },
            )
        except requests.exceptions.RequestException as exc:
            raise UpstreamUnavailableError(
                f"Failed to reach Bynder token endpoint: {exc}",
                subcode=UPSTREAM_AUTH_FAILED,
            ) from exc

        if r.status_code >= 400:
            raise UpstreamUnavailableError(
                f"Failed to authenticate with Bynder (status {r.status_code})",
                subcode=UPSTREAM_AUTH_FAILED,
                details={"status_code": r.status_code},
            )
        try:
            body = r.json()
        except ValueError:
            body = {}
        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not access_token:
            raise UpstreamUnavailableError(
                "Bynder token response did not include an access token",
                subcode=UPSTREAM_AUTH_FAILED,
            )
        expires_in = body.get("expires_in") or 3600
        try:
            lifetime = max(0.0, float(expires_in) - _EXPIRY_MARGIN_SECONDS)
        except (TypeError, ValueError):
            lifetime = 3600.0 - _EXPIRY_MARGIN_SECONDS
        self._token = _TokenPair(access_token=access_token, expires_at=time.monotonic() + lifetime)
        logger.info("Successfully authenticated with Bynder")
        return self._token
