# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PageErrorPolicy(str, Enum):
    """
    What the paginated fetcher does when a single page request fails.

    ``STOP`` logs the failure and returns the items collected so far.
    ``PROPAGATE`` raises the page failure to the caller.
    """

    STOP = "stop"
    PROPAGATE = "propagate"


_TRUTHY = ("1", "true", "yes", "on")


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be an integer, got {value!r}.")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be a number, got {value!r}.")


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    return value in _TRUTHY


@dataclass(frozen=True)
class ProxyConfig:
    """
    Configuration settings for the proxy and its upstream client.

    :param base_url: Bynder portal URL, for example ``"https://portal.getbynder.com"``.
    :type base_url: str
    :param domain: Portal domain used to build export artifact names.
    :type domain: str
    :param client_id: OAuth2 client id for the client-credentials grant.
    :type client_id: str or None
    :param client_secret: OAuth2 client secret for the client-credentials grant.
    :type client_secret: str or None
    :param scope: OAuth2 scopes requested for the access token.
    :type scope: str
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param page_size: Largest page the upstream listing accepts (default: 100).
    :type page_size: int
    :param list_max_limit: Cap applied to caller-supplied list limits (default: 1000).
    :type list_max_limit: int
    :param export_default_limit: Item count for media exports when the caller gives none.
    :type export_default_limit: int
    :param metaproperty_sample_limit: Media items sampled when deriving metaproperties.
    :type metaproperty_sample_limit: int
    :param output_dir: Directory where export artifacts are written.
    :type output_dir: str
    :param on_page_error: Behaviour of the paginated fetcher on a failed page.
    :type on_page_error: ~bynder_proxy.core.config.PageErrorPolicy
    :param use_mock_data: Serve canned data from the in-memory upstream instead of Bynder.
    :type use_mock_data: bool
    :param production: Hide stack traces in error envelopes.
    :type production: bool
    :param log_level: Root log level for the service entry point.
    :type log_level: str
    """

    base_url: str = "https://portal.getbynder.com"
    domain: str = "default"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    scope: str = "offline asset:read meta.assetbank:read"

    http_timeout: Optional[float] = None
    page_size: int = 100
    list_max_limit: int = 1000
    export_default_limit: int = 1000
    metaproperty_sample_limit: int = 100

    output_dir: str = "output"
    on_page_error: PageErrorPolicy = PageErrorPolicy.STOP
    use_mock_data: bool = False
    production: bool = False

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @classmethod
    def from_env(cls) -> "ProxyConfig":
        """
        Create a configuration instance from environment variables.

        Unset variables fall back to the dataclass defaults. Loading a ``.env``
        file is left to the service entry point.

        :return: Configuration instance.
        :rtype: ~bynder_proxy.core.config.ProxyConfig
        :raises ValueError: If a numeric variable or ``ON_PAGE_ERROR`` cannot be parsed.
        """
        app_env = (_env_str("APP_ENV") or _env_str("NODE_ENV") or "").lower()
        policy = (_env_str("ON_PAGE_ERROR", PageErrorPolicy.STOP.value) or "").lower()
        try:
            on_page_error = PageErrorPolicy(policy)
        except ValueError:
            raise ValueError(f"ON_PAGE_ERROR must be 'stop' or 'propagate', got {policy!r}.")

        return cls(
            base_url=_env_str("BYNDER_BASE_URL", cls.base_url),
            domain=_env_str("BYNDER_DOMAIN", cls.domain),
            client_id=_env_str("BYNDER_CLIENT_ID"),
            client_secret=_env_str("BYNDER_CLIENT_SECRET"),
            scope=_env_str("BYNDER_SCOPE", cls.scope),
            http_timeout=_env_float("BYNDER_HTTP_TIMEOUT"),
            page_size=_env_int("BYNDER_PAGE_SIZE", cls.page_size),
            list_max_limit=_env_int("LIST_MAX_LIMIT", cls.list_max_limit),
            export_default_limit=_env_int("EXPORT_DEFAULT_LIMIT", cls.export_default_limit),
            metaproperty_sample_limit=_env_int("METAPROPERTY_SAMPLE_LIMIT", cls.metaproperty_sample_limit),
            output_dir=_env_str("EXPORT_OUTPUT_DIR", cls.output_dir),
            on_page_error=on_page_error,
            use_mock_data=_env_bool("USE_MOCK_DATA"),
            production=app_env == "production",
            log_level=_env_str("LOG_LEVEL", cls.log_level),
            host=_env_str("HOST", cls.host),
            port=_env_int("PORT", cls.port),
        )
