# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the proxy.

This module contains the foundational components including authentication,
configuration, HTTP client, and error handling.
"""

from .config import PageErrorPolicy, ProxyConfig
from .errors import (
    ProxyError,
    UpstreamUnavailableError,
    UpstreamRequestError,
    NotFoundError,
    InvalidParameterError,
)

__all__ = [
    "PageErrorPolicy",
    "ProxyConfig",
    "ProxyError",
    "UpstreamUnavailableError",
    "UpstreamRequestError",
    "NotFoundError",
    "InvalidParameterError",
]
