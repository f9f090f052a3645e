# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exception hierarchy for the proxy.

Every error carries a stable ``code`` plus an optional ``subcode`` and
``status_code`` and can be rendered with :meth:`ProxyError.to_dict`.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional


class ProxyError(Exception):
    """Base structured error for the proxy."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class UpstreamUnavailableError(ProxyError):
    """The upstream client is not configured, not authenticated or unreachable."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            code="upstream_unavailable",
            subcode=subcode,
            status_code=500,
            details=details,
            source="server",
        )


class UpstreamRequestError(ProxyError):
    """A single upstream call (one page or one lookup) failed."""

    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        subcode: Optional[str] = None,
        url: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if url is not None:
            d["url"] = url
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        super().__init__(
            message,
            code="upstream_request_failed",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
        )


class NotFoundError(ProxyError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="not_found", subcode=subcode, status_code=404, details=details)


class InvalidParameterError(ProxyError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="invalid_parameter", subcode=subcode, status_code=400, details=details)


__all__ = [
    "ProxyError",
    "UpstreamUnavailableError",
    "UpstreamRequestError",
    "NotFoundError",
    "InvalidParameterError",
]
