# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Uniform response envelopes for the HTTP surface.

Success: ``{"success": true, "timestamp", "message"?, "data"?}``.
Failure: ``{"success": false, "error": {"code", "message", "details"?, "stack"?}, "timestamp"}``.
"""

from __future__ import annotations

import datetime as _dt
import math
import traceback
from typing import Any, Dict, Optional, Tuple

from ..core.errors import ProxyError

_MISSING = object()


def _timestamp() -> str:
    now = _dt.datetime.now(_dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_response(data: Any = _MISSING, message: Optional[str] = None, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a success envelope; ``data=None`` is kept as ``null``, an omitted ``data`` is left out."""
    response: Dict[str, Any] = {"success": True, "timestamp": _timestamp()}
    if message:
        response["message"] = message
    if data is not _MISSING:
        response["data"] = data
    if meta:
        response.update(meta)
    return response


def error_response(
    message: str,
    code: str = "INTERNAL_ERROR",
    status_code: int = 500,
    exc: Optional[BaseException] = None,
    *,
    production: bool = False,
) -> Tuple[Dict[str, Any], int]:
    """
    Build an error envelope and the HTTP status to send it with.

    Structured details of a :class:`~bynder_proxy.core.errors.ProxyError` are
    included; the stack trace only outside production.
    """
    error: Dict[str, Any] = {"code": code, "message": message}
    if isinstance(exc, ProxyError) and exc.details:
        error["details"] = exc.details
    if exc is not None and not production:
        error["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return {"success": False, "error": error, "timestamp": _timestamp()}, status_code


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, Any]:
    return {
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if limit else 0,
        }
    }


__all__ = ["error_response", "pagination_meta", "success_response"]
