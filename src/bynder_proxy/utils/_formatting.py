# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Value formatting helpers shared by the flattener and the export store."""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")

_PROTOCOL_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_TLD_RE = re.compile(r"\.(com|org|net|io|biz|co|dev)$", re.IGNORECASE)
# Hosted portals live under <portal>.getbynder.com; that label is dropped like a TLD.
_HOST_SUFFIX_RE = re.compile(r"\.(getbynder|bynder)$", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[._\s]+")
_INVALID_RE = re.compile(r"[^a-z0-9-]", re.IGNORECASE)
_DASH_RUN_RE = re.compile(r"-{2,}")


def format_file_size(value: Any) -> str:
    """
    Render a byte count as a human-readable size.

    ``0`` gives ``"0 Bytes"``, ``1024`` gives ``"1 KB"`` and ``1536`` gives
    ``"1.5 KB"``. Values are rounded to two decimals with trailing zeros
    dropped; the largest unit is TB. Anything that is not a non-negative
    number (numeric strings are accepted) gives ``""``.
    """
    if value is None or isinstance(value, bool):
        return ""
    try:
        size = float(value)
    except (TypeError, ValueError):
        return ""
    if math.isnan(size) or math.isinf(size) or size < 0:
        return ""
    if size == 0:
        return "0 Bytes"

    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


def slugify_domain(domain_url: Optional[str]) -> str:
    """
    Turn a portal URL or domain into a filename-safe slug.

    ``"https://My-Portal.getbynder.com/"`` becomes ``"my-portal"``:

    - protocol prefix and anything from the first ``/``, ``?`` or ``#`` are removed
    - a trailing ``.com``, ``.org``, ``.net``, ``.io``, ``.biz``, ``.co`` or ``.dev`` is removed,
      then a trailing ``.getbynder`` or ``.bynder`` host label
    - runs of ``.``, ``_`` and whitespace become ``-``
    - characters outside ``[a-z0-9-]`` are dropped and the result lower-cased
    - repeated dashes collapse and leading/trailing dashes are trimmed

    Empty input, or input that reduces to nothing, gives ``"unknown"``.
    """
    if not domain_url:
        return "unknown"
    domain = _PROTOCOL_RE.sub("", str(domain_url).strip())
    domain = re.split(r"[/?#]", domain, maxsplit=1)[0]
    domain = _TLD_RE.sub("", domain)
    domain = _HOST_SUFFIX_RE.sub("", domain)
    domain = _SEPARATOR_RE.sub("-", domain)
    domain = _INVALID_RE.sub("", domain).lower()
    domain = _DASH_RUN_RE.sub("-", domain).strip("-")
    return domain or "unknown"


__all__ = ["format_file_size", "slugify_domain"]
