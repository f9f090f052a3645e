# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Storage for generated export artifacts.

:class:`ExportStore` owns the output directory. The directory is created by
:meth:`ExportStore.ensure`, which the composition root calls once at start-up.
"""

from __future__ import annotations

import logging
import time
from urllib.parse import quote
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from .core._error_codes import VALIDATION_INVALID_FILENAME
from .core.errors import InvalidParameterError, NotFoundError
from .models.table import Table
from .utils._excel import write_workbook
from .utils._formatting import slugify_domain

logger = logging.getLogger(__name__)

XLSX_EXTENSION = ".xlsx"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DOWNLOAD_ROUTE = "/api/media/download"


class ExportStore:
    """
    Writes spreadsheet artifacts into one directory and serves them back by name.

    Artifact names embed a millisecond timestamp. Caller-supplied names are
    used as given (with ``.xlsx`` appended when missing); writing an existing
    name overwrites it.

    :param output_dir: Directory holding the artifacts.
    :type output_dir: str or ~pathlib.Path
    """

    def __init__(self, output_dir: Union[str, Path]) -> None:
        self.output_dir = Path(output_dir).resolve()

    def ensure(self) -> Path:
        """Create the output directory if it does not exist yet."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    @staticmethod
    def default_filename(export_type: str, domain: Optional[str], now_ms: Optional[int] = None) -> str:
        """``<export-type>-<instance-slug>-<epoch-ms>.xlsx``"""
        stamp = now_ms if now_ms is not None else int(time.time() * 1000)
        return f"{export_type}-{slugify_domain(domain)}-{stamp}{XLSX_EXTENSION}"

    @staticmethod
    def download_url(filename: str) -> str:
        return f"{DOWNLOAD_ROUTE}/{quote(filename)}"

    def path_for(self, filename: str) -> Path:
        """
        Return the artifact path for ``filename`` inside the output directory.

        :raises ~bynder_proxy.core.errors.InvalidParameterError: If the name is empty
            or would point outside the output directory.
        """
        name = (filename or "").strip()
        if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
            raise InvalidParameterError(
                f"Invalid export filename: {filename!r}",
                subcode=VALIDATION_INVALID_FILENAME,
            )
        if not name.lower().endswith(XLSX_EXTENSION):
            name += XLSX_EXTENSION
        return self.output_dir / name

    def write(self, filename: str, sheets: Sequence[Tuple[str, Table]]) -> Path:
        """Write the given sheets to ``filename`` and return the artifact path."""
        path = self.path_for(filename)
        self.ensure()
        write_workbook(path, sheets)
        logger.info("XLSX file created at: %s", path)
        return path

    def resolve_download(self, filename: str) -> Path:
        """
        Return the path of an existing artifact.

        :raises ~bynder_proxy.core.errors.NotFoundError: If no such artifact exists.
        """
        try:
            path = self.path_for(filename)
        except InvalidParameterError:
            raise NotFoundError("Export file not found") from None
        if path.name != filename or not path.is_file():
            raise NotFoundError("Export file not found")
        return path


__all__ = ["DOWNLOAD_ROUTE", "ExportStore", "XLSX_CONTENT_TYPE"]
