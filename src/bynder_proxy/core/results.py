# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Result types for export operations.

- :class:`ExportResult`: where a generated artifact lives and how to download it
- :class:`MediaExportResult`: media export, with the number of exported items
- :class:`MetapropertyExportResult`: metaproperty export, with sheet row counts
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict


@dataclass(frozen=True)
class ExportResult:
    """
    Reference to a generated spreadsheet artifact.

    :param filename: Artifact file name inside the output directory.
    :type filename: :class:`str`
    :param download_url: Relative URL serving the artifact.
    :type download_url: :class:`str`
    :param path: Absolute path of the artifact on disk.
    :type path: :class:`pathlib.Path`
    """

    filename: str
    download_url: str
    path: Path

    def to_dict(self) -> Dict[str, Any]:
        return {"downloadUrl": self.download_url, "filename": self.filename}


@dataclass(frozen=True)
class MediaExportResult(ExportResult):
    """
    Result of a media export.

    :param total_items: Number of media rows written.
    :type total_items: :class:`int`
    """

    total_items: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"totalItems": self.total_items, **super().to_dict()}


@dataclass(frozen=True)
class MetapropertyExportResult(ExportResult):
    """
    Result of a metaproperty export.

    :param properties_count: Rows on the metaproperty sheet.
    :type properties_count: :class:`int`
    :param options_count: Rows on the option sheet.
    :type options_count: :class:`int`
    """

    properties_count: int = 0
    options_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertiesCount": self.properties_count,
            "optionsCount": self.options_count,
            **super().to_dict(),
        }


__all__ = ["ExportResult", "MediaExportResult", "MetapropertyExportResult"]
