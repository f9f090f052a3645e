# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from pathlib import Path

from bynder_proxy.core.results import ExportResult, MediaExportResult, MetapropertyExportResult


def test_media_export_result_to_dict():
    result = MediaExportResult(
        filename="media-acme-1.xlsx",
        download_url="/api/media/download/media-acme-1.xlsx",
        path=Path("/tmp/media-acme-1.xlsx"),
        total_items=12,
    )
    assert result.to_dict() == {
        "totalItems": 12,
        "downloadUrl": "/api/media/download/media-acme-1.xlsx",
        "filename": "media-acme-1.xlsx",
    }
    assert isinstance(result, ExportResult)


def test_metaproperty_export_result_to_dict():
    result = MetapropertyExportResult(
        filename="m.xlsx",
        download_url="/api/media/download/m.xlsx",
        path=Path("m.xlsx"),
        properties_count=2,
        options_count=6,
    )
    d = result.to_dict()
    assert d["propertiesCount"] == 2
    assert d["optionsCount"] == 6
    assert "path" not in d
