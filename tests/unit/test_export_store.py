# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pandas as pd
import pytest

from bynder_proxy.core.errors import InvalidParameterError, NotFoundError
from bynder_proxy.export import ExportStore
from bynder_proxy.models.table import Table


def _table(rows):
    table = Table()
    for row in rows:
        table.add_row(row)
    return table


def test_default_filename_pattern():
    name = ExportStore.default_filename("media", "https://My-Portal.getbynder.com/", now_ms=1700000000123)
    assert name == "media-my-portal-1700000000123.xlsx"
    assert ExportStore.default_filename("meta-properties", None, now_ms=1) == "meta-properties-unknown-1.xlsx"


def test_ensure_creates_directory(tmp_path):
    store = ExportStore(tmp_path / "a" / "b")
    assert not store.output_dir.exists()
    store.ensure()
    assert store.output_dir.is_dir()
    store.ensure()


@pytest.mark.parametrize("name", ["", "  ", "..", "../evil.xlsx", "dir/file.xlsx", "a\\b.xlsx"])
def test_path_for_rejects_unsafe_names(store, name):
    with pytest.raises(InvalidParameterError):
        store.path_for(name)


def test_path_for_appends_extension(store):
    assert store.path_for("report").name == "report.xlsx"
    assert store.path_for("report.XLSX").name == "report.XLSX"
    assert store.path_for("report").parent == store.output_dir


def test_write_two_sheets_and_resolve(store):
    props = _table([{"ID": "p1", "Name": "Department"}])
    options = _table([{"ID": "o1", "Metaproperty ID": "p1"}, {"ID": "o2", "Metaproperty ID": "p1"}])
    path = store.write("meta.xlsx", [("Meta Properties", props), ("Property Options", options)])
    assert path.is_file()
    assert store.resolve_download("meta.xlsx") == path

    sheets = pd.read_excel(path, sheet_name=None, dtype=str)
    assert list(sheets) == ["Meta Properties", "Property Options"]
    assert len(sheets["Property Options"]) == 2


def test_write_overwrites_existing_name(store):
    store.write("same.xlsx", [("S", _table([{"a": "1"}]))])
    path = store.write("same.xlsx", [("S", _table([{"a": "1"}, {"a": "2"}]))])
    assert len(pd.read_excel(path, dtype=str)) == 2


def test_header_only_sheet_written(store):
    path = store.write("empty.xlsx", [("Empty", Table(columns=["ID", "Label"]))])
    df = pd.read_excel(path, dtype=str)
    assert list(df.columns) == ["ID", "Label"]
    assert df.empty


@pytest.mark.parametrize("name", ["missing.xlsx", "../conftest.py", "", "meta"])
def test_resolve_download_unknown(store, name):
    store.write("meta.xlsx", [("S", _table([{"a": "1"}]))])
    with pytest.raises(NotFoundError):
        store.resolve_download(name)


def test_text_cells_never_become_formulas(store):
    from openpyxl import load_workbook

    table = _table([{"name": "=1+1", "link": "https://cdn.example/a.jpg"}])
    path = store.write("cells.xlsx", [("S", table)])
    ws = load_workbook(path)["S"]
    assert ws["A2"].value == "=1+1"
    assert ws["A2"].data_type == "s"
    assert ws["B2"].hyperlink is None


def test_download_url_is_quoted():
    assert ExportStore.download_url("media-acme-1.xlsx") == "/api/media/download/media-acme-1.xlsx"
    assert ExportStore.download_url("my report#1?.xlsx") == "/api/media/download/my%20report%231%3F.xlsx"


def test_download_url_round_trips_through_service(store):
    from fastapi.testclient import TestClient

    from bynder_proxy.client import BynderProxyClient
    from bynder_proxy.core.config import ProxyConfig
    from bynder_proxy.service.app import create_app

    path = store.write("my report#1", [("S", _table([{"a": "1"}]))])
    client = BynderProxyClient(ProxyConfig(use_mock_data=True), store=store)
    with TestClient(create_app(client)) as tc:
        r = tc.get(store.download_url(path.name))
    assert r.status_code == 200
