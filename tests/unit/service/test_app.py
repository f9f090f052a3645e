# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from bynder_proxy.client import BynderProxyClient
from bynder_proxy.core.config import ProxyConfig
from bynder_proxy.core.errors import UpstreamRequestError, UpstreamUnavailableError
from bynder_proxy.export import XLSX_CONTENT_TYPE
from bynder_proxy.service.app import ROUTE_CATALOGUE, create_app, parse_bool


@pytest.fixture
def api(proxy_client):
    with TestClient(create_app(proxy_client)) as client:
        yield client


@pytest.fixture
def failing_api(test_config, store):
    upstream = MagicMock()
    client = BynderProxyClient(test_config, upstream=upstream, store=store)
    with TestClient(create_app(client), raise_server_exceptions=False) as tc:
        yield tc, upstream


def test_root(api):
    r = api.get("/")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "API is running"
    assert body["version"] == "1.0.0"


def test_routes_catalogue(api):
    body = api.get("/api/routes").json()
    assert body["success"] is True
    assert body["data"] == ROUTE_CATALOGUE
    assert body["timestamp"].endswith("Z")


def test_media_list(api):
    r = api.get("/api/media/list", params={"limit": 12})
    assert r.status_code == 200
    body = r.json()
    assert len(body["data"]) == 12
    assert body["pagination"] == {"page": 1, "limit": 12, "total": 12, "pages": 1}


def test_media_list_filters(api):
    body = api.get("/api/media/list", params={"limit": 100, "type": "image", "limitedUsage": "true"}).json()
    assert body["data"]
    assert all(m["type"] == "image" and m["limited"] for m in body["data"])


def test_media_list_second_page_larger_than_upstream_page(api):
    # upstream pages hold 10 items; a caller page holds 12
    body = api.get("/api/media/list", params={"limit": 12, "page": 2}).json()
    ids = [m["id"] for m in body["data"]]
    assert ids == [f"00000000-0000-0000-0000-{i:012d}" for i in range(13, 25)]
    assert body["pagination"]["page"] == 2
    assert body["pagination"]["limit"] == 12


def test_media_list_invalid_limit(api):
    r = api.get("/api/media/list", params={"limit": "many"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_PARAMETER"


def test_media_list_upstream_unavailable(failing_api):
    tc, upstream = failing_api
    upstream._list_media.side_effect = UpstreamUnavailableError("Bynder client credentials are not configured")
    r = tc.get("/api/media/list")
    assert r.status_code == 500
    error = r.json()["error"]
    assert error["code"] == "MEDIA_LIST_ERROR"
    assert error["message"] == "Bynder client credentials are not configured"
    assert "stack" in error


def test_property_filters_forwarded(failing_api):
    tc, upstream = failing_api
    upstream._list_media.return_value = []
    tc.get("/api/media/list", params={"property_Region": "Europe", "orderBy": "", "page": "2"})
    args, kwargs = upstream._list_media.call_args
    # page 2 of 100 items starts at item 100, upstream page 11 of size 10
    assert args == (11, 10)
    assert kwargs["filters"] == {"property_Region": "Europe"}


def test_get_media(api):
    item_id = "00000000-0000-0000-0000-000000000003"
    r = api.get(f"/api/media/{item_id}")
    assert r.status_code == 200
    assert r.json()["data"]["id"] == item_id


def test_get_media_not_found(api):
    r = api.get("/api/media/does-not-exist")
    assert r.status_code == 404
    error = r.json()["error"]
    assert error["code"] == "MEDIA_NOT_FOUND"
    assert error["message"] == "Media item with ID does-not-exist not found"


def test_get_media_upstream_status_passed_through(failing_api):
    tc, upstream = failing_api
    upstream._get_media.side_effect = UpstreamRequestError("Forbidden", 403)
    r = tc.get("/api/media/m1")
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "BYNDER_API_ERROR"


def test_export_and_download(api):
    r = api.get("/api/media/exportAllMedia", params={"limit": 7})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["totalItems"] == 7
    assert data["filename"].startswith("media-acme-")
    assert data["downloadUrl"] == f"/api/media/download/{data['filename']}"

    download = api.get(data["downloadUrl"])
    assert download.status_code == 200
    assert download.headers["content-type"] == XLSX_CONTENT_TYPE
    assert "attachment" in download.headers["content-disposition"]
    assert download.content[:2] == b"PK"


def test_export_with_filename(api):
    data = api.get("/api/media/exportAllMedia", params={"limit": 1, "filename": "mine"}).json()["data"]
    assert data["filename"] == "mine.xlsx"


def test_export_nothing_found(api):
    r = api.get("/api/media/exportAllMedia", params={"type": "audio"})
    assert r.status_code == 404
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "No media items found to export"
    assert body["data"] is None


def test_export_invalid_filename(api):
    r = api.get("/api/media/exportAllMedia", params={"filename": ".."})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_PARAMETER"


def test_download_missing_file(api):
    r = api.get("/api/media/download/nothing-here.xlsx")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "FILE_NOT_FOUND"


def test_export_metaproperties(api):
    r = api.get("/api/media/exportMetaProperties")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["propertiesCount"] == 2
    assert data["optionsCount"] == 6
    assert data["filename"].startswith("meta-properties-acme-")


def test_export_metaproperties_failure(failing_api):
    tc, upstream = failing_api
    upstream._list_metaproperties.side_effect = UpstreamRequestError("Bynder down", 502)
    r = tc.get("/api/media/exportMetaProperties")
    assert r.status_code == 500
    assert r.json()["error"]["code"] == "META_PROPERTY_EXPORT_ERROR"


def test_media_metaproperties(api):
    body = api.get("/api/media/metaproperties", params={"limit": 5}).json()
    assert body["data"]["mediaItemsSampled"] == 5
    assert body["data"]["totalProperties"] == 2


def test_metaproperties_list(api):
    body = api.get("/api/metaproperties/list", params={"options": "0"}).json()
    assert set(body["data"]) == {"property1", "property2"}
    assert "options" not in body["data"]["property1"]


def test_content_access(api):
    assert len(api.get("/api/content_access/metaproperties/list").json()["data"]) == 2
    assert api.get("/api/content_access/metaproperties/property2").json()["data"]["name"] == "Region"
    r = api.get("/api/content_access/metaproperties/unknown")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "CONTENT_ACCESS_METAPROPERTY_GET_ERROR"


def test_unknown_route(api):
    r = api.get("/api/nope")
    assert r.status_code == 404
    error = r.json()["error"]
    assert error["code"] == "ROUTE_NOT_FOUND"
    assert error["message"] == "Route GET /api/nope not found"


def test_stack_hidden_in_production(store):
    upstream = MagicMock()
    upstream._list_metaproperties.side_effect = UpstreamRequestError("Bynder down", 502)
    client = BynderProxyClient(ProxyConfig(production=True), upstream=upstream, store=store)
    with TestClient(create_app(client)) as tc:
        error = tc.get("/api/metaproperties/list").json()["error"]
    assert error["code"] == "METAPROPERTY_LIST_ERROR"
    assert "stack" not in error
    assert "details" not in error


def test_cors_headers(api):
    r = api.get("/api/routes", headers={"Origin": "https://app.example"})
    assert r.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("1", True), ("TRUE", True), ("false", False), ("0", False), ("maybe", None), (None, None)],
)
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected
