# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for proxy tests.

This module provides common test fixtures, fake upstreams, and configuration
that can be used across all test modules.
"""

import pytest
from unittest.mock import Mock

from bynder_proxy.client import BynderProxyClient
from bynder_proxy.core.config import ProxyConfig
from bynder_proxy.data._mock import _MockBynderClient
from bynder_proxy.export import ExportStore


class PagedUpstream:
    """Upstream double serving ``items`` page by page and recording every call."""

    def __init__(self, items, fail_on_page=None, error=None):
        self.items = list(items)
        self.fail_on_page = fail_on_page
        self.error = error
        self.calls = []

    def _list_media(self, page, size, total=False, filters=None):
        self.calls.append({"page": page, "size": size, "total": total, "filters": dict(filters or {})})
        if self.fail_on_page is not None and page == self.fail_on_page:
            raise self.error
        start = (page - 1) * size
        return [dict(item) for item in self.items[start:start + size]]


@pytest.fixture
def test_config(tmp_path):
    """Test configuration with safe defaults."""
    return ProxyConfig(
        base_url="https://acme.getbynder.com",
        domain="acme.getbynder.com",
        client_id="client-id",
        client_secret="client-secret",
        http_timeout=5,
        page_size=10,
        output_dir=str(tmp_path / "output"),
    )


@pytest.fixture
def store(tmp_path):
    """Export store rooted in a temporary directory."""
    s = ExportStore(tmp_path / "output")
    s.ensure()
    return s


@pytest.fixture
def mock_upstream():
    """In-memory upstream with a small catalogue."""
    return _MockBynderClient(item_count=25)


@pytest.fixture
def proxy_client(test_config, mock_upstream, store):
    """Client wired to the in-memory upstream and a temporary store."""
    return BynderProxyClient(test_config, upstream=mock_upstream, store=store)


@pytest.fixture
def mock_http_client():
    """Mock HTTP client for unit tests."""
    mock = Mock()
    mock._request.return_value = Mock()
    return mock


@pytest.fixture
def sample_media():
    """Sample media record as returned by Bynder."""
    return {
        "id": "11111111-2222-3333-4444-555555555555",
        "name": "Product shot",
        "type": "image",
        "fileSize": 1536,
        "tags": ["summer", "campaign"],
        "thumbnails": {"mini": "https://cdn.example/mini.jpg", "thul": "https://cdn.example/thul.jpg"},
        "property_Department": ["Marketing", "Sales"],
        "activeOriginalFocusPoint": {"x": 10, "y": 20},
        "watermarked": False,
        "description": None,
    }


@pytest.fixture
def paged_upstream():
    """Factory for :class:`PagedUpstream` doubles."""
    return PagedUpstream
