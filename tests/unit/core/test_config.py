# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from bynder_proxy.core.config import PageErrorPolicy, ProxyConfig

_ENV_VARS = [
    "BYNDER_BASE_URL",
    "BYNDER_DOMAIN",
    "BYNDER_CLIENT_ID",
    "BYNDER_CLIENT_SECRET",
    "BYNDER_HTTP_TIMEOUT",
    "BYNDER_PAGE_SIZE",
    "EXPORT_OUTPUT_DIR",
    "ON_PAGE_ERROR",
    "USE_MOCK_DATA",
    "APP_ENV",
    "NODE_ENV",
    "PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = ProxyConfig.from_env()
    assert config.page_size == 100
    assert config.list_max_limit == 1000
    assert config.on_page_error is PageErrorPolicy.STOP
    assert config.port == 3000
    assert not config.has_credentials
    assert not config.production


def test_reads_environment(clean_env):
    clean_env.setenv("BYNDER_BASE_URL", "https://acme.getbynder.com")
    clean_env.setenv("BYNDER_CLIENT_ID", "id")
    clean_env.setenv("BYNDER_CLIENT_SECRET", "secret")
    clean_env.setenv("BYNDER_HTTP_TIMEOUT", "12.5")
    clean_env.setenv("BYNDER_PAGE_SIZE", "50")
    clean_env.setenv("ON_PAGE_ERROR", "Propagate")
    clean_env.setenv("USE_MOCK_DATA", "true")
    clean_env.setenv("NODE_ENV", "production")
    config = ProxyConfig.from_env()
    assert config.base_url == "https://acme.getbynder.com"
    assert config.has_credentials
    assert config.http_timeout == 12.5
    assert config.page_size == 50
    assert config.on_page_error is PageErrorPolicy.PROPAGATE
    assert config.use_mock_data
    assert config.production


def test_invalid_values_rejected(clean_env):
    clean_env.setenv("BYNDER_PAGE_SIZE", "lots")
    with pytest.raises(ValueError):
        ProxyConfig.from_env()
    clean_env.setenv("BYNDER_PAGE_SIZE", "10")
    clean_env.setenv("ON_PAGE_ERROR", "retry")
    with pytest.raises(ValueError):
        ProxyConfig.from_env()
