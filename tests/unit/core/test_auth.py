# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from unittest.mock import MagicMock

import pytest
import requests

from bynder_proxy.core._auth import _AuthManager
from bynder_proxy.core._error_codes import UPSTREAM_AUTH_FAILED, UPSTREAM_NOT_CONFIGURED
from bynder_proxy.core.errors import UpstreamUnavailableError


def _response(status, body):
    r = MagicMock()
    r.status_code = status
    r.json.return_value = body
    return r


def _manager(http, client_id="id", client_secret="secret"):
    return _AuthManager("https://acme.getbynder.com/", client_id, client_secret, "offline", http)


def test_token_requested_once_and_cached(mock_http_client):
    mock_http_client._request.return_value = _response(200, {"access_token": "tok", "expires_in": 3600})
    auth = _manager(mock_http_client)
    assert auth._acquire_token().access_token == "tok"
    assert auth._acquire_token().access_token == "tok"
    mock_http_client._request.assert_called_once()
    method, url = mock_http_client._request.call_args.args
    assert method == "post"
    assert url == "https://acme.getbynder.com/v6/authentication/oauth2/token"
    assert mock_http_client._request.call_args.kwargs["data"]["grant_type"] == "client_credentials"


def test_expired_token_refreshed(mock_http_client):
    mock_http_client._request.return_value = _response(200, {"access_token": "tok", "expires_in": 30})
    auth = _manager(mock_http_client)
    auth._acquire_token()
    auth._acquire_token()
    # a lifetime shorter than the refresh margin is never reused
    assert mock_http_client._request.call_count == 2


def test_missing_credentials(mock_http_client):
    auth = _manager(mock_http_client, client_secret=None)
    assert not auth.is_configured
    with pytest.raises(UpstreamUnavailableError) as ei:
        auth._acquire_token()
    assert ei.value.subcode == UPSTREAM_NOT_CONFIGURED
    mock_http_client._request.assert_not_called()


def test_rejected_credentials(mock_http_client):
    mock_http_client._request.return_value = _response(401, {"error": "invalid_client"})
    with pytest.raises(UpstreamUnavailableError) as ei:
        _manager(mock_http_client)._acquire_token()
    assert ei.value.subcode == UPSTREAM_AUTH_FAILED
    assert ei.value.details == {"status_code": 401}


def test_token_endpoint_unreachable(mock_http_client):
    mock_http_client._request.side_effect = requests.exceptions.ConnectTimeout("slow")
    with pytest.raises(UpstreamUnavailableError):
        _manager(mock_http_client)._acquire_token()


def test_response_without_token(mock_http_client):
    mock_http_client._request.return_value = _response(200, {"token_type": "bearer"})
    with pytest.raises(UpstreamUnavailableError):
        _manager(mock_http_client)._acquire_token()
