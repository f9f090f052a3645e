# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from unittest.mock import MagicMock, patch

import pytest
import requests

from bynder_proxy.core._http import _HttpClient


def test_default_timeouts_per_method():
    client = _HttpClient()
    with patch("bynder_proxy.core._http.requests.request") as req:
        client._request("get", "https://x")
        assert req.call_args.kwargs["timeout"] == 30
        client._request("post", "https://x")
        assert req.call_args.kwargs["timeout"] == 60


def test_configured_and_explicit_timeout():
    client = _HttpClient(timeout=5)
    with patch("bynder_proxy.core._http.requests.request") as req:
        client._request("get", "https://x")
        assert req.call_args.kwargs["timeout"] == 5
        client._request("get", "https://x", timeout=1)
        assert req.call_args.kwargs["timeout"] == 1


def test_session_used_and_closed():
    session = MagicMock(spec=requests.Session)
    client = _HttpClient(session=session)
    client._request("get", "https://x", params={"a": 1})
    session.request.assert_called_once_with("get", "https://x", params={"a": 1}, timeout=30)
    client.close()
    session.close.assert_called_once()
    client.close()
    session.close.assert_called_once()


def test_network_errors_not_retried():
    client = _HttpClient()
    with patch(
        "bynder_proxy.core._http.requests.request",
        side_effect=requests.exceptions.ConnectionError("down"),
    ) as req:
        with pytest.raises(requests.exceptions.ConnectionError):
            client._request("get", "https://x")
        assert req.call_count == 1
