"""Tests for the provider HTTP client."""

import httpx
import pytest

from kinetic.config import HttpConfig
from kinetic.providers.client import ProviderClient


@pytest.fixture
def http_config() -> HttpConfig:
    return HttpConfig(max_attempts=3, initial_delay=0, max_delay=0, standard_timeout=5, long_timeout=60)


def _client(handler, http_config, **kwargs) -> ProviderClient:
    return ProviderClient(
        "https://api.test/", http=http_config, transport=httpx.MockTransport(handler), **kwargs
    )


class TestProviderClient:
    """Tests for ProviderClient.request."""

    def test_unwraps_success_envelope(self, http_config):
        """Test unwraps success envelope."""
        def handler(request):
            return httpx.Response(200, json={"success": True, "data": {"tempo": 120}})

        with _client(handler, http_config) as client:
            assert client.post_json("/api/beat-analysis", {}) == {"tempo": 120}

    def test_plain_body_is_returned(self, http_config):
        """Test plain body is returned."""
        client = _client(lambda request: httpx.Response(200, json=[1, 2]), http_config)
        assert client.request("GET", "/x") == [1, 2]

    def test_retries_server_errors(self, http_config):
        """Test retries server errors."""
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"ok": True})

        assert _client(handler, http_config).request("GET", "/x") == {"ok": True}
        assert len(calls) == 3

    def test_gives_up_after_max_attempts(self, http_config):
        """Test gives up after max attempts."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502)

        with pytest.raises(httpx.HTTPStatusError):
            _client(handler, http_config).request("GET", "/x")
        assert len(calls) == 3

    def test_client_errors_are_not_retried(self, http_config):
        """Test client errors are not retried."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(400, json={"error": "bad"})

        with pytest.raises(httpx.HTTPStatusError):
            _client(handler, http_config).request("POST", "/x")
        assert len(calls) == 1

    def test_timeouts_not_retried_by_default(self, http_config):
        """Test timeouts not retried by default."""
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(httpx.TimeoutException):
            _client(handler, http_config).request("GET", "/x")
        assert len(calls) == 1

    def test_timeouts_retried_when_enabled(self, http_config):
        """Test timeouts retried when enabled."""
        http_config.retry_on_timeout = True
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("slow", request=request)
            return httpx.Response(200, json={})

        assert _client(handler, http_config).request("GET", "/x") == {}
        assert len(calls) == 2

    def test_connection_errors_are_retried(self, http_config):
        """Test connection errors are retried."""
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={})

        _client(handler, http_config).request("GET", "/x")
        assert len(calls) == 2

    def test_bearer_token(self, http_config):
        """Test bearer token."""
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={})

        _client(handler, http_config, api_key="secret").request("GET", "/x")
        assert seen["auth"] == "Bearer secret"

    def test_long_timeout_class(self, http_config):
        """Test long timeout class."""
        seen = {}

        def handler(request):
            seen["timeout"] = request.extensions["timeout"]["read"]
            return httpx.Response(200, json={})

        client = _client(handler, http_config)
        client.request("POST", "/x", timeout_class="long")
        assert seen["timeout"] == 60
        client.request("POST", "/x")
        assert seen["timeout"] == 5
