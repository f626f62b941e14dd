"""
Unit tests for HTTPClient URL handling and request building.
"""

import pytest

from tinyhttp.client import HTTPClient
from tinyhttp.config import ClientConfig
from tinyhttp.http.errors import HTTPIOError
from tinyhttp.http.message import HTTPMethod, HTTPVersion


class TestParseURL:
    """Tests for HTTPClient._parse_url."""

    @pytest.mark.parametrize("url, address, target", [
        ("http://example.com", ("example.com", 80), "/"),
        ("http://example.com/", ("example.com", 80), "/"),
        ("http://localhost:8080/ok", ("localhost", 8080), "/ok"),
        ("http://host/search?q=x&y=2", ("host", 80), "/search?q=x&y=2"),
        ("http://host/page#section", ("host", 80), "/page"),
        ("http://127.0.0.1:9000", ("127.0.0.1", 9000), "/"),
        ("http://[::1]:8080/v6", ("::1", 8080), "/v6"),
    ])
    def test_valid(self, url, address, target):
        assert HTTPClient()._parse_url(url) == (address, target)

    @pytest.mark.parametrize("url", [
        "https://example.com/",
        "ftp://example.com/",
        "example.com/path",
        "http:///nohost",
    ])
    def test_invalid(self, url):
        with pytest.raises(ValueError):
            HTTPClient()._parse_url(url)

    def test_bad_port(self):
        with pytest.raises(ValueError):
            HTTPClient()._parse_url("http://host:notaport/")

    def test_custom_default_port(self):
        client = HTTPClient(ClientConfig(default_port=8080))

        assert client._parse_url("http://host/") == (("host", 8080), "/")


class TestBuildRequest:
    """Tests for HTTPClient._build_request."""

    def test_get(self):
        request = HTTPClient()._build_request(HTTPMethod.GET, ("example.com", 80), "/")

        assert request.method is HTTPMethod.GET
        assert request.version is HTTPVersion.HTTP_1_1
        assert request.get_header("host") == "example.com"
        assert request.body == b""

    def test_host_includes_non_default_port(self):
        request = HTTPClient()._build_request(HTTPMethod.GET, ("localhost", 8080), "/")

        assert request.get_header("host") == "localhost:8080"

    def test_ipv6_host_bracketed(self):
        request = HTTPClient()._build_request(HTTPMethod.GET, ("::1", 8080), "/")

        assert request.get_header("host") == "[::1]:8080"

    def test_user_agent(self):
        client = HTTPClient(ClientConfig(user_agent="tinyhttp-test"))
        request = client._build_request(HTTPMethod.GET, ("h", 80), "/")

        assert request.get_header("user-agent") == "tinyhttp-test"

    def test_no_user_agent_by_default(self):
        request = HTTPClient()._build_request(HTTPMethod.GET, ("h", 80), "/")

        assert "user-agent" not in request.headers

    def test_post_body(self):
        request = HTTPClient()._build_request(HTTPMethod.POST, ("h", 80), "/echo", "data")

        assert request.method is HTTPMethod.POST
        assert request.body == b"data"


class TestConnectFailure:
    """Tests for connection errors."""

    def test_connection_refused(self, free_port: int):
        """Nothing listening surfaces as HTTPIOError."""
        with pytest.raises(HTTPIOError):
            HTTPClient(ClientConfig(timeout=2.0)).get(f"http://127.0.0.1:{free_port}/")
