"""
Unit tests for HTTPResponse and the response helpers.
"""

import pytest

from tinyhttp.http.headers import Headers
from tinyhttp.http.message import HTTPStatus, HTTPVersion
from tinyhttp.http.response import HTTPResponse, not_found, ok


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_defaults(self):
        """A bare response is an empty HTTP/1.1 200."""
        response = HTTPResponse()

        assert response.status is HTTPStatus.OK
        assert response.version is HTTPVersion.HTTP_1_1
        assert isinstance(response.headers, Headers)
        assert response.body == b""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(
            status=HTTPStatus.NOT_FOUND, version=HTTPVersion.HTTP_1_0
        ).status_line == "HTTP/1.0 404 Not Found"

    def test_coerces_plain_values(self):
        """Status codes, version tokens, dicts and str are accepted."""
        response = HTTPResponse(status=404, headers={"X-A": "1"}, body="x", version="HTTP/1.0")

        assert response.status is HTTPStatus.NOT_FOUND
        assert response.version is HTTPVersion.HTTP_1_0
        assert response.headers.get("x-a") == "1"
        assert response.body == b"x"

    def test_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            HTTPResponse(status=500)

    def test_set_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers["x-one"] == "1"
        assert response.get_header("X-Two") == "2"

    def test_set_body(self):
        assert HTTPResponse().set_body("héllo").body == "héllo".encode("utf-8")

    def test_text(self):
        assert HTTPResponse(body=b"caf\xc3\xa9").text == "café"


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_ok_empty(self):
        """ok() with no body has no headers at all."""
        response = ok()

        assert response.status == HTTPStatus.OK
        assert len(response.headers) == 0
        assert response.body == b""

    def test_ok_text(self):
        response = ok("Hello")

        assert response.body == b"Hello"
        assert response.content_type == "text/plain"

    def test_ok_json(self):
        response = ok({"msg": "hello"})

        assert response.json == {"msg": "hello"}
        assert response.get_header("content-type") == "application/json; charset=utf-8"

    def test_ok_bytes_with_content_type(self):
        response = ok(b"\x00\x01", content_type="application/octet-stream")

        assert response.body == b"\x00\x01"
        assert response.content_type == "application/octet-stream"

    def test_ok_version(self):
        assert ok(version=HTTPVersion.HTTP_1_0).version is HTTPVersion.HTTP_1_0

    def test_not_found(self):
        """not_found() is an empty 404 in the given version."""
        response = not_found(HTTPVersion.HTTP_1_0)

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.version is HTTPVersion.HTTP_1_0
        assert len(response.headers) == 0
        assert response.body == b""
