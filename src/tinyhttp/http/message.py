"""
=============================================================================
HTTP MESSAGE TOKENS
=============================================================================

The three enumerations that appear on the first line of every message:

    Request line:    GET /ok HTTP/1.1
                     ─┬─     ────┬───
                      │          │
                   HTTPMethod  HTTPVersion

    Status line:     HTTP/1.1 404 Not Found
                     ────┬─── ─┬─ ────┬────
                         │     │      │
                  HTTPVersion  └─ HTTPStatus (code + phrase)

Each enum converts to its wire token and parses back from it. Parsing is
strict: an unknown token raises HTTPSyntaxError right at the parse site.
There is no "unsupported" or "invalid" member that a caller could forget
to check.

=============================================================================
SUPPORTED SET
=============================================================================

    ┌──────────┬──────────────────────────────┐
    │ Methods  │ GET, POST                    │
    │ Versions │ HTTP/1.0, HTTP/1.1           │
    │ Statuses │ 200 OK, 404 Not Found        │
    └──────────┴──────────────────────────────┘

=============================================================================
"""

import json
from enum import Enum, IntEnum
from typing import Any, Optional, Union

from .errors import HTTPSyntaxError


class HTTPMethod(Enum):
    """Request methods understood by the codec."""

    GET = "GET"      # Retrieve a resource
    POST = "POST"    # Submit data

    @property
    def token(self) -> str:
        """The method as written on the request line."""
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "HTTPMethod":
        """
        Parse a method token.

        Matching is case-sensitive: "get" is not a method.

        Raises:
            HTTPSyntaxError: If the token is not a supported method.
        """
        try:
            return cls(token)
        except ValueError:
            raise HTTPSyntaxError(f"Unknown method: {token!r}") from None

    def __str__(self) -> str:
        return self.value


class HTTPVersion(Enum):
    """Protocol versions understood by the codec."""

    HTTP_1_0 = "HTTP/1.0"
    HTTP_1_1 = "HTTP/1.1"

    @property
    def token(self) -> str:
        """The version as written on the request/status line."""
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "HTTPVersion":
        """
        Parse a version token.

        Raises:
            HTTPSyntaxError: If the token is not HTTP/1.0 or HTTP/1.1.
        """
        try:
            return cls(token)
        except ValueError:
            raise HTTPSyntaxError(f"Unsupported HTTP version: {token!r}") from None

    def __str__(self) -> str:
        return self.value


class HTTPStatus(IntEnum):
    """
    Response status codes with their reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200            # Request succeeded
    NOT_FOUND = 404     # No route for this method/path

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES[self]

    @classmethod
    def from_code(cls, code: int) -> "HTTPStatus":
        """
        Look up a status by numeric code.

        Raises:
            HTTPSyntaxError: If the code is not a supported status.
        """
        try:
            return cls(code)
        except ValueError:
            raise HTTPSyntaxError(f"Unknown status code: {code}") from None

    @classmethod
    def from_token(cls, token: str) -> "HTTPStatus":
        """
        Parse the status-code token of a status line ("200", "404").

        The token must match a code exactly, so "+200" or "0200" fail.

        Raises:
            HTTPSyntaxError: If the token is not a supported status code.
        """
        for member in cls:
            if token == str(member.value):
                return member
        raise HTTPSyntaxError(f"Invalid status code: {token!r}")


# Reason phrases, as they appear after the code on the status line.
_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}


class MessageMixin:
    """
    Accessors shared by HTTPRequest and HTTPResponse.

    Both dataclasses carry ``headers`` (a Headers collection) and ``body``
    (bytes); this mixin adds the read-only conveniences on top.
    """

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a header value (case-insensitive lookup)."""
        return self.headers.get(name, default)

    @property
    def content_length(self) -> Optional[int]:
        """Declared content-length, or None if missing/unparsable."""
        return self.headers.content_length()

    @property
    def content_type(self) -> Optional[str]:
        """
        Media type without parameters.

        "application/json; charset=utf-8" → "application/json"
        """
        ct = self.headers.get("content-type", "")
        return ct.split(";")[0].strip().lower() or None

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (undecodable bytes are replaced)."""
        return self.body.decode("utf-8", errors="replace")

    @property
    def json(self) -> Any:
        """
        Body parsed as JSON.

        Raises:
            HTTPSyntaxError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HTTPSyntaxError(f"Invalid JSON body: {e}") from None


def coerce_body(body: Union[str, bytes, bytearray, None]) -> bytes:
    """Normalize a message body to bytes (str is UTF-8 encoded)."""
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)
