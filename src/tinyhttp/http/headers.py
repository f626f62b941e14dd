"""
=============================================================================
HTTP HEADER COLLECTION
=============================================================================

A case-insensitive mapping of header name → value.

=============================================================================
CASE INSENSITIVITY
=============================================================================

Header names are case-insensitive per RFC 7230. We normalize every name
to lowercase when it is inserted, so all later lookups are plain dict
lookups:

    headers.insert("Content-Type", "text/html")
    headers.insert("content-type", "application/json")   # overwrites

    headers.get("CONTENT-TYPE")   → "application/json"
    len(headers)                  → 1

Keys are unique. A second insert with any casing replaces the value.

=============================================================================
HEADER BLOCK FORMAT
=============================================================================

    content-type: text/plain\r\n      ← name ":" OWS value CRLF
    content-length: 5\r\n
    \r\n                              ← empty line ends the block

On read, each line is split at the FIRST colon:

    "host: example.com:8080"   → ("host", "example.com:8080")
    "x-empty:"                 → ("x-empty", "")
    "no colon here"            → HTTPSyntaxError

Leading whitespace of the value is dropped; everything else is kept.

=============================================================================
ORDERING
=============================================================================

Python dicts preserve insertion order, so write_to() emits headers in the
order they were first inserted. Output is deterministic for a given
sequence of inserts.

=============================================================================
"""

import re
import sys
from typing import BinaryIO, Dict, Iterator, Mapping, Optional, Tuple, Union

from .errors import HTTPSyntaxError
from .streams import DEFAULT_MAX_LINE_SIZE, read_line, write_all


# Most header lines accepted in one block.
DEFAULT_MAX_HEADERS = 100

# Content-Length must be plain ASCII digits ("+5", "-1", " 5" are not lengths).
_CONTENT_LENGTH_PATTERN = re.compile(r"^[0-9]+$")
_MAX_LENGTH_DIGITS = len(str(sys.maxsize))


class Headers:
    """
    Case-insensitive header collection owned by a single message.

    Usage:
        headers = Headers({"Content-Type": "text/plain"})
        headers.insert("X-Request-Id", "a1b2")

        "content-type" in headers         # True
        headers["x-request-id"]           # "a1b2"
        headers.content_length()          # None (not set)
    """

    def __init__(self, initial: Optional[Union["Headers", Mapping[str, str]]] = None):
        self._headers: Dict[str, str] = {}
        if initial is not None:
            for name, value in initial.items():
                self.insert(name, value)

    # =========================================================================
    # CORE OPERATIONS
    # =========================================================================

    def insert(self, name: str, value: str) -> "Headers":
        """
        Set a header, replacing any existing value for the same name.

        Returns:
            Self for method chaining.
        """
        self._headers[name.lower()] = str(value)
        return self

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a header value (case-insensitive lookup)."""
        return self._headers.get(name.lower(), default)

    def contains(self, name: str) -> bool:
        """Check whether a header is present (case-insensitive)."""
        return name.lower() in self._headers

    def remove(self, name: str) -> Optional[str]:
        """Remove a header and return its value, or None if absent."""
        return self._headers.pop(name.lower(), None)

    def content_length(self) -> Optional[int]:
        """
        Get the declared body length.

        Returns:
            The content-length as an int, or None if the header is missing
            or is not a non-negative integer that fits in sys.maxsize. An
            unusable length is not an error here; the codec decides what a
            missing length means.
        """
        value = self._headers.get("content-length")
        if value is None:
            return None
        value = value.strip()
        if not _CONTENT_LENGTH_PATTERN.match(value):
            return None
        # Longer digit strings cannot fit, and int() may refuse them outright
        digits = value.lstrip("0") or "0"
        if len(digits) > _MAX_LENGTH_DIGITS:
            return None
        length = int(digits)
        if length > sys.maxsize:
            return None
        return length

    # =========================================================================
    # WIRE FORMAT
    # =========================================================================

    def write_to(self, writer: BinaryIO) -> None:
        """
        Write every header as ``name: value\\r\\n``.

        The terminating empty line is NOT written; the codec writes it
        after deciding whether to add a computed content-length.
        """
        for name, value in self._headers.items():
            write_all(writer, f"{name}: {value}\r\n".encode("utf-8"))

    def read_from(
        self,
        reader: BinaryIO,
        max_line_size: int = DEFAULT_MAX_LINE_SIZE,
        max_headers: int = DEFAULT_MAX_HEADERS,
    ) -> "Headers":
        """
        Read a header block up to and including its empty line.

        Args:
            reader: Binary stream positioned at the first header line.
            max_line_size: Longest header line accepted, in bytes.
            max_headers: Most header lines accepted.

        Returns:
            Self, populated with the parsed headers.

        Raises:
            HTTPSyntaxError: A line has no colon, the stream ends before
                             the empty line, or a limit is exceeded.
            HTTPIOError: The stream failed.
        """
        count = 0
        while True:
            line = read_line(reader, max_line_size)
            if line is None:
                raise HTTPSyntaxError("Stream ended before end of headers")
            if line == "":
                return self

            count += 1
            if count > max_headers:
                raise HTTPSyntaxError(f"Too many headers (limit {max_headers})")

            name, value = parse_header_line(line)
            self.insert(name, value)

    # =========================================================================
    # MAPPING PROTOCOL
    # =========================================================================

    def items(self) -> Iterator[Tuple[str, str]]:
        """Iterate over (name, value) pairs in insertion order."""
        return iter(self._headers.items())

    def copy(self) -> "Headers":
        return Headers(self)

    def __getitem__(self, name: str) -> str:
        return self._headers[name.lower()]

    def __setitem__(self, name: str, value: str) -> None:
        self.insert(name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._headers == other._headers
        if isinstance(other, Mapping):
            return self._headers == {k.lower(): str(v) for k, v in other.items()}
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"


def parse_header_line(line: str) -> Tuple[str, str]:
    """
    Split one header line into (name, value).

    The name is lowercased as-is; the value loses its leading whitespace.

    Raises:
        HTTPSyntaxError: No colon in the line.
    """
    name, sep, value = line.partition(":")
    if not sep:
        raise HTTPSyntaxError(f"Invalid header line (no colon): {line!r}")

    return name.lower(), value.lstrip(" \t")
