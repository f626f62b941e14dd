"""
=============================================================================
HTTP/1.x WIRE CODEC
=============================================================================

Turns HTTPRequest/HTTPResponse objects into bytes on a stream and back.

=============================================================================
ENCODING
=============================================================================

    encode_request(req, writer)          encode_response(resp, writer)
    ───────────────────────────          ─────────────────────────────
    GET /ok HTTP/1.1\r\n                 HTTP/1.1 200 OK\r\n
    <headers>                            <headers>
    content-length: N\r\n   ← only if the caller did not set one
    \r\n                                 \r\n
    <body>                               <body>
                   ... then flush the writer

The encoder never omits or miscounts content-length when it is the one
computing it. A content-length set by the caller is written as-is.

=============================================================================
DECODING AND BODY LENGTH
=============================================================================

    ┌──────────────────────┬──────────────────────┬──────────────────────┐
    │ content-length       │ decode_request       │ decode_response      │
    │                      │ (server side)        │ (client side)        │
    ├──────────────────────┼──────────────────────┼──────────────────────┤
    │ N > 0                │ read exactly N       │ read exactly N       │
    │ 0                    │ empty, no read       │ empty, no read       │
    │ absent / unparsable  │ empty, no read       │ read until EOF       │
    └──────────────────────┴──────────────────────┴──────────────────────┘

Why the asymmetry? A server that read requests until EOF would block
forever on a client that keeps its side open while waiting for the
answer. A client, on the other hand, can rely on the HTTP/1.0 rule that
the server closes the connection to mark the end of a length-less body.

Early EOF inside a declared body is an I/O failure (HTTPIOError), not a
syntax error: the bytes we got were fine, the transport stopped short.

=============================================================================
FAILURES
=============================================================================

    HTTPSyntaxError
        - stream closed before the first line (zero bytes read)
        - request line without exactly 3 tokens
        - status line without version and status tokens
        - unknown method / unsupported version / unknown status
        - header line without colon, header block cut off by EOF
        - declared body larger than max_body_size

    HTTPIOError
        - any OSError from the stream
        - stream ended before the declared body length

=============================================================================
"""

import io
from typing import BinaryIO, Optional

from .errors import HTTPSyntaxError
from .headers import DEFAULT_MAX_HEADERS, Headers
from .message import HTTPMethod, HTTPStatus, HTTPVersion
from .request import HTTPRequest
from .response import HTTPResponse
from .streams import (
    CRLF,
    DEFAULT_MAX_LINE_SIZE,
    flush,
    read_exact,
    read_line,
    read_to_end,
    write_all,
)


# =============================================================================
# ENCODING
# =============================================================================

def encode_request(request: HTTPRequest, writer: BinaryIO) -> None:
    """
    Write a request to the stream and flush it.

    Raises:
        HTTPIOError: The stream failed.
    """
    write_all(writer, f"{request.request_line}\r\n".encode("utf-8"))
    _write_headers_and_body(request.headers, request.body, writer)


def encode_response(response: HTTPResponse, writer: BinaryIO) -> None:
    """
    Write a response to the stream and flush it.

    Raises:
        HTTPIOError: The stream failed.
    """
    write_all(writer, f"{response.status_line}\r\n".encode("utf-8"))
    _write_headers_and_body(response.headers, response.body, writer)


def _write_headers_and_body(headers: Headers, body: bytes, writer: BinaryIO) -> None:
    headers.write_to(writer)

    # content-length: required so the peer knows where the body ends
    if not headers.contains("content-length"):
        write_all(writer, f"content-length: {len(body)}\r\n".encode("ascii"))

    write_all(writer, CRLF)
    write_all(writer, body)
    flush(writer)


# =============================================================================
# DECODING
# =============================================================================

def decode_request(
    reader: BinaryIO,
    max_line_size: int = DEFAULT_MAX_LINE_SIZE,
    max_headers: int = DEFAULT_MAX_HEADERS,
    max_body_size: Optional[int] = None,
) -> HTTPRequest:
    """
    Read one request from the stream.

    =====================================================================
    ALGORITHM
    =====================================================================

    1. Read the request line, split into METHOD PATH VERSION
    2. Parse method and version (strict)
    3. Read the header block
    4. Read the body if, and only if, content-length > 0

    =====================================================================

    Args:
        reader: Binary stream positioned at the start of a request.
        max_line_size: Longest line accepted, in bytes.
        max_headers: Most header lines accepted.
        max_body_size: Largest declared body accepted (None = no limit).

    Returns:
        The decoded HTTPRequest.

    Raises:
        HTTPSyntaxError: Malformed request.
        HTTPIOError: The stream failed or ended inside the body.
    """
    line = read_line(reader, max_line_size)
    if line is None:
        raise HTTPSyntaxError("Connection closed before request line")

    parts = line.split()
    if len(parts) != 3:
        raise HTTPSyntaxError(f"Invalid request line: {line!r}")

    method = HTTPMethod.from_token(parts[0])
    path = parts[1]
    version = HTTPVersion.from_token(parts[2])

    headers = Headers().read_from(reader, max_line_size, max_headers)

    length = headers.content_length()
    if not length:
        # Missing, unparsable or zero: never read further on the server
        body = b""
    else:
        if max_body_size is not None and length > max_body_size:
            raise HTTPSyntaxError(
                f"Request body too large: {length} bytes (limit {max_body_size})"
            )
        body = read_exact(reader, length)

    return HTTPRequest(
        method=method,
        path=path,
        version=version,
        headers=headers,
        body=body,
    )


def decode_response(
    reader: BinaryIO,
    max_line_size: int = DEFAULT_MAX_LINE_SIZE,
    max_headers: int = DEFAULT_MAX_HEADERS,
) -> HTTPResponse:
    """
    Read one response from the stream.

    The status line must have three tokens. Only the version and
    status-code tokens are parsed; the reason phrase is ignored.

    Without a content-length the body runs to end-of-stream, so this
    call blocks until the server closes the connection.

    Raises:
        HTTPSyntaxError: Malformed response.
        HTTPIOError: The stream failed or ended inside the body.
    """
    line = read_line(reader, max_line_size)
    if line is None:
        raise HTTPSyntaxError("Connection closed before status line")

    # "HTTP/1.1 404 Not Found" → ["HTTP/1.1", "404", "Not Found"]
    parts = line.split(None, 2)
    if len(parts) != 3:
        raise HTTPSyntaxError(f"Invalid status line: {line!r}")

    version = HTTPVersion.from_token(parts[0])
    status = HTTPStatus.from_token(parts[1])

    headers = Headers().read_from(reader, max_line_size, max_headers)

    length = headers.content_length()
    if length is None:
        body = read_to_end(reader)
    else:
        body = read_exact(reader, length)

    return HTTPResponse(
        status=status,
        headers=headers,
        body=body,
        version=version,
    )


# =============================================================================
# IN-MEMORY CONVENIENCE
# =============================================================================

def request_to_bytes(request: HTTPRequest) -> bytes:
    """Serialize a request exactly as encode_request would send it."""
    buffer = io.BytesIO()
    encode_request(request, buffer)
    return buffer.getvalue()


def response_to_bytes(response: HTTPResponse) -> bytes:
    """Serialize a response exactly as encode_response would send it."""
    buffer = io.BytesIO()
    encode_response(response, buffer)
    return buffer.getvalue()


def request_from_bytes(data: bytes, **limits) -> HTTPRequest:
    """Decode a request from a complete byte string."""
    return decode_request(io.BytesIO(data), **limits)


def response_from_bytes(data: bytes, **limits) -> HTTPResponse:
    """Decode a response from a complete byte string."""
    return decode_response(io.BytesIO(data), **limits)
