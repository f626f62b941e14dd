"""
=============================================================================
BYTE STREAM HELPERS
=============================================================================

Small blocking read/write primitives used by the header reader and the
codec. They work on any binary file-like object:

    - socket.makefile("rb") / socket.makefile("wb")   (real connections)
    - io.BytesIO                                       (tests, to_bytes)

=============================================================================
TCP IS A BYTE STREAM
=============================================================================

TCP does not preserve message boundaries, so a message is recovered by
looking for delimiters (CRLF for lines) and by counting bytes (the
content-length of a body). A buffered reader does the buffering for us:

    readline(limit)  → blocks until "\n", end-of-stream, or limit bytes
    read(n)          → blocks until n bytes or end-of-stream
    read()           → blocks until end-of-stream

Every OSError coming out of the stream (reset, broken pipe, timeout) is
re-raised as HTTPIOError so callers see exactly two failure kinds.

=============================================================================
"""

from typing import BinaryIO, Optional

from .errors import HTTPIOError, HTTPSyntaxError


CRLF = b"\r\n"

# Longest line (request line, status line or header line) accepted,
# terminator included.
DEFAULT_MAX_LINE_SIZE = 64 * 1024


def read_line(reader: BinaryIO, max_size: int = DEFAULT_MAX_LINE_SIZE) -> Optional[str]:
    """
    Read one line and return it without its line terminator.

    Every line must end in CRLF; a bare LF is a syntax error.

    Args:
        reader: Binary stream to read from.
        max_size: Maximum line length in bytes, terminator included.

    Returns:
        The decoded line, or None if the stream ended before any byte
        of the line was read.

    Raises:
        HTTPSyntaxError: Line too long, not CRLF-terminated, cut off by
                         end-of-stream, or not valid UTF-8.
        HTTPIOError: The stream failed.
    """
    try:
        raw = reader.readline(max_size)
    except OSError as e:
        raise HTTPIOError(f"Read failed: {e}") from e

    if not raw:
        return None

    if raw.endswith(CRLF):
        raw = raw[:-2]
    elif raw.endswith(b"\n"):
        raise HTTPSyntaxError(f"Line not terminated by CRLF: {raw!r}")
    elif len(raw) >= max_size:
        raise HTTPSyntaxError(f"Line exceeds {max_size} bytes")
    else:
        raise HTTPSyntaxError("Stream ended in the middle of a line")

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HTTPSyntaxError(f"Line is not valid UTF-8: {e}") from None


def read_exact(reader: BinaryIO, size: int) -> bytes:
    """
    Read exactly ``size`` bytes.

    Raises:
        HTTPIOError: The stream failed, ended before ``size`` bytes, or
                     ``size`` is too large to buffer.
    """
    if size == 0:
        return b""
    try:
        data = reader.read(size)
    except OSError as e:
        raise HTTPIOError(f"Read failed: {e}") from e
    except (OverflowError, MemoryError) as e:
        raise HTTPIOError(f"Cannot buffer a {size} byte body: {e}") from e

    data = data or b""
    if len(data) < size:
        raise HTTPIOError(
            f"Unexpected end of stream: expected {size} bytes, got {len(data)}"
        )
    return data


def read_to_end(reader: BinaryIO) -> bytes:
    """
    Read everything until the peer closes the stream.

    Blocks until end-of-stream. Only the client uses this, for responses
    that carry no content-length.
    """
    try:
        return reader.read() or b""
    except OSError as e:
        raise HTTPIOError(f"Read failed: {e}") from e


def write_all(writer: BinaryIO, data: bytes) -> None:
    """Write ``data`` to the stream, translating transport errors."""
    try:
        writer.write(data)
    except OSError as e:
        raise HTTPIOError(f"Write failed: {e}") from e


def flush(writer: BinaryIO) -> None:
    """Flush buffered output to the transport."""
    try:
        writer.flush()
    except OSError as e:
        raise HTTPIOError(f"Flush failed: {e}") from e
