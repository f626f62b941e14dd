"""
=============================================================================
HTTP ERRORS
=============================================================================

Exception types raised while encoding, decoding and transporting messages.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ERROR HIERARCHY                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTPError                                                          │
    │   ├── HTTPSyntaxError   "the peer sent garbage"                      │
    │   │     - malformed request/status line                              │
    │   │     - unknown method, unsupported version, unknown status        │
    │   │     - header line without a colon                                │
    │   │     - header block cut off by end-of-stream                      │
    │   │                                                                  │
    │   └── HTTPIOError       "the network broke"                          │
    │         - connect/bind/accept/read/write failure                     │
    │         - stream ended inside a declared body                        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Keeping the two kinds apart lets a caller decide what to report: a syntax
error is a bug on the other side, an I/O error is usually transient.

=============================================================================
"""


class HTTPError(Exception):
    """Base class for every error raised by tinyhttp."""


class HTTPSyntaxError(HTTPError):
    """
    Raised when bytes on the wire do not form a valid HTTP/1.x message.

    Decoding stops at the first malformed field. No default value is ever
    substituted for a missing or broken mandatory field.
    """


class HTTPIOError(HTTPError):
    """
    Raised when the underlying transport fails.

    The original OSError (if any) is available as ``__cause__``.
    """
