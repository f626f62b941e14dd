"""
=============================================================================
TINYHTTP CLI ENTRY POINT
=============================================================================

=============================================================================
USAGE
=============================================================================

    # Demo server on localhost:8080
    python -m tinyhttp server

    # Custom address, verbose logging
    python -m tinyhttp server --host 0.0.0.0 --port 3000 --log-level DEBUG

    # One request against any HTTP/1.x server
    python -m tinyhttp client http://127.0.0.1:8080/ok
    python -m tinyhttp client http://127.0.0.1:8080/echo --method POST --data hi

Server settings not given on the command line come from the TINYHTTP_*
environment variables (see config.py).

=============================================================================
"""

import argparse
import sys

from . import __version__
from .client import HTTPClient
from .config import ClientConfig, ServerConfig
from .http import HTTPError, HTTPRequest, HTTPResponse, ok
from .server import HTTPServer


def build_demo_server(config: ServerConfig) -> HTTPServer:
    """
    Server with the demo routes:

        GET  /      text greeting
        GET  /ok    empty 200
        POST /echo  body sent back unchanged
    """
    server = HTTPServer(config=config)

    @server.get("/")
    def index(request: HTTPRequest) -> HTTPResponse:
        return ok("Hello from tinyhttp!\n", version=request.version)

    @server.get("/ok")
    def ok_handler(request: HTTPRequest) -> HTTPResponse:
        return ok(version=request.version)

    @server.post("/echo")
    def echo(request: HTTPRequest) -> HTTPResponse:
        return ok(request.body, content_type=request.get_header("content-type"), version=request.version)

    return server


def run_server(args: argparse.Namespace) -> int:
    config = ServerConfig.from_env()
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.log_level is not None:
        config.log_level = args.log_level

    server = build_demo_server(config)
    server.router.print_routes()
    server.run()
    return 0


def run_client(args: argparse.Namespace) -> int:
    client = HTTPClient(ClientConfig(timeout=args.timeout, user_agent=f"tinyhttp/{__version__}"))

    if args.method == "POST":
        response = client.post(args.url, args.data or "")
    else:
        response = client.get(args.url)

    print(response.status_line)
    for name, value in response.headers.items():
        print(f"{name}: {value}")
    print()
    sys.stdout.buffer.write(response.body)
    sys.stdout.flush()
    return 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="tinyhttp",
        description="Minimal HTTP/1.x client and server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttp server                          # Demo server on :8080
  python -m tinyhttp server --port 3000              # Custom port
  python -m tinyhttp client http://127.0.0.1:8080/ok # GET a URL
        """
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"tinyhttp {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # ─────────────────────────────────────────────────────────────────────
    # SERVER
    # ─────────────────────────────────────────────────────────────────────

    server_parser = subparsers.add_parser("server", help="Run the demo server")
    server_parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1)"
    )
    server_parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)"
    )
    server_parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )
    server_parser.set_defaults(func=run_server)

    # ─────────────────────────────────────────────────────────────────────
    # CLIENT
    # ─────────────────────────────────────────────────────────────────────

    client_parser = subparsers.add_parser("client", help="Send one request and print the response")
    client_parser.add_argument("url", help="http:// URL to request")
    client_parser.add_argument(
        "--method", "-X",
        choices=["GET", "POST"],
        default="GET",
        help="Request method (default: GET)"
    )
    client_parser.add_argument(
        "--data", "-d",
        default=None,
        help="Request body for POST"
    )
    client_parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Socket timeout in seconds (default: none)"
    )
    client_parser.set_defaults(func=run_client)

    args = parser.parse_args(argv)

    try:
        return args.func(args)
    except (HTTPError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
