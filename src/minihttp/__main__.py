"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    python -m minihttp                       # 127.0.0.1:8080, ./public
    python -m minihttp 0.0.0.0:8080          # bind address as host:port
    python -m minihttp --port 3000 --public ./site
    python -m minihttp --buffer-size 4096    # accept larger requests

Runs the bundled WebsiteHandler. Environment variables (HTTP_HOST,
HTTP_PORT, HTTP_BUFFER_SIZE, HTTP_PUBLIC_DIR, HTTP_LOG_LEVEL) provide the
defaults; command-line arguments override them.

Exit status 1 if the address cannot be bound or the configuration is
invalid.

=============================================================================
"""

import argparse
import os
import sys

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .handlers import WebsiteHandler
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal single-threaded HTTP/1.1 server",
    )
    parser.add_argument(
        "address",
        nargs="?",
        default=None,
        help="Bind address as host:port (overrides --host/--port)",
    )
    parser.add_argument("--host", "-H", default=None, help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port to listen on (default: 8080)")
    parser.add_argument(
        "--buffer-size", "-b",
        type=int,
        default=None,
        help="Bytes read per request; also the maximum request size (default: 1024)",
    )
    parser.add_argument(
        "--public", "-d",
        default=None,
        help="Directory to serve files from (default: ./public)",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment first, then command-line overrides."""
    config = ServerConfig.from_env()

    if args.address:
        bound = ServerConfig.from_address(args.address)
        config.host, config.port = bound.host, bound.port
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.buffer_size is not None:
        config.buffer_size = args.buffer_size
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.public is not None:
        config.public_dir = args.public
    if config.public_dir is None:
        config.public_dir = os.path.join(os.getcwd(), "public")

    return config


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = HTTPServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        server.run(WebsiteHandler(config.public_dir))
    except OSError as e:
        print(f"Error: cannot listen on {config.host}:{config.port}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
