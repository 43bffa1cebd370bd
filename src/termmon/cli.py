"""Command-line interface for termmon.

Provides the main entry point for running the HTTP server and for
printing the recent command digest straight from the database.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="termmon",
        description="Shell command history collection service",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/termmon.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP collection server")
    serve_parser.add_argument("--host", type=str, default=None, help="Override server.host")
    serve_parser.add_argument("--port", type=int, default=None, help="Override server.port")

    recent_parser = subparsers.add_parser(
        "recent", help="Print the most recent commands from the database",
    )
    recent_parser.add_argument(
        "--limit", type=int, default=None,
        help="Number of commands to print (default: history.recent_limit)",
    )

    return parser.parse_args(argv)


def _serve(settings, args) -> None:
    """Build the application from settings and run it under uvicorn."""
    import uvicorn

    from termmon.endpoint.server import create_app

    app = create_app(
        database_url=settings.storage.database_url,
        echo=settings.storage.echo,
        recent_limit=settings.history.recent_limit,
        storage_failure=settings.server.storage_failure,
    )
    uvicorn.run(
        app,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
    )


def _print_recent(settings, args) -> None:
    """Print the recency digest exactly as GET /commands would serve it."""
    from termmon.endpoint.handlers import render_digest
    from termmon.storage.sqlite import SqliteCommandStore

    limit = args.limit if args.limit is not None else settings.history.recent_limit
    store = SqliteCommandStore(settings.storage.database_url, echo=settings.storage.echo)
    try:
        store.initialize()
        commands = store.recent(limit)
    finally:
        store.close()
    print(render_digest(commands), end="")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the termmon CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from termmon.config.settings import load_settings
    from termmon.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        logger.info("Starting command history server")
        _serve(settings, args)

    elif args.command == "recent":
        _print_recent(settings, args)


if __name__ == "__main__":
    main()
