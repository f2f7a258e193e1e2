"""
Serve one EPUB to every reader on the network.

Usage:
    reading-room /path/to/book.epub [--password secret] [--port 15470]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import uvicorn

from reading_room.config import ServerSettings

from api.app import create_app
from api.dependencies import build_state

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = ServerSettings.from_env()
    parser = argparse.ArgumentParser(prog="reading-room", description="Share one EPUB with many readers.")
    parser.add_argument("epub", type=Path, help="Path to the EPUB file to serve")
    parser.add_argument("--password", default=defaults.password, help="Require this password from clients")
    parser.add_argument("--host", default=defaults.host, help="Bind address")
    parser.add_argument("--port", type=int, default=defaults.port, help="Bind port")
    parser.add_argument(
        "--sweep-interval",
        type=float,
        default=defaults.sweep_interval,
        help="Seconds between sweeps of inactive readers",
    )
    parser.add_argument("--no-search", action="store_true", help="Do not build the full-text search index")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    settings = ServerSettings(
        epub_path=args.epub,
        password=args.password,
        host=args.host,
        port=args.port,
        sweep_interval=args.sweep_interval,
        enable_search=not args.no_search,
    )
    # Load before binding so a broken book never starts serving.
    state = build_state(settings)
    app = create_app(settings, state=state)

    logger.info("Server listening on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
