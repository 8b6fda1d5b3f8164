from __future__ import annotations

import argparse
import logging

from aiohttp import web

from .settings import Settings, settings
from .web import create_app

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None, defaults: Settings = settings) -> Settings:
    parser = argparse.ArgumentParser(
        prog="webdlna",
        description="Serve the folders of a MiniDLNA ContentDirectory as one HTML page.",
    )
    parser.add_argument(
        "--minidlna", default=defaults.minidlna_url, help="MiniDLNA server address"
    )
    parser.add_argument(
        "--cache-interval",
        type=float,
        default=defaults.cache_interval,
        help="seconds a folder listing is served before it is refreshed",
    )
    parser.add_argument(
        "--skip-prefix",
        action="append",
        dest="skip_prefixes",
        help='skip folders whose title starts with this (default: "All ")',
    )
    parser.add_argument(
        "--serve-stale",
        action="store_true",
        default=defaults.serve_stale_on_error,
        help="serve the previous listing when a refresh fails",
    )
    parser.add_argument("--log-level", default=defaults.log_level)
    parser.add_argument(
        "listen", nargs="?", default=defaults.listen, help="host:port to listen on"
    )
    args = parser.parse_args(argv)
    if args.cache_interval <= 0:
        parser.error("--cache-interval must be positive")

    return defaults.model_copy(
        update={
            "minidlna_url": args.minidlna.rstrip("/"),
            "cache_interval": args.cache_interval,
            "skip_title_prefixes": args.skip_prefixes or defaults.skip_title_prefixes,
            "serve_stale_on_error": args.serve_stale,
            "log_level": args.log_level.upper(),
            "listen": args.listen,
        }
    )


def main(argv: list[str] | None = None):
    config = parse_args(argv)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    host, port = config.listen_address
    logger.info("Listening on %s:%d for %s ...", host, port, config.minidlna_url)
    web.run_app(create_app(config), host=host, port=port, print=None)


if __name__ == "__main__":
    main()
