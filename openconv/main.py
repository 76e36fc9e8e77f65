from __future__ import annotations

"""Entry point for serving the OpenConv state engine."""

import argparse
import asyncio
import logging
import sys

import uvicorn

from .config import AppConfig, config_path, load_config, save_config
from .context import create_context
from .errors import ConfigError
from .http.api import create_app
from .logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the OpenConv client state engine")
    parser.add_argument("--host", help="Bind address (overrides the config file)")
    parser.add_argument("--port", type=int, help="Port (overrides the config file)")
    parser.add_argument("--profile", help="Preference profile to restore and save")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--write-config",
        action="store_true",
        help="Write the effective configuration to disk and exit",
    )
    return parser


def apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.host:
        cfg.server.host = args.host
    if args.port:
        cfg.server.port = args.port
    if args.profile:
        cfg.profile = args.profile
    return cfg


async def main_async(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        cfg = apply_overrides(load_config(), args)
    except ConfigError as exc:
        setup_logging(debug=args.debug)
        logging.error("Configuration error: %s", exc)
        sys.exit(1)
    setup_logging(cfg.log_level, debug=args.debug)

    if args.write_config:
        save_config(cfg)
        logging.info("Configuration written to %s", config_path())
        return

    ctx = create_context(cfg)
    try:
        await ctx.start()
    except Exception:
        logging.exception("Startup failed")
        await ctx.close()
        sys.exit(1)

    app = create_app(ctx)
    server = uvicorn.Server(
        uvicorn.Config(app, host=cfg.server.host, port=cfg.server.port, log_level="info")
    )
    logging.info("Serving on http://%s:%s", cfg.server.host, cfg.server.port)
    try:
        await server.serve()
    finally:
        await ctx.close()


def main() -> None:
    asyncio.run(main_async())


if __name__ == "__main__":  # pragma: no cover
    main()
