"""Command-line entry point: ``toolchat-server`` or ``python -m toolchat_server``."""

import argparse
import logging
import sys

import uvicorn

from toolchat_server import __version__, create_app
from toolchat_server.config import ToolchatSettings

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolchat-server",
        description="Headless FastAPI server for tool-augmented LLM conversations",
    )
    parser.add_argument(
        "--version", action="version", version=f"toolchat-server {__version__}"
    )
    parser.add_argument("--host", help="Bind address [env: TOOLCHAT_HOST]")
    parser.add_argument("--port", type=int, help="Bind port [env: TOOLCHAT_PORT]")
    parser.add_argument(
        "--data-dir",
        help="Directory holding the record store [env: TOOLCHAT_DATA_DIR]",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Log level for the app and uvicorn [env: TOOLCHAT_LOG_LEVEL]",
    )
    parser.add_argument(
        "--reload", action="store_true", help="Restart on code changes (development)"
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> ToolchatSettings:
    """Load settings from the environment, letting given CLI flags win."""
    overrides = {
        name: getattr(args, name)
        for name in ("host", "port", "data_dir", "log_level")
        if getattr(args, name) is not None
    }
    return ToolchatSettings(**overrides)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    sys.exit(main())
