"""CLI entry point for aifns.

This module provides the command-line interface for starting the HTTP server
or an interactive chat. It can be invoked as `aifns` (via the script entry
point) or `python -m aifns`.
"""

import argparse
import asyncio
import os
import sys
from typing import Any

import uvicorn
from fastapi import FastAPI

from aifns import __version__, create_app
from aifns.config import AifnsSettings

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the serve and chat subcommands."""
    parser = argparse.ArgumentParser(
        prog="aifns",
        description="LLM conversations with typed function calling via Ollama",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"aifns {__version__}",
    )

    # Options shared by both subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via AIFNS_OLLAMA_HOST)",
    )
    common.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model to chat with (default: llama3.1:8b, can be set via AIFNS_MODEL)",
    )
    common.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help="Maximum model requests per answer (default: 10, can be set via AIFNS_MAX_TURNS)",
    )
    common.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=LOG_LEVELS,
        help="Logging level (default: INFO, can be set via AIFNS_LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser(
        "serve", parents=[common], help="Start the HTTP API server"
    )
    serve.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via AIFNS_HOST)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via AIFNS_PORT)",
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    subparsers.add_parser(
        "chat", parents=[common], help="Start an interactive chat in the terminal"
    )

    return parser


OPTION_NAMES = ("host", "port", "ollama_host", "model", "max_turns", "log_level")


def cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Settings given on the command line."""
    return {
        name: getattr(args, name)
        for name in OPTION_NAMES
        if getattr(args, name, None) is not None
    }


def settings_from_args(args: argparse.Namespace) -> AifnsSettings:
    """Build settings, CLI args override environment variables."""
    return AifnsSettings(**cli_overrides(args))


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the aifns CLI."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)

    if args.command == "chat":
        from aifns.cli import configure_logging, run_chat

        configure_logging(settings.log_level)
        try:
            asyncio.run(run_chat(settings))
        except KeyboardInterrupt:
            return 130
        return 0

    if args.reload:
        # The reloaded worker builds its settings from the environment
        for name, value in cli_overrides(args).items():
            os.environ[f"AIFNS_{name.upper()}"] = str(value)
        app: FastAPI | str = "aifns.app:create_app"
    else:
        app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
        factory=args.reload,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
