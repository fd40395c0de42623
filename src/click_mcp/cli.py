"""Launcher serving any importable click application over MCP.

Usage:
    # Serve a click group as MCP tools on stdio
    click-mcp serve mypackage.cli:app

    # Run the application directly (what each tool call does)
    click-mcp run mypackage.cli:app hello --name World

    # With Claude Code
    claude mcp add myapp -- click-mcp serve mypackage.cli:app

Each tool call re-enters this launcher as
``python -m click_mcp run MODULE:ATTR <command path> --flag value ...``,
so the application does not need an ``mcp`` subcommand of its own.
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys
from typing import NoReturn

import click

from click_mcp.adapter import command_action, from_click
from click_mcp.config import BridgeConfig
from click_mcp.errors import BridgeError
from click_mcp.server import build_server, serve_stdio

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_command(target: str) -> click.Command:
    """Import a click command from a ``module:attribute`` path.

    Raises:
        ValueError: If target is not in ``module:attribute`` form.
        ImportError: If the module cannot be imported.
        TypeError: If the attribute is not a click command.
    """
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"expected MODULE:ATTR, got: {target!r}")

    module = importlib.import_module(module_name)
    obj = module
    for part in attribute.split("."):
        obj = getattr(obj, part)

    if not isinstance(obj, click.Command):
        raise TypeError(f"{target} is {type(obj).__name__}, not a click command")
    return obj


def serve(args: argparse.Namespace, command: click.Command) -> int:
    config = BridgeConfig(
        command=(sys.executable, "-m", "click_mcp"),
        prefix=("run", args.target),
        timeout=args.timeout,
    )
    tree = from_click(command, name=args.name, version=args.version)
    try:
        server = build_server(tree, command_action(command) is not None, config=config)
    except BridgeError as e:
        logger.error("Cannot serve %s: %s", args.target, e)
        return 1

    asyncio.run(serve_stdio(server))
    return 0


def run(args: argparse.Namespace, command: click.Command) -> NoReturn:
    """Run the command in click's standalone mode, exiting with its status."""
    command.main(args=list(args.args), prog_name=args.name or command.name)
    raise AssertionError("click standalone mode always exits")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="click-mcp",
        description="Serve a click application's commands as MCP tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve over stdio
  click-mcp serve mypackage.cli:app

  # Run a command the way a tool call does
  click-mcp run mypackage.cli:app hello --name World
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (logs go to stderr, default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    serve_parser = subparsers.add_parser("serve", help="Serve commands as MCP server on stdio")
    serve_parser.add_argument("target", help="Click command to serve, as MODULE:ATTR")
    serve_parser.add_argument("--name", help="Root name used in tool names (default: command name)")
    serve_parser.add_argument("--version", default="", help="Version reported to MCP clients")
    serve_parser.add_argument(
        "--timeout", type=float, help="Per-call timeout in seconds (default: none)"
    )

    run_parser = subparsers.add_parser("run", help="Run the click command with arguments")
    run_parser.add_argument("target", help="Click command to run, as MODULE:ATTR")
    run_parser.add_argument("--name", help="Program name shown in usage messages")
    run_parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the command")

    args = parser.parse_args(argv)

    # stdout carries the MCP stream, so logs go to stderr
    logging.basicConfig(stream=sys.stderr, level=args.log_level, format=LOG_FORMAT)

    if args.action == "serve" and args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    try:
        command = load_command(args.target)
    except (ValueError, ImportError, AttributeError, TypeError) as e:
        parser.error(f"cannot load {args.target}: {e}")

    if args.action == "serve":
        return serve(args, command)
    run(args, command)


if __name__ == "__main__":
    sys.exit(main())
