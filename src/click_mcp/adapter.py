"""Adapter from click command trees to bridge command trees."""

from __future__ import annotations

import asyncio
import os
from typing import Any

import click

from click_mcp.config import BridgeConfig
from click_mcp.errors import BridgeError
from click_mcp.invoker import MCP_COMMAND
from click_mcp.server import build_server, serve_stdio
from click_mcp.types import Command, Flag


def command_action(command: click.Command) -> Any:
    """Return the callable a command runs on its own, or None.

    A group's callback only counts when the group can be invoked without a
    subcommand.
    """
    if command.callback is None:
        return None
    if isinstance(command, click.Group) and not command.invoke_without_command:
        return None
    return command.callback


def _scalar_default(value: Any) -> Any:
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    if isinstance(value, (str, bool, int, float)):
        return value
    # Callables, click's unset sentinel, tuples
    return None


def _converted_default(param: click.Option) -> Any:
    """Return the default the option's callback would receive, as a scalar.

    click keeps a declared default as written (``default="false"`` on a
    ``type=bool`` option) and converts it only when the command runs.
    """
    default = _scalar_default(param.default)
    if default is None:
        return None
    try:
        return _scalar_default(param.type(default, param))
    except click.BadParameter:
        # Left as declared for the schema translator to reject
        return default


def flag_from_param(param: click.Parameter) -> Flag | None:
    """Convert a click parameter into a Flag.

    Parameters the bridge cannot pass as ``--name value`` (positional
    arguments, on/off and counting flags, multi-value and short-only
    options) get a type name the schema translator rejects, so registration
    fails loudly.

    Returns:
        The Flag, or None for parameters that never reach the callback
        (``expose_value=False``, e.g. --version).
    """
    if not param.expose_value:
        return None

    name = param.name or ""
    usage = getattr(param, "help", None) or ""

    if not isinstance(param, click.Option):
        return Flag(name=name, type="argument", usage=usage, required=param.required)

    long_opt = next((opt[2:] for opt in param.opts if opt.startswith("--")), None)
    if long_opt is None:
        return Flag(name=name, type="short-only option", usage=usage, required=param.required)

    default = _scalar_default(param.default)
    if param.is_flag:
        type_name = "boolean flag"
    elif param.count:
        type_name = "count"
    elif param.multiple or param.nargs != 1:
        type_name = f"multiple {param.type.name}"
    else:
        type_name = param.type.name
        default = _converted_default(param)

    return Flag(
        name=long_opt,
        type=type_name,
        usage=usage,
        required=param.required,
        default=default,
    )


def from_click(
    command: click.Command,
    name: str | None = None,
    version: str = "",
) -> Command:
    """Build a bridge command tree from a click command or group.

    Args:
        command: The click command. Groups are walked recursively.
        name: Name for the root, e.g. the program name. Defaults to
            ``command.name``.
        version: Version reported by the MCP server.

    Returns:
        The equivalent Command tree. The click objects are not modified.
    """
    name = name or command.name or ""

    flags = tuple(
        flag for flag in (flag_from_param(p) for p in command.params) if flag is not None
    )

    children: list[Command] = []
    if isinstance(command, click.Group):
        ctx = click.Context(command, info_name=name)
        for sub_name in command.list_commands(ctx):
            sub = command.get_command(ctx, sub_name)
            if sub is not None:
                children.append(from_click(sub, sub_name))

    return Command(
        name=name,
        description=command.help or "",
        usage=command.short_help or "",
        version=version,
        flags=flags,
        commands=tuple(children),
        action=command_action(command),
        hidden=command.hidden,
    )


def mcp_command(
    root: click.Command,
    *prefix: str,
    name: str | None = None,
    version: str = "",
    config: BridgeConfig | None = None,
) -> click.Command:
    """Create the ``mcp`` subcommand that serves ``root`` over MCP on stdio.

    Whether the root is callable is captured here, before the CLI runs.

    Usage:
        cli.add_command(mcp_command(cli, name="example"))

    Args:
        root: Root command or group of the application.
        *prefix: Leading path segments inserted on every call.
        name: Root name used in tool names. Defaults to ``root.name``.
        version: Version reported by the MCP server.
        config: Bridge configuration. Defaults to re-executing this program.
    """
    root_has_action = command_action(root) is not None

    @click.command(
        MCP_COMMAND,
        help="Serve commands as MCP server on stdio",
        short_help="Serve commands as MCP server on stdio",
    )
    def serve() -> None:
        tree = from_click(root, name=name, version=version)
        try:
            server = build_server(tree, root_has_action, *prefix, config=config)
        except BridgeError as e:
            raise click.ClickException(str(e)) from e
        asyncio.run(serve_stdio(server))

    return serve
