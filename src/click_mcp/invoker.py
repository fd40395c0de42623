"""Invocation bridge: turns a tool call into a subprocess run and back."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from collections.abc import Awaitable, Callable, Mapping
from decimal import Decimal
from typing import Any

from click_mcp.config import BridgeConfig
from click_mcp.errors import RecursionGuardError, UnsupportedArgumentError
from click_mcp.types import TOOL_DELIMITER, CallResult

logger = logging.getLogger(__name__)

# Name of the subcommand that serves the bridge itself.
MCP_COMMAND = "mcp"

ToolHandler = Callable[[str, Mapping[str, Any]], Awaitable[CallResult]]


def format_value(value: Any) -> str:
    """Render a scalar argument as a command-line token.

    Strings pass through unchanged, booleans become "true"/"false" and
    numbers use the shortest decimal that round-trips, without exponent or
    trailing zeros (688.0 -> "688", 1e-07 -> "0.0000001").

    Raises:
        TypeError: If value is not a string, boolean or number.
    """
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(Decimal(repr(value)).normalize(), "f")
    raise TypeError(f"unsupported argument type: {type(value).__name__}")


class Invoker:
    """Handler shared by every registered tool.

    Re-executes the configured program with the command path decoded from the
    tool name plus one ``--name value`` pair per argument. No shell is used,
    so argument values are never interpreted.

    Usage:
        invoker = Invoker(BridgeConfig(command=("/usr/local/bin/app",)))
        result = await invoker("app_hello", {"name": "World"})
        # runs: /usr/local/bin/app hello --name World
    """

    def __init__(self, config: BridgeConfig | None = None) -> None:
        self._config = config if config is not None else BridgeConfig()

    @property
    def config(self) -> BridgeConfig:
        return self._config

    def build_args(self, tool_name: str, arguments: Mapping[str, Any]) -> list[str]:
        """Reconstruct the argument vector for a tool call.

        The first segment of the tool name is the root command, which the
        re-executed program already is, so it is dropped.

        Raises:
            RecursionGuardError: If the command path would run the MCP server.
            UnsupportedArgumentError: If an argument value is not a scalar.
        """
        args = [*self._config.prefix, *tool_name.split(TOOL_DELIMITER)[1:]]

        if MCP_COMMAND in args:
            raise RecursionGuardError(args)

        for key, value in arguments.items():
            try:
                token = format_value(value)
            except TypeError as e:
                raise UnsupportedArgumentError(tool_name, key, value) from e
            args.extend([f"--{key}", token])

        return args

    async def __call__(self, tool_name: str, arguments: Mapping[str, Any]) -> CallResult:
        """Run a tool call.

        Args:
            tool_name: Qualified tool name, e.g. "app_hello".
            arguments: Parameter name -> scalar value.

        Returns:
            Success carrying stdout when the command exits 0, otherwise an
            error result carrying stderr.

        Raises:
            RecursionGuardError: If the call targets the MCP server itself.
            UnsupportedArgumentError: If an argument value is not a scalar.
        """
        args = self.build_args(tool_name, arguments or {})
        cmd = [*self._config.command, *args]
        logger.info("forking %s with args %s", cmd[0], cmd[1:])

        try:
            returncode, stdout, stderr = await self._run_subprocess(cmd)
        except TimeoutError:
            logger.warning("Tool %s timed out after %ss", tool_name, self._config.timeout)
            return CallResult.failure(f"Command timed out after {self._config.timeout}s")
        except OSError as e:
            logger.warning("Tool %s failed to start: %s", tool_name, e)
            return CallResult.failure("")

        logger.debug("invoked tool %s, stderr: %r", tool_name, stderr)

        if returncode != 0:
            logger.warning("Tool %s exited with code %s", tool_name, returncode)
            return CallResult.failure(stderr)

        return CallResult.success(stdout)

    async def _run_subprocess(self, cmd: list[str]) -> tuple[int, str, str]:
        """Run a subprocess and return its exit code, stdout and stderr."""
        full_env = None
        if self._config.env:
            full_env = os.environ.copy()
            full_env.update(self._config.env)

        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=full_env,
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._config.timeout
            )
        except TimeoutError:
            process.kill()
            await process.wait()
            raise
        except asyncio.CancelledError:
            # Reaped by the event loop's child watcher; awaiting here would be
            # cancelled again by the caller's cancel scope.
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            raise

        return (
            process.returncode,
            stdout.decode(errors="replace"),
            stderr.decode(errors="replace"),
        )
