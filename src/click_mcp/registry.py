"""Tool registry and the command tree registrar."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from click_mcp.config import BridgeConfig
from click_mcp.errors import (
    BridgeError,
    DuplicateToolError,
    RegistrationError,
    ToolNotFoundError,
)
from click_mcp.invoker import MCP_COMMAND, Invoker, ToolHandler
from click_mcp.schema import translate_flags
from click_mcp.types import TOOL_DELIMITER, CallResult, Command, ToolDescriptor

logger = logging.getLogger(__name__)

# Commands never exposed as tools, along with everything beneath them.
EXCLUDED_COMMANDS = frozenset({MCP_COMMAND, "help"})


class ToolRegistry:
    """Ordered registry of tool descriptors and their handlers.

    Built once at start-up, then frozen. Enumeration follows registration
    order.

    Usage:
        registry = register_tree(root, root.has_action)
        for descriptor in registry.list_tools():
            print(descriptor.name)
        result = await registry.call_tool("app_hello", {"name": "World"})
    """

    def __init__(self) -> None:
        self._tools: dict[str, tuple[ToolDescriptor, ToolHandler]] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        """Add a tool.

        Raises:
            DuplicateToolError: If the name is taken or the registry is frozen.
        """
        if self._frozen:
            raise DuplicateToolError(descriptor.name, "cannot be added to a frozen registry")
        if descriptor.name in self._tools:
            raise DuplicateToolError(descriptor.name)
        self._tools[descriptor.name] = (descriptor, handler)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def list_tools(self) -> list[ToolDescriptor]:
        return [descriptor for descriptor, _ in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    def get(self, name: str) -> ToolDescriptor:
        """Get a tool descriptor by name.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        if name not in self._tools:
            raise ToolNotFoundError(name, self.names())
        return self._tools[name][0]

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> CallResult:
        """Dispatch a call to the tool's handler.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        if name not in self._tools:
            raise ToolNotFoundError(name, self.names())
        _, handler = self._tools[name]
        return await handler(name, arguments)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self.list_tools())

    def __len__(self) -> int:
        return len(self._tools)


def register_tree(
    root: Command,
    root_has_action: bool,
    *prefix: str,
    handler: ToolHandler | None = None,
    config: BridgeConfig | None = None,
    registry: ToolRegistry | None = None,
) -> ToolRegistry:
    """Register every eligible command of a tree as a tool.

    Walks the tree depth-first, parents before children. A command becomes a
    tool when it has an action and is not the root, or is the root and
    ``root_has_action`` is set. Commands named "mcp" or "help" and hidden
    commands are skipped together with their subcommands.

    ``root_has_action`` must be captured by the caller before anything that
    may replace the root's action (e.g. the CLI framework running the root).

    Args:
        root: Root of the command tree.
        root_has_action: Whether the root was callable before any mutation.
        *prefix: Leading path segments the default Invoker inserts on every
            call.
        handler: Handler shared by all tools. Defaults to an Invoker. A
            custom handler owns its own prefix and configuration, so it
            cannot be combined with ``prefix`` or ``config``.
        config: Bridge configuration for the default Invoker. Its prefix is
            replaced by ``prefix`` when one is given.
        registry: Registry to fill. A new one is created if None.

    Returns:
        The registry, frozen.

    Raises:
        RegistrationError: If a command cannot be translated into a tool.
        TypeError: If ``handler`` is given together with ``prefix`` or
            ``config``.
    """
    if handler is not None and (prefix or config is not None):
        raise TypeError(
            "prefix and config apply to the default Invoker only, not to a custom handler"
        )

    if handler is None:
        config = config if config is not None else BridgeConfig()
        if prefix:
            config = BridgeConfig(
                command=config.command, prefix=prefix, timeout=config.timeout, env=config.env
            )
        handler = Invoker(config)

    registry = registry if registry is not None else ToolRegistry()
    _register(registry, handler, root, (), root_has_action)
    registry.freeze()
    return registry


def _register(
    registry: ToolRegistry,
    handler: ToolHandler,
    command: Command,
    path: tuple[str, ...],
    root_has_action: bool,
) -> None:
    if command.name in EXCLUDED_COMMANDS or command.hidden:
        logger.debug("skipping command %s", " ".join((*path, command.name)))
        return

    loc = (*path, command.name)
    if TOOL_DELIMITER in command.name:
        raise RegistrationError(
            loc, ValueError(f"command name contains reserved delimiter {TOOL_DELIMITER!r}")
        )

    if command.has_action and (path or root_has_action):
        logger.debug("registering command %s", " ".join(loc))
        try:
            parameters = translate_flags(command.flags)
            descriptor = ToolDescriptor(
                name=TOOL_DELIMITER.join(loc),
                description=command.description or command.usage,
                parameters=tuple(parameters),
            )
            registry.register(descriptor, handler)
        except BridgeError as e:
            raise RegistrationError(loc, e) from e

    for sub in command.commands:
        _register(registry, handler, sub, loc, root_has_action)
