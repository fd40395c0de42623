"""Error types for click-mcp.

All errors inherit from BridgeError for easy catching at framework level.
"""

import difflib
from collections.abc import Sequence
from typing import Any


class BridgeError(Exception):
    """Base class for all click-mcp errors."""

    pass


class SchemaTranslationError(BridgeError):
    """Raised when a flag has no parameter schema equivalent."""

    def __init__(self, flag_name: str, flag_type: str, reason: str | None = None) -> None:
        self.flag_name = flag_name
        self.flag_type = flag_type
        self.reason = reason or f"unsupported flag type: {flag_type}"
        super().__init__(f"{self.reason} (flag '{flag_name}')")



class RegistrationError(BridgeError):
    """Raised when a command cannot be registered as a tool."""

    def __init__(self, location: tuple[str, ...], cause: Exception) -> None:
        self.location = location
        self.cause = cause
        super().__init__(f"failed to register command {' '.join(location)}: {cause}")


class DuplicateToolError(BridgeError):
    """Raised when a tool name is registered twice or the registry is frozen."""

    def __init__(self, tool_name: str, reason: str = "already registered") -> None:
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"Tool '{tool_name}' {reason}")


class ToolNotFoundError(BridgeError):
    """Raised when a call names a tool the registry does not hold.

    The message suggests up to three registered tools with similar names.
    """

    def __init__(self, tool_name: str, known_tools: Sequence[str] = ()) -> None:
        self.tool_name = tool_name
        self.known_tools = tuple(known_tools)
        self.suggestions = difflib.get_close_matches(tool_name, self.known_tools, n=3)
        msg = f"Unknown tool '{tool_name}'"
        if self.suggestions:
            msg += f"; did you mean: {', '.join(self.suggestions)}?"
        elif not self.known_tools:
            msg += "; no tools are registered"
        super().__init__(msg)



class RecursionGuardError(BridgeError):
    """Raised when a call would re-enter the MCP server subcommand."""

    def __init__(self, args: list[str]) -> None:
        self.command_args = args  # Named to avoid collision with Exception.args
        super().__init__("cannot invoke the MCP bridge from within itself")


class UnsupportedArgumentError(BridgeError):
    """Raised when a call argument is not a string, boolean or number."""

    def __init__(self, tool_name: str, argument: str, value: Any) -> None:
        self.tool_name = tool_name
        self.argument = argument
        self.value = value
        super().__init__(
            f"Tool '{tool_name}' argument '{argument}' has unsupported type "
            f"{type(value).__name__}; expected string, boolean or number"
        )
