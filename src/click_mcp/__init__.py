"""click-mcp: serve click command trees as MCP tools."""

# Click integration
from click_mcp.adapter import from_click, mcp_command
from click_mcp.config import BridgeConfig
from click_mcp.errors import (
    BridgeError,
    DuplicateToolError,
    RecursionGuardError,
    RegistrationError,
    SchemaTranslationError,
    ToolNotFoundError,
    UnsupportedArgumentError,
)
from click_mcp.invoker import Invoker
from click_mcp.registry import ToolRegistry, register_tree
from click_mcp.schema import translate_flags
from click_mcp.server import build_server, serve_stdio

# Core types (foundational, used everywhere)
from click_mcp.types import (
    TOOL_DELIMITER,
    CallResult,
    Command,
    Flag,
    FlagKind,
    ParameterSchema,
    ToolDescriptor,
)

__version__ = "0.1.0"

__all__ = [
    # Click integration
    "from_click",
    "mcp_command",
    # Bridge
    "BridgeConfig",
    "Invoker",
    "ToolRegistry",
    "register_tree",
    "translate_flags",
    "build_server",
    "serve_stdio",
    # Types
    "TOOL_DELIMITER",
    "CallResult",
    "Command",
    "Flag",
    "FlagKind",
    "ParameterSchema",
    "ToolDescriptor",
    # Errors
    "BridgeError",
    "SchemaTranslationError",
    "RegistrationError",
    "DuplicateToolError",
    "ToolNotFoundError",
    "RecursionGuardError",
    "UnsupportedArgumentError",
]
