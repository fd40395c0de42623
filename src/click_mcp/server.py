"""MCP server exposing a command tree's tools over stdio.

Usage:
    server = build_server(root, root.has_action)
    asyncio.run(serve_stdio(server))
"""

from __future__ import annotations

import logging

import mcp.types as types
from mcp import McpError
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from click_mcp.config import BridgeConfig
from click_mcp.errors import BridgeError
from click_mcp.registry import ToolRegistry, register_tree
from click_mcp.types import CallResult, Command, ToolDescriptor

logger = logging.getLogger(__name__)


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema(),
    )


def to_mcp_result(result: CallResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def create_server(name: str, registry: ToolRegistry, version: str | None = None) -> Server:
    """Create an MCP server serving the tools of a registry.

    Only the tools capability is advertised. Failed commands are returned as
    results with isError set; bridge errors (unknown tool, recursion guard,
    bad argument) become JSON-RPC errors.
    """
    server: Server = Server(name, version=version)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [to_mcp_tool(d) for d in registry.list_tools()]

    async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
        name = req.params.name
        arguments = req.params.arguments or {}
        try:
            result = await registry.call_tool(name, arguments)
        except BridgeError as e:
            logger.warning("Tool call %s rejected: %s", name, e)
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e
        return types.ServerResult(to_mcp_result(result))

    # Installed directly rather than via @server.call_tool(), which turns every
    # exception into an isError result.
    server.request_handlers[types.CallToolRequest] = call_tool
    return server


def build_server(
    root: Command,
    root_has_action: bool,
    *prefix: str,
    config: BridgeConfig | None = None,
) -> Server:
    """Build an MCP server for a command tree.

    Args:
        root: Root of the command tree; its name and version identify the server.
        root_has_action: Whether the root was callable before any mutation.
        *prefix: Leading path segments inserted on every call.
        config: Bridge configuration. Defaults to re-executing this program.

    Raises:
        RegistrationError: If a command cannot be translated into a tool.
    """
    logger.debug("building MCP server for %s", root.name)
    registry = register_tree(root, root_has_action, *prefix, config=config)
    return create_server(root.name, registry, version=root.version or None)


async def serve_stdio(server: Server) -> None:
    """Serve over stdin/stdout until the input stream closes or is cancelled."""
    logger.debug("serving MCP server %s on stdio", server.name)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
