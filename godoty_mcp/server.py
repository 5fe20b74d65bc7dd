"""MCP server exposing Godot editor tools over stdio.

Only tools/list and tools/call are served. Every call is gated on the bridge
connection, and any failure on the dispatch path comes back to the agent as an
error-flagged text block rather than a protocol error.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from godoty_mcp import __version__
from godoty_mcp.bridge.client import GodotClient
from godoty_mcp.config.schema import Config
from godoty_mcp.tools.base import ToolDescriptor, ToolResult, text_content, tool_result
from godoty_mcp.tools.registry import ToolDispatcher
from godoty_mcp.utils.exceptions import ConnectFailedError, classify_exception, error_message

SERVER_NAME = "godoty-mcp"

NOT_CONNECTED_TEXT = (
    "Error: Not connected to Godot. Please ensure the Godot editor is running "
    "with the Godoty Bridge plugin enabled."
)


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema,
    )


def to_mcp_content(block: dict[str, Any]) -> types.TextContent | types.ImageContent:
    if block.get("type") == "image":
        return types.ImageContent(type="image", data=block["data"], mimeType=block["mimeType"])
    return types.TextContent(type="text", text=str(block.get("text", "")))


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[to_mcp_content(block) for block in result.get("content", [])],
        isError=bool(result.get("isError", False)),
    )


class GodotyMCPServer:
    """Protocol shell between MCP clients and the Godot tool dispatcher."""

    def __init__(
        self,
        client: GodotClient,
        *,
        name: str = SERVER_NAME,
        version: str = __version__,
        dispatcher: ToolDispatcher | None = None,
    ):
        self.client = client
        self.name = name
        self.version = version
        self.dispatcher = dispatcher or ToolDispatcher(client)

    @classmethod
    def from_config(cls, config: Config, client: GodotClient | None = None) -> "GodotyMCPServer":
        return cls(
            client or GodotClient.from_config(config.godot),
            name=config.server.name,
            version=config.server.version,
        )

    def list_tools(self) -> list[ToolDescriptor]:
        return self.dispatcher.list_tools()

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Run one tool call; never raises for dispatch-path failures."""
        if not self.client.is_connected():
            logger.warning("Tool {} called while Godot is not connected", name)
            return tool_result(text_content(NOT_CONNECTED_TEXT), is_error=True)

        try:
            return await self.dispatcher.dispatch(name, arguments or {})
        except Exception as exc:
            code, category, _ = classify_exception(exc)
            logger.warning("Tool {} failed ({}, {}): {}", name, code, category.value, error_message(exc))
            return tool_result(text_content(error_message(exc)), is_error=True)

    def build_server(self) -> Server:
        """Wire this shell into a low-level MCP ``Server``."""
        server = Server(self.name, version=self.version)

        @server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return [to_mcp_tool(descriptor) for descriptor in self.list_tools()]

        # Schemas are advertised only; arguments reach the editor untouched.
        @server.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
            return to_call_tool_result(await self.call_tool(name, arguments))

        return server

    async def start(self) -> None:
        """Connect to Godot; on failure keep serving and let the client retry."""
        try:
            await self.client.connect()
        except ConnectFailedError as exc:
            if self.client.reconnect_enabled:
                logger.warning("{}. Will keep retrying in the background.", exc.message)
            else:
                logger.warning("{}", exc.message)

    async def stop(self) -> None:
        await self.client.disconnect()

    async def run_stdio(self) -> None:
        server = self.build_server()
        logger.info("{} v{} serving on stdio", self.name, self.version)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    async def serve(self) -> None:
        """Connect, serve MCP over stdio until EOF, then disconnect."""
        await self.start()
        try:
            await self.run_stdio()
        finally:
            await self.stop()
