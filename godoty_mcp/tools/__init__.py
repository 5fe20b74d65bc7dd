"""Godot editor tools exposed over MCP."""

from godoty_mcp.tools.base import ToolDescriptor, ToolDomain, ToolResult
from godoty_mcp.tools.registry import ToolDispatcher, ToolRoute, all_tools, build_routes

__all__ = [
    "ToolDescriptor",
    "ToolDomain",
    "ToolResult",
    "ToolDispatcher",
    "ToolRoute",
    "all_tools",
    "build_routes",
]
