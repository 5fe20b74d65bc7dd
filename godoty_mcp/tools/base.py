"""Shared types and content-block helpers for Godot editor tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol

from godoty_mcp.bridge.serialization import safe_dict

ToolResult = dict[str, Any]


class ToolDomain(str, Enum):
    CAPTURE = "capture"
    DOCS = "docs"
    SCENE = "scene"
    ACTIONS = "actions"


class RpcCaller(Protocol):
    """Anything that can issue a Godot RPC call (normally a GodotClient)."""

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any: ...


ToolHandler = Callable[[str, dict[str, Any], RpcCaller], Awaitable[ToolResult]]


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """
    Static description of one agent-facing tool.

    The input schema is advertised to the agent as-is and never enforced here.
    """

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    def to_schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def text_content(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


def image_content(data: str, mime_type: str) -> dict[str, Any]:
    return {"type": "image", "data": data, "mimeType": mime_type}


def tool_result(*blocks: dict[str, Any], is_error: bool = False) -> ToolResult:
    """Wrap content blocks in the call-tool response envelope."""
    result: ToolResult = {"content": list(blocks)}
    if is_error:
        result["isError"] = True
    return result


def text_result(text: str) -> ToolResult:
    return tool_result(text_content(text))


def is_success(result: Any) -> bool:
    return bool(safe_dict(result).get("success"))


def remote_error_message(result: Any) -> str:
    """Message from a ``success: false`` payload's ``error`` object."""
    error = safe_dict(result).get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    return "Unknown error"
