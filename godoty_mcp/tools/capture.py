"""Screenshot tools: editor viewports and the running game."""

from __future__ import annotations

import re
from typing import Any

from godoty_mcp.bridge.serialization import safe_dict
from godoty_mcp.tools.base import (
    RpcCaller,
    ToolDescriptor,
    ToolDomain,
    ToolResult,
    image_content,
    is_success,
    remote_error_message,
    text_content,
    text_result,
    tool_result,
)
from godoty_mcp.utils.exceptions import UnknownToolError

DOMAIN = ToolDomain.CAPTURE

DATA_URL_RE = re.compile(r"^data:image/(\w+);base64,(.+)$")

TOOLS: list[ToolDescriptor] = [
    ToolDescriptor(
        name="godot_capture_viewport",
        description="Capture a screenshot of the Godot editor viewport (2D or 3D)",
        input_schema={
            "type": "object",
            "properties": {
                "viewport_type": {
                    "type": "string",
                    "enum": ["2d", "3d", "both"],
                    "default": "3d",
                    "description": "Which viewport to capture",
                },
                "max_width": {"type": "number", "default": 2048, "description": "Maximum image width"},
                "max_height": {"type": "number", "default": 2048, "description": "Maximum image height"},
            },
        },
    ),
    ToolDescriptor(
        name="godot_capture_game",
        description="Capture a screenshot of the running game",
        input_schema={
            "type": "object",
            "properties": {
                "max_width": {"type": "number", "default": 1920},
                "max_height": {"type": "number", "default": 1080},
            },
        },
    ),
]

METHODS = {
    "godot_capture_viewport": "capture_viewport",
    "godot_capture_game": "capture_game",
}


def split_data_url(data_url: Any) -> tuple[str, str] | None:
    """Return ``(mime_type, base64_payload)`` for an image data URL, else None."""
    if not isinstance(data_url, str):
        return None
    match = DATA_URL_RE.match(data_url)
    if match is None:
        return None
    return f"image/{match.group(1)}", match.group(2)


def _image_blocks(data_url: Any, caption: str) -> list[dict[str, Any]]:
    blocks = []
    parts = split_data_url(data_url)
    if parts is not None:
        mime_type, payload = parts
        blocks.append(image_content(payload, mime_type))
    blocks.append(text_content(caption))
    return blocks


def format_capture(result: dict[str, Any]) -> ToolResult:
    content: list[dict[str, Any]] = []

    if result.get("image"):
        caption = (
            f"Captured {result.get('viewport_type') or 'game'} viewport "
            f"({result.get('width')}x{result.get('height')})"
        )
        if result.get("scene_path"):
            caption += f" - Scene: {result['scene_path']}"
        content.extend(_image_blocks(result["image"], caption))

    for viewport_type, shot in safe_dict(result.get("images")).items():
        shot = safe_dict(shot)
        caption = f"{str(viewport_type).upper()} viewport ({shot.get('width')}x{shot.get('height')})"
        content.extend(_image_blocks(shot.get("image"), caption))

    return tool_result(*content)


async def handle_tool(name: str, args: dict[str, Any], client: RpcCaller) -> ToolResult:
    method = METHODS.get(name)
    if method is None:
        raise UnknownToolError(name)
    result = await client.call(method, args)
    if not is_success(result):
        return text_result(f"Failed to capture: {remote_error_message(result)}")
    return format_capture(result)
