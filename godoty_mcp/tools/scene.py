"""Scene tree, selection and node inspection tools."""

from __future__ import annotations

import json
from typing import Any

from godoty_mcp.tools.base import (
    RpcCaller,
    ToolDescriptor,
    ToolDomain,
    ToolResult,
    is_success,
    remote_error_message,
    text_result,
)
from godoty_mcp.utils.exceptions import UnknownToolError

DOMAIN = ToolDomain.SCENE

TOOLS: list[ToolDescriptor] = [
    ToolDescriptor(
        name="godot_get_scene",
        description="Get the current scene tree structure",
        input_schema={
            "type": "object",
            "properties": {
                "root_path": {"type": "string", "default": "/root", "description": "Starting node path"},
                "max_depth": {"type": "number", "default": -1, "description": "Maximum depth (-1 for unlimited)"},
                "include_properties": {"type": "boolean", "default": False},
            },
        },
    ),
    ToolDescriptor(
        name="godot_get_selected",
        description="Get currently selected nodes in the editor",
        input_schema={
            "type": "object",
            "properties": {
                "include_properties": {"type": "boolean", "default": False},
            },
        },
    ),
    ToolDescriptor(
        name="godot_get_node",
        description="Get detailed information about a specific node",
        input_schema={
            "type": "object",
            "properties": {
                "node_path": {"type": "string", "description": "Path to the node"},
                "include_children": {"type": "boolean", "default": False},
            },
            "required": ["node_path"],
        },
    ),
]

METHODS = {
    "godot_get_scene": "get_scene_tree",
    "godot_get_selected": "get_selected_nodes",
    "godot_get_node": "get_node_properties",
}

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


def _node_label(node: dict[str, Any]) -> str:
    label = f"{node.get('name')} ({node.get('type')})"
    script = node.get("script")
    if script:
        label += f" [script: {str(script).split('/')[-1]}]"
    return label


def _children(node: dict[str, Any]) -> list[dict[str, Any]]:
    children = node.get("children")
    if not isinstance(children, list):
        return []
    return [child for child in children if isinstance(child, dict)]


def _append_subtree(lines: list[str], node: dict[str, Any], indent: str) -> None:
    children = _children(node)
    for index, child in enumerate(children):
        last = index == len(children) - 1
        lines.append(f"{indent}{LAST_BRANCH if last else BRANCH}{_node_label(child)}")
        _append_subtree(lines, child, indent + (SPACE if last else PIPE))


def format_scene_tree(scene_path: str, root: dict[str, Any]) -> str:
    lines = [f"Scene: {scene_path}", "", _node_label(root)]
    _append_subtree(lines, root, "")
    return "\n".join(lines)


def format_selected_nodes(nodes: list[Any]) -> str:
    nodes = [node for node in nodes if isinstance(node, dict)]
    if not nodes:
        return "No nodes selected"

    lines = [f"Selected {len(nodes)} node(s):", ""]
    for node in nodes:
        lines.append(f"- **{node.get('name')}** ({node.get('type')})")
        lines.append(f"  Path: {node.get('path')}")
        if node.get("script"):
            lines.append(f"  Script: {node['script']}")
        lines.append("")
    return "\n".join(lines)


def format_raw(result: Any) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False)


async def handle_tool(name: str, args: dict[str, Any], client: RpcCaller) -> ToolResult:
    method = METHODS.get(name)
    if method is None:
        raise UnknownToolError(name)

    result = await client.call(method, args)
    if not is_success(result):
        return text_result(f"Error: {remote_error_message(result)}")

    if name == "godot_get_scene" and isinstance(result.get("root"), dict):
        return text_result(format_scene_tree(result.get("scene_path") or "", result["root"]))
    if name == "godot_get_selected" and isinstance(result.get("selected_nodes"), list):
        return text_result(format_selected_nodes(result["selected_nodes"]))
    return text_result(format_raw(result))
