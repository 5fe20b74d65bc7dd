"""Editor actions (run, stop, select, edit) and debugger error retrieval."""

from __future__ import annotations

from typing import Any

from godoty_mcp.bridge.serialization import safe_dict
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

DOMAIN = ToolDomain.ACTIONS

EDITOR_ACTIONS = [
    "run_scene",
    "run_main_scene",
    "stop_scene",
    "pause_scene",
    "resume_scene",
    "select_node",
    "focus_node",
    "set_property",
    "create_node",
    "save_scene",
    "reload_scene",
]

TOOLS: list[ToolDescriptor] = [
    ToolDescriptor(
        name="godot_run_action",
        description="Execute an action in the Godot editor",
        input_schema={
            "type": "object",
            "properties": {
                "action": {"type": "string", "enum": EDITOR_ACTIONS, "description": "Action to execute"},
                "params": {"type": "object", "description": "Action-specific parameters"},
            },
            "required": ["action"],
        },
    ),
    ToolDescriptor(
        name="godot_get_errors",
        description="Get recent errors and warnings from the debugger",
        input_schema={
            "type": "object",
            "properties": {
                "count": {"type": "number", "default": 10},
                "severity": {"type": "string", "enum": ["error", "warning", "all"], "default": "all"},
            },
        },
    ),
]

METHODS = {
    "godot_run_action": "execute_action",
    "godot_get_errors": "get_errors",
}


def _format_error_entry(entry: dict[str, Any]) -> str:
    severity = str(entry.get("severity") or "")
    icon = "❌" if severity == "error" else "⚠️"
    source = safe_dict(entry.get("source"))
    return (
        f"{icon} [{severity.upper()}] {entry.get('message')}\n"
        f"   at {source.get('script')}:{source.get('line')} in {source.get('function') or 'unknown'}"
    )


def format_errors(result: dict[str, Any]) -> str:
    errors = [e for e in result.get("errors") or [] if isinstance(e, dict)]
    if not errors:
        return "No errors or warnings found."
    filtered = result.get("filtered_count", len(errors))
    total = result.get("total_count", len(errors))
    body = "\n\n".join(_format_error_entry(e) for e in errors)
    return f"Found {filtered} of {total} errors/warnings:\n\n{body}"


async def handle_tool(name: str, args: dict[str, Any], client: RpcCaller) -> ToolResult:
    method = METHODS.get(name)
    if method is None:
        raise UnknownToolError(name)

    result = await client.call(method, args)

    if name == "godot_get_errors":
        if not is_success(result):
            return text_result(f"Failed to get errors: {remote_error_message(result)}")
        return text_result(format_errors(result))

    if not is_success(result):
        return text_result(f"Action failed: {remote_error_message(result)}")
    action = result.get("action") or args.get("action")
    return text_result(result.get("message") or f"Action '{action}' completed successfully")
