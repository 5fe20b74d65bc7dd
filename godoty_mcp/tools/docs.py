"""Class reference lookup and search against the editor's built-in docs."""

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

DOMAIN = ToolDomain.DOCS

TOOLS: list[ToolDescriptor] = [
    ToolDescriptor(
        name="godot_get_docs",
        description="Get documentation for a Godot class or method from the running editor",
        input_schema={
            "type": "object",
            "properties": {
                "class_name": {"type": "string", "description": 'Godot class name (e.g., "CharacterBody3D")'},
                "method_name": {"type": "string", "description": "Optional: specific method to document"},
                "include_inherited": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include inherited members",
                },
            },
            "required": ["class_name"],
        },
    ),
    ToolDescriptor(
        name="godot_search_docs",
        description="Search Godot documentation for classes, methods, or properties",
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "limit": {"type": "number", "default": 10},
            },
            "required": ["query"],
        },
    ),
]

METHODS = {
    "godot_get_docs": "get_class_docs",
    "godot_search_docs": "search_docs",
}


def resolve_method(name: str, args: dict[str, Any]) -> str:
    """Remote method for a docs tool; a method_name narrows class docs to one method."""
    if name == "godot_get_docs" and args.get("method_name"):
        return "get_method_docs"
    method = METHODS.get(name)
    if method is None:
        raise UnknownToolError(name)
    return method


def _rows(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def _arguments(entry: dict[str, Any]) -> str:
    return ", ".join(f"{arg.get('name')}: {arg.get('type')}" for arg in _rows(entry.get("arguments")))


def format_search_results(query: Any, result: dict[str, Any]) -> str:
    lines = [
        f"- [{row.get('type')}] {row.get('class_name')}.{row.get('name')}"
        for row in _rows(result.get("results"))
    ]
    return f'Search results for "{query}":\n\n' + "\n".join(lines)


def format_class_docs(docs: dict[str, Any]) -> str:
    """Render class (or single-method) docs as Markdown; empty sections are left out."""
    lines = [f"# {docs.get('class_name')}", ""]

    if docs.get("inherits"):
        lines += [f"**Inherits:** {docs['inherits']}", ""]

    properties = _rows(docs.get("properties"))
    if properties:
        lines += ["## Properties", "", "| Name | Type | Default |", "|------|------|---------|"]
        for prop in properties:
            lines.append(f"| `{prop.get('name')}` | {prop.get('type')} | {prop.get('default') or '-'} |")
        lines.append("")

    methods = _rows(docs.get("methods"))
    if methods:
        lines += ["## Methods", ""]
        for method in methods:
            lines.append(f"### {method.get('name')}({_arguments(method)}) -> {method.get('return_type')}")
            if method.get("description"):
                lines += ["", str(method["description"])]
            lines.append("")

    signals = _rows(docs.get("signals"))
    if signals:
        lines += ["## Signals", ""]
        for signal in signals:
            lines.append(f"- **{signal.get('name')}**({_arguments(signal)})")
        lines.append("")

    return "\n".join(lines)


async def handle_tool(name: str, args: dict[str, Any], client: RpcCaller) -> ToolResult:
    method = resolve_method(name, args)
    result = await client.call(method, args)

    if name == "godot_search_docs":
        # Search replies may omit the success flag entirely.
        if safe_dict(result).get("success") is False:
            return text_result(f"Error: {remote_error_message(result)}")
        return text_result(format_search_results(args.get("query"), safe_dict(result)))

    if not is_success(result):
        return text_result(f"Error: {remote_error_message(result)}")
    return text_result(format_class_docs(result))
