"""Tool routing: one table from tool name to its domain handler."""

from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any

from loguru import logger

from godoty_mcp.tools import actions, capture, docs, scene
from godoty_mcp.tools.base import RpcCaller, ToolDescriptor, ToolDomain, ToolHandler, ToolResult
from godoty_mcp.utils.exceptions import UnknownToolError

DOMAIN_MODULES: tuple[ModuleType, ...] = (capture, docs, scene, actions)


@dataclass(frozen=True, slots=True)
class ToolRoute:
    domain: ToolDomain
    descriptor: ToolDescriptor
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.descriptor.name


def build_routes() -> list[ToolRoute]:
    """Routes for every tool in the static catalog, in catalog order."""
    return [
        ToolRoute(module.DOMAIN, descriptor, module.handle_tool)
        for module in DOMAIN_MODULES
        for descriptor in module.TOOLS
    ]


def all_tools() -> list[ToolDescriptor]:
    return [route.descriptor for route in build_routes()]


def remote_method_for(name: str) -> str:
    """Default remote method behind a tool, for display."""
    for module in DOMAIN_MODULES:
        if name in module.METHODS:
            return module.METHODS[name]
    raise UnknownToolError(name)


class ToolDispatcher:
    """
    Routes tool calls to domain handlers.

    The route table is built once; lookups are exact matches on the tool name.
    """

    def __init__(self, client: RpcCaller, routes: list[ToolRoute] | None = None):
        self._client = client
        self._routes: dict[str, ToolRoute] = {}
        for route in routes if routes is not None else build_routes():
            if route.name in self._routes:
                raise ValueError(f"Duplicate tool name: {route.name}")
            self._routes[route.name] = route

    def list_tools(self) -> list[ToolDescriptor]:
        return [route.descriptor for route in self._routes.values()]

    def get(self, name: str) -> ToolRoute | None:
        return self._routes.get(name)

    def has(self, name: str) -> bool:
        return name in self._routes

    async def dispatch(self, name: str, args: dict[str, Any] | None = None) -> ToolResult:
        """
        Run one tool call.

        Raises:
            UnknownToolError: no tool with that name.
            GodotyError: whatever the transport raised for the underlying call.
        """
        route = self._routes.get(name)
        if route is None:
            raise UnknownToolError(name)
        logger.debug("Dispatching {} to {} handler", name, route.domain.value)
        return await route.handler(name, args if args is not None else {}, self._client)
