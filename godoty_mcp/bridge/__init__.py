"""WebSocket JSON-RPC bridge to the Godot editor plugin."""

from godoty_mcp.bridge.client import ConnectionState, ConnectionStatus, GodotClient, PendingRequest
from godoty_mcp.bridge.protocol import RpcError, RpcNotification, RpcRequest, RpcResponse
from godoty_mcp.bridge.retry import ReconnectPolicy

__all__ = [
    "GodotClient",
    "ConnectionState",
    "ConnectionStatus",
    "PendingRequest",
    "ReconnectPolicy",
    "RpcError",
    "RpcNotification",
    "RpcRequest",
    "RpcResponse",
]
