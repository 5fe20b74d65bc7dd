"""JSON-RPC 2.0 frame models for the Godot editor bridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"


@dataclass(slots=True)
class RpcError:
    """Normalized JSON-RPC error payload."""

    code: int
    message: str
    data: Any = None


@dataclass(slots=True)
class RpcRequest:
    """Client → peer request frame."""

    id: int
    method: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class RpcResponse:
    """Peer → client response frame; always carries an id."""

    id: int | str | None
    result: Any = None
    error: RpcError | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class RpcNotification:
    """Peer → client event frame; never carries an id."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)
