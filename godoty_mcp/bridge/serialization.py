"""Serialization helpers for bridge RPC frames."""

from __future__ import annotations

import json
from typing import Any

from .protocol import JSONRPC_VERSION, RpcError, RpcNotification, RpcRequest, RpcResponse
from godoty_mcp.utils.exceptions import ErrorCode


class FrameDecodeError(ValueError):
    """Inbound frame is not valid JSON-RPC."""


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def encode_request(request: RpcRequest) -> str:
    """Encode a request frame as one JSON text message."""
    payload = {
        "jsonrpc": JSONRPC_VERSION,
        "id": request.id,
        "method": request.method,
        "params": request.params,
    }
    return json.dumps(payload, ensure_ascii=False)


def normalize_rpc_error(error: Any) -> RpcError:
    """Normalize unknown error payloads into RpcError."""
    row = safe_dict(error)
    try:
        code = int(row.get("code"))
    except (TypeError, ValueError):
        code = int(ErrorCode.INTERNAL_ERROR)
    return RpcError(
        code=code,
        message=str(row.get("message") or "rpc failed"),
        data=row.get("data"),
    )


def _normalize_id(raw: Any) -> int | str | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    # Godot's JSON encoder writes every number as a float, so ids echo back as 1.0.
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        # Some peers echo numeric ids back as strings.
        return int(raw) if raw.isdigit() else raw
    return None


def decode_frame(raw: str | bytes) -> RpcResponse | RpcNotification:
    """
    Decode one inbound text frame.

    A frame with an ``id`` key is a response; one without is a notification.

    Raises:
        FrameDecodeError: invalid JSON, non-object payload, or neither an id nor a method.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FrameDecodeError(f"frame is not utf-8: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise FrameDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise FrameDecodeError(f"expected a JSON object, got {type(payload).__name__}")

    if "id" in payload:
        error = payload.get("error")
        return RpcResponse(
            id=_normalize_id(payload.get("id")),
            result=payload.get("result"),
            error=normalize_rpc_error(error) if error is not None else None,
        )

    method = payload.get("method")
    if isinstance(method, str) and method:
        return RpcNotification(method=method, params=safe_dict(payload.get("params")))

    raise FrameDecodeError("frame has neither an id nor a method")
