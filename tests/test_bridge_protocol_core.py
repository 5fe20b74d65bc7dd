import json

import pytest

from godoty_mcp.bridge.protocol import RpcNotification, RpcRequest, RpcResponse
from godoty_mcp.bridge.retry import ReconnectPolicy
from godoty_mcp.bridge.serialization import (
    FrameDecodeError,
    decode_frame,
    encode_request,
    normalize_rpc_error,
    safe_dict,
)
from godoty_mcp.utils.exceptions import ErrorCode


def test_encode_request_builds_jsonrpc_envelope() -> None:
    raw = encode_request(RpcRequest(id=7, method="search_docs", params={"query": "Nœud"}))
    assert json.loads(raw) == {"jsonrpc": "2.0", "id": 7, "method": "search_docs", "params": {"query": "Nœud"}}
    assert "Nœud" in raw


def test_decode_frame_with_id_is_response() -> None:
    frame = decode_frame('{"jsonrpc": "2.0", "id": 3, "result": {"success": true}}')
    assert isinstance(frame, RpcResponse)
    assert frame.id == 3
    assert frame.result == {"success": True}
    assert frame.is_error is False


def test_decode_frame_normalizes_error_payload() -> None:
    frame = decode_frame(b'{"jsonrpc": "2.0", "id": "4", "error": {"code": "oops"}}')
    assert isinstance(frame, RpcResponse)
    assert frame.id == 4
    assert frame.is_error
    assert frame.error.code == ErrorCode.INTERNAL_ERROR
    assert frame.error.message == "rpc failed"


def test_decode_frame_without_id_is_notification() -> None:
    frame = decode_frame(json.dumps({"jsonrpc": "2.0", "method": "scene_changed", "params": [1]}))
    assert isinstance(frame, RpcNotification)
    assert frame.method == "scene_changed"
    assert frame.params == {}


def test_decode_frame_null_id_is_still_a_response() -> None:
    frame = decode_frame('{"jsonrpc": "2.0", "id": null, "error": {"code": -32700, "message": "Parse error"}}')
    assert isinstance(frame, RpcResponse)
    assert frame.id is None
    assert frame.error.code == -32700


@pytest.mark.parametrize(
    ("raw_id", "expected"),
    [("2.0", 2), ("1.5", None), ("true", None), ('"3"', 3)],
)
def test_decode_frame_normalizes_response_ids(raw_id, expected) -> None:
    frame = decode_frame(f'{{"jsonrpc": "2.0", "id": {raw_id}, "result": null}}')
    assert isinstance(frame, RpcResponse)
    assert frame.id == expected


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        '"text"',
        '{"jsonrpc": "2.0"}',
        '{"jsonrpc": "2.0", "method": ""}',
        b"\xff\xfe",
    ],
)
def test_decode_frame_rejects_malformed_frames(raw) -> None:
    with pytest.raises(FrameDecodeError):
        decode_frame(raw)


def test_safe_dict_and_normalize_rpc_error() -> None:
    assert safe_dict(None) == {}
    assert safe_dict({"a": 1}) == {"a": 1}
    err = normalize_rpc_error({"code": -32004, "message": "Capture failed", "data": {"viewport": "3d"}})
    assert (err.code, err.message, err.data) == (-32004, "Capture failed", {"viewport": "3d"})


def test_reconnect_policy_is_fixed_by_default() -> None:
    policy = ReconnectPolicy.from_millis(2000)
    assert [policy.delay_for(n) for n in range(4)] == [2.0, 2.0, 2.0, 2.0]


def test_reconnect_policy_backoff_is_bounded() -> None:
    policy = ReconnectPolicy.from_millis(500, max_interval_ms=3000)
    assert [policy.delay_for(n) for n in range(5)] == [0.5, 1.0, 2.0, 3.0, 3.0]
    assert policy.delay_for(10_000) == 3.0
