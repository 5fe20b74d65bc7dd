"""Tests for godoty_mcp.utils.exceptions module."""

from __future__ import annotations

import asyncio
import json

from godoty_mcp.utils.exceptions import (
    ConnectFailedError,
    ErrorCategory,
    ErrorCode,
    GodotyError,
    NotConnectedError,
    RemoteError,
    RequestTimeoutError,
    UnknownToolError,
    classify_exception,
    error_message,
    sanitize_error_message,
)


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_godoty_error_to_dict(self) -> None:
        exc = GodotyError("test message", code="TEST_CODE")
        assert exc.to_dict() == {
            "error": "TEST_CODE",
            "message": "test message",
            "category": ErrorCategory.FATAL.value,
            "details": {},
        }
        assert str(exc) == "[TEST_CODE] test message"

    def test_not_connected_error(self) -> None:
        exc = NotConnectedError()
        assert exc.message == "Not connected to Godot"
        assert exc.category == ErrorCategory.CONNECTION

    def test_timeout_error_names_method(self) -> None:
        exc = RequestTimeoutError("capture_game", 30000)
        assert exc.message == "Request timeout: capture_game"
        assert exc.details == {"method": "capture_game", "timeout_ms": 30000}

    def test_remote_error_maps_reserved_codes(self) -> None:
        assert RemoteError("get_class_docs", "Class not found", -32001).code == "CLASS_NOT_FOUND"
        assert RemoteError("get_class_docs", "Odd", 12).code == "REMOTE_ERROR"
        assert RemoteError("get_class_docs", "No code").rpc_code is None

    def test_unknown_tool_error(self) -> None:
        exc = UnknownToolError("godot_unknown")
        assert exc.message == "Unknown tool: godot_unknown"
        assert exc.category == ErrorCategory.NOT_FOUND

    def test_connect_failed_error(self) -> None:
        exc = ConnectFailedError("ws://127.0.0.1:6550", "Connection refused")
        assert exc.message == "Could not connect to Godot at ws://127.0.0.1:6550: Connection refused"
        assert exc.category == ErrorCategory.RETRYABLE


class TestErrorCodes:
    def test_reserved_values(self) -> None:
        assert ErrorCode.PARSE_ERROR == -32700
        assert ErrorCode.NODE_NOT_FOUND == -32000
        assert ErrorCode.QUOTA_EXCEEDED == -32008
        assert len(ErrorCode) == 14

    def test_lookup(self) -> None:
        assert ErrorCode.lookup(-32005) is ErrorCode.TIMEOUT
        assert ErrorCode.lookup("-32601") is ErrorCode.METHOD_NOT_FOUND
        assert ErrorCode.lookup(1) is None
        assert ErrorCode.lookup(None) is None


class TestHelpers:
    def test_sanitize_error_message(self) -> None:
        out = sanitize_error_message("handshake failed token=abc123 for bearer XYZ.456")
        assert "abc123" not in out
        assert "XYZ.456" not in out
        assert "[REDACTED]" in out

    def test_classify_exception(self) -> None:
        assert classify_exception(NotConnectedError()) == ("NOT_CONNECTED", ErrorCategory.CONNECTION, True)
        assert classify_exception(asyncio.TimeoutError()) == ("TIMEOUT", ErrorCategory.TIMEOUT, True)
        assert classify_exception(ConnectionRefusedError())[0] == "CONNECTION_ERROR"
        assert classify_exception(json.JSONDecodeError("x", "doc", 0))[1] == ErrorCategory.VALIDATION
        assert classify_exception(RuntimeError("x")) == ("INTERNAL_ERROR", ErrorCategory.FATAL, False)

    def test_error_message(self) -> None:
        assert error_message(UnknownToolError("nope")) == "Unknown tool: nope"
        assert error_message(RuntimeError("boom")) == "boom"
        assert error_message(RuntimeError()) == "RuntimeError"
