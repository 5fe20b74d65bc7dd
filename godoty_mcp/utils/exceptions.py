"""
Exception hierarchy and error handling utilities for godoty_mcp.

Provides:
- Custom exception classes with error codes
- Error categorization (retryable, fatal, timeout, ...)
- Reserved numeric JSON-RPC error codes shared with the editor plugin
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum, IntEnum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    CONNECTION = "connection"


class ErrorCode(IntEnum):
    """Numeric error codes reserved on the Godot RPC channel."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    NODE_NOT_FOUND = -32000
    CLASS_NOT_FOUND = -32001
    ACTION_NOT_ALLOWED = -32002
    GAME_NOT_RUNNING = -32003
    CAPTURE_FAILED = -32004
    TIMEOUT = -32005
    INVALID_PATH = -32006
    AUTH_REQUIRED = -32007
    QUOTA_EXCEEDED = -32008

    @classmethod
    def lookup(cls, value: Any) -> "ErrorCode | None":
        """Return the matching code, or None for codes outside the reserved set."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return None


class GodotyError(Exception):
    """Base exception for all godoty_mcp errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class NotConnectedError(GodotyError):
    """Raised when a call is issued while no connection to Godot is open."""

    def __init__(self, message: str = "Not connected to Godot"):
        super().__init__(message, code="NOT_CONNECTED", category=ErrorCategory.CONNECTION)


class ConnectFailedError(GodotyError):
    """The socket failed before it ever reached the open state."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Could not connect to Godot at {url}: {reason}",
            code="CONNECT_FAILED",
            category=ErrorCategory.RETRYABLE,
            details={"url": url, "reason": reason},
        )


class ConnectionLostError(GodotyError):
    """The connection went away while a request was outstanding."""

    def __init__(self, method: str):
        super().__init__(
            f"Connection to Godot lost: {method}",
            code="CONNECTION_LOST",
            category=ErrorCategory.RETRYABLE,
            details={"method": method},
        )


class RequestTimeoutError(GodotyError):
    """No response arrived for a request within its timeout."""

    def __init__(self, method: str, timeout_ms: int):
        super().__init__(
            f"Request timeout: {method}",
            code="TIMEOUT",
            category=ErrorCategory.TIMEOUT,
            details={"method": method, "timeout_ms": timeout_ms},
        )


class RemoteError(GodotyError):
    """The peer answered a request with a JSON-RPC error object."""

    def __init__(self, method: str, message: str, rpc_code: int | None = None, data: Any = None):
        known = ErrorCode.lookup(rpc_code)
        super().__init__(
            message,
            code=known.name if known else "REMOTE_ERROR",
            category=ErrorCategory.RECOVERABLE,
            details={"method": method, "rpc_code": rpc_code},
        )
        self.method = method
        self.rpc_code = rpc_code
        self.data = data


class UnknownToolError(GodotyError):
    """Tool name not present in the catalog."""

    def __init__(self, tool_name: str):
        super().__init__(
            f"Unknown tool: {tool_name}",
            code="UNKNOWN_TOOL",
            category=ErrorCategory.NOT_FOUND,
            details={"tool_name": tool_name},
        )


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    Returns:
        Tuple of (error_code, category, should_retry)
    """
    if isinstance(exc, GodotyError):
        return exc.code, exc.category, exc.category in (ErrorCategory.RETRYABLE, ErrorCategory.CONNECTION)

    if isinstance(exc, asyncio.TimeoutError):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.CONNECTION, True

    if isinstance(exc, OSError):
        return "OS_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION, False

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False


def error_message(exc: BaseException) -> str:
    """Human-readable message for an exception, without the code prefix."""
    if isinstance(exc, GodotyError):
        return exc.message
    text = sanitize_error_message(str(exc))
    return text or exc.__class__.__name__
