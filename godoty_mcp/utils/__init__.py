"""Utility functions for godoty_mcp."""

from godoty_mcp.utils.exceptions import (
    GodotyError,
    NotConnectedError,
    ConnectFailedError,
    ConnectionLostError,
    RequestTimeoutError,
    RemoteError,
    UnknownToolError,
    ErrorCategory,
    ErrorCode,
    classify_exception,
    error_message,
    sanitize_error_message,
)

__all__ = [
    "GodotyError",
    "NotConnectedError",
    "ConnectFailedError",
    "ConnectionLostError",
    "RequestTimeoutError",
    "RemoteError",
    "UnknownToolError",
    "ErrorCategory",
    "ErrorCode",
    "classify_exception",
    "error_message",
    "sanitize_error_message",
]
