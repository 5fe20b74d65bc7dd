"""WebSocket JSON-RPC client for the Godot editor bridge plugin.

One client owns one socket. Every mutation of the socket handle, the pending
request table and the reconnect state happens on the event loop that runs the
client, so the table needs no lock.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

import websockets
from loguru import logger

from godoty_mcp.bridge.protocol import RpcNotification, RpcRequest
from godoty_mcp.bridge.retry import ReconnectPolicy
from godoty_mcp.bridge.serialization import FrameDecodeError, decode_frame, encode_request
from godoty_mcp.utils.exceptions import (
    ConnectFailedError,
    ConnectionLostError,
    NotConnectedError,
    RemoteError,
    RequestTimeoutError,
    sanitize_error_message,
)

if TYPE_CHECKING:
    from godoty_mcp.config.schema import GodotConnectionConfig

DEFAULT_URL = "ws://127.0.0.1:6550"
DEFAULT_RECONNECT_INTERVAL_MS = 2000
REQUEST_TIMEOUT_MS = 30000

Connector = Callable[[str], Awaitable[Any]]
NotificationHandler = Callable[[str, dict[str, Any]], Any]
ConnectionListener = Callable[[bool], Any]


class ConnectionState(str, Enum):
    """Lifecycle of the single peer connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


@dataclass(slots=True)
class PendingRequest:
    """Bookkeeping for one outstanding call."""

    id: int
    method: str
    future: asyncio.Future[Any]
    timer: asyncio.TimerHandle


@dataclass(slots=True)
class ConnectionStatus:
    """Point-in-time view of the connection, for status reporting."""

    state: ConnectionState
    connected: bool
    url: str
    last_error: str | None
    reconnect_attempts: int
    pending_requests: int


async def _open_websocket(url: str) -> Any:
    # Screenshots arrive as base64 data URLs well above the default 1 MiB frame limit.
    return await websockets.connect(url, max_size=None)


class GodotClient:
    """JSON-RPC client for the Godot editor plugin, with automatic reconnect."""

    def __init__(
        self,
        url: str = DEFAULT_URL,
        *,
        reconnect: bool = True,
        reconnect_interval_ms: int = DEFAULT_RECONNECT_INTERVAL_MS,
        max_reconnect_interval_ms: int | None = None,
        request_timeout_ms: int = REQUEST_TIMEOUT_MS,
        fail_pending_on_disconnect: bool = False,
        connector: Connector | None = None,
    ):
        self.url = url
        self.reconnect_enabled = reconnect
        self.request_timeout_ms = request_timeout_ms
        self.fail_pending_on_disconnect = fail_pending_on_disconnect
        self._policy = ReconnectPolicy.from_millis(reconnect_interval_ms, max_reconnect_interval_ms)
        self._connector: Connector = connector or _open_websocket

        self._ws: Any = None
        self._state = ConnectionState.DISCONNECTED
        self._request_id = 0
        self._pending: dict[int, PendingRequest] = {}
        self._connect_lock = asyncio.Lock()
        self._reader_task: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None
        self._reconnect_attempts = 0
        self._last_error: str | None = None
        self._notification_handlers: list[NotificationHandler] = []
        self._connection_listeners: list[ConnectionListener] = []
        self._background: set[asyncio.Future[Any]] = set()

    @classmethod
    def from_config(cls, config: "GodotConnectionConfig", **kwargs: Any) -> "GodotClient":
        """Build a client from the ``godot`` section of the config."""
        return cls(
            config.url,
            reconnect=config.reconnect,
            reconnect_interval_ms=config.reconnect_interval_ms,
            max_reconnect_interval_ms=config.max_reconnect_interval_ms,
            fail_pending_on_disconnect=config.fail_pending_on_disconnect,
            **kwargs,
        )

    # ── state ────────────────────────────────────────────────────

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def pending_count(self) -> int:
        """Number of requests still waiting for an outcome."""
        return len(self._pending)

    @property
    def reconnect_scheduled(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self._ws is not None

    def status(self) -> ConnectionStatus:
        return ConnectionStatus(
            state=self._state,
            connected=self.is_connected(),
            url=self.url,
            last_error=self._last_error,
            reconnect_attempts=self._reconnect_attempts,
            pending_requests=len(self._pending),
        )

    def add_notification_handler(self, handler: NotificationHandler) -> Callable[[], None]:
        """Register a sink for peer notifications; returns an unsubscribe function."""
        self._notification_handlers.append(handler)
        return lambda: self._remove(self._notification_handlers, handler)

    def add_connection_listener(self, listener: ConnectionListener) -> Callable[[], None]:
        """Register a callback fired once per connected/disconnected transition."""
        self._connection_listeners.append(listener)
        return lambda: self._remove(self._connection_listeners, listener)

    @staticmethod
    def _remove(items: list[Any], item: Any) -> None:
        with contextlib.suppress(ValueError):
            items.remove(item)

    def _set_state(self, state: ConnectionState) -> None:
        was_connected = self._state is ConnectionState.CONNECTED
        self._state = state
        now_connected = state is ConnectionState.CONNECTED
        if was_connected != now_connected:
            self._emit_connection_change(now_connected)

    def _emit_connection_change(self, connected: bool) -> None:
        for listener in list(self._connection_listeners):
            try:
                result = listener(connected)
                if inspect.isawaitable(result):
                    self._spawn(result)
            except Exception:
                logger.exception("Connection listener failed")

    def _spawn(self, awaitable: Awaitable[Any]) -> None:
        task = asyncio.ensure_future(awaitable)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Future[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Background callback failed")

    # ── lifecycle ────────────────────────────────────────────────

    async def connect(self) -> None:
        """
        Open the socket to Godot.

        When the attempt fails and reconnection is enabled, the background
        reconnect loop takes over before the error is raised.

        Raises:
            ConnectFailedError: the socket failed before reaching the open state.
        """
        async with self._connect_lock:
            if self._ws is not None:
                return
            self._cancel_reconnect()
            self._set_state(ConnectionState.CONNECTING)
            logger.info("Connecting to Godot at {}", self.url)
            try:
                ws = await self._connector(self.url)
            except Exception as exc:
                self._last_error = sanitize_error_message(str(exc)) or exc.__class__.__name__
                self._set_state(ConnectionState.DISCONNECTED)
                if self.reconnect_enabled:
                    self._schedule_reconnect()
                raise ConnectFailedError(self.url, self._last_error) from exc

            self._ws = ws
            self._last_error = None
            self._reconnect_attempts = 0
            self._set_state(ConnectionState.CONNECTED)
            logger.info("Connected to Godot")
            self._reader_task = asyncio.create_task(self._read_loop(ws), name="godot-reader")

    async def disconnect(self) -> None:
        """Disable reconnection and close the socket. Safe to call repeatedly."""
        self.reconnect_enabled = False
        self._cancel_reconnect()
        ws, self._ws = self._ws, None
        reader, self._reader_task = self._reader_task, None
        self._set_state(ConnectionState.DISCONNECTED)
        if ws is None:
            return

        logger.info("Disconnecting from Godot")
        if self.fail_pending_on_disconnect:
            self._fail_pending()
        try:
            await ws.close()
        except Exception as exc:
            logger.debug("Error while closing Godot socket: {}", exc)
        if reader is not None and reader is not asyncio.current_task() and not reader.done():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader

    async def __aenter__(self) -> "GodotClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    # ── requests ─────────────────────────────────────────────────

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """
        Send one request and wait for its single outcome.

        Raises:
            NotConnectedError: no open connection; nothing was sent or registered.
            RequestTimeoutError: no response within ``request_timeout_ms``.
            RemoteError: the peer answered with a JSON-RPC error.
            ConnectionLostError: the frame could not be sent, or the connection
                dropped while ``fail_pending_on_disconnect`` is set.
        """
        ws = self._ws
        if ws is None or not self.is_connected():
            raise NotConnectedError()

        loop = asyncio.get_running_loop()
        self._request_id += 1
        request_id = self._request_id
        future: asyncio.Future[Any] = loop.create_future()
        timer = loop.call_later(self.request_timeout_ms / 1000.0, self._expire, request_id)
        self._pending[request_id] = PendingRequest(request_id, method, future, timer)

        frame = encode_request(RpcRequest(id=request_id, method=method, params=params or {}))
        logger.debug("Godot request #{} {}", request_id, method)
        try:
            try:
                await ws.send(frame)
            except Exception as exc:
                logger.warning("Failed to send {} to Godot: {}", method, exc)
                raise ConnectionLostError(method) from exc
            return await future
        finally:
            self._discard(request_id)

    def _discard(self, request_id: int) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is not None:
            pending.timer.cancel()

    def _expire(self, request_id: int) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is None or pending.future.done():
            return
        logger.warning("Godot request #{} {} timed out after {}ms", request_id, pending.method, self.request_timeout_ms)
        pending.future.set_exception(RequestTimeoutError(pending.method, self.request_timeout_ms))

    def _fail_pending(self) -> None:
        pending, self._pending = self._pending, {}
        for entry in pending.values():
            entry.timer.cancel()
            if not entry.future.done():
                entry.future.set_exception(ConnectionLostError(entry.method))

    # ── inbound ──────────────────────────────────────────────────

    async def _read_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                self._handle_message(raw)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._last_error = sanitize_error_message(str(exc)) or exc.__class__.__name__
            logger.warning("Godot socket error: {}", self._last_error)
        finally:
            self._handle_close(ws)

    def _handle_message(self, raw: str | bytes) -> None:
        try:
            frame = decode_frame(raw)
        except FrameDecodeError as exc:
            logger.warning("Dropping malformed frame from Godot: {}", exc)
            return

        if isinstance(frame, RpcNotification):
            self._dispatch_notification(frame)
            return

        if frame.id is None:
            if frame.error is not None:
                logger.warning("Godot error without request id: {}", frame.error.message)
            return

        pending = self._pending.pop(frame.id, None)
        if pending is None:
            logger.debug("Dropping response for untracked request id {}", frame.id)
            return
        pending.timer.cancel()
        if pending.future.done():
            return
        if frame.error is not None:
            pending.future.set_exception(
                RemoteError(pending.method, frame.error.message, frame.error.code, frame.error.data)
            )
        else:
            pending.future.set_result(frame.result)

    def _dispatch_notification(self, frame: RpcNotification) -> None:
        logger.debug("Godot event: {} {}", frame.method, frame.params)
        for handler in list(self._notification_handlers):
            try:
                result = handler(frame.method, frame.params)
                if inspect.isawaitable(result):
                    self._spawn(result)
            except Exception:
                logger.exception("Notification handler failed for {}", frame.method)

    # ── reconnect ────────────────────────────────────────────────

    def _handle_close(self, ws: Any) -> None:
        if ws is not self._ws:
            return
        self._ws = None
        self._reader_task = None
        self._set_state(ConnectionState.DISCONNECTED)
        logger.warning("Disconnected from Godot")
        if self.fail_pending_on_disconnect:
            self._fail_pending()
        if self.reconnect_enabled:
            self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self.reconnect_scheduled:
            return
        self._set_state(ConnectionState.RECONNECTING)
        self._reconnect_task = asyncio.create_task(self._reconnect_loop(), name="godot-reconnect")

    def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        if task is None or task is asyncio.current_task():
            return
        self._reconnect_task = None
        if not task.done():
            task.cancel()

    async def _reconnect_loop(self) -> None:
        try:
            while self.reconnect_enabled and self._ws is None:
                delay = self._policy.delay_for(self._reconnect_attempts)
                logger.info("Reconnecting to Godot in {}ms...", int(delay * 1000))
                await asyncio.sleep(delay)
                if not self.reconnect_enabled or self._ws is not None:
                    break
                self._reconnect_attempts += 1
                try:
                    await self.connect()
                except ConnectFailedError as exc:
                    logger.debug("Reconnect attempt {} failed: {}", self._reconnect_attempts, exc.message)
                    self._set_state(ConnectionState.RECONNECTING)
        finally:
            if self._reconnect_task is asyncio.current_task():
                self._reconnect_task = None
