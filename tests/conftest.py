"""Pytest fixtures."""

from typing import Any

import pytest


class FakeGodot:
    """Stands in for GodotClient: records calls and replays a canned result."""

    def __init__(self, result: Any = None, *, connected: bool = True):
        self.result = result
        self.connected = connected
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    def is_connected(self) -> bool:
        return self.connected

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        self.calls.append((method, params))
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@pytest.fixture
def fake_godot() -> FakeGodot:
    return FakeGodot()
