import pytest
from mcp import types
from mcp.server import Server

from godoty_mcp.server import NOT_CONNECTED_TEXT, GodotyMCPServer, to_call_tool_result
from godoty_mcp.utils.exceptions import ConnectFailedError, RemoteError, RequestTimeoutError


@pytest.mark.asyncio
async def test_call_while_disconnected_is_rejected_without_dispatch(fake_godot) -> None:
    fake_godot.connected = False
    shell = GodotyMCPServer(fake_godot)

    out = await shell.call_tool("godot_get_scene", {})

    assert out == {"content": [{"type": "text", "text": NOT_CONNECTED_TEXT}], "isError": True}
    assert "Not connected to Godot" in NOT_CONNECTED_TEXT
    assert fake_godot.calls == []


@pytest.mark.asyncio
async def test_unknown_tool_is_wrapped_as_error(fake_godot) -> None:
    shell = GodotyMCPServer(fake_godot)
    out = await shell.call_tool("godot_unknown", {})
    assert out == {"content": [{"type": "text", "text": "Unknown tool: godot_unknown"}], "isError": True}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "text"),
    [
        (RequestTimeoutError("get_errors", 30000), "Request timeout: get_errors"),
        (RemoteError("get_scene_tree", "No scene open", -32000), "No scene open"),
        (RuntimeError("boom"), "boom"),
    ],
)
async def test_dispatch_exceptions_become_error_results(fake_godot, error, text) -> None:
    fake_godot.result = error
    shell = GodotyMCPServer(fake_godot)

    out = await shell.call_tool("godot_get_errors", {})

    assert out == {"content": [{"type": "text", "text": text}], "isError": True}


@pytest.mark.asyncio
async def test_successful_results_pass_through(fake_godot) -> None:
    fake_godot.result = {"success": True, "errors": []}
    shell = GodotyMCPServer(fake_godot)

    out = await shell.call_tool("godot_get_errors", None)

    assert out == {"content": [{"type": "text", "text": "No errors or warnings found."}]}
    assert fake_godot.calls == [("get_errors", {})]


def test_list_tools_exposes_catalog(fake_godot) -> None:
    shell = GodotyMCPServer(fake_godot)
    assert len(shell.list_tools()) == 9


def test_to_call_tool_result_converts_blocks() -> None:
    result = to_call_tool_result(
        {
            "content": [
                {"type": "image", "data": "AAAA", "mimeType": "image/png"},
                {"type": "text", "text": "3d viewport (800x600)"},
            ],
            "isError": False,
        }
    )
    assert isinstance(result, types.CallToolResult)
    assert isinstance(result.content[0], types.ImageContent)
    assert result.content[0].data == "AAAA"
    assert result.content[0].mimeType == "image/png"
    assert isinstance(result.content[1], types.TextContent)
    assert result.isError is False


def test_build_server_registers_tool_handlers(fake_godot) -> None:
    server = GodotyMCPServer(fake_godot, name="godoty-test", version="9.9.9").build_server()
    assert isinstance(server, Server)
    assert server.name == "godoty-test"
    assert types.ListToolsRequest in server.request_handlers
    assert types.CallToolRequest in server.request_handlers


class _Client:
    def __init__(self, fail: bool, reconnect: bool = True) -> None:
        self.fail = fail
        self.reconnect_enabled = reconnect
        self.connected = False
        self.disconnects = 0

    def is_connected(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        if self.fail:
            raise ConnectFailedError("ws://127.0.0.1:6550", "Connection refused")
        self.connected = True

    async def disconnect(self) -> None:
        self.disconnects += 1
        self.connected = False


@pytest.mark.asyncio
async def test_start_survives_unreachable_editor_and_stop_disconnects() -> None:
    client = _Client(fail=True)
    shell = GodotyMCPServer(client)  # type: ignore[arg-type]

    await shell.start()
    assert not client.is_connected()

    await shell.stop()
    assert client.disconnects == 1


@pytest.mark.asyncio
async def test_serve_disconnects_when_stdio_ends(monkeypatch) -> None:
    client = _Client(fail=False)
    shell = GodotyMCPServer(client)  # type: ignore[arg-type]
    served = []

    async def _fake_run_stdio() -> None:
        served.append(client.is_connected())

    monkeypatch.setattr(shell, "run_stdio", _fake_run_stdio)
    await shell.serve()

    assert served == [True]
    assert client.disconnects == 1
