import pytest

from godoty_mcp.tools import capture


@pytest.mark.asyncio
async def test_single_viewport_capture_yields_image_then_caption(fake_godot) -> None:
    fake_godot.result = {
        "success": True,
        "image": "data:image/png;base64,AAAA",
        "width": 800,
        "height": 600,
        "viewport_type": "3d",
    }
    args = {"viewport_type": "3d", "max_width": 1024}
    out = await capture.handle_tool("godot_capture_viewport", args, fake_godot)

    assert fake_godot.calls == [("capture_viewport", args)]
    assert out["content"][0] == {"type": "image", "data": "AAAA", "mimeType": "image/png"}
    assert out["content"][1]["type"] == "text"
    assert "3d viewport (800x600)" in out["content"][1]["text"]
    assert "isError" not in out


@pytest.mark.asyncio
async def test_game_capture_caption_includes_scene_path(fake_godot) -> None:
    fake_godot.result = {
        "success": True,
        "image": "data:image/jpeg;base64,/9j/",
        "width": 1920,
        "height": 1080,
        "scene_path": "res://levels/one.tscn",
    }
    out = await capture.handle_tool("godot_capture_game", {}, fake_godot)

    assert fake_godot.calls[0][0] == "capture_game"
    assert out["content"][0]["mimeType"] == "image/jpeg"
    assert out["content"][1]["text"] == "Captured game viewport (1920x1080) - Scene: res://levels/one.tscn"


@pytest.mark.asyncio
async def test_both_viewports_are_emitted_in_mapping_order(fake_godot) -> None:
    fake_godot.result = {
        "success": True,
        "images": {
            "2d": {"image": "data:image/png;base64,TWO", "width": 640, "height": 480},
            "3d": {"image": "data:image/webp;base64,THREE", "width": 1280, "height": 720},
        },
    }
    out = await capture.handle_tool("godot_capture_viewport", {"viewport_type": "both"}, fake_godot)

    assert out["content"] == [
        {"type": "image", "data": "TWO", "mimeType": "image/png"},
        {"type": "text", "text": "2D viewport (640x480)"},
        {"type": "image", "data": "THREE", "mimeType": "image/webp"},
        {"type": "text", "text": "3D viewport (1280x720)"},
    ]


@pytest.mark.asyncio
async def test_non_matching_data_url_contributes_text_only(fake_godot) -> None:
    fake_godot.result = {"success": True, "image": "https://example.invalid/shot.png", "width": 10, "height": 20}
    out = await capture.handle_tool("godot_capture_game", {}, fake_godot)

    assert out["content"] == [{"type": "text", "text": "Captured game viewport (10x20)"}]


@pytest.mark.asyncio
async def test_failed_capture_returns_text_without_raising(fake_godot) -> None:
    fake_godot.result = {"success": False, "error": {"message": "Game is not running"}}
    out = await capture.handle_tool("godot_capture_game", {}, fake_godot)
    assert out == {"content": [{"type": "text", "text": "Failed to capture: Game is not running"}]}

    fake_godot.result = {"success": False}
    out = await capture.handle_tool("godot_capture_game", {}, fake_godot)
    assert out["content"][0]["text"] == "Failed to capture: Unknown error"


def test_split_data_url() -> None:
    assert capture.split_data_url("data:image/gif;base64,R0lG") == ("image/gif", "R0lG")
    assert capture.split_data_url("data:text/plain;base64,AAAA") is None
    assert capture.split_data_url(None) is None
