from __future__ import annotations

import asyncio
import base64
from pathlib import Path

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError

from nano_banana.errors import (
    InternalFailure,
    InvalidArguments,
    InvalidCredential,
    MethodNotFound,
    NoPriorArtifact,
    NotConfigured,
    ProviderFailure,
    StaleArtifact,
)
from nano_banana.providers.dryrun import DryRunProvider
from nano_banana.server import build_server, call_dispatcher, list_tool_definitions, to_mcp_content, to_mcp_error
from nano_banana.session.credentials import CredentialResolver
from nano_banana.session.state import SessionState
from nano_banana.tools.dispatcher import ContentSegment, ToolDispatcher, ToolResult
from nano_banana.tools.schemas import TOOL_NAMES


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (InvalidCredential("bad"), types.INVALID_PARAMS),
        (InvalidArguments("bad"), types.INVALID_PARAMS),
        (NotConfigured(), types.INVALID_REQUEST),
        (NoPriorArtifact(), types.INVALID_REQUEST),
        (StaleArtifact(Path("/tmp/gone.png")), types.INVALID_REQUEST),
        (ProviderFailure("boom"), types.INTERNAL_ERROR),
        (InternalFailure("boom"), types.INTERNAL_ERROR),
        (MethodNotFound("nope"), types.METHOD_NOT_FOUND),
    ],
)
def test_error_kinds_map_to_protocol_codes(error, code: int) -> None:  # type: ignore[no-untyped-def]
    mcp_error = to_mcp_error(error)
    assert isinstance(mcp_error, McpError)
    assert mcp_error.error.code == code
    assert mcp_error.error.message == str(error)
    assert mcp_error.error.data == {"kind": error.kind}


def test_content_segments_convert_to_protocol_content() -> None:
    result = ToolResult(
        segments=[
            ContentSegment.text_segment("saved"),
            ContentSegment.image_segment(b"png-bytes", "image/png"),
        ]
    )
    content = to_mcp_content(result)
    assert isinstance(content[0], types.TextContent)
    assert content[0].text == "saved"
    assert isinstance(content[1], types.ImageContent)
    assert base64.b64decode(content[1].data) == b"png-bytes"
    assert content[1].mimeType == "image/png"


def test_tool_definitions_cover_all_tools() -> None:
    tools = list_tool_definitions()
    assert [tool.name for tool in tools] == list(TOOL_NAMES)
    edit = next(tool for tool in tools if tool.name == "edit_image")
    assert set(edit.inputSchema["required"]) == {"imagePath", "prompt"}


def _dispatcher(tmp_path: Path, secret: str | None) -> ToolDispatcher:
    environ = {"GEMINI_API_KEY": secret} if secret else {}
    state = SessionState.start(CredentialResolver(config_path=tmp_path / "config.json", environ=environ))
    return ToolDispatcher(state, DryRunProvider(preview_edge=32), output_dir=tmp_path / "out")


def test_call_dispatcher_returns_text_and_image(tmp_path: Path) -> None:
    dispatcher = _dispatcher(tmp_path, "key")

    async def run() -> list:
        return await call_dispatcher(dispatcher, asyncio.Lock(), "generate_image", {"prompt": "a boat"})

    content = asyncio.run(run())

    assert [item.type for item in content] == ["text", "image"]
    assert dispatcher.state.artifacts.current() is not None


def test_call_dispatcher_raises_protocol_error(tmp_path: Path) -> None:
    dispatcher = _dispatcher(tmp_path, None)

    async def run() -> list:
        return await call_dispatcher(dispatcher, asyncio.Lock(), "generate_image", {"prompt": "a boat"})

    with pytest.raises(McpError) as excinfo:
        asyncio.run(run())
    assert excinfo.value.error.code == types.INVALID_REQUEST


def test_call_dispatcher_serializes_invocations(tmp_path: Path) -> None:
    dispatcher = _dispatcher(tmp_path, "key")

    async def run() -> None:
        lock = asyncio.Lock()
        await asyncio.gather(
            *(call_dispatcher(dispatcher, lock, "generate_image", {"prompt": f"boat {i}"}) for i in range(3))
        )

    asyncio.run(run())

    saved = sorted((tmp_path / "out").iterdir())
    assert len(saved) == 3
    assert dispatcher.state.artifacts.current() in saved


def test_build_server_uses_package_name(tmp_path: Path) -> None:
    server = build_server(_dispatcher(tmp_path, "key"))
    assert server.name == "nano-banana-mcp"
