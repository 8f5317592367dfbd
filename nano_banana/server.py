"""MCP stdio server exposing the image tools."""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .errors import NanoBananaError
from .tools.dispatcher import SEGMENT_IMAGE, ToolDispatcher, ToolResult
from .tools.schemas import TOOL_SPECS


logger = logging.getLogger(__name__)

SERVER_NAME = "nano-banana-mcp"

ERROR_CODES: dict[str, int] = {
    "InvalidCredential": types.INVALID_PARAMS,
    "InvalidArguments": types.INVALID_PARAMS,
    "NotConfigured": types.INVALID_REQUEST,
    "NoPriorArtifact": types.INVALID_REQUEST,
    "StaleArtifact": types.INVALID_REQUEST,
    "ProviderFailure": types.INTERNAL_ERROR,
    "InternalFailure": types.INTERNAL_ERROR,
    "MethodNotFound": types.METHOD_NOT_FOUND,
}

Content = types.TextContent | types.ImageContent


def to_mcp_error(exc: NanoBananaError) -> McpError:
    code = ERROR_CODES.get(exc.kind, types.INTERNAL_ERROR)
    return McpError(types.ErrorData(code=code, message=str(exc), data={"kind": exc.kind}))


def to_mcp_content(result: ToolResult) -> list[Content]:
    content: list[Content] = []
    for segment in result.segments:
        if segment.type == SEGMENT_IMAGE and segment.data is not None:
            content.append(
                types.ImageContent(
                    type="image",
                    data=base64.b64encode(segment.data).decode("ascii"),
                    mimeType=segment.mime_type or "image/png",
                )
            )
            continue
        content.append(types.TextContent(type="text", text=segment.text or ""))
    return content


def list_tool_definitions() -> list[types.Tool]:
    return [
        types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
        for spec in TOOL_SPECS
    ]


async def call_dispatcher(
    dispatcher: ToolDispatcher,
    lock: asyncio.Lock,
    name: str,
    arguments: dict[str, Any] | None,
) -> list[Content]:
    # One invocation at a time: the session has a single artifact slot.
    async with lock:
        try:
            result = await asyncio.to_thread(dispatcher.dispatch, name, arguments or {})
        except NanoBananaError as exc:
            raise to_mcp_error(exc) from exc
    return to_mcp_content(result)


def build_server(dispatcher: ToolDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)
    lock = asyncio.Lock()

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return list_tool_definitions()

    @server.call_tool()
    async def _call_tool(name: str, arguments: dict[str, Any] | None) -> list[Content]:
        return await call_dispatcher(dispatcher, lock, name, arguments)

    return server


async def serve(dispatcher: ToolDispatcher) -> None:
    server = build_server(dispatcher)
    logger.info("Starting %s %s on stdio", SERVER_NAME, __version__)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
