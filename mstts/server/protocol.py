"""MCP tool server bound to the request dispatcher.

Responsibilities:
- Register `tools/list` and `tools/call` handlers on an MCP low-level server.
- Translate dispatcher results into tool results or JSON-RPC errors.
- Serve over stdio, reading input through a decoder that replaces invalid bytes.

Framing, the `initialize` handshake, `ping`, and notifications are handled by
the MCP session; every request runs in its own task, so receiving continues
while a synthesis is in flight.
"""

from __future__ import annotations

import io
import sys
from typing import Any, BinaryIO

import anyio
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from .. import __version__
from ..telemetry.logger import ServerLogger
from .dispatcher import ProtocolFailure, RequestDispatcher

SERVER_NAME = "audio-mcp-tts-server"


def tolerant_stdin(buffer: BinaryIO | None = None) -> anyio.AsyncFile[str]:
    """Wrap a byte stream as async UTF-8 text, replacing undecodable bytes."""

    stream = buffer if buffer is not None else sys.stdin.buffer
    return anyio.wrap_file(io.TextIOWrapper(stream, encoding="utf-8", errors="replace"))


class StdioServer:
    """Serve the dispatcher's tools to MCP clients."""

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        logger: ServerLogger | None = None,
        server_name: str = SERVER_NAME,
        server_version: str = __version__,
    ) -> None:
        self.dispatcher = dispatcher
        self.logger = logger
        self.server: Server[Any, Any] = Server(server_name, version=server_version)
        self.server.list_tools()(self._list_tools)
        self.server.request_handlers[types.CallToolRequest] = self._call_tool

    async def serve_stdio(
        self,
        stdin: anyio.AsyncFile[str] | None = None,
        stdout: anyio.AsyncFile[str] | None = None,
    ) -> None:
        """Serve over process standard streams until input closes."""

        if self.logger is not None:
            self.logger.info("server", "start", name=self.server.name)
        async with stdio_server(
            stdin=stdin if stdin is not None else tolerant_stdin(),
            stdout=stdout if stdout is not None else anyio.wrap_file(sys.stdout),
        ) as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
        if self.logger is not None:
            self.logger.info("server", "stop")

    async def _list_tools(self) -> list[types.Tool]:
        return [
            types.Tool.model_validate(tool) for tool in self.dispatcher.list_tools()["tools"]
        ]

    async def _call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        """Run one `tools/call` request through the dispatcher.

        A `ProtocolFailure` is raised as an `McpError` so the session answers
        with a JSON-RPC error; unexpected exceptions become internal errors.
        """

        name = request.params.name
        request_id = self.server.request_context.request_id
        if self.logger is not None:
            self.logger.info("dispatch", "call", request_id=request_id, tool=name)
        try:
            outcome = await self.dispatcher.call_tool(name, request.params.arguments)
        except Exception as exc:
            if self.logger is not None:
                self.logger.failure(
                    "server", type(exc).__name__, request_id=request_id, tool=name
                )
            raise McpError(
                types.ErrorData(code=types.INTERNAL_ERROR, message=f"Internal error: {exc}")
            ) from exc

        if isinstance(outcome, ProtocolFailure):
            raise McpError(types.ErrorData(**outcome.as_error()))
        return types.ServerResult(types.CallToolResult.model_validate(outcome.as_result()))
