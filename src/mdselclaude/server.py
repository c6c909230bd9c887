"""MCP server exposing mdsel_index and mdsel_select over stdio."""

from __future__ import annotations

from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.lowlevel import NotificationOptions
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server

from mdselclaude import __version__
from mdselclaude.config.schema import Config
from mdselclaude.errors import ToolCallError
from mdselclaude.executor import MdselExecutor
from mdselclaude.logging import get_logger
from mdselclaude.tools import MdselTools

SERVER_NAME = "mdsel-claude"

log = get_logger("server")


def _joined_text(result: types.CallToolResult) -> str:
    return "".join(
        block.text for block in result.content if isinstance(block, types.TextContent)
    )


class MdselServer:
    """MCP server wiring the tool handlers to one shared executor."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.executor = MdselExecutor(config.executor)
        self.tools = MdselTools(self.executor)
        self.server: Server = Server(SERVER_NAME, version=__version__)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Register MCP handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return self.tools.list_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.ContentBlock]:
            result = await self.tools.call(name, arguments)
            if result.isError:
                # Reported to the client as a CallToolResult with isError set
                raise ToolCallError(_joined_text(result))
            return result.content

    async def start(self) -> None:
        """Serve requests on stdin/stdout until the client disconnects."""
        log.info("Serving %s with mdsel at %s", SERVER_NAME, self.executor.binary_path)
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
