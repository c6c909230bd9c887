"""MCP tool handlers for mdsel_index and mdsel_select.

Handlers shape arguments into an mdsel argument vector, hand it to the
executor and wrap the result in a CallToolResult. mdsel's output is passed
through untouched.
"""

from __future__ import annotations

from typing import Any

from mcp import types
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mdselclaude.executor.protocol import Executor
from mdselclaude.executor.result import ExecutionResult
from mdselclaude.logging import get_logger
from mdselclaude.tools.descriptions import (
    FILES_DESC,
    MDSEL_INDEX_DESC,
    MDSEL_SELECT_DESC,
    SELECTOR_DESC,
)

log = get_logger("tools")

MDSEL_INDEX = "mdsel_index"
MDSEL_SELECT = "mdsel_select"


class MdselIndexInput(BaseModel):
    """Arguments for mdsel_index."""

    model_config = ConfigDict(extra="ignore")

    files: list[str] = Field(min_length=1, description=FILES_DESC)


class MdselSelectInput(BaseModel):
    """Arguments for mdsel_select."""

    model_config = ConfigDict(extra="ignore")

    selector: str = Field(min_length=1, description=SELECTOR_DESC)
    files: list[str] = Field(min_length=1, description=FILES_DESC)


def _text_result(text: str, is_error: bool) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def render_result(result: ExecutionResult) -> types.CallToolResult:
    """Wrap an ExecutionResult as a single text block.

    The text is mdsel's stdout verbatim; its stderr is never relayed. When no
    process was started the text is the launch-failure message instead.
    """
    text = result.stdout if result.launched else result.stderr
    return _text_result(text, is_error=not result.success)


def validation_error(error: ValidationError) -> types.CallToolResult:
    """Render pydantic errors the way tool callers expect them."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        messages.append(f"{location}: {item['msg']}" if location else item["msg"])
    return _text_result(f"Input validation error: {', '.join(messages)}", is_error=True)


class MdselTools:
    """The two tools exposed to the agent."""

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=MDSEL_INDEX,
                description=MDSEL_INDEX_DESC,
                inputSchema=MdselIndexInput.model_json_schema(),
            ),
            types.Tool(
                name=MDSEL_SELECT,
                description=MDSEL_SELECT_DESC,
                inputSchema=MdselSelectInput.model_json_schema(),
            ),
        ]

    async def call(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        """Dispatch a tools/call request by tool name."""
        if name == MDSEL_INDEX:
            return await self.index(arguments or {})
        if name == MDSEL_SELECT:
            return await self.select(arguments or {})
        return _text_result(f"Unknown tool: {name}", is_error=True)

    async def index(self, arguments: dict[str, Any]) -> types.CallToolResult:
        try:
            args = MdselIndexInput.model_validate(arguments)
        except ValidationError as e:
            return validation_error(e)

        log.debug("mdsel_index files=%s", args.files)
        result = await self._executor.run(["index", *args.files])
        return render_result(result)

    async def select(self, arguments: dict[str, Any]) -> types.CallToolResult:
        try:
            args = MdselSelectInput.model_validate(arguments)
        except ValidationError as e:
            return validation_error(e)

        # Selector is always the first positional argument after the subcommand
        log.debug("mdsel_select selector=%r files=%s", args.selector, args.files)
        result = await self._executor.run(["select", args.selector, *args.files])
        return render_result(result)
