"""Tests for the mdsel_index / mdsel_select tool handlers and the MCP server."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest
from mcp import types

from mdselclaude.config import Config, ExecutorConfig
from mdselclaude.executor import ExecutionOptions, ExecutionResult, MdselExecutor
from mdselclaude.server import MdselServer
from mdselclaude.tools import MDSEL_INDEX, MDSEL_SELECT, MdselTools, render_result


class StubExecutor:
    """Records argument vectors and replays a canned result."""

    def __init__(self, result: ExecutionResult | None = None) -> None:
        self.result = result or ExecutionResult(stdout="{}", stderr="", exit_code=0)
        self.calls: list[list[str]] = []

    async def run(
        self, command_args: Sequence[str], options: ExecutionOptions | None = None
    ) -> ExecutionResult:
        self.calls.append(list(command_args))
        return self.result


def _text(result: types.CallToolResult) -> str:
    assert len(result.content) == 1
    block = result.content[0]
    assert isinstance(block, types.TextContent)
    return block.text


class TestRenderResult:
    """Test ExecutionResult to tool result mapping."""

    def test_success_passes_stdout_verbatim(self) -> None:
        stdout = '{"not": "valid json"\n  '
        result = render_result(ExecutionResult(stdout=stdout, stderr="noise", exit_code=0))
        assert _text(result) == stdout
        assert result.isError is False

    def test_failure_with_stdout(self) -> None:
        result = render_result(ExecutionResult(stdout="partial", stderr="oops", exit_code=2))
        assert _text(result) == "partial"
        assert result.isError is True

    def test_failure_without_stdout_drops_stderr(self) -> None:
        result = render_result(
            ExecutionResult(stdout="", stderr="file not found", exit_code=1)
        )
        assert _text(result) == ""
        assert result.isError is True

    def test_launch_failure_uses_message(self) -> None:
        result = render_result(
            ExecutionResult(
                stdout="", stderr="mdsel CLI not found", exit_code=1, launched=False
            )
        )
        assert _text(result) == "mdsel CLI not found"
        assert result.isError is True

    def test_timeout_is_error(self) -> None:
        result = render_result(
            ExecutionResult(stdout="", stderr="", exit_code=None, signal="SIGKILL", timed_out=True)
        )
        assert result.isError is True


class TestMdselTools:
    """Test tool dispatch and argument validation."""

    def test_list_tools(self) -> None:
        tools = {tool.name: tool for tool in MdselTools(StubExecutor()).list_tools()}
        assert set(tools) == {MDSEL_INDEX, MDSEL_SELECT}
        assert tools[MDSEL_INDEX].inputSchema["required"] == ["files"]
        assert set(tools[MDSEL_SELECT].inputSchema["required"]) == {"selector", "files"}
        assert tools[MDSEL_INDEX].description
        assert tools[MDSEL_SELECT].description

    @pytest.mark.asyncio
    async def test_index_argv(self) -> None:
        executor = StubExecutor()
        result = await MdselTools(executor).call(
            MDSEL_INDEX, {"files": ["README.md", "docs/a b.md"]}
        )
        assert executor.calls == [["index", "README.md", "docs/a b.md"]]
        assert _text(result) == "{}"
        assert result.isError is False

    @pytest.mark.asyncio
    async def test_select_argv(self) -> None:
        executor = StubExecutor()
        await MdselTools(executor).call(
            MDSEL_SELECT, {"selector": "heading:h2[0]", "files": ["README.md"]}
        )
        assert executor.calls == [["select", "heading:h2[0]", "README.md"]]

    @pytest.mark.asyncio
    async def test_selector_not_interpreted(self) -> None:
        executor = StubExecutor()
        await MdselTools(executor).call(
            MDSEL_SELECT, {"selector": "--help; rm -rf ~", "files": ["x.md"]}
        )
        assert executor.calls == [["select", "--help; rm -rf ~", "x.md"]]

    @pytest.mark.asyncio
    async def test_extra_arguments_ignored(self) -> None:
        executor = StubExecutor()
        await MdselTools(executor).call(MDSEL_INDEX, {"files": ["a.md"], "verbose": True})
        assert executor.calls == [["index", "a.md"]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("name", "arguments"),
        [
            (MDSEL_INDEX, {}),
            (MDSEL_INDEX, {"files": []}),
            (MDSEL_INDEX, {"files": "README.md"}),
            (MDSEL_SELECT, {"files": ["a.md"]}),
            (MDSEL_SELECT, {"selector": "", "files": ["a.md"]}),
            (MDSEL_SELECT, {"selector": "heading:h1[0]"}),
        ],
    )
    async def test_invalid_arguments(self, name: str, arguments: dict) -> None:
        executor = StubExecutor()
        result = await MdselTools(executor).call(name, arguments)
        assert result.isError is True
        assert _text(result).startswith("Input validation error: ")
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_none_arguments(self) -> None:
        executor = StubExecutor()
        result = await MdselTools(executor).call(MDSEL_INDEX, None)
        assert result.isError is True
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_unknown_tool(self) -> None:
        executor = StubExecutor()
        result = await MdselTools(executor).call("mdsel_delete", {"files": ["a.md"]})
        assert result.isError is True
        assert _text(result) == "Unknown tool: mdsel_delete"
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_failure_keeps_stderr_out(self, fake_mdsel) -> None:
        executor = MdselExecutor(
            ExecutorConfig(binary_path=fake_mdsel("printf 'file not found' >&2; exit 1"))
        )
        result = await MdselTools(executor).call(
            MDSEL_SELECT, {"selector": "heading:h1[0]", "files": ["missing.md"]}
        )
        assert result.isError is True
        assert _text(result) == ""

    @pytest.mark.asyncio
    async def test_failure_relays_stdout_only(self, fake_mdsel) -> None:
        executor = MdselExecutor(
            ExecutorConfig(binary_path=fake_mdsel("printf partial; printf 'trace' >&2; exit 2"))
        )
        result = await MdselTools(executor).call(MDSEL_INDEX, {"files": ["a.md"]})
        assert result.isError is True
        assert _text(result) == "partial"

    @pytest.mark.asyncio
    async def test_missing_binary_surfaces_install_hint(self, tmp_path: Path) -> None:
        executor = MdselExecutor(ExecutorConfig(binary_path=str(tmp_path / "mdsel")))
        result = await MdselTools(executor).call(MDSEL_INDEX, {"files": ["README.md"]})
        assert result.isError is True
        assert "npm install -g mdsel" in _text(result)


class TestMdselServer:
    """Test the MCP request handlers registered on the server."""

    @pytest.fixture
    def server(self, fake_mdsel) -> MdselServer:
        binary = fake_mdsel('printf "%s|" "$@"')
        return MdselServer(Config(executor=ExecutorConfig(binary_path=binary)))

    @pytest.mark.asyncio
    async def test_list_tools_request(self, server: MdselServer) -> None:
        handler = server.server.request_handlers[types.ListToolsRequest]
        response = await handler(types.ListToolsRequest(method="tools/list"))
        names = {tool.name for tool in response.root.tools}
        assert names == {MDSEL_INDEX, MDSEL_SELECT}

    @pytest.mark.asyncio
    async def test_call_tool_request(self, server: MdselServer) -> None:
        handler = server.server.request_handlers[types.CallToolRequest]
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(
                name=MDSEL_SELECT,
                arguments={"selector": "heading:h2[0]", "files": ["README.md"]},
            ),
        )
        response = await handler(request)
        assert response.root.isError is False
        assert response.root.content[0].text == "select|heading:h2[0]|README.md|"

    @pytest.mark.asyncio
    async def test_call_tool_failure_is_error_result(self, tmp_path: Path) -> None:
        binary = str(tmp_path / "missing-mdsel")
        server = MdselServer(Config(executor=ExecutorConfig(binary_path=binary)))
        handler = server.server.request_handlers[types.CallToolRequest]
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(
                name=MDSEL_INDEX, arguments={"files": ["README.md"]}
            ),
        )
        response = await handler(request)
        assert response.root.isError is True
        assert "npm install -g mdsel" in response.root.content[0].text

    @pytest.mark.asyncio
    async def test_call_tool_failure_hides_stderr(self, fake_mdsel) -> None:
        binary = fake_mdsel("printf 'internal detail' >&2; exit 1")
        server = MdselServer(Config(executor=ExecutorConfig(binary_path=binary)))
        handler = server.server.request_handlers[types.CallToolRequest]
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(
                name=MDSEL_INDEX, arguments={"files": ["README.md"]}
            ),
        )
        response = await handler(request)
        assert response.root.isError is True
        assert all("internal detail" not in block.text for block in response.root.content)
