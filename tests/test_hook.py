"""Tests for the hook protocol runner and the `hook` CLI mode."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest

from mdselclaude.cli import run_cli
from mdselclaude.gate import REMINDER_MESSAGE, WordCountGate, handle_payload, run_hook


def _payload(file_path: str, tool_name: str = "Read") -> str:
    return json.dumps(
        {
            "hook_event_name": "PreToolUse",
            "tool_name": tool_name,
            "tool_input": {"file_path": file_path},
        }
    )


@pytest.fixture
def large_md(tmp_path: Path) -> str:
    path = tmp_path / "large.md"
    path.write_text("word " * 250, encoding="utf-8")
    return str(path)


class TestHandlePayload:
    """Test raw payload handling."""

    def test_large_markdown(self, large_md: str) -> None:
        output = handle_payload(_payload(large_md), WordCountGate())
        assert output.advisory_message == REMINDER_MESSAGE

    @pytest.mark.parametrize("raw", ["", "not json", "{", "[1, 2]", '"Read"', "{}"])
    def test_unusable_input_continues(self, raw: str) -> None:
        output = handle_payload(raw, WordCountGate())
        assert output.continue_action is True
        assert output.advisory_message is None


class TestRunHook:
    """Test one full stdin/stdout exchange."""

    def test_writes_single_json_line(self, large_md: str) -> None:
        stdout = io.StringIO()
        status = run_hook(WordCountGate(), stdin=io.StringIO(_payload(large_md)), stdout=stdout)

        assert status == 0
        lines = stdout.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0]) == {"continue": True, "systemMessage": REMINDER_MESSAGE}

    def test_style_selects_envelope(self, large_md: str) -> None:
        stdout = io.StringIO()
        run_hook(
            WordCountGate(),
            style="generic",
            stdin=io.StringIO(_payload(large_md)),
            stdout=stdout,
        )
        assert json.loads(stdout.getvalue()) == {
            "continueAction": True,
            "advisoryMessage": REMINDER_MESSAGE,
        }

    def test_malformed_input(self) -> None:
        stdout = io.StringIO()
        status = run_hook(WordCountGate(), stdin=io.StringIO("{oops"), stdout=stdout)
        assert status == 0
        assert json.loads(stdout.getvalue()) == {"continue": True}


class TestHookCommand:
    """Test `mdsel-claude hook`."""

    def test_reminder(
        self,
        large_md: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO(_payload(large_md)))
        assert run_cli(["hook"]) == 0
        assert json.loads(capsys.readouterr().out) == {
            "continue": True,
            "systemMessage": REMINDER_MESSAGE,
        }

    def test_env_threshold(
        self,
        large_md: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("MDSEL_MIN_WORDS", "1000")
        monkeypatch.setattr(sys, "stdin", io.StringIO(_payload(large_md)))
        assert run_cli(["hook"]) == 0
        assert json.loads(capsys.readouterr().out) == {"continue": True}

    def test_project_config_threshold(
        self,
        large_md: str,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config_dir = tmp_path / ".mdsel"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("gate:\n  min_words: 500\n")
        monkeypatch.setattr(sys, "stdin", io.StringIO(_payload(large_md)))

        assert run_cli(["--project-root", str(tmp_path), "hook"]) == 0
        assert json.loads(capsys.readouterr().out) == {"continue": True}

    def test_invalid_config_still_answers(
        self,
        large_md: str,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("executor:\n  kill_signal: SIGNOPE\n")
        monkeypatch.setattr(sys, "stdin", io.StringIO(_payload(large_md)))

        assert run_cli(["--config", str(config_file), "hook", "--style", "decision"]) == 0
        assert json.loads(capsys.readouterr().out) == {
            "decision": "approve",
            "reason": REMINDER_MESSAGE,
        }

    def test_garbage_stdin(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO("not json at all"))
        assert run_cli(["hook", "--style", "post-tool-use"]) == 0
        assert json.loads(capsys.readouterr().out) == {}
