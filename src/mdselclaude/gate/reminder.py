"""Word-count gate that nudges agents toward mdsel for large Markdown files.

The gate is advisory only: every HookOutput continues the host's action, and
the only thing it can add is the fixed REMINDER_MESSAGE.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from mdselclaude.config.loader import MIN_WORDS_ENV, parse_min_words
from mdselclaude.config.schema import GateConfig
from mdselclaude.gate.word_count import count_words

# Must stay byte-identical across every invocation
REMINDER_MESSAGE = (
    "This is a Markdown file over the configured size threshold.\n"
    "Use mdsel_index and mdsel_select instead of Read."
)


class HookStyle(str, Enum):
    """Envelope formats understood by different hook runners."""

    CLAUDE = "claude"  # PreToolUse: {"continue": true, "systemMessage": ...}
    POST_TOOL_USE = "post-tool-use"  # {"hookSpecificOutput": {...}}
    DECISION = "decision"  # {"decision": "approve", "reason": ...}
    GENERIC = "generic"  # {"continueAction": true, "advisoryMessage": ...}


@dataclass(frozen=True)
class HookInput:
    """One file-access event from the host."""

    tool_name: str
    file_path: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> HookInput:
        """Build from a hook payload.

        Accepts the Claude Code shape ({"tool_name", "tool_input": {"file_path"}})
        and the flat shape ({"toolName", "filePath"}).

        Raises:
            ValueError: If the payload has no usable tool name or file path.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("hook payload must be a JSON object")

        tool_name = payload.get("tool_name", payload.get("toolName"))
        tool_input = payload.get("tool_input")
        if isinstance(tool_input, Mapping):
            file_path = tool_input.get("file_path", tool_input.get("filePath"))
        else:
            file_path = payload.get("file_path", payload.get("filePath"))

        if not isinstance(tool_name, str) or not tool_name:
            raise ValueError("hook payload has no tool name")
        if not isinstance(file_path, str) or not file_path:
            raise ValueError("hook payload has no file path")
        return cls(tool_name=tool_name, file_path=file_path)


@dataclass(frozen=True)
class HookOutput:
    """Gate verdict. The host action always continues."""

    advisory_message: str | None = None

    @property
    def continue_action(self) -> bool:
        return True

    def to_payload(self, style: HookStyle | str = HookStyle.CLAUDE) -> dict[str, Any]:
        """Render the host-specific JSON envelope."""
        style = HookStyle(style)
        message = self.advisory_message

        if style is HookStyle.CLAUDE:
            payload: dict[str, Any] = {"continue": self.continue_action}
            if message is not None:
                payload["systemMessage"] = message
            return payload

        if style is HookStyle.POST_TOOL_USE:
            if message is None:
                return {}
            return {
                "hookSpecificOutput": {
                    "hookEventName": "PostToolUse",
                    "additionalContext": message,
                }
            }

        if style is HookStyle.DECISION:
            payload = {"decision": "approve"}
            if message is not None:
                payload["reason"] = message
            return payload

        payload = {"continueAction": self.continue_action}
        if message is not None:
            payload["advisoryMessage"] = message
        return payload


class WordCountGate:
    """Advisory check run before the host reads a file.

    Stateless between calls: the file is re-read and the threshold re-resolved
    on every evaluation.
    """

    def __init__(self, config: GateConfig | None = None) -> None:
        self._config = config or GateConfig()
        self._extensions = frozenset(ext.lower() for ext in self._config.extensions)

    @property
    def config(self) -> GateConfig:
        return self._config

    def threshold(self) -> int:
        """MDSEL_MIN_WORDS if set and valid, else the configured min_words."""
        from_env = parse_min_words(os.environ.get(MIN_WORDS_ENV))
        if from_env is not None:
            return from_env
        return self._config.min_words

    def is_candidate(self, file_path: str, tool_name: str) -> bool:
        """True if the event names the trigger tool and a Markdown file."""
        if tool_name != self._config.trigger_tool:
            return False
        return Path(file_path).suffix.lower() in self._extensions

    def evaluate(self, file_path: str, tool_name: str) -> HookOutput:
        """Decide whether to attach the reminder to this read.

        Never raises. Unreadable files get no advisory; the tool that actually
        reads them reports the error.
        """
        if not self.is_candidate(file_path, tool_name):
            return HookOutput()

        try:
            content = Path(file_path).read_text(encoding="utf-8", errors="replace")
        except (OSError, ValueError):
            return HookOutput()

        if count_words(content) > self.threshold():
            return HookOutput(advisory_message=REMINDER_MESSAGE)
        return HookOutput()

    def evaluate_input(self, hook_input: HookInput) -> HookOutput:
        return self.evaluate(hook_input.file_path, hook_input.tool_name)
