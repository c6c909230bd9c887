"""Word-count reminder gate and its hook protocol."""

from mdselclaude.gate.hook import handle_payload, render, run_hook
from mdselclaude.gate.reminder import (
    REMINDER_MESSAGE,
    HookInput,
    HookOutput,
    HookStyle,
    WordCountGate,
)
from mdselclaude.gate.word_count import count_words

__all__ = [
    "REMINDER_MESSAGE",
    "HookInput",
    "HookOutput",
    "HookStyle",
    "WordCountGate",
    "count_words",
    "handle_payload",
    "render",
    "run_hook",
]
