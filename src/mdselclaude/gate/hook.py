"""Hook protocol runner: one JSON object in on stdin, one JSON object out.

The process always exits 0. Payloads that cannot be parsed get the plain
"continue" envelope, the same as files below the threshold.
"""

from __future__ import annotations

import json
import sys
from typing import IO

from mdselclaude.gate.reminder import HookInput, HookOutput, HookStyle, WordCountGate
from mdselclaude.logging import get_logger

log = get_logger("gate.hook")


def handle_payload(raw: str, gate: WordCountGate) -> HookOutput:
    """Parse a raw hook payload and evaluate it."""
    try:
        payload = json.loads(raw)
        hook_input = HookInput.from_payload(payload)
    except (json.JSONDecodeError, ValueError) as e:
        log.debug("Ignoring unusable hook payload: %s", e)
        return HookOutput()
    return gate.evaluate_input(hook_input)


def render(output: HookOutput, style: HookStyle | str = HookStyle.CLAUDE) -> str:
    """Serialize a HookOutput as one line of JSON."""
    return json.dumps(output.to_payload(style))


def run_hook(
    gate: WordCountGate,
    style: HookStyle | str = HookStyle.CLAUDE,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> int:
    """Run one hook exchange and return the process exit status (always 0)."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    output = handle_payload(stdin.read(), gate)
    if output.advisory_message is not None:
        log.info("Reminder attached for large Markdown read")
    stdout.write(render(output, style) + "\n")
    stdout.flush()
    return 0
