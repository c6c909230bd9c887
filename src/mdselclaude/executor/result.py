"""Execution result and per-call option dataclasses."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mdselclaude.config.schema import (
    DEFAULT_GRACE_PERIOD,
    DEFAULT_KILL_SIGNAL,
    DEFAULT_TIMEOUT,
    signal_from_name,
)

if TYPE_CHECKING:
    from mdselclaude.config.schema import ExecutorConfig


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one mdsel invocation.

    Attributes:
        stdout: Everything the process wrote to stdout, in arrival order.
        stderr: Everything the process wrote to stderr, or the synthesized
            launch-failure message when no process ever ran.
        exit_code: Process exit code, or None if the process died by signal.
        signal: Signal name if the process was terminated by a signal.
        timed_out: True if the timeout fired during this invocation.
        launched: False when no process was started, in which case stderr
            holds the synthesized launch-failure message.
        duration_ms: Execution duration in milliseconds.
    """

    stdout: str
    stderr: str
    exit_code: int | None
    signal: str | None = None
    timed_out: bool = False
    launched: bool = True
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """True iff the process exited with code 0."""
        return self.exit_code == 0

    def __repr__(self) -> str:
        """Concise repr for logs and the REPL."""
        if not self.launched:
            return "<ExecutionResult launch failed>"
        if self.success:
            return f"<ExecutionResult ok, {len(self.stdout)} chars>"
        if self.exit_code is None:
            return f"<ExecutionResult signal={self.signal}, timed_out={self.timed_out}>"
        return f"<ExecutionResult error, exit={self.exit_code}>"


@dataclass(frozen=True)
class ExecutionOptions:
    """Per-call settings, snapshotted at the start of run().

    Attributes:
        working_directory: Directory to run mdsel in. None inherits ours.
        environment: Full environment for the child. None copies os.environ
            at call time.
        timeout: Seconds before kill_signal is sent.
        kill_signal: Signal name sent when the timeout fires.
        grace_period: Seconds between kill_signal and SIGKILL.
    """

    working_directory: str | None = None
    environment: Mapping[str, str] | None = None
    timeout: float = DEFAULT_TIMEOUT
    kill_signal: str = DEFAULT_KILL_SIGNAL
    grace_period: float = DEFAULT_GRACE_PERIOD

    def __post_init__(self) -> None:
        if not (math.isfinite(self.timeout) and self.timeout > 0):
            raise ValueError(f"timeout must be a positive number, got {self.timeout}")
        if not (math.isfinite(self.grace_period) and self.grace_period > 0):
            raise ValueError(f"grace_period must be a positive number, got {self.grace_period}")
        signal_from_name(self.kill_signal)

    @classmethod
    def from_config(cls, config: ExecutorConfig) -> ExecutionOptions:
        """Build the default options for an executor config."""
        return cls(
            timeout=config.timeout,
            kill_signal=config.kill_signal,
            grace_period=config.grace_period,
        )
