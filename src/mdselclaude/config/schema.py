"""Configuration schema dataclasses for mdsel-claude.

Defines the structure of configuration at all levels (system, user, project).
Every field has a default so partial configs merge cleanly.
"""

from __future__ import annotations

import math
import signal
from dataclasses import dataclass, field
from typing import Any

from mdselclaude.errors import ConfigurationError

DEFAULT_BINARY = "mdsel"
DEFAULT_TIMEOUT = 30.0
DEFAULT_KILL_SIGNAL = "SIGTERM"
DEFAULT_GRACE_PERIOD = 5.0
DEFAULT_MIN_WORDS = 200
DEFAULT_TRIGGER_TOOL = "Read"
DEFAULT_EXTENSIONS = (".md", ".markdown")


def signal_from_name(name: str) -> signal.Signals:
    """Resolve a signal name such as "SIGTERM" (or "TERM") to a Signals member.

    Raises:
        ConfigurationError: If the platform has no signal with that name.
    """
    key = name.upper()
    if not key.startswith("SIG"):
        key = "SIG" + key
    try:
        return signal.Signals[key]
    except KeyError:
        raise ConfigurationError(f"Unknown signal name: {name!r}") from None


@dataclass(frozen=True)
class ExecutorConfig:
    """Settings for the mdsel subprocess engine.

    Read-only and shared by every concurrent run() call.

    Example config.yaml:
        executor:
          binary_path: /usr/local/bin/mdsel
          timeout: 30
          kill_signal: SIGTERM
          grace_period: 5
    """

    binary_path: str = DEFAULT_BINARY  # Absolute path resolved by the loader
    timeout: float = DEFAULT_TIMEOUT  # Seconds before kill_signal is sent
    kill_signal: str = DEFAULT_KILL_SIGNAL
    grace_period: float = DEFAULT_GRACE_PERIOD  # Seconds before SIGKILL

    def __post_init__(self) -> None:
        if not self.binary_path:
            raise ConfigurationError("executor.binary_path must not be empty")
        if not (math.isfinite(self.timeout) and self.timeout > 0):
            raise ConfigurationError(
                f"executor.timeout must be a positive number, got {self.timeout}"
            )
        if not (math.isfinite(self.grace_period) and self.grace_period > 0):
            raise ConfigurationError(
                f"executor.grace_period must be a positive number, got {self.grace_period}"
            )
        signal_from_name(self.kill_signal)


@dataclass(frozen=True)
class GateConfig:
    """Settings for the word-count reminder gate.

    min_words is the fallback threshold; MDSEL_MIN_WORDS in the environment
    still wins at evaluation time.
    """

    min_words: int = DEFAULT_MIN_WORDS
    trigger_tool: str = DEFAULT_TRIGGER_TOOL
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object.

    Built once at process start and handed to the executor and the gate.
    """

    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    gate: GateConfig = field(default_factory=GateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown keys, kept as-is
