"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides
- Config caching with reset support
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import math
import os
import re
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from mdselclaude.config.layers import config_layers, overlay
from mdselclaude.config.schema import (
    DEFAULT_BINARY,
    DEFAULT_EXTENSIONS,
    DEFAULT_GRACE_PERIOD,
    DEFAULT_KILL_SIGNAL,
    DEFAULT_MIN_WORDS,
    DEFAULT_TIMEOUT,
    DEFAULT_TRIGGER_TOOL,
    Config,
    ExecutorConfig,
    GateConfig,
    LoggingConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("mdselclaude.config")

MIN_WORDS_ENV = "MDSEL_MIN_WORDS"
BINARY_PATH_ENV = "MDSEL_PATH"
TIMEOUT_ENV = "MDSEL_TIMEOUT"
LOG_FILE_ENV = "MDSEL_LOG"

_cached_config: Config | None = None

# Leading decimal integer: "300words" reads as 300
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def parse_min_words(value: Any) -> int | None:
    """Parse a word threshold from its leading integer.

    "300", " 300 " and "300words" all give 300; "1.5" gives 1. Zero is a valid
    threshold and makes every non-empty Markdown file qualify.

    Returns:
        The threshold, or None when value is missing, has no leading digits
        or is negative.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    threshold = int(match.group(1))
    if threshold < 0:
        return None
    return threshold


def _parse_positive_float(value: Any, default: float, key: str) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        _log.warning("Ignoring non-numeric %s: %r", key, value)
        return default
    if not math.isfinite(number):
        _log.warning("Ignoring non-finite %s: %r", key, value)
        return default
    if number <= 0:
        _log.warning("Ignoring non-positive %s: %r", key, value)
        return default
    return number


def resolve_binary_path(configured: str | None) -> str:
    """Resolve the mdsel executable to an absolute path when possible.

    Bare names are looked up on PATH; explicit paths are used as given so a
    missing binary surfaces as a launch failure at run time.
    """
    candidate = configured or DEFAULT_BINARY
    if os.sep in candidate or (os.altsep and os.altsep in candidate):
        return str(Path(candidate).expanduser())
    return shutil.which(candidate) or candidate


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Build config dict from environment variables (highest priority)."""
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}

    binary_path = env.get(BINARY_PATH_ENV)
    if binary_path:
        overrides.setdefault("executor", {})["binary_path"] = binary_path

    timeout = env.get(TIMEOUT_ENV)
    if timeout:
        overrides.setdefault("executor", {})["timeout"] = timeout

    min_words = parse_min_words(env.get(MIN_WORDS_ENV))
    if min_words is not None:
        overrides.setdefault("gate", {})["min_words"] = min_words

    log_path = env.get(LOG_FILE_ENV)
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    return overrides


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    executor_data = data.get("executor", {})
    if not isinstance(executor_data, dict):
        executor_data = {}
    executor = ExecutorConfig(
        binary_path=resolve_binary_path(executor_data.get("binary_path")),
        timeout=_parse_positive_float(
            executor_data.get("timeout"), DEFAULT_TIMEOUT, "executor.timeout"
        ),
        kill_signal=str(executor_data.get("kill_signal") or DEFAULT_KILL_SIGNAL),
        grace_period=_parse_positive_float(
            executor_data.get("grace_period"), DEFAULT_GRACE_PERIOD, "executor.grace_period"
        ),
    )

    gate_data = data.get("gate", {})
    if not isinstance(gate_data, dict):
        gate_data = {}
    min_words = parse_min_words(gate_data.get("min_words"))
    if min_words is None:
        if gate_data.get("min_words") is not None:
            _log.warning("Ignoring invalid gate.min_words: %r", gate_data.get("min_words"))
        min_words = DEFAULT_MIN_WORDS
    extensions_data = gate_data.get("extensions")
    if isinstance(extensions_data, list) and extensions_data:
        extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in extensions_data
            if isinstance(ext, str) and ext
        )
    else:
        extensions = DEFAULT_EXTENSIONS
    gate = GateConfig(
        min_words=min_words,
        trigger_tool=str(gate_data.get("trigger_tool") or DEFAULT_TRIGGER_TOOL),
        extensions=extensions,
    )

    log_data = data.get("logging", {})
    if not isinstance(log_data, dict):
        log_data = {}
    verbose = log_data.get("verbose")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=verbose if isinstance(verbose, int) and not isinstance(verbose, bool) else None,
        file=log_data.get("file"),
    )

    known_keys = {"executor", "gate", "logging"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(executor=executor, gate=gate, logging=logging_config, extra=extra)


def load_config(
    project_root: str | None = None,
    config_file: str | Path | None = None,
    reload: bool = False,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables (MDSEL_PATH, MDSEL_TIMEOUT, MDSEL_MIN_WORDS, MDSEL_LOG)
    2. Explicit config file (--config)
    3. Project config ($project_root/.mdsel/config.yaml)
    4. User config ($XDG_CONFIG_HOME/mdsel-claude/, ~/.config/mdsel-claude/ or ~/.mdsel/)
    5. System config (/etc/mdsel-claude/config.yaml)

    Args:
        project_root: Project directory for project-level config.
        config_file: Additional config file applied above the project layer.
        reload: Force reload even if cached.

    Returns:
        Merged Config object.

    Raises:
        ConfigurationError: If the merged values cannot form a valid config
            (for example an unknown kill_signal name).
    """
    global _cached_config

    cacheable = project_root is None and config_file is None
    if _cached_config is not None and not reload and cacheable:
        return _cached_config

    merged: dict[str, Any] = {}
    for layer in config_layers(project_root, config_file):
        layer_data = load_yaml_file(layer.path)
        if layer_data:
            _log.debug("Loaded %s config from %s", layer.name, layer.path)
            merged = overlay(merged, layer_data)

    merged = overlay(merged, env_overrides())
    config = dict_to_config(merged)

    if cacheable:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config. Useful for testing or forcing a reload."""
    global _cached_config
    _cached_config = None
