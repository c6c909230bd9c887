"""Configuration management for mdsel-claude.

Provides hierarchical YAML-based configuration with:
- System-level config (/etc/mdsel-claude/)
- User-level config ($XDG_CONFIG_HOME/mdsel-claude/, ~/.config/mdsel-claude/ or ~/.mdsel/)
- Project-level config ($project_root/.mdsel/)
- An explicit file from --config
- Environment variable overrides (highest priority)

Example usage:
    from mdselclaude.config import load_config

    config = load_config(project_root="/path/to/project")
    print(config.executor.binary_path)
    print(config.gate.min_words)
"""

from mdselclaude.config.layers import ConfigLayer, config_layers, overlay
from mdselclaude.config.loader import (
    MIN_WORDS_ENV,
    get_config,
    load_config,
    parse_min_words,
    reset_config,
)
from mdselclaude.config.schema import (
    Config,
    ExecutorConfig,
    GateConfig,
    LoggingConfig,
    signal_from_name,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    "parse_min_words",
    "MIN_WORDS_ENV",
    # Schema types
    "ExecutorConfig",
    "GateConfig",
    "LoggingConfig",
    "signal_from_name",
    # Layering
    "ConfigLayer",
    "config_layers",
    "overlay",
]
