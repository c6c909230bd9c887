"""Where config layers live and how they stack.

A layer is one YAML file. Layers are applied lowest to highest:

    system    /etc/mdsel-claude/config.yaml
    user      $XDG_CONFIG_HOME/mdsel-claude/config.yaml, else ~/.config/...
              when ~/.config exists, else ~/.mdsel/config.yaml
    project   <project_root>/.mdsel/config.yaml
    explicit  the file passed with --config

Environment overrides sit above all of them and are built by the loader.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NamedTuple

APP_DIR = "mdsel-claude"
PROJECT_DIR = ".mdsel"
CONFIG_FILENAME = "config.yaml"

SYSTEM_CONFIG = Path("/etc") / APP_DIR / CONFIG_FILENAME


class ConfigLayer(NamedTuple):
    """A named config file. The file need not exist."""

    name: str
    path: Path


def user_config_path() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR / CONFIG_FILENAME
    home = Path.home()
    if (home / ".config").is_dir():
        return home / ".config" / APP_DIR / CONFIG_FILENAME
    return home / PROJECT_DIR / CONFIG_FILENAME


def project_config_path(project_root: str | Path) -> Path:
    return Path(project_root) / PROJECT_DIR / CONFIG_FILENAME


def config_layers(
    project_root: str | Path | None = None,
    config_file: str | Path | None = None,
) -> list[ConfigLayer]:
    """List the config layers that apply, lowest priority first."""
    layers = [
        ConfigLayer("system", SYSTEM_CONFIG),
        ConfigLayer("user", user_config_path()),
    ]
    if project_root:
        layers.append(ConfigLayer("project", project_config_path(project_root)))
    if config_file is not None:
        layers.append(ConfigLayer("explicit", Path(config_file)))
    return layers


def overlay(base: Mapping[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Return base with layer laid over it.

    Mappings present on both sides are combined key by key. A None in layer
    leaves the base value alone; anything else, lists included, replaces it.
    Neither input is modified.
    """
    merged = dict(base)
    for key, value in layer.items():
        if value is None:
            continue
        below = merged.get(key)
        if isinstance(below, Mapping) and isinstance(value, Mapping):
            value = overlay(below, value)
        merged[key] = value
    return merged
