"""Exception types for mdsel-claude.

Operational failures of the wrapped binary are never raised; they come back
as an ExecutionResult. These exceptions signal caller or configuration bugs.
"""

from __future__ import annotations


class MdselError(Exception):
    """Base class for mdsel-claude errors."""


class ConfigurationError(MdselError, ValueError):
    """Raised when a configuration value cannot be used."""


class ToolCallError(MdselError):
    """A tool call finished unsuccessfully; the message is the tool's output."""
