"""MCP tool surface: mdsel_index and mdsel_select."""

from mdselclaude.tools.handlers import (
    MDSEL_INDEX,
    MDSEL_SELECT,
    MdselIndexInput,
    MdselSelectInput,
    MdselTools,
    render_result,
)

__all__ = [
    "MDSEL_INDEX",
    "MDSEL_SELECT",
    "MdselIndexInput",
    "MdselSelectInput",
    "MdselTools",
    "render_result",
]
