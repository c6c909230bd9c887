"""Execution engine for the wrapped mdsel binary."""

from mdselclaude.executor.protocol import Executor
from mdselclaude.executor.result import ExecutionOptions, ExecutionResult
from mdselclaude.executor.subprocess_executor import (
    InvocationState,
    MdselExecutor,
    not_found_message,
)

__all__ = [
    "ExecutionOptions",
    "ExecutionResult",
    "Executor",
    "InvocationState",
    "MdselExecutor",
    "not_found_message",
]
