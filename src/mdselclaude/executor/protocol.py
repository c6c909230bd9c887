"""Executor protocol for running the wrapped mdsel binary."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from mdselclaude.executor.result import ExecutionOptions, ExecutionResult


class Executor(Protocol):
    """Protocol for running mdsel subcommands.

    Implementations:
    - MdselExecutor: asyncio subprocess execution of the real binary
    """

    async def run(
        self,
        command_args: Sequence[str],
        options: ExecutionOptions | None = None,
    ) -> ExecutionResult:
        """Run mdsel with the given argument vector.

        Args:
            command_args: Subcommand and arguments, e.g. ["index", "README.md"].
            options: Per-call settings. None uses the executor's defaults.

        Returns:
            ExecutionResult; operational failures never raise.
        """
        ...
