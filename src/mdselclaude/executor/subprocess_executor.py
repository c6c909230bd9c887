"""Subprocess-based executor for the mdsel CLI.

Every run() owns its process, output buffers, reader tasks and timers. The
timeout escalates in two steps: kill_signal first, then SIGKILL once the
grace period runs out. Failures come back as an ExecutionResult; nothing
about the child process is raised to the caller.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
import time
from collections.abc import Sequence
from enum import Enum

from mdselclaude.config.schema import ExecutorConfig, signal_from_name
from mdselclaude.executor.result import ExecutionOptions, ExecutionResult
from mdselclaude.logging import get_logger

log = get_logger("executor")

# Bytes requested per read from a pipe
_CHUNK_SIZE = 64 * 1024

# Exit code reported when the process could not be started
LAUNCH_FAILURE_EXIT_CODE = 1


class InvocationState(Enum):
    """Lifecycle of a single run() call."""

    CREATED = "created"
    SPAWNED = "spawned"
    RUNNING = "running"
    TIMEOUT_FIRED = "timeout_fired"
    TERMINATED = "terminated"


def not_found_message(binary_path: str) -> str:
    """Message placed in stderr when the mdsel binary is missing."""
    return f"mdsel CLI not found at {binary_path}. Install with: npm install -g mdsel"


async def _drain(stream: asyncio.StreamReader, sink: bytearray) -> None:
    """Append raw chunks from a pipe to sink until EOF."""
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            return
        sink.extend(chunk)


class _ExitWatchingProtocol(asyncio.subprocess.SubprocessStreamProtocol):
    """Stream protocol that resolves `exited` as soon as the process exits.

    Process.wait() only returns once every pipe is closed, and a background
    child that inherited stdout can keep a pipe open long after mdsel itself
    is gone.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__(limit=_CHUNK_SIZE, loop=loop)
        self.exited: asyncio.Future[int] = loop.create_future()
        self._subprocess: asyncio.SubprocessTransport | None = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        super().connection_made(transport)
        self._subprocess = transport  # type: ignore[assignment]

    def process_exited(self) -> None:
        super().process_exited()
        if self._subprocess is None or self.exited.done():
            return
        returncode = self._subprocess.get_returncode()
        if returncode is not None:
            self.exited.set_result(returncode)


class _Invocation:
    """State for one run() call. Never shared between calls."""

    def __init__(self, argv: list[str], options: ExecutionOptions) -> None:
        self.argv = argv
        self.options = options
        self.state = InvocationState.CREATED
        self.timed_out = False
        self._kill_signal = signal_from_name(options.kill_signal)
        self._stdout = bytearray()
        self._stderr = bytearray()
        self._process: asyncio.subprocess.Process | None = None
        self._transport: asyncio.SubprocessTransport | None = None
        self._exited: asyncio.Future[int] | None = None
        self._readers: list[asyncio.Task[None]] = []
        self._timers: list[asyncio.TimerHandle] = []
        self._started = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        return (time.perf_counter() - self._started) * 1000

    async def execute(self) -> ExecutionResult:
        loop = asyncio.get_running_loop()
        try:
            transport, protocol = await loop.subprocess_exec(
                lambda: _ExitWatchingProtocol(loop),
                *self.argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.options.working_directory,
                env=self._environment(),
            )
            self._transport = transport
            self._exited = protocol.exited
            self._process = asyncio.subprocess.Process(transport, protocol, loop)
        except FileNotFoundError as e:
            self.state = InvocationState.TERMINATED
            cwd = self.options.working_directory
            if cwd is not None and e.filename == cwd:
                return self._launch_failure(str(e))
            log.warning("mdsel binary not found: %s", self.argv[0])
            return self._launch_failure(not_found_message(self.argv[0]))
        except OSError as e:
            self.state = InvocationState.TERMINATED
            log.warning("Failed to start %s: %s", self.argv[0], e)
            return self._launch_failure(str(e))

        self.state = InvocationState.SPAWNED
        log.debug("Spawned pid=%s: %s", self._process.pid, self.argv)

        assert self._process.stdout is not None
        assert self._process.stderr is not None
        self._readers = [
            asyncio.create_task(_drain(self._process.stdout, self._stdout)),
            asyncio.create_task(_drain(self._process.stderr, self._stderr)),
        ]
        self._timers.append(loop.call_later(self.options.timeout, self._on_timeout))
        self.state = InvocationState.RUNNING

        try:
            returncode = await self._exited
            await self._finish_reading()
        finally:
            self._cleanup()

        return self._build_result(returncode)

    def _environment(self) -> dict[str, str]:
        if self.options.environment is None:
            return os.environ.copy()
        return dict(self.options.environment)

    def _on_timeout(self) -> None:
        """First timer: ask the process to stop."""
        if self._process is None or self._process.returncode is not None:
            return
        self.state = InvocationState.TIMEOUT_FIRED
        self.timed_out = True
        log.warning(
            "mdsel pid=%s exceeded %.1fs, sending %s",
            self._process.pid,
            self.options.timeout,
            self._kill_signal.name,
        )
        with contextlib.suppress(ProcessLookupError):
            self._process.send_signal(self._kill_signal)
        loop = asyncio.get_running_loop()
        self._timers.append(loop.call_later(self.options.grace_period, self._on_grace_expired))

    def _on_grace_expired(self) -> None:
        """Second timer: the process ignored kill_signal."""
        if self._process is None or self._process.returncode is not None:
            return
        log.warning("mdsel pid=%s still alive after grace period, sending SIGKILL", self._process.pid)
        with contextlib.suppress(ProcessLookupError):
            self._process.kill()

    async def _finish_reading(self) -> None:
        """Wait for both pipes to hit EOF.

        A grandchild can keep a pipe open after mdsel exits, so the wait is
        bounded by the grace period; whatever arrived by then is kept.
        """
        if not self._readers:
            return
        _, pending = await asyncio.wait(self._readers, timeout=self.options.grace_period)
        if pending:
            log.debug("Output pipes still open after exit, abandoning %d reader(s)", len(pending))

    def _cleanup(self) -> None:
        """Release timers, readers, the process and our ends of its pipes."""
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
        for reader in self._readers:
            if not reader.done():
                reader.cancel()
        if self._process is not None and self._process.returncode is None:
            # Reached only when the awaiting task was cancelled
            with contextlib.suppress(ProcessLookupError):
                self._process.kill()
        if self._transport is not None:
            # The child watcher still reaps the pid after the transport closes
            self._transport.close()
        self.state = InvocationState.TERMINATED

    def _launch_failure(self, message: str) -> ExecutionResult:
        return ExecutionResult(
            stdout=self._stdout.decode("utf-8", errors="replace"),
            stderr=message,
            exit_code=LAUNCH_FAILURE_EXIT_CODE,
            launched=False,
            duration_ms=self.duration_ms,
        )

    def _build_result(self, returncode: int) -> ExecutionResult:
        exit_code: int | None = returncode
        signal_name: str | None = None
        if returncode < 0:
            exit_code = None
            try:
                signal_name = signal.Signals(-returncode).name
            except ValueError:
                signal_name = f"SIG{-returncode}"

        result = ExecutionResult(
            stdout=self._stdout.decode("utf-8", errors="replace"),
            stderr=self._stderr.decode("utf-8", errors="replace"),
            exit_code=exit_code,
            signal=signal_name,
            timed_out=self.timed_out,
            duration_ms=self.duration_ms,
        )
        log.debug("mdsel finished: %r", result)
        return result


class MdselExecutor:
    """Run the mdsel CLI as a child process and capture its output verbatim.

    The binary path and default timeout come from ExecutorConfig and are
    read-only, so one executor can serve any number of concurrent calls.
    """

    def __init__(self, config: ExecutorConfig | None = None) -> None:
        """Initialize the executor.

        Args:
            config: Binary path and default timeout settings.
        """
        self._config = config or ExecutorConfig()
        self._default_options = ExecutionOptions.from_config(self._config)

    @property
    def binary_path(self) -> str:
        return self._config.binary_path

    @property
    def default_options(self) -> ExecutionOptions:
        return self._default_options

    async def run(
        self,
        command_args: Sequence[str],
        options: ExecutionOptions | None = None,
    ) -> ExecutionResult:
        """Run mdsel with a literal argument vector.

        Args:
            command_args: Subcommand and arguments, e.g. ["select", "h2.0", "a.md"].
            options: Per-call settings. None uses the configured defaults.

        Returns:
            ExecutionResult with stdout/stderr exactly as the process wrote them.

        Raises:
            TypeError: If command_args is a string or contains non-strings.
        """
        if isinstance(command_args, (str, bytes)):
            raise TypeError("command_args must be a sequence of strings, not a string")
        args = list(command_args)
        for arg in args:
            if not isinstance(arg, str):
                raise TypeError(f"command_args items must be str, got {type(arg).__name__}")

        invocation = _Invocation([self._config.binary_path, *args], options or self._default_options)
        return await invocation.execute()

    async def index(
        self, files: Sequence[str], options: ExecutionOptions | None = None
    ) -> ExecutionResult:
        """Run `mdsel index <files...>`."""
        return await self.run(["index", *files], options)

    async def select(
        self, selector: str, files: Sequence[str], options: ExecutionOptions | None = None
    ) -> ExecutionResult:
        """Run `mdsel select <selector> <files...>`."""
        return await self.run(["select", selector, *files], options)
