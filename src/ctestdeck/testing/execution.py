"""Supervision of test runner processes.

The engine launches ``ctest`` without waiting for it. A per-run pump task
reads merged stdout/stderr in chunks, hands each decoded increment to the
run's consumer first and only then appends it to the run's own output
buffer. Each handle owns its buffer, so overlapping runs never mix text.
"""

from __future__ import annotations

import asyncio
import codecs
import contextlib
import signal
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from ctestdeck.config.models import RunnerConfig
from ctestdeck.core.errors import ConfigError, ExecutionError
from ctestdeck.core.logging import get_logger, set_run_id
from ctestdeck.testing.models import RunRequest, RunState

log = get_logger("testing.execution")

OutputConsumer = Callable[[str], None]
ExitConsumer = Callable[[str], None]

# Characters CTest's regular expressions treat specially.
_CTEST_REGEX_SPECIAL = frozenset("^$.[]|()*+?{}\\")


def escape_test_name(name: str) -> str:
    """Escape a test name so CTest matches it literally."""
    return "".join(f"\\{c}" if c in _CTEST_REGEX_SPECIAL else c for c in name)


def build_test_filter(names: Iterable[str]) -> str:
    """Anchored alternation matching exactly the given test names."""
    return "^(" + "|".join(escape_test_name(n) for n in sorted(names)) + ")$"


def describe_exit(returncode: int) -> str:
    """Human-readable summary of how the runner exited."""
    if returncode == 0:
        return "finished"
    if returncode < 0:
        try:
            sig = signal.Signals(-returncode).name
        except ValueError:
            sig = str(-returncode)
        return f"killed by signal {sig}"
    return f"exited abnormally with code {returncode}"


def _consume_failure(task: asyncio.Task[str]) -> None:
    # The pump logs consumer failures itself; retrieve them so asyncio
    # does not report them again when nobody awaits the handle.
    if not task.cancelled():
        task.exception()


# =============================================================================
# Execution Handle
# =============================================================================


@dataclass(eq=False)
class ExecutionHandle:
    """One in-flight invocation of the test runner."""

    run_id: str
    command: list[str]
    cwd: Path
    process: asyncio.subprocess.Process
    on_output: OutputConsumer
    on_exit: ExitConsumer | None = None
    read_chunk_size: int = 65536
    terminate_grace_sec: float = 5.0
    start_time: float = field(default_factory=time.time)
    exit_code: int | None = None
    exit_description: str | None = None
    _chunks: list[str] = field(default_factory=list, repr=False)
    _task: asyncio.Task[str] | None = field(default=None, repr=False)

    @property
    def state(self) -> RunState:
        return "running" if self.exit_code is None else "exited"

    @property
    def output(self) -> str:
        """Everything the runner printed so far."""
        return "".join(self._chunks)

    @property
    def pid(self) -> int:
        return self.process.pid

    def begin(self) -> None:
        """Start pumping output. Called once by the engine after launch."""
        if self._task is None:
            self._task = asyncio.create_task(self._pump(), name=f"ctest-run-{self.run_id}")
            self._task.add_done_callback(_consume_failure)

    async def wait(self) -> str:
        """Wait for the process to exit; returns the exit description."""
        if self._task is None:
            raise RuntimeError(f"Run {self.run_id} was never started")
        return await asyncio.shield(self._task)

    async def cancel(self) -> str:
        """Terminate the runner, killing it if it ignores the request.

        Test records are left as they are; tests that never reported a
        result stay Running.
        """
        if self._task is None:
            raise RuntimeError(f"Run {self.run_id} was never started")
        if self.state == "running":
            log.info("run_cancelling", run_id=self.run_id, pid=self.pid)
            with contextlib.suppress(ProcessLookupError):
                self.process.terminate()
            try:
                return await asyncio.wait_for(
                    asyncio.shield(self._task), timeout=self.terminate_grace_sec
                )
            except TimeoutError:
                log.warning("run_kill", run_id=self.run_id, pid=self.pid)
                with contextlib.suppress(ProcessLookupError):
                    self.process.kill()
        return await asyncio.shield(self._task)

    async def _pump(self) -> str:
        set_run_id(self.run_id)
        try:
            await self._read_output()
        except Exception:
            log.exception("output_consumer_failed", run_id=self.run_id)
            with contextlib.suppress(ProcessLookupError):
                self.process.kill()
            self._notify_exit(await self.process.wait())
            raise
        return self._notify_exit(await self.process.wait())

    def _notify_exit(self, returncode: int) -> str:
        description = self._record_exit(returncode)
        if self.on_exit is not None:
            self.on_exit(description)
        return description

    async def _read_output(self) -> None:
        stream = self.process.stdout
        if stream is None:
            raise RuntimeError("Runner stdout is not piped")
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while chunk := await stream.read(self.read_chunk_size):
            self._deliver(decoder.decode(chunk))
        self._deliver(decoder.decode(b"", final=True))

    def _deliver(self, text: str) -> None:
        if not text:
            return
        self.on_output(text)
        self._chunks.append(text)

    def _record_exit(self, returncode: int) -> str:
        self.exit_code = returncode
        self.exit_description = describe_exit(returncode)
        log.info(
            "run_exited",
            run_id=self.run_id,
            exit_code=returncode,
            description=self.exit_description,
            duration_sec=round(time.time() - self.start_time, 3),
        )
        return self.exit_description


# =============================================================================
# Execution Engine
# =============================================================================


class ExecutionEngine:
    """Launches the test runner for a run request."""

    def __init__(self, config: RunnerConfig | None = None) -> None:
        self._config = config or RunnerConfig()

    @property
    def config(self) -> RunnerConfig:
        return self._config

    def build_command(self, request: RunRequest) -> list[str]:
        cmd = list(self._config.ctest_command)
        if self._config.output_on_failure:
            cmd.append("--output-on-failure")
        cmd.extend(self._config.extra_args)
        if not request.is_all:
            cmd.extend(["-R", build_test_filter(request.target_tests)])
        return cmd

    async def start(
        self,
        build_dir: Path | None,
        request: RunRequest,
        *,
        on_output: OutputConsumer,
        on_exit: ExitConsumer | None = None,
    ) -> ExecutionHandle:
        """Launch the runner in ``build_dir`` and return without waiting.

        Raises:
            ConfigError: If no build directory is configured.
            ExecutionError: If the process cannot be spawned.
        """
        if build_dir is None:
            raise ConfigError.no_build_directory()

        cmd = self.build_command(request)
        run_id = uuid4().hex[:8]

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=build_dir,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except (OSError, ValueError) as e:
            # ValueError: argv the OS cannot represent (e.g. an embedded NUL).
            log.warning("launch_failed", command=cmd, cwd=str(build_dir), error=str(e))
            raise ExecutionError.launch_failure(cmd, str(e)) from e

        handle = ExecutionHandle(
            run_id=run_id,
            command=cmd,
            cwd=build_dir,
            process=process,
            on_output=on_output,
            on_exit=on_exit,
            read_chunk_size=self._config.read_chunk_size,
            terminate_grace_sec=self._config.terminate_grace_sec,
        )
        handle.begin()
        log.info(
            "run_started",
            run_id=run_id,
            pid=process.pid,
            cwd=str(build_dir),
            tests=len(request.target_tests) or "all",
        )
        return handle
