"""
Analysis executor -- the boundary between the council and the model doing the work.

An executor takes a prompt, a timeout and an optional model identifier and
returns the captured text. It raises ExecutionError subclasses instead:
  - ExecutionTimeout: the call outlived its timeout; its work was killed
  - ExecutorUnavailable: the call could not be started at all

Executors never retry. One attempt per call.

CliExecutor (default) shells out to the `claude` CLI in print mode:
  - the prompt is written to stdin, so its size is not bound by argv limits
  - stdout and stderr are both captured; stderr is appended after a marker
  - combined output is capped at MAX_OUTPUT_BYTES with a visible notice
  - each call runs in its own process group, so a timeout or a cancelled
    task takes down the whole tree (SIGTERM, then SIGKILL after a grace period)

Usage:
    executor = CliExecutor()
    executor.check_available()          # preflight, raises CapabilityUnavailable
    text = await executor.execute("Analyze ...", timeout=600, model="opus")
"""

import asyncio
import logging
import os
import shutil
import signal
from typing import Protocol, runtime_checkable

from ..config import DEFAULT_CLI_PATH
from ..errors import (
    CapabilityUnavailable,
    ExecutionTimeout,
    ExecutorUnavailable,
)

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 500_000
STDERR_MARKER = b"\n[stderr]: "
KILL_GRACE_SECONDS = 3.0


# =============================================================================
# EXECUTOR PROTOCOL
# =============================================================================


@runtime_checkable
class ExecutorProtocol(Protocol):
    """Interface any analysis executor must implement to serve a council.

    Example:
        class MyExecutor:
            def check_available(self): ...
            async def execute(self, prompt, timeout, model=None): ...
    """

    def check_available(self) -> None: ...

    async def execute(
        self, prompt: str, timeout: float, model: str | None = None
    ) -> str: ...


# =============================================================================
# OUTPUT CAPTURE
# =============================================================================


def combine_output(stdout: bytes, stderr: bytes) -> bytes:
    """Primary output first, diagnostics after a marker (only if any)."""
    if not stderr:
        return stdout
    return stdout + STDERR_MARKER + stderr


def truncate_output(data: bytes, max_bytes: int = MAX_OUTPUT_BYTES) -> str:
    """
    Decode captured output, capping it at ``max_bytes``.

    Output at or under the cap comes back unchanged, so truncating an
    already-capped prefix again is a no-op. Over the cap, the first
    ``max_bytes`` bytes are kept and a truncation notice is appended.
    Invalid UTF-8 (including a character split by the cut) is replaced.
    """
    if len(data) <= max_bytes:
        return data.decode("utf-8", errors="replace")
    text = data[:max_bytes].decode("utf-8", errors="replace")
    return f"{text}\n\n[Output truncated at {max_bytes // 1000}KB]"


# =============================================================================
# CLI EXECUTOR
# =============================================================================


class CliExecutor:
    """
    Runs each analysis as a `claude -p` subprocess.

    Usage:
        executor = CliExecutor(cli_path="claude")
        text = await executor.execute(prompt, timeout=600)
    """

    def __init__(
        self,
        cli_path: str = DEFAULT_CLI_PATH,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
        kill_grace_seconds: float = KILL_GRACE_SECONDS,
    ):
        self._cli_path = cli_path
        self._max_output_bytes = max_output_bytes
        self._kill_grace_seconds = kill_grace_seconds

    @property
    def cli_path(self) -> str:
        return self._cli_path

    def build_command(self, model: str | None = None) -> list[str]:
        """Argument vector for one call. No shell is involved; the prompt goes to stdin."""
        cmd = [
            self._cli_path,
            "-p",
            "--output-format", "text",
            "--dangerously-skip-permissions",
        ]
        if model:
            cmd.extend(["--model", model])
        return cmd

    def check_available(self) -> None:
        """Preflight: fail once, up front, instead of N times in parallel."""
        if shutil.which(self._cli_path) is None:
            raise CapabilityUnavailable(f"'{self._cli_path}' CLI not found in PATH")
        logger.debug(f"[Executor] Found {self._cli_path} at {shutil.which(self._cli_path)}")

    async def execute(
        self, prompt: str, timeout: float, model: str | None = None
    ) -> str:
        """Run one analysis. Returns captured text or raises ExecutionError."""
        cmd = self.build_command(model)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            logger.error(f"[Executor] Could not start {self._cli_path}: {e}")
            raise ExecutorUnavailable(str(e)) from e

        logger.debug(f"[Executor] Started pid {proc.pid} (timeout={timeout}s, model={model})")
        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(input=prompt.encode("utf-8")), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"[Executor] pid {proc.pid} timed out after {timeout}s, terminating")
            await self._terminate(proc)
            raise ExecutionTimeout(timeout) from None
        except asyncio.CancelledError:
            logger.warning(f"[Executor] pid {proc.pid} cancelled, terminating")
            await self._terminate(proc)
            raise

        if proc.returncode:
            logger.warning(f"[Executor] pid {proc.pid} exited with status {proc.returncode}")

        combined = combine_output(stdout, stderr)
        if len(combined) > self._max_output_bytes:
            logger.info(
                f"[Executor] pid {proc.pid} produced {len(combined)} bytes, "
                f"truncating to {self._max_output_bytes}"
            )
        return truncate_output(combined, self._max_output_bytes)

    async def _terminate(self, proc: asyncio.subprocess.Process) -> None:
        """Stop the process group: SIGTERM, grace period, then SIGKILL."""
        if proc.returncode is not None:
            return
        self._signal_group(proc, signal.SIGTERM)
        try:
            await asyncio.wait_for(proc.wait(), timeout=self._kill_grace_seconds)
        except asyncio.TimeoutError:
            logger.warning(f"[Executor] pid {proc.pid} ignored SIGTERM, killing")
            self._signal_group(proc, getattr(signal, "SIGKILL", signal.SIGTERM))
            try:
                # A descendant outside the group can hold the pipes open forever
                await asyncio.wait_for(proc.wait(), timeout=self._kill_grace_seconds)
            except asyncio.TimeoutError:
                logger.error(
                    f"[Executor] pid {proc.pid} still holds its pipes after SIGKILL, abandoning"
                )

    @staticmethod
    def _signal_group(proc: asyncio.subprocess.Process, sig: int) -> None:
        try:
            if os.name == "posix":
                # start_new_session made the child its own group leader
                os.killpg(proc.pid, sig)
            else:
                proc.send_signal(sig)
        except ProcessLookupError:
            pass
