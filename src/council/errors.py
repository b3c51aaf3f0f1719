"""
Error taxonomy for a council run.

Fatal (end the process before any dispatch):
  UsageError             -- missing task, bad option values
  CapabilityUnavailable  -- the analysis executor cannot be reached at all
  InstallError           -- the --install command failed

Per-call (converted to placeholder text where they happen, never fatal):
  ExecutionError         -- base for one executor call going wrong
  ExecutionTimeout       -- the call outlived its timeout and was killed
  ExecutorUnavailable    -- the call could not be started
"""


class CouncilError(Exception):
    """Base class for every error raised by this package."""


class UsageError(CouncilError, ValueError):
    """Raised when operator input is invalid. Contains a user-friendly message."""


class CapabilityUnavailable(CouncilError):
    """Raised by executor preflight when the analysis capability is unreachable."""


class InstallError(CouncilError):
    """Raised when the launcher cannot be installed."""


class ExecutionError(CouncilError):
    """One executor call failed. ``detail`` is the human-readable reason."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ExecutionTimeout(ExecutionError):
    """The external call did not return within ``timeout`` seconds."""

    def __init__(self, timeout: float):
        super().__init__(f"Timed out after {timeout:g}s")
        self.timeout = timeout


class ExecutorUnavailable(ExecutionError):
    """The external call could not be invoked (missing binary, spawn failure)."""

    def __init__(self, detail: str):
        super().__init__(f"Process failed: {detail}")
