"""
council -- Fan one analysis task out to N advisors, each looking through a
different lens, then synthesize their findings into one recommendation.

Usage:
    from council import Council, RunTask, CliExecutor

    council = Council(executor=CliExecutor())
    result = await council.run(RunTask(content="Review the auth module"))
    print(result.synthesis.text)
"""

__version__ = "0.3.0"

from .config import CouncilConfig, ExecutorConfig
from .errors import (
    CapabilityUnavailable,
    CouncilError,
    ExecutionError,
    ExecutionTimeout,
    ExecutorUnavailable,
    InstallError,
    UsageError,
)
from .lenses import LENSES, Lens, LensRegistry, select_lenses
from .llm import CliExecutor, ApiExecutor, build_executor
from .orchestration import Council, CouncilResult, MemberResult, RunTask, SynthesisResult
