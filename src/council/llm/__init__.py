"""
Analysis executors -- where each council member's prompt actually gets answered.

Two backends share one contract (ExecutorProtocol):
  - CliExecutor: `claude -p` subprocess per call (default)
  - ApiExecutor: Anthropic / OpenAI SDK request per call

Usage:
    from council.config import ExecutorConfig
    from council.llm import build_executor

    executor = build_executor(ExecutorConfig(backend="cli"))
    executor.check_available()
    text = await executor.execute("Analyze this", timeout=600)
"""

from .api import ApiExecutor
from .executor import (
    MAX_OUTPUT_BYTES,
    CliExecutor,
    ExecutorProtocol,
    combine_output,
    truncate_output,
)
from .factory import build_executor
