"""Build the configured analysis executor."""

import logging

from ..config import ExecutorConfig
from .api import ApiExecutor
from .executor import CliExecutor, ExecutorProtocol

logger = logging.getLogger(__name__)


def build_executor(config: ExecutorConfig) -> ExecutorProtocol:
    """
    Create an executor for ``config.backend``.

      cli       -> CliExecutor(config.cli_path)
      anthropic -> ApiExecutor(provider="anthropic")
      openai    -> ApiExecutor(provider="openai")
    """
    if config.backend == "cli":
        executor: ExecutorProtocol = CliExecutor(cli_path=config.cli_path)
    elif config.backend in ("anthropic", "openai"):
        executor = ApiExecutor(provider=config.backend, api_key=config.api_key)
    else:
        raise ValueError(f"Unsupported backend: {config.backend}")
    logger.debug(f"[Executor] Using {config.backend} backend")
    return executor
