"""
API executor -- same contract as CliExecutor, but over a provider SDK.

Supports: Anthropic (Claude), OpenAI (GPT/o-series).

The SDKs are optional (pip install 'council[api]') and imported lazily.
SDK-level retries are disabled: a council call is a single attempt.
The per-call timeout wraps the whole request, and cancelling it closes
the in-flight HTTP request.

Usage:
    executor = ApiExecutor(provider="anthropic")
    executor.check_available()   # SDK installed + ANTHROPIC_API_KEY set
    text = await executor.execute("Analyze ...", timeout=600)
"""

import asyncio
import logging
import os
import time
from typing import Any

from ..errors import (
    CapabilityUnavailable,
    ExecutionError,
    ExecutionTimeout,
    ExecutorUnavailable,
)
from .executor import MAX_OUTPUT_BYTES, truncate_output

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 8192

PROVIDER_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o",
}


class ApiExecutor:
    """
    Provider-agnostic executor over the official async SDKs.

    Usage:
        executor = ApiExecutor(provider="openai")
        text = await executor.execute(prompt, timeout=300, model="gpt-4o")
    """

    def __init__(
        self,
        provider: str = "anthropic",
        api_key: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
        client: Any = None,
    ):
        self._provider = provider.lower()
        if self._provider not in PROVIDER_KEY_ENV:
            raise ValueError(f"Unsupported provider: {provider}")
        self._api_key = api_key or os.environ.get(PROVIDER_KEY_ENV[self._provider], "")
        self._max_tokens = max_tokens
        self._max_output_bytes = max_output_bytes
        self._client = client

    @property
    def provider(self) -> str:
        return self._provider

    def _default_model(self) -> str:
        return DEFAULT_MODELS[self._provider]

    def _get_client(self) -> Any:
        """Create the SDK client on first use."""
        if self._client is not None:
            return self._client

        env_var = PROVIDER_KEY_ENV[self._provider]
        if not self._api_key:
            raise CapabilityUnavailable(f"{env_var} not set")

        try:
            if self._provider == "anthropic":
                import anthropic

                self._client = anthropic.AsyncAnthropic(api_key=self._api_key, max_retries=0)
            else:
                import openai

                self._client = openai.AsyncOpenAI(api_key=self._api_key, max_retries=0)
        except ImportError as e:
            raise CapabilityUnavailable(
                f"{self._provider} SDK not installed. Install it: pip install 'council[api]'"
            ) from e

        logger.info(f"[Executor] Initialized {self._provider} client")
        return self._client

    def check_available(self) -> None:
        """Preflight: SDK importable and API key present."""
        self._get_client()

    async def execute(
        self, prompt: str, timeout: float, model: str | None = None
    ) -> str:
        """Run one analysis. Returns captured text or raises ExecutionError."""
        try:
            client = self._get_client()
        except CapabilityUnavailable as e:
            raise ExecutorUnavailable(str(e)) from e

        model = model or self._default_model()
        start = time.time()
        try:
            content = await asyncio.wait_for(
                self._call_provider(client, prompt, model), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"[Executor] {self._provider}/{model} timed out after {timeout}s")
            raise ExecutionTimeout(timeout) from None
        except Exception as e:
            logger.error(f"[Executor] {self._provider}/{model} call failed: {e}")
            raise ExecutionError(f"Request failed: {type(e).__name__}: {e}") from e

        logger.debug(
            f"[Executor] {self._provider}/{model}: {len(content)} chars "
            f"({(time.time() - start) * 1000:.0f}ms)"
        )
        return truncate_output(content.encode("utf-8"), self._max_output_bytes)

    async def _call_provider(self, client: Any, prompt: str, model: str) -> str:
        """Dispatch to provider-specific implementation."""
        messages = [{"role": "user", "content": prompt}]
        if self._provider == "anthropic":
            response = await client.messages.create(
                model=model,
                max_tokens=self._max_tokens,
                messages=messages,
            )
            return "".join(
                block.text for block in response.content
                if getattr(block, "type", "text") == "text"
            )

        response = await client.chat.completions.create(
            model=model,
            max_tokens=self._max_tokens,
            messages=messages,
        )
        return response.choices[0].message.content or ""
