"""
Run and executor configuration.

Values come from CLI options; each option also reads an environment variable
(COUNCIL_MEMBERS, COUNCIL_TIMEOUT, COUNCIL_MODEL, COUNCIL_BACKEND, COUNCIL_CLI).
"""

from dataclasses import dataclass

DEFAULT_NUM_MEMBERS = 5
DEFAULT_TIMEOUT_SECONDS = 600
DEFAULT_BACKEND = "cli"
DEFAULT_CLI_PATH = "claude"

BACKENDS = ("cli", "anthropic", "openai")


@dataclass(frozen=True)
class CouncilConfig:
    """Parameters of one council run."""

    num_members: int = DEFAULT_NUM_MEMBERS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS  # Per dispatch, synthesis included
    model: str | None = None  # Forwarded verbatim to every executor call
    synthesize: bool = True
    show_all: bool = False  # Present every member's full text


@dataclass(frozen=True)
class ExecutorConfig:
    """Which analysis executor to build and how to reach it."""

    backend: str = DEFAULT_BACKEND
    cli_path: str = DEFAULT_CLI_PATH
    api_key: str | None = None  # API backends only; falls back to the provider env var
