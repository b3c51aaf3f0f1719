"""Test fixtures -- scripted executor standing in for the analysis capability."""

import asyncio
import random
import re

import pytest

from council.errors import CapabilityUnavailable
from council.lenses import Lens

SYNTHESIS_PREFIX = "You are a master synthesizer"
LENS_LABEL = re.compile(r"labeled \[([^\]]+)\]")


class FakeExecutor:
    """Executor that answers from a script instead of calling a model.

    ``responses`` maps lens name -> text or exception to raise.
    ``delays`` maps lens name -> seconds to sleep before answering.
    Unlisted lenses answer "analysis from <lens>".
    """

    def __init__(
        self,
        responses: dict | None = None,
        delays: dict | None = None,
        synthesis: str | Exception = "FINAL SYNTHESIS",
        available: bool = True,
    ):
        self.responses = responses or {}
        self.delays = delays or {}
        self.synthesis = synthesis
        self.available = available
        self.calls: list[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.in_flight_at_synthesis: int | None = None

    def check_available(self) -> None:
        if not self.available:
            raise CapabilityUnavailable("'claude' CLI not found in PATH")

    @property
    def member_calls(self) -> list[dict]:
        return [c for c in self.calls if c["kind"] == "member"]

    @property
    def synthesis_calls(self) -> list[dict]:
        return [c for c in self.calls if c["kind"] == "synthesis"]

    async def execute(self, prompt, timeout, model=None):
        if prompt.startswith(SYNTHESIS_PREFIX):
            self.in_flight_at_synthesis = self.in_flight
            self.calls.append({"kind": "synthesis", "prompt": prompt, "timeout": timeout, "model": model})
            if isinstance(self.synthesis, Exception):
                raise self.synthesis
            return self.synthesis

        lens = LENS_LABEL.search(prompt).group(1)
        self.calls.append(
            {"kind": "member", "lens": lens, "prompt": prompt, "timeout": timeout, "model": model}
        )
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(lens, 0))
            response = self.responses.get(lens, f"analysis from {lens}")
            if isinstance(response, Exception):
                raise response
            return response
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_executor():
    """Executor where every member and the synthesizer succeed."""
    return FakeExecutor()


@pytest.fixture
def make_executor():
    """Factory for scripted executors: make_executor(responses=..., delays=...)."""
    return FakeExecutor


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def small_catalog():
    """Two mandatory lenses plus four optional ones."""
    return (
        Lens(name="goal", prompt="CONSTRAINT: the goal", mandatory=True),
        Lens(name="speed", prompt="CONSTRAINT: speed", mandatory=True),
        Lens(name="types", prompt="CONSTRAINT: types"),
        Lens(name="errors", prompt="CONSTRAINT: errors"),
        Lens(name="tests", prompt="CONSTRAINT: tests"),
        Lens(name="waste", prompt="CONSTRAINT: waste"),
    )
