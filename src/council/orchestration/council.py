"""
Council orchestrator -- fan one task out to N lens-constrained members, then synthesize.

Phases:
  DISPATCHING  -- one asyncio task per selected lens, all started at once
  COLLECTING   -- each task reports exactly one MemberResult on a shared queue;
                  results are re-sorted by slot, so completion order never leaks
  SYNTHESIZING -- (optional) one more executor call over every member result,
                  started only after the last member has reported

Failure isolation:
  - A member that times out or fails becomes a placeholder MemberResult at the
    dispatch boundary. Siblings and the run itself are unaffected.
  - A failed synthesis is reported on its own; member results stay valid.
  - Each member has its own timer. Nothing shares a deadline.

Hub-and-spoke: members never see each other's output; only the synthesizer does.
"""

import asyncio
import logging
import random
import time
from enum import Enum
from typing import Callable

from ..errors import ExecutionError
from ..lenses import Lens, LensRegistry
from ..llm import ExecutorProtocol
from .models import CouncilResult, MemberResult, RunTask, SynthesisResult
from .prompts import render_member_prompt, render_synthesis_prompt

logger = logging.getLogger(__name__)


class CouncilState(str, Enum):
    """Where a run currently is."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    COLLECTING = "collecting"
    SYNTHESIZING = "synthesizing"
    DONE = "done"


def failure_placeholder(slot: int, reason: str) -> str:
    """Text standing in for a member that produced no analysis."""
    return f"[Member {slot + 1} error: {reason}]"


# =============================================================================
# COUNCIL ORCHESTRATOR
# =============================================================================


class Council:
    """
    Multi-member council orchestrator.

    Usage:
        council = Council(executor=CliExecutor(), rng=random.Random(7))
        result = await council.run(RunTask(content="Review the cache layer"))

        for member in result.members:
            print(member.lens_name, member.failed)
        if result.synthesis and result.synthesis.succeeded:
            print(result.synthesis.text)

    ``on_dispatch(slot, lens)`` fires as each member is spawned and
    ``on_complete(member_result)`` as each one reports, in completion order.
    """

    def __init__(
        self,
        executor: ExecutorProtocol,
        registry: LensRegistry | None = None,
        rng: random.Random | None = None,
        on_dispatch: Callable[[int, Lens], None] | None = None,
        on_complete: Callable[[MemberResult], None] | None = None,
    ):
        self._executor = executor
        self._registry = registry or LensRegistry()
        self._rng = rng
        self._on_dispatch = on_dispatch
        self._on_complete = on_complete
        self.state = CouncilState.IDLE

    def select(self, task: RunTask) -> list[Lens]:
        """Pick the lenses for ``task`` using this council's random source."""
        return self._registry.select(task.config.num_members, rng=self._rng)

    async def run(
        self, task: RunTask, selection: list[Lens] | None = None
    ) -> CouncilResult:
        """Run every member, then (optionally) synthesize.

        ``selection`` defaults to ``self.select(task)``; pass one in to show
        the assignments before dispatch starts.
        """
        config = task.config
        result = CouncilResult(task=task)
        result.selection = list(selection) if selection is not None else self.select(task)

        if len(result.selection) > config.num_members:
            logger.warning(
                f"[Council] Requested {config.num_members} members but "
                f"{len(result.selection)} lenses are mandatory; seating all of them"
            )

        start = time.monotonic()
        result.members = await self._run_members(task, result.selection)
        result.member_seconds = time.monotonic() - start

        failed = len(result.failed_members)
        logger.info(
            f"[Council] {len(result.members) - failed}/{len(result.members)} members "
            f"succeeded in {result.member_seconds:.1f}s"
        )

        if config.synthesize:
            self.state = CouncilState.SYNTHESIZING
            logger.info(f"[Council] Synthesizing {len(result.members)} analyses")
            synthesis_start = time.monotonic()
            result.synthesis = await self._synthesize(task, result.members)
            result.synthesis_seconds = time.monotonic() - synthesis_start

        self.state = CouncilState.DONE
        logger.info(
            f"[Council] Complete: {result.total_seconds:.1f}s "
            f"(members: {result.member_seconds:.1f}s, "
            f"synthesis: {result.synthesis_seconds:.1f}s)"
        )
        return result

    async def _run_members(
        self, task: RunTask, selection: list[Lens]
    ) -> list[MemberResult]:
        """Dispatch every member concurrently; collect one result per slot."""
        self.state = CouncilState.DISPATCHING
        logger.info(f"[Council] Dispatching {len(selection)} members")

        queue: asyncio.Queue[MemberResult] = asyncio.Queue()
        pending: list[asyncio.Task] = []
        collected: dict[int, MemberResult] = {}
        try:
            for slot, lens in enumerate(selection):
                prompt = render_member_prompt(lens, task.content, len(selection))
                if self._on_dispatch:
                    self._on_dispatch(slot, lens)
                pending.append(
                    asyncio.create_task(self._dispatch(slot, lens, prompt, task, queue))
                )

            self.state = CouncilState.COLLECTING
            while len(collected) < len(selection):
                member = await queue.get()
                if member.slot in collected or not 0 <= member.slot < len(selection):
                    raise RuntimeError(f"[Council] Unexpected report for slot {member.slot}")
                collected[member.slot] = member
                logger.debug(
                    f"[Council] Member #{member.member_number} ({member.lens_name}) reported "
                    f"({len(collected)}/{len(selection)})"
                )
                if self._on_complete:
                    self._on_complete(member)
        finally:
            # Unfinished only on interrupt or a failed spawn; cancelling kills the external work
            for t in pending:
                if not t.done():
                    t.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        return [collected[slot] for slot in sorted(collected)]

    async def _dispatch(
        self,
        slot: int,
        lens: Lens,
        prompt: str,
        task: RunTask,
        queue: asyncio.Queue,
    ) -> None:
        """Run one member and report exactly once, success or not."""
        start = time.monotonic()
        error: str | None = None
        try:
            text = await self._executor.execute(
                prompt, task.config.timeout_seconds, task.config.model
            )
        except ExecutionError as e:
            logger.error(f"[Council] Member #{slot + 1} ({lens.name}) failed: {e.detail}")
            error = e.detail
        except Exception as e:
            logger.exception(f"[Council] Member #{slot + 1} ({lens.name}) crashed")
            error = f"{type(e).__name__}: {e}"

        if error is not None:
            text = failure_placeholder(slot, error)

        queue.put_nowait(
            MemberResult(
                slot=slot,
                lens_name=lens.name,
                text=text,
                error=error,
                duration_seconds=time.monotonic() - start,
            )
        )

    async def _synthesize(
        self, task: RunTask, members: list[MemberResult]
    ) -> SynthesisResult:
        """One sequential call over all member results, in slot order."""
        prompt = render_synthesis_prompt(members, task.content)
        try:
            text = await self._executor.execute(
                prompt, task.config.timeout_seconds, task.config.model
            )
        except ExecutionError as e:
            logger.error(f"[Council] Synthesis failed: {e.detail}")
            return SynthesisResult(error=e.detail)
        except Exception as e:
            logger.exception("[Council] Synthesis crashed")
            return SynthesisResult(error=f"{type(e).__name__}: {e}")
        return SynthesisResult(text=text)
