"""Data models for a council run."""

from dataclasses import dataclass, field

from ..config import CouncilConfig
from ..lenses import Lens


@dataclass(frozen=True)
class RunTask:
    """Input to a council run. Created once, never mutated."""

    content: str
    config: CouncilConfig = field(default_factory=CouncilConfig)


@dataclass(frozen=True)
class MemberResult:
    """One member's outcome. ``slot`` is the only ordering key."""

    slot: int
    lens_name: str
    text: str  # Output, or a placeholder naming the slot and the failure
    error: str | None = None
    duration_seconds: float = 0.0

    @property
    def member_number(self) -> int:
        return self.slot + 1

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class SynthesisResult:
    """Outcome of the single synthesis call: success, or failure(reason)."""

    text: str = ""
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class CouncilResult:
    """Complete council output."""

    task: RunTask
    selection: list[Lens] = field(default_factory=list)
    members: list[MemberResult] = field(default_factory=list)  # Sorted by slot
    synthesis: SynthesisResult | None = None
    member_seconds: float = 0.0  # Dispatch + collect
    synthesis_seconds: float = 0.0

    @property
    def failed_members(self) -> list[MemberResult]:
        return [m for m in self.members if m.failed]

    @property
    def total_seconds(self) -> float:
        return self.member_seconds + self.synthesis_seconds
