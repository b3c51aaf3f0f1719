"""
LensRegistry -- Holds the lens catalog and picks which lenses sit on a council.

Selection policy:
  - Every mandatory lens is always seated, in catalog order.
  - Remaining seats are filled from a uniform shuffle of the optional lenses.
  - Never more seats than lenses; never the same lens twice.
  - A request smaller than the mandatory set still gets the whole mandatory
    set (not clamped to n).

The random source is injected so tests can seed it.

Usage:
    registry = LensRegistry()
    selection = registry.select(5, rng=random.Random(42))
"""

import logging
import random
from typing import Sequence

from .catalog import LENSES, Lens

logger = logging.getLogger(__name__)


class LensRegistry:
    """Read-only view over a lens catalog with the selection policy."""

    def __init__(self, catalog: Sequence[Lens] = LENSES):
        self._lenses: dict[str, Lens] = {}
        for lens in catalog:
            if lens.name in self._lenses:
                raise ValueError(f"Duplicate lens name in catalog: {lens.name}")
            self._lenses[lens.name] = lens
        self._catalog = tuple(catalog)

    def select(self, n: int, rng: random.Random | None = None) -> list[Lens]:
        """Pick the lenses for one run. See module docstring for the policy."""
        if n < 0:
            raise ValueError(f"Member count must be non-negative, got {n}")

        selected = list(self.mandatory)
        if n > len(selected):
            shuffled = list(self.optional)
            (rng or random.SystemRandom()).shuffle(shuffled)
            selected.extend(shuffled[: n - len(selected)])

        logger.debug(
            f"[LensRegistry] Selected {len(selected)} lenses for n={n}: "
            f"{[lens.name for lens in selected]}"
        )
        return selected

    def get(self, name: str) -> Lens | None:
        """Get a lens by name."""
        return self._lenses.get(name)

    @property
    def lenses(self) -> tuple[Lens, ...]:
        """Full catalog in catalog order."""
        return self._catalog

    @property
    def mandatory(self) -> tuple[Lens, ...]:
        return tuple(lens for lens in self._catalog if lens.mandatory)

    @property
    def optional(self) -> tuple[Lens, ...]:
        return tuple(lens for lens in self._catalog if not lens.mandatory)

    @property
    def names(self) -> list[str]:
        return [lens.name for lens in self._catalog]

    def __len__(self) -> int:
        return len(self._catalog)


def select_lenses(
    n: int,
    rng: random.Random | None = None,
    catalog: Sequence[Lens] = LENSES,
) -> list[Lens]:
    """Select lenses from ``catalog`` without keeping a registry around."""
    return LensRegistry(catalog).select(n, rng=rng)
