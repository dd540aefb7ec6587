"""Random source protocol used by the generators.

``random.Random`` satisfies it. Tests pass a stub that returns fixed values.
"""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Anything that draws a uniform float in [a, b]."""

    def uniform(self, a: float, b: float) -> float:
        ...


def default_random_source(seed: int | None = None) -> RandomSource:
    """Create a fresh ``random.Random`` (seeded when ``seed`` is given)."""
    return random.Random(seed)
