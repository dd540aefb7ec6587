"""Zoom / pan windowing over an instrument's history.

A ViewWindow belongs to one chart card. It only stores how many points are
visible (view_size) and how far back from the live edge the window ends
(view_offset). visible_slice() turns that into a slice of the history and
clamps again at the slice boundary, so stale values left over from a
different capacity can never produce an out-of-range slice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")

MIN_VIEW_SIZE = 5
DEFAULT_VIEW_SIZE = 20
VIEW_STEP = 5


def slice_bounds(total: int, view_size: int, view_offset: int) -> tuple[int, int]:
    """Compute (start, end) indices of the visible range.

    Always satisfies 0 <= start <= end <= total.
    """
    total = max(0, total)
    end = min(total, max(0, total - view_offset))
    start = max(0, end - max(0, view_size))
    return start, end


def visible_slice(history: Sequence[T], view_size: int, view_offset: int) -> list[T]:
    """Return the visible part of ``history``.

    end = len - view_offset, start = max(0, end - view_size).
    """
    start, end = slice_bounds(len(history), view_size, view_offset)
    return list(history[start:end])


@dataclass
class ViewWindow:
    """Per-card zoom/pan state."""

    capacity: int = 40
    view_size: int = DEFAULT_VIEW_SIZE
    view_offset: int = 0

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {self.capacity}")
        self._clamp()

    @property
    def min_size(self) -> int:
        return min(MIN_VIEW_SIZE, self.capacity)

    @property
    def max_offset(self) -> int:
        return max(0, self.capacity - self.view_size)

    @property
    def is_live(self) -> bool:
        """True when the window ends at the most recent point."""
        return self.view_offset == 0

    def _clamp(self) -> None:
        self.view_size = max(self.min_size, min(self.capacity, self.view_size))
        self.view_offset = max(0, min(self.max_offset, self.view_offset))

    def zoom_in(self) -> None:
        self.view_size = max(self.min_size, self.view_size - VIEW_STEP)

    def zoom_out(self) -> None:
        self.view_size = min(self.capacity, self.view_size + VIEW_STEP)
        # A wider window may no longer fit at the current offset
        self.view_offset = min(self.view_offset, self.max_offset)

    def pan_left(self) -> None:
        """Look further back in history."""
        self.view_offset = min(self.max_offset, self.view_offset + VIEW_STEP)

    def pan_right(self) -> None:
        """Move toward the live edge."""
        self.view_offset = max(0, self.view_offset - VIEW_STEP)

    def reset(self) -> None:
        self.view_size = min(DEFAULT_VIEW_SIZE, self.capacity)
        self.view_offset = 0

    def apply(self, history: Sequence[T]) -> list[T]:
        """Slice ``history`` with this window's state."""
        return visible_slice(history, self.view_size, self.view_offset)
