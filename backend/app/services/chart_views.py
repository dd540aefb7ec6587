"""Per-card chart windows.

Each chart card gets its own ViewWindow on first use. Windows never touch
the simulation loop: they only slice whatever history the caller hands in.
"""

from typing import Callable

from core.view_window import ViewWindow

ACTIONS: dict[str, Callable[[ViewWindow], None]] = {
    "zoom-in": ViewWindow.zoom_in,
    "zoom-out": ViewWindow.zoom_out,
    "pan-left": ViewWindow.pan_left,
    "pan-right": ViewWindow.pan_right,
    "reset": ViewWindow.reset,
}


class ChartViews:
    """ViewWindow registry keyed by card id."""

    def __init__(self, capacity: int = 40):
        self.capacity = capacity
        self._windows: dict[str, ViewWindow] = {}

    def get(self, card_id: str) -> ViewWindow:
        """Get the window for a card, creating it on first access."""
        window = self._windows.get(card_id)
        if window is None:
            window = ViewWindow(capacity=self.capacity)
            self._windows[card_id] = window
        return window

    def apply(self, card_id: str, action: str) -> ViewWindow:
        """Run a named action on a card's window.

        Raises:
            KeyError: unknown action
        """
        handler = ACTIONS[action]
        window = self.get(card_id)
        handler(window)
        return window

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._windows

    def __len__(self) -> int:
        return len(self._windows)
