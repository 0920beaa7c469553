"""
Rolling window of recent position fixes.

The tracker answers one question: has the vessel stayed put across the whole window?
A window that is not yet full is never considered stationary, so after start-up or a
reset a full window of fresh evidence has to accumulate first.
"""

import logging
from collections import deque
from typing import Deque, Tuple

from .geo import Position, path_length

DEFAULT_WINDOW_SIZE = 30
DEFAULT_MAX_DISTANCE_NM = 0.1

class PositionTracker:
    """
    Fixed-capacity, newest-first history of position fixes.

    Recording a fix at full capacity evicts the oldest one.
    """

    def __init__(self, capacity: int = DEFAULT_WINDOW_SIZE):
        """
        Initialize the tracker.

        Args:
            capacity: Number of fixes a full window holds (at least 2)
        """
        if capacity < 2:
            raise ValueError(f"Window capacity must be at least 2, got {capacity}")
        self._capacity = capacity
        # appendleft on a bounded deque drops from the right, i.e. the oldest fix
        self._window: Deque[Position] = deque(maxlen=capacity)
        self.logger = logging.getLogger(__name__)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def positions(self) -> Tuple[Position, ...]:
        """Snapshot of the window, newest fix first."""
        return tuple(self._window)

    @property
    def is_full(self) -> bool:
        return len(self._window) >= self._capacity

    def __len__(self) -> int:
        return len(self._window)

    def record(self, position: Position) -> None:
        """Add the newest fix to the front of the window."""
        self._window.appendleft(position)

    def path_length(self) -> float:
        """Distance in nautical miles travelled across the window."""
        return path_length(self._window)

    def is_stationary(self, max_distance: float = DEFAULT_MAX_DISTANCE_NM) -> bool:
        """
        Check whether the vessel has been stationary across the full window.

        Args:
            max_distance: Largest total path length, in nautical miles, still counted as stationary

        Returns:
            True only if the window is full and its path length is within max_distance
        """
        if not self.is_full:
            return False
        travelled = self.path_length()
        self.logger.debug(
            "Travelled %.4f nm over the last %d fixes (limit %.4f nm)",
            travelled, len(self._window), max_distance,
        )
        return travelled <= max_distance

    def reset(self) -> None:
        """Drop every recorded fix."""
        self._window.clear()
