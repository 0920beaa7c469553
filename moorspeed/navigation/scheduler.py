"""
Speed test scheduling decision.

The scheduler has two states:
- IDLE: no speed test has completed since the process started
- ARMED: a TestRecord (time and place of the last completed test) exists

It is only consulted with a stationarity verdict from the PositionTracker. A vessel
that is not stationary never triggers a test. A stationary vessel triggers one when:
- the scheduler is IDLE, or
- more than min_interval_hours have passed since the last test, or
- test_on_move is enabled and the vessel is at least move_threshold_nm away from
  where the last test ran.

The decision itself does not change state. The caller resets the tracker when a test
is triggered and reports a successful test back with record_completion().
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .geo import Position, distance_between

DEFAULT_MOVE_THRESHOLD_NM = 1.0

class SchedulerState(str, Enum):
    """Whether a speed test has completed yet in this process."""
    IDLE = "idle"
    ARMED = "armed"

@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Scheduling parameters, fixed for the lifetime of the process."""

    min_interval_hours: float
    test_on_move: bool
    move_threshold_nm: float = DEFAULT_MOVE_THRESHOLD_NM

    @property
    def min_interval(self) -> timedelta:
        return timedelta(hours=self.min_interval_hours)

@dataclass(frozen=True, slots=True)
class TestRecord:
    """When and where the most recent speed test completed."""
    __test__ = False  # not a pytest test class

    timestamp: datetime
    position: Position

@dataclass(frozen=True, slots=True)
class SchedulerDecision:
    """
    Outcome of a single scheduling evaluation.

    Attributes:
        trigger: True if a speed test should start now
        reason: Short machine-friendly reason ('moving', 'first_test', 'interval',
            'moved', 'not_due')
        elapsed: Time since the last completed test; None when IDLE
        moved_nm: Distance from the last test position; 0.0 when IDLE
        interval_hours: Configured minimum interval
        test_on_move: Whether the move rule was enabled
    """

    trigger: bool
    reason: str
    elapsed: Optional[timedelta]
    moved_nm: float
    interval_hours: float
    test_on_move: bool

    def describe(self) -> str:
        """Human-readable status line for logs and the status event."""
        elapsed_hours = "n/a" if self.elapsed is None else f"{self.elapsed.total_seconds() / 3600:.2f}"
        prefix = "testing" if self.trigger else "not testing"
        return (
            f"{prefix} ({self.reason}): interval {self.interval_hours:g} hours / "
            f"elapsed {elapsed_hours} hours / moved {self.moved_nm:.2f} nm / "
            f"test on move {'enabled' if self.test_on_move else 'disabled'}"
        )

class TestScheduler:
    """Decides when a new speed test is due."""
    __test__ = False  # not a pytest test class

    def __init__(self, config: SchedulerConfig):
        self.config = config
        self._last_test: Optional[TestRecord] = None

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.IDLE if self._last_test is None else SchedulerState.ARMED

    @property
    def last_test(self) -> Optional[TestRecord]:
        return self._last_test

    def evaluate(self, stationary: bool, position: Position, now: datetime) -> SchedulerDecision:
        """
        Decide whether to trigger a speed test on this tick.

        Args:
            stationary: Verdict from PositionTracker.is_stationary()
            position: Current position fix
            now: Current time, comparable with the recorded test timestamps

        Returns:
            The decision with the values it was based on
        """
        record = self._last_test
        elapsed = None if record is None else now - record.timestamp
        moved = 0.0 if record is None else distance_between(position, record.position)

        if not stationary:
            reason, trigger = "moving", False
        elif record is None:
            reason, trigger = "first_test", True
        elif elapsed > self.config.min_interval:
            reason, trigger = "interval", True
        elif self.config.test_on_move and moved >= self.config.move_threshold_nm:
            reason, trigger = "moved", True
        else:
            reason, trigger = "not_due", False

        return SchedulerDecision(
            trigger=trigger,
            reason=reason,
            elapsed=elapsed,
            moved_nm=moved,
            interval_hours=self.config.min_interval_hours,
            test_on_move=self.config.test_on_move,
        )

    def record_completion(self, timestamp: datetime, position: Position) -> TestRecord:
        """
        Store a successfully completed test, moving the scheduler to ARMED.

        Args:
            timestamp: When the test completed
            position: Where the vessel was when it completed

        Returns:
            The new TestRecord
        """
        self._last_test = TestRecord(timestamp=timestamp, position=position)
        return self._last_test
