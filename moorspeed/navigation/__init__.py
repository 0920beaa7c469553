"""
Navigation logic for Moorspeed.

Pure, I/O free pieces that decide when a speed test is due:
- geo: great-circle distance and path length in nautical miles
- tracker: rolling window of position fixes and the stationarity verdict
- scheduler: the trigger decision given the last completed test
"""

from .geo import Position, distance, path_length
from .tracker import PositionTracker
from .scheduler import SchedulerConfig, SchedulerDecision, SchedulerState, TestRecord, TestScheduler

__all__ = [
    'Position',
    'distance',
    'path_length',
    'PositionTracker',
    'SchedulerConfig',
    'SchedulerDecision',
    'SchedulerState',
    'TestRecord',
    'TestScheduler',
]
