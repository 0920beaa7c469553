"""
Measurement and reporting events for Moorspeed.

This module defines events related to scheduling decisions, speed tests
and the submission of their results to the collector.
"""

from typing import Dict, Any, Optional, Literal
from moorspeed.core.events import BaseEvent, EventType

class SchedulerStatusEvent(BaseEvent):
    """
    Event published with the scheduler's human-readable status.

    The message format is informational only and may change.
    """
    type: Literal[EventType.SCHEDULER_STATUS] = EventType.SCHEDULER_STATUS
    message: str
    reason: str  # Reason code of the decision ('first_test', 'interval', 'moved', 'not_due', ...)
    triggered: bool

class SpeedTestStartedEvent(BaseEvent):
    """
    Event published when a speed test has been dispatched.

    The test runs in the background; completion or failure follows as a separate event.
    """
    type: Literal[EventType.SPEED_TEST_STARTED] = EventType.SPEED_TEST_STARTED
    position: Dict[str, float]  # Position at trigger time
    reason: str

class SpeedTestCompletedEvent(BaseEvent):
    """
    Event published when a speed test has completed successfully.

    The reporting service submits these results to the collector.
    """
    type: Literal[EventType.SPEED_TEST_COMPLETED] = EventType.SPEED_TEST_COMPLETED
    position: Dict[str, float]  # Position at completion time
    download_mbps: float
    upload_mbps: float
    ping_ms: Optional[float] = None
    isp: Optional[str] = None
    results: Dict[str, Any] = {}  # Full results from the measurement library
    status: str  # Human-readable summary line

class SpeedTestFailedEvent(BaseEvent):
    """
    Event published when a speed test could not be completed.

    No retry is scheduled; later ticks decide again from scratch.
    """
    type: Literal[EventType.SPEED_TEST_FAILED] = EventType.SPEED_TEST_FAILED
    error: str

class ResultsSubmittedEvent(BaseEvent):
    """
    Event published when results were accepted by the collector.
    """
    type: Literal[EventType.RESULTS_SUBMITTED] = EventType.RESULTS_SUBMITTED
    collector_url: str
    status_code: int

class SubmissionFailedEvent(BaseEvent):
    """
    Event published when results could not be delivered to the collector.

    The speed test still counts as done for scheduling purposes.
    """
    type: Literal[EventType.SUBMISSION_FAILED] = EventType.SUBMISSION_FAILED
    collector_url: str
    error: str
    status_code: Optional[int] = None
