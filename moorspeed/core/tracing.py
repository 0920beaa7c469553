"""
Event tracing for Moorspeed.

Keeps a bounded history of the events that went through the bus so a long-running
deployment can be inspected: how many ticks were skipped for lack of a fix, when the
last speed test ran, what the collector answered.
"""

import time
import logging
from typing import Dict, List, Optional, Any, Deque
from collections import Counter, deque
from .events import BaseEvent

class EventTracer:
    """
    Records published events in a fixed-size ring buffer.

    The oldest entries are dropped once max_events is reached.
    """

    def __init__(self, max_events: int = 1000):
        """
        Initialize the event tracer.

        Args:
            max_events: Maximum number of events to keep in the buffer
        """
        self.max_events = max_events
        self.events: Deque[Dict[str, Any]] = deque(maxlen=max_events)
        self.logger = logging.getLogger(__name__)

    def record_event(self, event: BaseEvent) -> None:
        """Record an event in the trace buffer."""
        self.events.append({
            'recorded_at': time.time(),
            'trace_id': event.trace_id,
            'type': event.type,
            'producer': event.producer_name,
            'event_data': event.model_dump(exclude={'trace_id', 'type', 'producer_name'}),
        })
        self.logger.debug(f"Recorded event {event.type} from {event.producer_name}")

    def get_trace(self, trace_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get all recorded events, or only those with the given trace ID."""
        if trace_id is None:
            return list(self.events)
        return [e for e in self.events if e['trace_id'] == trace_id]

    def get_events_by_type(self, event_type: str) -> List[Dict[str, Any]]:
        """Get all recorded events of a specific type, oldest first."""
        return [e for e in self.events if e['type'] == event_type]

    def get_events_by_producer(self, producer_name: str) -> List[Dict[str, Any]]:
        """Get all recorded events from a specific producer, oldest first."""
        return [e for e in self.events if e['producer'] == producer_name]

    def get_last_event(self, event_type: str) -> Optional[Dict[str, Any]]:
        """Get the most recent event of a type, or None."""
        for entry in reversed(self.events):
            if entry['type'] == event_type:
                return entry
        return None

    def get_event_count(self) -> int:
        return len(self.events)

    def clear(self) -> None:
        """Clear all recorded events."""
        self.events.clear()

    def get_event_rate(self, window_seconds: int = 60) -> float:
        """
        Calculate the event rate over a time window.

        Args:
            window_seconds: Time window in seconds

        Returns:
            Events per second over the window
        """
        window_start = time.time() - window_seconds
        in_window = sum(1 for e in self.events if e['recorded_at'] >= window_start)
        return in_window / window_seconds

    def get_event_stats(self) -> Dict[str, Any]:
        """
        Get statistics about recorded events.

        Returns:
            Dictionary with total count, counts per type and per producer, and the current rate
        """
        return {
            'total_events': len(self.events),
            'event_types': dict(Counter(e['type'] for e in self.events)),
            'producers': dict(Counter(e['producer'] for e in self.events)),
            'rate_per_second': self.get_event_rate(),
        }
