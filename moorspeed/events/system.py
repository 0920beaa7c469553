"""
System events for Moorspeed.

This module defines events related to application lifecycle, service state,
and system-level operations.
"""

from typing import Dict, Any, Optional, Literal
from moorspeed.core.events import BaseEvent, EventType
from moorspeed.core.registry import EventRegistry

class ApplicationStartupCompletedEvent(BaseEvent):
    """
    Event published when application startup has completed.

    This event signals that all services have been started and position
    sampling is under way.
    """
    type: Literal[EventType.APPLICATION_STARTUP_COMPLETED] = EventType.APPLICATION_STARTUP_COMPLETED

class ServiceStateChangedEvent(BaseEvent):
    """
    Event published when a service changes state.

    This event is used to communicate service lifecycle changes
    (started, stopping, stopped, error).
    """
    type: Literal[EventType.SERVICE_STATE_CHANGED] = EventType.SERVICE_STATE_CHANGED
    service_name: str
    state: str  # 'started', 'stopping', 'stopped', 'error'
    error: Optional[str] = None  # Present only if state is 'error'

class ServiceErrorEvent(BaseEvent):
    """
    Event published when a service encounters an unexpected error.

    The service keeps running; the event exists so the error is visible
    in the trace alongside the regular events.
    """
    type: Literal[EventType.SERVICE_ERROR] = EventType.SERVICE_ERROR
    service_name: str
    error_type: str
    error_message: str
    details: Optional[Dict[str, Any]] = None

def register_system_events(registry: EventRegistry) -> None:
    """Register the system event schemas, which are published by the framework itself."""
    registry.register_event(
        EventType.APPLICATION_STARTUP_COMPLETED,
        ApplicationStartupCompletedEvent,
        "All services started",
    )
    registry.register_event(
        EventType.SERVICE_STATE_CHANGED,
        ServiceStateChangedEvent,
        "A service changed lifecycle state",
    )
    registry.register_event(
        EventType.SERVICE_ERROR,
        ServiceErrorEvent,
        "A service hit an unexpected error and carried on",
    )
