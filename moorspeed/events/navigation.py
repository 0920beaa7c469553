"""
Navigation events for Moorspeed.

This module defines events related to position sampling.
"""

from typing import Literal, Optional
from moorspeed.core.events import BaseEvent, EventType

class PositionReceivedEvent(BaseEvent):
    """
    Event published when a fresh position fix has been recorded.

    Carries the state of the rolling window after the fix was added.
    """
    type: Literal[EventType.POSITION_RECEIVED] = EventType.POSITION_RECEIVED
    latitude: float
    longitude: float
    window_size: int  # Fixes currently in the window
    path_length_nm: float  # Distance travelled across the window
    stationary: bool

class PositionUnavailableEvent(BaseEvent):
    """
    Event published when a tick is skipped for lack of a recent fix.

    No sample is recorded and no scheduling decision is made for that tick.
    """
    type: Literal[EventType.POSITION_UNAVAILABLE] = EventType.POSITION_UNAVAILABLE
    max_age_seconds: float
    reason: Optional[str] = None
