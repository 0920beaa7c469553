"""
External collaborators for Moorspeed.

This package wraps everything outside the process: the Signal K server that knows
where the vessel is, the speed test library, and the collector that receives results.
It isolates the services from HTTP details and blocking library calls.
"""

from .base import BaseProvider
from .signalk import SignalKPositionSource, VesselIdentity
from .throughput import SpeedtestProvider, MeasurementResult
from .collector import CollectorClient

__all__ = [
    'BaseProvider',
    'SignalKPositionSource',
    'VesselIdentity',
    'SpeedtestProvider',
    'MeasurementResult',
    'CollectorClient',
]
