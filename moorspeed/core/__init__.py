"""
Core framework for Moorspeed.

This package provides the fundamental components of the Moorspeed architecture:
- Event system with typed event definitions
- Service registry and lifecycle management
- Configuration management
- Error types shared by services and providers
- Observability and tracing
"""

from .events import EventType, BaseEvent
from .registry import EventRegistry, ServiceRegistry
from .bus import EventBus
from .tracing import EventTracer
from .service import BaseService
from .config import get_config, ApplicationConfig
from .errors import (
    MoorspeedError,
    ConfigurationError,
    PositionUnavailableError,
    MeasurementError,
    SubmissionError,
)

__all__ = [
    'EventType',
    'BaseEvent',
    'EventRegistry',
    'ServiceRegistry',
    'EventBus',
    'EventTracer',
    'BaseService',
    'get_config',
    'ApplicationConfig',
    'MoorspeedError',
    'ConfigurationError',
    'PositionUnavailableError',
    'MeasurementError',
    'SubmissionError',
]
