"""
Exception types for Moorspeed.

Providers raise these so services can tell an expected outside failure
(no GPS fix, speed test server unreachable, collector down) from a bug.
"""


class MoorspeedError(Exception):
    """Base class for all Moorspeed errors."""


class ConfigurationError(MoorspeedError):
    """Raised when the configuration does not allow a service to run."""


class PositionUnavailableError(MoorspeedError):
    """Raised when no sufficiently recent position fix is available."""


class MeasurementError(MoorspeedError):
    """Raised when a throughput measurement could not be completed."""


class SubmissionError(MoorspeedError):
    """
    Raised when results could not be delivered to the collector.

    Attributes:
        status_code: HTTP status returned by the collector, if any
    """

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
