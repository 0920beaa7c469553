"""
Service implementations for Moorspeed.

Services are the long-running components of the application, each responsible
for a specific piece of functionality. They communicate through events.
"""

from .reporting_service import ReportingService
from .speedtest_service import SpeedTestService

__all__ = ['ReportingService', 'SpeedTestService']
