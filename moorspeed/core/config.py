"""
Configuration management system for Moorspeed.

This module provides Pydantic settings models for type-safe configuration with validation
and environment variable integration. Every section reads its own MOORSPEED_* prefix and
the optional .env file in the working directory.
"""

from enum import Enum
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moorspeed.navigation.scheduler import SchedulerConfig

MIN_INTERVAL_HOURS = 8
MAX_INTERVAL_HOURS = 84

class LogLevel(str, Enum):
    """Log levels for the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class BaseConfig(BaseSettings):
    """
    Base configuration class with common settings for all components.

    All other configuration classes should inherit from this class.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="MOORSPEED_", extra="ignore")

    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

class EventConfig(BaseConfig):
    """Configuration for the event system."""
    model_config = SettingsConfigDict(env_prefix="MOORSPEED_EVENT_")

    max_trace_events: int = 1000
    tracing_enabled: bool = True

class ServiceConfig(BaseConfig):
    """Configuration for service management."""
    model_config = SettingsConfigDict(env_prefix="MOORSPEED_SERVICE_")

    service_startup_timeout: float = 10.0  # seconds
    service_shutdown_timeout: float = 5.0  # seconds

class SchedulerSettings(BaseConfig):
    """
    Configuration for position sampling and speed test scheduling.

    interval_hours is the minimum time between two speed tests. Values outside
    8-84 hours are pulled back into that range rather than rejected.
    """
    model_config = SettingsConfigDict(env_prefix="MOORSPEED_SCHEDULER_")

    interval_hours: float = 48
    test_on_move: bool = True
    tick_seconds: float = 60.0
    window_size: int = 30
    max_distance_nm: float = 0.1
    move_threshold_nm: float = 1.0
    position_max_age_seconds: float = 60.0

    @field_validator("interval_hours")
    @classmethod
    def clamp_interval(cls, v):
        """Keep the interval within the supported range."""
        return min(max(v, MIN_INTERVAL_HOURS), MAX_INTERVAL_HOURS)

    @field_validator("window_size")
    @classmethod
    def validate_window_size(cls, v):
        """A stationarity judgement needs at least two fixes."""
        if v < 2:
            raise ValueError("Window size must be at least 2")
        return v

    @field_validator("tick_seconds", "max_distance_nm", "move_threshold_nm", "position_max_age_seconds")
    @classmethod
    def validate_positive(cls, v):
        """Validate value is strictly positive."""
        if v <= 0:
            raise ValueError("Value must be greater than 0")
        return v

    def to_scheduler_config(self) -> SchedulerConfig:
        """Build the immutable scheduler configuration."""
        return SchedulerConfig(
            min_interval_hours=self.interval_hours,
            test_on_move=self.test_on_move,
            move_threshold_nm=self.move_threshold_nm,
        )

class SignalKConfig(BaseConfig):
    """Configuration for the Signal K server providing navigation data."""
    model_config = SettingsConfigDict(env_prefix="MOORSPEED_SIGNALK_")

    url: str = "http://localhost:3000"
    request_timeout: float = 10.0  # seconds

class SpeedtestConfig(BaseConfig):
    """
    Configuration for the throughput measurement.

    The measurement provider's EULA, terms of use, privacy policy and GDPR terms
    must all be accepted before any test is run.
    """
    model_config = SettingsConfigDict(env_prefix="MOORSPEED_SPEEDTEST_")

    accept_eula: bool = False
    accept_tos: bool = False
    accept_privacy: bool = False
    accept_gdpr: bool = False
    secure: bool = True
    timeout: float = 30.0  # seconds, per HTTP request made by the library

    @property
    def policies_accepted(self) -> bool:
        return self.accept_eula and self.accept_tos and self.accept_privacy and self.accept_gdpr

class CollectorConfig(BaseConfig):
    """Configuration for the remote collector receiving measurements."""
    model_config = SettingsConfigDict(env_prefix="MOORSPEED_COLLECTOR_")

    url: str = "https://boatersatlas.com/measurements/submit/"
    request_timeout: float = 30.0  # seconds
    website: Optional[str] = None
    equipment: Optional[str] = None

class ApplicationConfig(BaseConfig):
    """
    Main application configuration that combines all component configurations.

    This is the top-level configuration class that should be used by the application.
    """
    model_config = SettingsConfigDict(env_nested_delimiter="__")

    event: EventConfig = Field(default_factory=EventConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    signalk: SignalKConfig = Field(default_factory=SignalKConfig)
    speedtest: SpeedtestConfig = Field(default_factory=SpeedtestConfig)
    collector: CollectorConfig = Field(default_factory=CollectorConfig)

def get_config() -> ApplicationConfig:
    """
    Get the application configuration.

    Returns:
        The validated ApplicationConfig instance
    """
    return ApplicationConfig()
