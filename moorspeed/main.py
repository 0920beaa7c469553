"""
Main entry point for Moorspeed.

This module wires the providers and services together and runs the application.
It handles signal management, logging setup, and system lifecycle.
"""

import asyncio
import logging
import signal
import sys
import structlog
from typing import Any, Dict, List, Optional

from moorspeed.core import (
    EventRegistry, ServiceRegistry, EventBus, EventTracer, BaseService, get_config,
    ConfigurationError,
)
from moorspeed.core.config import ApplicationConfig
from moorspeed.events.system import ApplicationStartupCompletedEvent, register_system_events
from moorspeed.providers import BaseProvider, CollectorClient, SignalKPositionSource, SpeedtestProvider
from moorspeed.services import ReportingService, SpeedTestService

def setup_logging(level: str = "INFO"):
    """Configure structured logging for the application."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level, logging.INFO),
        stream=sys.stdout,
    )

class MoorspeedApplication:
    """
    Main application class for Moorspeed.

    This class initializes and manages the event system, the external providers
    and the services, and shuts them down in reverse order.
    """

    def __init__(self, config: Optional[ApplicationConfig] = None):
        """Initialize the application."""
        self.logger = structlog.get_logger(app="moorspeed")
        self.config = config or get_config()

        self.event_registry = EventRegistry()
        register_system_events(self.event_registry)
        self.service_registry = ServiceRegistry()

        if self.config.event.tracing_enabled:
            self.event_tracer = EventTracer(max_events=self.config.event.max_trace_events)
        else:
            self.event_tracer = None

        self.event_bus = EventBus(self.event_registry, self.event_tracer)

        self.signalk = SignalKPositionSource(self.config.signalk)
        self.collector = CollectorClient(self.config.collector)
        self.speedtest = SpeedtestProvider(self.config.speedtest)

        self.providers: List[BaseProvider] = []
        self.services: Dict[str, BaseService] = {}
        self._running = True

    async def initialize(self):
        """Initialize providers, start all services and announce startup."""
        self.logger.info("Initializing Moorspeed")

        try:
            await self._init_provider(self.speedtest)
        except ConfigurationError as e:
            # Nothing to do without an accepted measurement provider
            self.logger.error(str(e))
            raise

        try:
            await self._init_provider(self.signalk)
            await self._init_provider(self.collector)

            # Start in dependency order: the speed test service requires reporting
            self.services["reporting"] = await self._init_service(
                ReportingService,
                collector=self.collector,
                identity_source=self.signalk,
            )
            self.services["speedtest"] = await self._init_service(
                SpeedTestService,
                position_source=self.signalk,
                measurement=self.speedtest,
            )

            await self.event_bus.publish(
                ApplicationStartupCompletedEvent(producer_name="moorspeed"),
                "moorspeed"
            )
            for health in (await self.check_health()).values():
                self.logger.info("Provider status", **health)
            self.logger.info("Moorspeed initialization complete")

        except Exception as e:
            self.logger.error("Failed to initialize application", error=str(e), exc_info=True)
            raise

    async def _init_provider(self, provider: BaseProvider):
        await provider.initialize()
        self.providers.append(provider)

    async def check_health(self) -> Dict[str, Dict[str, Any]]:
        """Collect the health report of every initialized provider, keyed by provider name."""
        return {provider.name: await provider.check_health() for provider in self.providers}

    async def _init_service(self, service_class, **kwargs):
        """
        Initialize and start a service.

        Args:
            service_class: The service class to initialize
            **kwargs: Additional arguments to pass to the service constructor

        Returns:
            The started service instance
        """
        service_name = service_class.__name__
        self.logger.info(f"Initializing service: {service_name}")

        service = service_class(
            event_bus=self.event_bus,
            service_registry=self.service_registry,
            config=self.config,
            **kwargs
        )

        try:
            await asyncio.wait_for(service.start(), timeout=self.config.service.service_startup_timeout)
            return service
        except Exception as e:
            self.logger.error(f"Failed to start service: {service_name}",
                              error=str(e), exc_info=True)
            raise

    async def run(self):
        """Run the application main loop."""
        try:
            while self._running:
                await asyncio.sleep(1)

        except asyncio.CancelledError:
            self.logger.info("Application task cancelled")

        finally:
            await self.shutdown()

    async def shutdown(self):
        """Stop all services, then release the providers."""
        if not self.services and not self.providers:
            return

        self._running = False
        self.logger.info("Shutting down Moorspeed")

        for name, service in reversed(list(self.services.items())):
            try:
                self.logger.info(f"Stopping service: {name}")
                await asyncio.wait_for(service.stop(), timeout=self.config.service.service_shutdown_timeout)
            except Exception as e:
                self.logger.error(f"Error stopping service {name}: {e}")
        self.services.clear()

        for provider in reversed(self.providers):
            try:
                await provider.shutdown()
            except Exception as e:
                self.logger.error(f"Error shutting down provider {provider.name}: {e}")
        self.providers.clear()

        self.logger.info("Moorspeed shutdown complete")

    def handle_signal(self, sig):
        """
        Handle termination signals.

        Stops the main loop; run() then shuts everything down.

        Args:
            sig: The signal received
        """
        self.logger.info(f"Received signal {sig.name}, shutting down")
        self._running = False

async def main():
    """Application entry point."""
    config = get_config()
    setup_logging("DEBUG" if config.debug else config.log_level.value)

    app = MoorspeedApplication(config)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(
            sig, lambda s=sig: app.handle_signal(s))

    try:
        await app.initialize()
    except Exception:
        await app.shutdown()
        raise
    await app.run()

def cli():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except ConfigurationError:
        sys.exit(2)
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    cli()
