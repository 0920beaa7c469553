"""
Speed test scheduling service for Moorspeed.

Samples the vessel position on a fixed cadence, feeds the rolling window, and starts
a speed test when the scheduler says one is due. The measurement runs as a background
task; ticks keep coming while it is in flight.

All scheduler and window state lives on the event loop thread. The measurement's
blocking work happens in a worker thread, but its completion resumes on the loop
before the TestRecord is written, so ticks and completions never race.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, ClassVar, Dict, Any, Optional, Set

from moorspeed.core.bus import EventBus
from moorspeed.core.config import ApplicationConfig
from moorspeed.core.errors import MeasurementError
from moorspeed.core.events import BaseEvent, EventType
from moorspeed.core.registry import ServiceRegistry
from moorspeed.core.service import BaseService
from moorspeed.events.measurement import (
    SchedulerStatusEvent,
    SpeedTestStartedEvent,
    SpeedTestCompletedEvent,
    SpeedTestFailedEvent,
)
from moorspeed.events.navigation import PositionReceivedEvent, PositionUnavailableEvent
from moorspeed.events.system import ServiceErrorEvent
from moorspeed.navigation.geo import Position
from moorspeed.navigation.scheduler import SchedulerDecision, TestScheduler
from moorspeed.navigation.tracker import PositionTracker

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class SpeedTestService(BaseService):
    """
    Periodic position sampling and speed test triggering.

    Collaborators:
        position_source: object with ``async get_position(max_age_seconds) -> Optional[Position]``
        measurement: object with ``async measure(position) -> MeasurementResult``
    """

    PRODUCES_EVENTS: ClassVar[Dict[EventType, Dict[str, Any]]] = {
        EventType.POSITION_RECEIVED: {
            'schema': PositionReceivedEvent,
            'description': "A fresh position fix was added to the window",
        },
        EventType.POSITION_UNAVAILABLE: {
            'schema': PositionUnavailableEvent,
            'description': "No recent position fix; the tick was skipped",
        },
        EventType.SCHEDULER_STATUS: {
            'schema': SchedulerStatusEvent,
            'description': "Scheduling decision for a stationary vessel",
        },
        EventType.SPEED_TEST_STARTED: {
            'schema': SpeedTestStartedEvent,
            'description': "A speed test was dispatched",
        },
        EventType.SPEED_TEST_COMPLETED: {
            'schema': SpeedTestCompletedEvent,
            'description': "A speed test completed successfully",
        },
        EventType.SPEED_TEST_FAILED: {
            'schema': SpeedTestFailedEvent,
            'description': "A speed test failed",
        },
    }

    REQUIRED_SERVICES: ClassVar[Set[str]] = {"ReportingService"}

    def __init__(self,
                 event_bus: EventBus,
                 service_registry: ServiceRegistry,
                 config: ApplicationConfig,
                 position_source,
                 measurement,
                 clock: Callable[[], datetime] = utc_now,
                 name: Optional[str] = None):
        """
        Initialize the service.

        Args:
            event_bus: The event bus for publishing events
            service_registry: The service registry for lifecycle management
            config: Application configuration; the scheduler section is used
            position_source: Position provider
            measurement: Measurement provider
            clock: Returns the current time; tests substitute a fake clock
            name: Optional service name
        """
        super().__init__(event_bus, service_registry, name=name, config=config)
        self.settings = config.scheduler
        self.position_source = position_source
        self.measurement = measurement
        self._clock = clock

        self.tracker: Optional[PositionTracker] = None
        self.scheduler: Optional[TestScheduler] = None
        self._tick_task: Optional[asyncio.Task] = None
        self._measurement_task: Optional[asyncio.Task] = None

    @property
    def measurement_in_progress(self) -> bool:
        return self._measurement_task is not None and not self._measurement_task.done()

    async def start(self) -> None:
        """Create fresh scheduling state and start the tick loop."""
        await super().start()
        self.tracker = PositionTracker(self.settings.window_size)
        self.scheduler = TestScheduler(self.settings.to_scheduler_config())
        self._tick_task = asyncio.create_task(self._tick_loop())
        self.logger.info(
            "Sampling position",
            every_seconds=self.settings.tick_seconds,
            window=self.settings.window_size,
            interval_hours=self.settings.interval_hours,
            test_on_move=self.settings.test_on_move,
        )

    async def stop(self) -> None:
        """
        Stop the tick loop.

        A speed test that is already running is left to finish or fail on its own.
        """
        if self._tick_task:
            self._tick_task.cancel()
            try:
                await self._tick_task
            except asyncio.CancelledError:
                pass
            self._tick_task = None
        if self.measurement_in_progress:
            self.logger.info("Leaving in-flight speed test to complete")
        await super().stop()

    async def _tick_loop(self) -> None:
        """Run tick() on a fixed cadence until cancelled."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.settings.tick_seconds
        while self._running:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            next_tick += self.settings.tick_seconds
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.logger.error("Error in scheduling tick", error=str(e), exc_info=True)
                await self.publish(ServiceErrorEvent(
                    service_name=self.name,
                    error_type=type(e).__name__,
                    error_message=str(e),
                ))

    async def tick(self) -> Optional[SchedulerDecision]:
        """
        Run one scheduling tick.

        Returns:
            The scheduling decision, or None if the tick was skipped for lack of a fix
            or because the vessel is not stationary
        """
        max_age = self.settings.position_max_age_seconds
        position = await self.position_source.get_position(max_age)
        if position is None:
            self.logger.debug("No recent position, skipping tick", max_age_seconds=max_age)
            await self.publish(PositionUnavailableEvent(max_age_seconds=max_age))
            return None

        self.tracker.record(position)
        travelled = self.tracker.path_length()
        stationary = self.tracker.is_stationary(self.settings.max_distance_nm)
        self.logger.debug(
            f"Position received {position.latitude}, {position.longitude}; "
            f"travelled {travelled:.4f} nm over the last {len(self.tracker)} fixes",
        )
        await self.publish(PositionReceivedEvent(
            latitude=position.latitude,
            longitude=position.longitude,
            window_size=len(self.tracker),
            path_length_nm=travelled,
            stationary=stationary,
        ))
        if not stationary:
            return None

        decision = self.scheduler.evaluate(stationary, position, self._clock())
        status = decision.describe()
        if decision.trigger:
            self.logger.info(status)
        else:
            self.logger.debug(status)
        await self.publish(SchedulerStatusEvent(
            message=status,
            reason=decision.reason,
            triggered=decision.trigger,
        ))

        if decision.trigger:
            # Reset before dispatch so a new full window is needed before the next trigger
            self.tracker.reset()
            self._dispatch_speed_test(position, decision.reason)
        return decision

    def _dispatch_speed_test(self, position: Position, reason: str) -> None:
        if self.measurement_in_progress:
            self.logger.warning("Speed test already in progress, not starting another")
            return
        self._measurement_task = asyncio.create_task(self._run_speed_test(position, reason))

    async def wait_for_speed_test(self) -> None:
        """Wait for the in-flight speed test, if any, to finish."""
        if self._measurement_task is not None:
            await asyncio.gather(self._measurement_task, return_exceptions=True)

    async def _run_speed_test(self, position: Position, reason: str) -> None:
        """Run one speed test and record it on success."""
        await self.publish(SpeedTestStartedEvent(position=position.to_dict(), reason=reason))
        try:
            result = await self.measurement.measure(position)
        except MeasurementError as e:
            self.logger.warning("Speed test failed", error=str(e))
            await self.publish(SpeedTestFailedEvent(error=str(e)))
            return
        except Exception as e:
            self.logger.error("Unexpected error during speed test", error=str(e), exc_info=True)
            await self.publish(SpeedTestFailedEvent(error=f"{type(e).__name__}: {e}"))
            return

        completed_at = self._clock()
        # Record where the vessel was when the data was gathered, not where the test was triggered
        try:
            completed_position = await self.position_source.get_position(self.settings.position_max_age_seconds)
        except Exception as e:
            self.logger.warning("Could not re-sample position after speed test", error=str(e))
            completed_position = None
        if completed_position is None:
            completed_position = position
        self.scheduler.record_completion(completed_at, completed_position)

        status = result.summary()
        self.logger.info(status)
        # Goes straight to the bus: a test that finishes after stop() is still reported
        await self.event_bus.publish(SpeedTestCompletedEvent(
            producer_name=self.name,
            position=completed_position.to_dict(),
            download_mbps=result.download_mbps,
            upload_mbps=result.upload_mbps,
            ping_ms=result.ping_ms,
            isp=result.isp,
            results=result.raw,
            status=status,
        ), self.name)

    async def handle_event(self, event: BaseEvent) -> None:
        """This service consumes no events."""
        pass
