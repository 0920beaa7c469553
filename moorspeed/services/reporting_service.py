"""
Reporting service for Moorspeed.

Submits each completed speed test to the remote collector together with the vessel
identity and the free-text metadata from the configuration. Submission failures are
reported but never affect scheduling: the test has already been recorded.
"""

from typing import ClassVar, Dict, Any, Optional

from moorspeed.core.bus import EventBus
from moorspeed.core.config import ApplicationConfig
from moorspeed.core.errors import SubmissionError
from moorspeed.core.events import BaseEvent, EventType
from moorspeed.core.registry import ServiceRegistry
from moorspeed.core.service import BaseService
from moorspeed.events.measurement import (
    ResultsSubmittedEvent,
    SpeedTestCompletedEvent,
    SubmissionFailedEvent,
)

class ReportingService(BaseService):
    """
    Forwards completed speed tests to the collector.

    Collaborators:
        collector: object with ``async submit(payload) -> int`` and a ``url`` attribute
        identity_source: object with ``async get_identity() -> VesselIdentity``
    """

    PRODUCES_EVENTS: ClassVar[Dict[EventType, Dict[str, Any]]] = {
        EventType.RESULTS_SUBMITTED: {
            'schema': ResultsSubmittedEvent,
            'description': "The collector accepted a measurement",
        },
        EventType.SUBMISSION_FAILED: {
            'schema': SubmissionFailedEvent,
            'description': "A measurement could not be delivered to the collector",
        },
    }

    CONSUMES_EVENTS: ClassVar[Dict[EventType, str]] = {
        EventType.SPEED_TEST_COMPLETED: "handle_event",
    }

    def __init__(self,
                 event_bus: EventBus,
                 service_registry: ServiceRegistry,
                 config: ApplicationConfig,
                 collector,
                 identity_source,
                 name: Optional[str] = None):
        super().__init__(event_bus, service_registry, name=name, config=config)
        self.collector = collector
        self.identity_source = identity_source
        self.submitted_count = 0
        self.failed_count = 0

    async def build_payload(self, event: SpeedTestCompletedEvent) -> Dict[str, Any]:
        """
        Assemble the document sent to the collector.

        Returns:
            Dictionary with the vessel name and MMSI, configured website and
            equipment, the position and the full measurement results
        """
        identity = await self.identity_source.get_identity()
        return {
            "name": identity.name,
            "mmsi": identity.mmsi,
            "website": self.config.collector.website,
            "equipment": self.config.collector.equipment,
            "position": event.position,
            "results": event.results,
        }

    async def handle_event(self, event: BaseEvent) -> None:
        """Submit a completed speed test."""
        if event.type != EventType.SPEED_TEST_COMPLETED:
            return

        payload = await self.build_payload(event)
        self.logger.debug("Submitting data to collector", url=self.collector.url)
        try:
            status_code = await self.collector.submit(payload)
        except SubmissionError as e:
            self.failed_count += 1
            self.logger.warning("Submission failed", error=str(e), status_code=e.status_code)
            await self.publish(SubmissionFailedEvent(
                collector_url=self.collector.url,
                error=str(e),
                status_code=e.status_code,
            ))
            return

        self.submitted_count += 1
        self.logger.info("Data successfully submitted", status_code=status_code)
        await self.publish(ResultsSubmittedEvent(
            collector_url=self.collector.url,
            status_code=status_code,
        ))
