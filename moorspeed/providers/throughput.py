"""
Throughput measurement for Moorspeed.

Runs a speedtest.net measurement through the speedtest-cli library. The library is
blocking and a full run takes tens of seconds, so measure() hands it to a worker thread.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import speedtest

from moorspeed.core.config import SpeedtestConfig
from moorspeed.core.errors import ConfigurationError, MeasurementError
from moorspeed.navigation.geo import Position
from .base import BaseProvider

BITS_PER_MEGABIT = 1_000_000

def to_mbps(bits_per_second: float) -> float:
    """Convert bits per second to megabits per second, rounded to one decimal."""
    return round(bits_per_second / BITS_PER_MEGABIT, 1)

@dataclass(frozen=True)
class MeasurementResult:
    """
    Outcome of a successful throughput measurement.

    Attributes:
        download_mbps: Download throughput in Mbps
        upload_mbps: Upload throughput in Mbps
        ping_ms: Latency to the test server in milliseconds
        isp: Internet provider name as seen by speedtest.net
        raw: Complete result dictionary from the library, forwarded to the collector
    """
    download_mbps: float
    upload_mbps: float
    ping_ms: Optional[float] = None
    isp: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: Dict[str, Any]) -> "MeasurementResult":
        """Build a result from speedtest-cli's results dictionary."""
        client = results.get("client") or {}
        return cls(
            download_mbps=to_mbps(results.get("download") or 0),
            upload_mbps=to_mbps(results.get("upload") or 0),
            ping_ms=results.get("ping"),
            isp=client.get("isp"),
            raw=results,
        )

    def summary(self) -> str:
        """One-line status, e.g. '23.4 Mbps download, 5.1 Mbps upload via Starlink'."""
        return (
            f"{self.download_mbps} Mbps download, {self.upload_mbps} Mbps upload "
            f"via {self.isp or 'unknown ISP'}"
        )

class SpeedtestProvider(BaseProvider):
    """
    Measurement collaborator backed by speedtest-cli.

    Refuses to initialize until the speedtest.net policies have been accepted
    in the configuration.
    """

    def __init__(self, config: SpeedtestConfig):
        super().__init__(config, "Speedtest")

    async def _initialize_impl(self) -> None:
        if not self.config.policies_accepted:
            raise ConfigurationError(
                "You need to accept the speedtest.net EULA, terms of use, privacy policy and GDPR terms "
                "(MOORSPEED_SPEEDTEST_ACCEPT_EULA, _ACCEPT_TOS, _ACCEPT_PRIVACY, _ACCEPT_GDPR)"
            )

    async def _shutdown_impl(self) -> None:
        pass

    def run_measurement(self) -> MeasurementResult:
        """
        Run a full measurement, blocking.

        Raises:
            MeasurementError: If any step of the measurement fails
        """
        try:
            client = speedtest.Speedtest(secure=self.config.secure, timeout=self.config.timeout)
            server = client.get_best_server()
            self.logger.debug("Selected speedtest server", host=server.get("host"), sponsor=server.get("sponsor"))
            client.download()
            client.upload()
            results = client.results.dict()
        except Exception as e:
            # speedtest-cli raises its own exceptions as well as raw socket/HTTP errors
            raise MeasurementError(f"Speedtest failed: {e}") from e
        return MeasurementResult.from_results(results)

    async def measure(self, position: Position) -> MeasurementResult:
        """
        Measure throughput without blocking the event loop.

        Args:
            position: Where the vessel was when the test was triggered (logged only)

        Returns:
            The measurement result

        Raises:
            MeasurementError: If the measurement fails
        """
        if not self._initialized:
            raise MeasurementError("Speedtest provider is not initialized")
        self.logger.info("Starting speedtest", latitude=position.latitude, longitude=position.longitude)
        result = await asyncio.to_thread(self.run_measurement)
        self.logger.info("Speedtest completed", summary=result.summary())
        return result
