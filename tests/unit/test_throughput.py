"""
Unit tests for the speedtest-cli measurement provider.
"""

import unittest
from unittest.mock import MagicMock, patch

from moorspeed.core.config import SpeedtestConfig
from moorspeed.core.errors import ConfigurationError, MeasurementError
from moorspeed.navigation.geo import Position
from moorspeed.providers.throughput import MeasurementResult, SpeedtestProvider, to_mbps

MOORING = Position(latitude=43.2965, longitude=5.3698)

RESULTS = {
    "download": 23_412_345.6,
    "upload": 5_098_765.4,
    "ping": 41.2,
    "server": {"host": "speedtest.example.net:8080", "sponsor": "Example"},
    "client": {"ip": "203.0.113.5", "isp": "Starlink"},
}

def accepted_config(**kwargs):
    return SpeedtestConfig(accept_eula=True, accept_tos=True, accept_privacy=True, accept_gdpr=True, **kwargs)

class TestMeasurementResult(unittest.TestCase):

    def test_to_mbps(self):
        self.assertEqual(to_mbps(23_412_345.6), 23.4)
        self.assertEqual(to_mbps(0), 0.0)

    def test_from_results(self):
        result = MeasurementResult.from_results(RESULTS)
        self.assertEqual(result.download_mbps, 23.4)
        self.assertEqual(result.upload_mbps, 5.1)
        self.assertEqual(result.ping_ms, 41.2)
        self.assertEqual(result.isp, "Starlink")
        self.assertIs(result.raw, RESULTS)

    def test_summary(self):
        self.assertEqual(
            MeasurementResult.from_results(RESULTS).summary(),
            "23.4 Mbps download, 5.1 Mbps upload via Starlink",
        )
        self.assertIn("unknown ISP", MeasurementResult(download_mbps=1.0, upload_mbps=0.5).summary())

class TestSpeedtestProvider(unittest.IsolatedAsyncioTestCase):
    """Test cases for the SpeedtestProvider class."""

    async def test_requires_policy_acceptance(self):
        provider = SpeedtestProvider(SpeedtestConfig(accept_eula=True))
        with self.assertRaises(ConfigurationError):
            await provider.initialize()
        self.assertFalse(provider.is_initialized())

    async def test_measure_before_initialize(self):
        with self.assertRaises(MeasurementError):
            await SpeedtestProvider(accepted_config()).measure(MOORING)

    @patch("moorspeed.providers.throughput.speedtest.Speedtest")
    async def test_measure(self, mock_speedtest):
        client = mock_speedtest.return_value
        client.get_best_server.return_value = RESULTS["server"]
        client.results.dict.return_value = RESULTS

        provider = SpeedtestProvider(accepted_config(timeout=15))
        await provider.initialize()
        result = await provider.measure(MOORING)

        mock_speedtest.assert_called_once_with(secure=True, timeout=15)
        client.download.assert_called_once()
        client.upload.assert_called_once()
        self.assertEqual(result.download_mbps, 23.4)
        self.assertEqual(result.isp, "Starlink")

    @patch("moorspeed.providers.throughput.speedtest.Speedtest")
    async def test_library_errors_become_measurement_errors(self, mock_speedtest):
        mock_speedtest.return_value.get_best_server.side_effect = RuntimeError("No matched servers")

        provider = SpeedtestProvider(accepted_config())
        await provider.initialize()

        with self.assertRaises(MeasurementError) as ctx:
            await provider.measure(MOORING)
        self.assertIn("No matched servers", str(ctx.exception))

if __name__ == "__main__":
    unittest.main()
