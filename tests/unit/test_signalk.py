"""
Unit tests for the Signal K position source.
"""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import requests

from moorspeed.core.config import SignalKConfig
from moorspeed.core.errors import PositionUnavailableError
from moorspeed.navigation.geo import Position
from moorspeed.providers.signalk import (
    POSITION_PATH,
    SELF_PATH,
    SignalKPositionSource,
    VesselIdentity,
    parse_position,
    parse_timestamp,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)

def position_document(age_seconds=5, latitude=60.1699, longitude=24.9384):
    timestamp = (datetime.now(timezone.utc) - timedelta(seconds=age_seconds)).isoformat().replace("+00:00", "Z")
    return {"value": {"latitude": latitude, "longitude": longitude}, "timestamp": timestamp}

def json_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response

class TestParsePosition(unittest.TestCase):
    """Test cases for parse_position()."""

    def test_fresh_fix(self):
        payload = {"value": {"latitude": 60.1, "longitude": 24.9}, "timestamp": "2026-06-01T11:59:30.000Z"}
        self.assertEqual(parse_position(payload, 60, NOW), Position(60.1, 24.9))

    def test_stale_fix(self):
        payload = {"value": {"latitude": 60.1, "longitude": 24.9}, "timestamp": "2026-06-01T11:58:00Z"}
        with self.assertRaises(PositionUnavailableError):
            parse_position(payload, 60, NOW)

    def test_missing_value(self):
        for payload in ({}, {"value": None, "timestamp": "2026-06-01T12:00:00Z"},
                        {"value": {"latitude": 60.1}, "timestamp": "2026-06-01T12:00:00Z"}):
            with self.assertRaises(PositionUnavailableError):
                parse_position(payload, 60, NOW)

    def test_missing_or_invalid_timestamp(self):
        value = {"latitude": 60.1, "longitude": 24.9}
        with self.assertRaises(PositionUnavailableError):
            parse_position({"value": value}, 60, NOW)
        with self.assertRaises(PositionUnavailableError):
            parse_position({"value": value, "timestamp": "yesterday"}, 60, NOW)

    def test_numeric_timestamp(self):
        payload = {"value": {"latitude": 60.1, "longitude": 24.9}, "timestamp": 1780315200}
        with self.assertRaises(PositionUnavailableError):
            parse_position(payload, 60, NOW)

    def test_unexpected_document(self):
        for payload in ([], "position", None):
            with self.assertRaises(PositionUnavailableError):
                parse_position(payload, 60, NOW)

    def test_naive_timestamp_is_utc(self):
        self.assertEqual(parse_timestamp("2026-06-01T12:00:00"), NOW)
        self.assertEqual(parse_timestamp("2026-06-01T12:00:00Z"), NOW)

class TestSignalKPositionSource(unittest.IsolatedAsyncioTestCase):
    """Test cases for the SignalKPositionSource provider."""

    async def asyncSetUp(self):
        self.session = MagicMock()
        self.source = SignalKPositionSource(SignalKConfig(url="http://boat.local:3000/"), session=self.session)
        await self.source.initialize()

    async def test_get_position(self):
        self.session.get.return_value = json_response(position_document(latitude=59.9, longitude=10.7))

        position = await self.source.get_position(60)

        self.assertEqual(position, Position(59.9, 10.7))
        url = self.session.get.call_args.args[0]
        self.assertEqual(url, "http://boat.local:3000" + POSITION_PATH)

    async def test_stale_position_is_none(self):
        self.session.get.return_value = json_response(position_document(age_seconds=600))
        self.assertIsNone(await self.source.get_position(60))

    async def test_request_error_is_none(self):
        self.session.get.side_effect = requests.ConnectionError("refused")
        self.assertIsNone(await self.source.get_position(60))

    async def test_http_error_is_none(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        self.session.get.return_value = response
        self.assertIsNone(await self.source.get_position(60))

    async def test_malformed_responses_are_none(self):
        document = position_document()
        document["timestamp"] = 1780315200
        for payload in (document, ["not", "a", "fix"]):
            self.session.get.return_value = json_response(payload)
            self.assertIsNone(await self.source.get_position(60))

    async def test_get_identity(self):
        self.session.get.return_value = json_response({"name": "Wanderer", "mmsi": "230123456"})

        identity = await self.source.get_identity()

        self.assertEqual(identity, VesselIdentity(name="Wanderer", mmsi="230123456"))
        self.assertTrue(self.session.get.call_args.args[0].endswith(SELF_PATH))

    async def test_identity_with_wrapped_values(self):
        self.session.get.return_value = json_response({"name": {"value": "Wanderer"}})
        identity = await self.source.get_identity()
        self.assertEqual(identity.name, "Wanderer")
        self.assertIsNone(identity.mmsi)

    async def test_identity_unavailable(self):
        self.session.get.side_effect = requests.Timeout("timed out")
        self.assertEqual(await self.source.get_identity(), VesselIdentity())

    async def test_identity_unexpected_response(self):
        self.session.get.return_value = json_response("Wanderer")
        self.assertEqual(await self.source.get_identity(), VesselIdentity())

    async def test_check_health(self):
        health = await self.source.check_health()
        self.assertEqual(health["status"], "ok")
        self.assertEqual(health["url"], "http://boat.local:3000")

        await self.source.shutdown()
        self.assertEqual((await self.source.check_health())["status"], "not_initialized")

    async def test_shutdown_closes_session(self):
        await self.source.shutdown()
        self.session.close.assert_called_once()
        self.assertFalse(self.source.is_initialized())

if __name__ == "__main__":
    unittest.main()
