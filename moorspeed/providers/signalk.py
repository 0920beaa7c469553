"""
Signal K position source for Moorspeed.

Reads the vessel's own position and identity from a Signal K server over its REST API.
A fix older than the caller's maximum age is treated the same as no fix at all.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from moorspeed.core.config import SignalKConfig
from moorspeed.core.errors import PositionUnavailableError
from moorspeed.navigation.geo import Position
from .base import BaseProvider

SELF_PATH = "/signalk/v1/api/vessels/self"
POSITION_PATH = SELF_PATH + "/navigation/position"

@dataclass(frozen=True, slots=True)
class VesselIdentity:
    """Name and MMSI of the vessel, as published by the Signal K server."""

    name: Optional[str] = None
    mmsi: Optional[str] = None

def parse_timestamp(value: str) -> datetime:
    """Parse a Signal K ISO 8601 timestamp into an aware UTC datetime."""
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

def parse_position(payload: Dict[str, Any], max_age_seconds: float, now: datetime) -> Position:
    """
    Extract a fresh position from a Signal K navigation.position document.

    Args:
        payload: Decoded JSON, e.g. {"value": {"latitude": .., "longitude": ..}, "timestamp": ".."}
        max_age_seconds: Oldest acceptable fix age
        now: Current time (timezone-aware)

    Returns:
        The position fix

    Raises:
        PositionUnavailableError: If the document has no usable fix or it is too old
    """
    if not isinstance(payload, dict):
        raise PositionUnavailableError(f"Unexpected Signal K response: {payload!r}")
    value = payload.get("value") or {}
    try:
        position = Position(latitude=float(value["latitude"]), longitude=float(value["longitude"]))
    except (KeyError, TypeError, ValueError) as e:
        raise PositionUnavailableError(f"No position in Signal K data: {e}") from e

    timestamp = payload.get("timestamp")
    if not timestamp:
        raise PositionUnavailableError("Position has no timestamp")
    try:
        age = (now - parse_timestamp(timestamp)).total_seconds()
    except ValueError as e:
        raise PositionUnavailableError(f"Invalid position timestamp {timestamp!r}") from e

    if age > max_age_seconds:
        raise PositionUnavailableError(f"Position is {age:.0f}s old (max {max_age_seconds:g}s)")
    return position

def _leaf_value(value: Any) -> Optional[str]:
    # Some servers wrap leaf values as {"value": ...}
    if isinstance(value, dict):
        value = value.get("value")
    return None if value is None else str(value)

class SignalKPositionSource(BaseProvider):
    """
    Position and identity provider backed by a Signal K server.

    get_position() returns None rather than raising when there is no fresh fix,
    so a tick can simply be skipped.
    """

    def __init__(self, config: SignalKConfig, session: Optional[requests.Session] = None):
        """
        Initialize the Signal K source.

        Args:
            config: Signal K server configuration
            session: Optional pre-built HTTP session (mainly for tests)
        """
        super().__init__(config, "SignalK")
        self.base_url = config.url.rstrip("/")
        self._session = session

    async def _initialize_impl(self) -> None:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": "application/json"})

    async def _shutdown_impl(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    async def check_health(self) -> Dict[str, Any]:
        health = await super().check_health()
        health["url"] = self.base_url
        return health

    def _get_json(self, path: str) -> Dict[str, Any]:
        if self._session is None:
            raise RuntimeError("Signal K source is not initialized")
        response = self._session.get(self.base_url + path, timeout=self.config.request_timeout)
        response.raise_for_status()
        return response.json()

    def fetch_position(self, max_age_seconds: float) -> Position:
        """
        Fetch the current position, blocking.

        Raises:
            PositionUnavailableError: If the server cannot be reached or has no fresh fix
        """
        try:
            payload = self._get_json(POSITION_PATH)
        except (requests.RequestException, ValueError) as e:
            raise PositionUnavailableError(f"Signal K request failed: {e}") from e
        return parse_position(payload, max_age_seconds, datetime.now(timezone.utc))

    async def get_position(self, max_age_seconds: float) -> Optional[Position]:
        """
        Get the current position if a fix no older than max_age_seconds exists.

        Args:
            max_age_seconds: Oldest acceptable fix age

        Returns:
            The position, or None if it is unavailable or stale
        """
        try:
            return await asyncio.to_thread(self.fetch_position, max_age_seconds)
        except PositionUnavailableError as e:
            self.logger.debug("Position unavailable", reason=str(e))
            return None

    async def get_identity(self) -> VesselIdentity:
        """
        Get the vessel name and MMSI.

        Returns:
            The identity; fields the server does not know are None
        """
        try:
            payload = await asyncio.to_thread(self._get_json, SELF_PATH)
        except (requests.RequestException, ValueError) as e:
            self.logger.warning("Could not read vessel identity", error=str(e))
            return VesselIdentity()
        if not isinstance(payload, dict):
            self.logger.warning("Unexpected vessel identity response", payload=payload)
            return VesselIdentity()
        return VesselIdentity(name=_leaf_value(payload.get("name")), mmsi=_leaf_value(payload.get("mmsi")))
