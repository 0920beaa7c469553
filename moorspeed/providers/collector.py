"""
Collector client for Moorspeed.

Posts measurement payloads as JSON to the remote collector.
"""

import asyncio
from typing import Any, Dict, Optional

import requests

from moorspeed.core.config import CollectorConfig
from moorspeed.core.errors import SubmissionError
from .base import BaseProvider

class CollectorClient(BaseProvider):
    """Reporting sink that submits results over HTTP."""

    def __init__(self, config: CollectorConfig, session: Optional[requests.Session] = None):
        super().__init__(config, "Collector")
        self.url = config.url
        self._session = session

    async def _initialize_impl(self) -> None:
        if self._session is None:
            self._session = requests.Session()

    async def _shutdown_impl(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    async def check_health(self) -> Dict[str, Any]:
        health = await super().check_health()
        health["url"] = self.url
        return health

    def post(self, payload: Dict[str, Any]) -> int:
        """
        Submit a payload, blocking.

        Returns:
            HTTP status code of the accepted submission

        Raises:
            SubmissionError: On transport errors or a non-2xx response
        """
        if self._session is None:
            raise SubmissionError("Collector client is not initialized")
        try:
            response = self._session.post(self.url, json=payload, timeout=self.config.request_timeout)
        except requests.RequestException as e:
            raise SubmissionError(f"Could not reach collector: {e}") from e
        if not 200 <= response.status_code < 300:
            raise SubmissionError(
                f"Collector rejected submission with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.status_code

    async def submit(self, payload: Dict[str, Any]) -> int:
        """
        Submit a payload without blocking the event loop.

        Args:
            payload: JSON-serializable measurement document

        Returns:
            HTTP status code of the accepted submission

        Raises:
            SubmissionError: If the collector did not accept the payload
        """
        return await asyncio.to_thread(self.post, payload)
