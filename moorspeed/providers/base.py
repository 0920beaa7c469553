"""
Base provider implementation for Moorspeed.

This module provides the BaseProvider class that all external collaborators inherit
from, defining a common initialize/shutdown lifecycle.
"""

import asyncio
import structlog
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

class BaseProvider(ABC):
    """
    Base class for all external collaborators.

    This class provides a common interface for lifecycle management and
    health reporting. Blocking I/O in subclasses is pushed to a worker
    thread so the event loop keeps ticking.
    """

    def __init__(self, config: Optional[Any] = None, name: Optional[str] = None):
        """
        Initialize the provider.

        Args:
            config: Optional provider-specific configuration
            name: Optional name for this provider instance
        """
        self.config = config
        self.name = name or self.__class__.__name__
        self.logger = structlog.get_logger(provider=self.name)
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """
        Initialize the provider.

        This method should be called before using the provider.
        """
        async with self._lock:
            if self._initialized:
                self.logger.warning("Provider already initialized")
                return

            try:
                await self._initialize_impl()
                self._initialized = True
                self.logger.info("Provider initialized")

            except Exception as e:
                self.logger.error(f"Error initializing provider: {e}")
                raise

    async def shutdown(self) -> None:
        """
        Shut down the provider and release its resources.
        """
        async with self._lock:
            if not self._initialized:
                self.logger.warning("Provider not initialized")
                return

            try:
                await self._shutdown_impl()
                self._initialized = False
                self.logger.info("Provider shut down")

            except Exception as e:
                self.logger.error(f"Error shutting down provider: {e}")
                raise

    def is_initialized(self) -> bool:
        return self._initialized

    @abstractmethod
    async def _initialize_impl(self) -> None:
        """Provider-specific initialization."""
        pass

    @abstractmethod
    async def _shutdown_impl(self) -> None:
        """Provider-specific cleanup."""
        pass

    async def check_health(self) -> Dict[str, Any]:
        """
        Check the health of the provider.

        Subclasses can extend the returned dictionary with their own details.

        Returns:
            Dictionary with health information
        """
        return {
            "name": self.name,
            "initialized": self._initialized,
            "status": "ok" if self._initialized else "not_initialized"
        }
