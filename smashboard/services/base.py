"""
Base service class for the Smash leaderboard bot.

Provides a lazily opened aiohttp session and JSON GET handling shared by
every service that talks to the data service.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from smashboard.utils.exceptions import FetchFailure

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for all services with HTTP session management."""

    def __init__(self, base_url: str, timeout: float = 10, session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize base service.

        Args:
            base_url: Root URL of the data service, without trailing slash
            timeout: Total request timeout in seconds
            session: Optional externally owned session (not closed by us)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    def get_session(self) -> aiohttp.ClientSession:
        """Return the HTTP session, opening one on first use."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def get_json(self, path: str) -> Any:
        """GET ``path`` and decode the JSON body, raising FetchFailure on any failure."""
        url = f"{self.base_url}{path}"
        try:
            async with self.get_session().get(url) as resp:
                if resp.status != 200:
                    raise FetchFailure(path, f"unexpected status from {url}", status=resp.status)
                return await resp.json(content_type=None)
        except FetchFailure:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FetchFailure(path, str(e) or type(e).__name__) from e

    async def close(self):
        """Close the HTTP session if this service opened it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("HTTP session closed")
        self._session = None
