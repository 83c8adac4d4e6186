"""
HTTP client for the APOD site and its relay.

Handles HTTP session management, bounded request retries, and connection quality settings.
"""

from __future__ import annotations

import asyncio
import logging
from collections import abc
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import aiohttp
from yarl import URL

from apodbg.config import MAX_RETRY_DELAY, USER_AGENT
from apodbg.exceptions import NetworkError
from apodbg.utils import ExponentialBackoff


if TYPE_CHECKING:
    from apodbg.config.settings import Settings


logger = logging.getLogger("APODBackground.http")


class HTTPClient:
    """
    Manages the HTTP session and retries transient failures.

    This client provides:
    - Lazy session creation with a shared connection pool
    - Connection quality-based timeout configuration
    - A bounded number of retries on connection errors and 5xx responses
    - Proxy support

    Any request that doesn't end in a 2xx response raises NetworkError.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the HTTP client.

        Parameters
        ----------
        settings : Settings
            Application settings for connection quality, retries and proxy configuration
        """
        self.settings = settings
        self._session: aiohttp.ClientSession | None = None

    async def get_session(self) -> aiohttp.ClientSession:
        """
        Get or create the HTTP session.

        Returns
        -------
        aiohttp.ClientSession
            The active HTTP session

        Raises
        ------
        RuntimeError
            If the session is closed
        """
        if (session := self._session) is not None:
            if session.closed:
                raise RuntimeError("Session is closed")
            return session

        connection_quality = self.settings.connection_quality
        if connection_quality < 1:
            connection_quality = self.settings.connection_quality = 1
        elif connection_quality > 6:
            connection_quality = self.settings.connection_quality = 6

        timeout = aiohttp.ClientTimeout(
            sock_connect=5 * connection_quality,
            total=10 * connection_quality,
        )
        connector = aiohttp.TCPConnector(limit=10)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            headers={"User-Agent": USER_AGENT},
        )
        return self._session

    @asynccontextmanager
    async def request(
        self, method: str, url: URL | str, **kwargs
    ) -> abc.AsyncIterator[aiohttp.ClientResponse]:
        """
        Make an HTTP request with automatic retries.

        Parameters
        ----------
        method : str
            HTTP method (GET, HEAD, etc.)
        url : URL | str
            Request URL
        **kwargs
            Additional arguments passed to aiohttp.ClientSession.request

        Yields
        ------
        aiohttp.ClientResponse
            The HTTP response, with its body already read

        Raises
        ------
        NetworkError
            On a non-2xx response, or once the retries are used up
        """
        session = await self.get_session()
        method = method.upper()

        if self.settings.proxy and "proxy" not in kwargs:
            kwargs["proxy"] = self.settings.proxy

        logger.debug(f"Request: ({method=}, {url=}, {kwargs=})")
        backoff = ExponentialBackoff(
            attempts=max(0, self.settings.retries) + 1,
            maximum=MAX_RETRY_DELAY.total_seconds(),
        )
        last_status: int | None = None
        last_reason = ""

        for delay in backoff:
            if delay:
                await asyncio.sleep(delay)
            response: aiohttp.ClientResponse | None = None
            try:
                response = await session.request(method, url, **kwargs)
                if response.status < 500:
                    # Pre-read the response to avoid getting errors outside the context manager
                    await response.read()
            except aiohttp.ClientConnectorCertificateError as exc:
                # SSL verification failures should not be retried
                raise NetworkError(str(url), reason=str(exc)) from exc
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                if response is not None:
                    response.release()
                last_status = None
                last_reason = str(exc) or type(exc).__name__
                logger.warning(
                    f"Request to {url} failed ({last_reason}), {backoff.remaining} retries left"
                )
                continue

            logger.debug(f"Response: {response.status}: {response}")
            if response.status >= 500:
                last_status = response.status
                last_reason = response.reason or ""
                response.release()
                logger.warning(
                    f"{url} answered {last_status}, {backoff.remaining} retries left"
                )
                continue

            try:
                if not 200 <= response.status < 300:
                    raise NetworkError(str(url), status=response.status, reason=response.reason or "")
                yield response
            finally:
                response.release()
            return

        raise NetworkError(str(url), status=last_status, reason=last_reason)

    async def get_text(self, url: URL | str, **kwargs) -> str:
        async with self.request("GET", url, **kwargs) as response:
            # The site doesn't always declare a charset
            return await response.text(errors="replace")

    async def get_bytes(self, url: URL | str, **kwargs) -> bytes:
        async with self.request("GET", url, **kwargs) as response:
            return await response.read()

    async def close(self) -> None:
        """
        Close the HTTP session.

        This should be called during application shutdown.
        """
        if self._session is not None:
            await self._session.close()
            self._session = None
