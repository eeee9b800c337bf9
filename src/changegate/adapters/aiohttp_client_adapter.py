# changegate/adapters/aiohttp_client_adapter.py
import asyncio
import aiohttp
from typing import Any, Dict, Optional
from yarl import URL

from changegate.core.interfaces.http_client import HttpClientPort
from changegate.core.exceptions import NoResponseError
from changegate.core.settings import logger


class AioHttpClientAdapter(HttpClientPort):
    def __init__(self):
        self._session: Optional[aiohttp.ClientSession] = None
        # Default client timeout configuration for individual requests.
        # Callers may override the total per call; sock_read/sock_connect stay.
        self._default_total: float = 30.0
        self._default_sock_read: float = 30.0
        self._default_sock_connect: float = 10.0
        self._default_client_timeout = aiohttp.ClientTimeout(
            total=self._default_total,
            sock_read=self._default_sock_read,
            sock_connect=self._default_sock_connect,
        )

    async def __aenter__(self):
        """Async context manager entry"""
        self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
        return False

    def _client_timeout(self, timeout: float | None) -> aiohttp.ClientTimeout:
        if timeout is None:
            return self._default_client_timeout
        return aiohttp.ClientTimeout(
            total=timeout,
            sock_read=self._default_sock_read,
            sock_connect=self._default_sock_connect,
        )

    async def get(
        self,
        url: str,
        headers: Dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Dict[str, Any]:
        if self._session is None:
            raise RuntimeError("HTTP client not initialized. Use 'async with' context manager.")

        try:
            # encoded=True keeps the caller's percent-encoding (e.g. %2F) intact
            async with self._session.get(
                URL(url, encoded=True),
                headers=headers,
                timeout=self._client_timeout(timeout),
            ) as response:
                try:
                    body = await response.json()
                except (aiohttp.ContentTypeError, ValueError):
                    # Not JSON; keep the raw text so callers can still inspect it
                    body = await response.text()

                return {
                    "status": response.status,
                    "headers": dict(response.headers),
                    "body": body,
                }

        except asyncio.TimeoutError:
            logger.error("Timeout when requesting remote service. URL: %s", url)
            raise NoResponseError(url, diagnostic="request timed out")

        except aiohttp.ClientError as client_error:
            logger.error(
                "Connection error when requesting remote service. URL: %s, Error: %s",
                url,
                str(client_error),
            )
            raise NoResponseError(url, diagnostic=str(client_error))

    async def close(self) -> None:
        """Close the session"""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
