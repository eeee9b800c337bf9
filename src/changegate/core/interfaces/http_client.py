# changegate/core/interfaces/http_client.py
from abc import ABC, abstractmethod
from typing import Any, Dict

class HttpClientPort(ABC):
    @abstractmethod
    async def __aenter__(self) -> "HttpClientPort":
        """Async context manager entry method"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit method"""
        pass

    @abstractmethod
    async def get(
        self,
        url: str,
        headers: Dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Dict[str, Any]:
        """Make a single GET request, whatever the status code.

        Returns a dict with keys: 'status' (int), 'headers' (dict) and 'body'
        (parsed JSON or raw text). Error statuses are returned, not raised.
        Raises NoResponseError when no response was received at all.

        `url` is sent as-is; query values must already be encoded.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the HTTP client session"""
        pass
