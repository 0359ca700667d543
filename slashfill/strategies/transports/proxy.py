"""Proxy chat completion transport.

Posts the request body unchanged to a proxy that holds the API key and
forwards it to OpenRouter. The proxy relays the upstream body as-is, so
either response shape can come back.
"""

import logging
from typing import Any

import httpx

from slashfill.interfaces.transport import BaseTransport, TransportError

logger = logging.getLogger(__name__)


class ProxyTransport(BaseTransport):
    """Transport that sends completions through a key-holding proxy."""

    def __init__(
        self,
        proxy_url: str,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            proxy_url: Base URL of the proxy, e.g. ``https://proxy.example.workers.dev``.
            timeout: Request timeout in seconds.
            client: Preconfigured HTTP client, mainly for tests.
        """
        self.proxy_url = proxy_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.proxy_url}/chat/completions"
        logger.debug(f"Proxy request for model {payload.get('model')}")

        try:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Proxy request failed: {e.response.status_code} - {e.response.text}")
            raise TransportError(f"Proxy returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Proxy request error: {e}")
            raise TransportError(f"Proxy request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Proxy returned invalid JSON: {e}")
            raise TransportError("Proxy returned invalid JSON") from e

        if not isinstance(body, dict):
            raise TransportError(f"Unexpected proxy body type: {type(body).__name__}")
        return body

    async def aclose(self) -> None:
        await self._client.aclose()
