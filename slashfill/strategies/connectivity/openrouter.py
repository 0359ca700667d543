"""Connectivity checks for OpenRouter and the key-holding proxy."""

import logging

import httpx

from slashfill.interfaces.connectivity import BaseConnectivity, ConnectivityStatus
from slashfill.strategies.transports.openrouter import OPENROUTER_BASE_URL

logger = logging.getLogger(__name__)


class OpenRouterConnectivity(BaseConnectivity):
    """Validates a user-supplied OpenRouter key against ``/auth/key``."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = OPENROUTER_BASE_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key or None
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._status = ConnectivityStatus.DISCONNECTED
        self.label: str | None = None

    @property
    def status(self) -> ConnectivityStatus:
        return self._status

    @property
    def api_key(self) -> str | None:
        return self._api_key

    async def validate(self) -> bool:
        if not self._api_key:
            self._status = ConnectivityStatus.DISCONNECTED
            return False

        self._status = ConnectivityStatus.CONNECTING
        try:
            response = await self._client.get(
                f"{self._base_url}/auth/key",
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"OpenRouter key validation error: {e}")
            self._status = ConnectivityStatus.ERROR
            return False

        if response.status_code != 200:
            logger.warning(f"OpenRouter rejected API key: {response.status_code}")
            self._status = ConnectivityStatus.ERROR
            return False

        try:
            data = response.json().get("data") or {}
        except ValueError:
            data = {}
        self.label = data.get("label") or "OpenRouter"
        self._status = ConnectivityStatus.CONNECTED
        logger.info(f"Connected to OpenRouter as {self.label}")
        return True

    async def aclose(self) -> None:
        await self._client.aclose()


class ProxyConnectivity(BaseConnectivity):
    """Asks the proxy whether its own key is configured and valid.

    The proxy answers ``GET /validate`` with ``{"valid": bool}`` and an
    optional ``label`` or ``error``.
    """

    def __init__(
        self,
        proxy_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.proxy_url = proxy_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._status = ConnectivityStatus.DISCONNECTED
        self.label: str | None = None

    @property
    def status(self) -> ConnectivityStatus:
        return self._status

    @property
    def api_key(self) -> str | None:
        # The key never leaves the proxy.
        return None

    async def validate(self) -> bool:
        self._status = ConnectivityStatus.CONNECTING
        try:
            response = await self._client.get(f"{self.proxy_url}/validate")
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Proxy validation error: {e}")
            self._status = ConnectivityStatus.ERROR
            return False
        except ValueError as e:
            logger.error(f"Proxy validation returned invalid JSON: {e}")
            self._status = ConnectivityStatus.ERROR
            return False

        if not isinstance(body, dict) or not body.get("valid"):
            error = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"Proxy is not usable: {error or 'invalid'}")
            self._status = ConnectivityStatus.ERROR
            return False

        self.label = body.get("label") or "OpenRouter"
        self._status = ConnectivityStatus.CONNECTED
        logger.info(f"Connected through proxy {self.proxy_url}")
        return True

    async def aclose(self) -> None:
        await self._client.aclose()
