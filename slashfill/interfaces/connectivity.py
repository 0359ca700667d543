"""Connectivity and authentication interfaces."""

from abc import ABC, abstractmethod
from enum import Enum


class ConnectivityStatus(str, Enum):
    """Connection state of the completion backend."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class NotConnectedError(Exception):
    """Raised when a completion is requested while the backend is unavailable."""

    pass


class BaseConnectivity(ABC):
    """Abstract base class for connectivity checks.

    Exposes whether completions can be requested and the key used for them.
    """

    @property
    @abstractmethod
    def status(self) -> ConnectivityStatus:
        """Return the last known connection status."""

    @property
    @abstractmethod
    def api_key(self) -> str | None:
        """Return the API key used for completions, if any."""

    @abstractmethod
    async def validate(self) -> bool:
        """Check the backend and update :attr:`status`.

        Returns:
            True if the backend accepted the credentials.
        """

    @property
    def connected(self) -> bool:
        """Whether completions can be requested."""
        return self.status == ConnectivityStatus.CONNECTED

    async def aclose(self) -> None:
        """Release any network resources held by the check."""
        return None
