"""Abstract base class for completion transports.

The Strategy Pattern lets the engine talk to OpenRouter directly or to a
proxy that holds the API key, without knowing which one it uses.
"""

from abc import ABC, abstractmethod
from typing import Any


class TransportError(Exception):
    """Raised when a completion request cannot be delivered or decoded."""

    pass


class BaseTransport(ABC):
    """Abstract base class for chat completion transports.

    Example:
        ```python
        class EchoTransport(BaseTransport):
            async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
                text = payload["messages"][-1]["content"]
                return {"choices": [{"message": {"content": text}}]}
        ```
    """

    @abstractmethod
    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one chat completion request.

        Args:
            payload: OpenAI-style request body with ``model``, ``messages``,
                ``temperature``, ``max_tokens`` and optional ``plugins``.

        Returns:
            The decoded JSON response body, in OpenAI or Anthropic shape.

        Raises:
            TransportError: If the request fails or the body is not JSON.
        """
        ...

    async def aclose(self) -> None:
        """Release any network resources held by the transport."""
        return None
