"""OpenRouter chat completion transport.

Talks to OpenRouter's OpenAI-compatible endpoint with the official OpenAI
SDK. OpenRouter-only request fields such as ``plugins`` are forwarded via
``extra_body``.
"""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from slashfill.interfaces.transport import BaseTransport, TransportError

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Request fields the OpenAI SDK does not accept as keyword arguments.
_EXTRA_BODY_FIELDS = ("plugins", "provider", "transforms")


class OpenRouterTransport(BaseTransport):
    """Transport that calls OpenRouter directly with the user's API key.

    Attributes:
        client: The async OpenAI client pointed at OpenRouter.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENROUTER_BASE_URL,
        referer: str | None = None,
        title: str | None = None,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            api_key: OpenRouter API key.
            base_url: OpenRouter API base URL.
            referer: Sent as ``HTTP-Referer`` for OpenRouter app rankings.
            title: Sent as ``X-Title`` for OpenRouter app rankings.
            timeout: Request timeout in seconds.
            client: Preconfigured client, mainly for tests.
        """
        headers: dict[str, str] = {}
        if referer:
            headers["HTTP-Referer"] = referer
        if title:
            headers["X-Title"] = title

        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            default_headers=headers or None,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        request = dict(payload)
        extra_body = {
            key: request.pop(key) for key in _EXTRA_BODY_FIELDS if key in request
        }

        logger.debug(f"OpenRouter request for model {request.get('model')}")

        try:
            response = await self.client.chat.completions.create(
                **request,
                extra_body=extra_body or None,
            )
        except OpenAIError as e:
            logger.error(f"OpenRouter API error: {e}")
            raise TransportError(f"OpenRouter request failed: {e}") from e

        return response.model_dump()

    async def aclose(self) -> None:
        await self.client.close()
