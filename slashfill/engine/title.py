"""Automatic note titles.

A short title is requested whenever the note has grown or shrunk enough
since the last one, and animated into its own buffer by erasing the old
title and typing the new one.
"""

import logging
import re

from slashfill.engine.animator import TextAnimator
from slashfill.engine.document import DocumentBuffer
from slashfill.engine.prompts import TITLE_PROMPT, build_payload
from slashfill.engine.responses import MalformedResponseError, extract_content
from slashfill.interfaces.connectivity import BaseConnectivity, NotConnectedError
from slashfill.interfaces.transport import BaseTransport, TransportError

logger = logging.getLogger(__name__)

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")


def should_regenerate(text: str, last_length: int, min_length: int = 20, min_change: int = 50) -> bool:
    """Whether the note changed enough since the last title to request a new one."""
    return len(text) > min_length and abs(len(text) - last_length) > min_change


def clean_title(raw: str) -> str:
    return _SURROUNDING_QUOTES.sub("", raw.strip())


class TitleGenerator:
    """Requests and animates note titles.

    Attributes:
        last_length: Note length when the current title was generated.
    """

    def __init__(
        self,
        transport: BaseTransport,
        connectivity: BaseConnectivity,
        animator: TextAnimator | None = None,
        model: str = "google/gemini-2.5-flash-lite",
        temperature: float = 0.3,
        max_tokens: int = 10,
        text_limit: int = 1000,
    ) -> None:
        self.transport = transport
        self.connectivity = connectivity
        self.animator = animator or TextAnimator(tick_ms=40, erase_tick_ms=20)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.text_limit = text_limit
        self.last_length = 0

    async def request_title(self, text: str) -> str:
        """Ask the model for a title for ``text``.

        Raises:
            NotConnectedError: If the backend is not connected.
            TransportError: If the request fails.
            MalformedResponseError: If the response carries no content.
        """
        if not self.connectivity.connected:
            raise NotConnectedError("Completion backend is not connected")

        payload = build_payload(
            TITLE_PROMPT,
            text[: self.text_limit],
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        body = await self.transport.complete(payload)
        return clean_title(extract_content(body))

    async def generate(self, text: str, title: DocumentBuffer) -> str | None:
        """Replace the title in ``title`` with a fresh one for ``text``.

        Failures are logged and leave the current title untouched.

        Returns:
            The new title, or None if it was not changed.
        """
        if not text.strip():
            return None

        try:
            new_title = await self.request_title(text)
        except (NotConnectedError, TransportError, MalformedResponseError) as e:
            logger.warning(f"Title generation failed: {e}")
            return None

        current = title.get()
        if not new_title or new_title == current:
            return None

        self.last_length = len(text)
        logger.info(f"Retitling note: {current!r} -> {new_title!r}")
        await self.animator.erase(title, current)
        await self.animator.fill(title, "", new_title, "")
        return new_title

    async def maybe_generate(self, text: str, title: DocumentBuffer) -> str | None:
        """Run :meth:`generate` if the note changed enough since the last title."""
        if not self.connectivity.connected or not should_regenerate(text, self.last_length):
            return None
        return await self.generate(text, title)
