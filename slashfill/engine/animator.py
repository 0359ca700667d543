"""Typewriter-style text animation.

Each operation is an async generator yielding one frame per tick; the
awaitable wrappers push frames into a :class:`DocumentBuffer` and stop as
soon as the caller's ``is_current`` check fails, so a superseded run never
writes another frame.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing

from slashfill.engine.document import DocumentBuffer
from slashfill.engine.models import AnimationJob

logger = logging.getLogger(__name__)

ZERO_WIDTH_CURSOR = "\u200b"

Sleeper = Callable[[float], Awaitable[None]]


def _always_current() -> bool:
    return True


class TextAnimator:
    """Reveals and erases text one chunk per tick.

    Attributes:
        tick_ms: Delay between reveal frames in milliseconds.
        erase_tick_ms: Delay between erase frames in milliseconds.
        chunk_size: Characters revealed or erased per tick.
    """

    def __init__(
        self,
        tick_ms: float = 30,
        chunk_size: int = 1,
        erase_tick_ms: float | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Initialize the animator.

        Args:
            tick_ms: Delay between reveal frames. Zero still yields to the
                event loop between frames.
            chunk_size: Characters per tick, at least 1.
            erase_tick_ms: Delay between erase frames. Defaults to ``tick_ms``.
            sleep: Coroutine used to wait between frames.
        """
        self.tick_ms = max(0.0, tick_ms)
        self.erase_tick_ms = self.tick_ms if erase_tick_ms is None else max(0.0, erase_tick_ms)
        self.chunk_size = max(1, chunk_size)
        self._sleep = sleep

    async def pause(self, milliseconds: float) -> None:
        """Wait without producing frames."""
        await self._sleep(max(0.0, milliseconds) / 1000)

    # =========================================================================
    # Frame generators
    # =========================================================================

    async def fill_frames(self, before: str, content: str, after: str) -> AsyncIterator[str]:
        """Yield frames revealing ``content`` between ``before`` and ``after``.

        Intermediate frames carry a zero-width cursor after the revealed
        part; the last frame is exactly ``before + content + after``.
        """
        job = AnimationJob(before, content, after, tick=self.tick_ms, chunk_size=self.chunk_size)

        revealed = 0
        while revealed < len(job.content):
            await self.pause(job.tick)
            revealed = min(revealed + job.chunk_size, len(job.content))
            yield job.frame(revealed, ZERO_WIDTH_CURSOR)

        await self.pause(job.tick)
        yield job.final

    async def marker_frames(
        self, read: Callable[[], str], content: str, marker: str, at: int | None = None
    ) -> AsyncIterator[str]:
        """Yield frames streaming ``content`` in place of ``marker``.

        ``at`` pins the marker occurrence to an offset; without it the first
        occurrence is used. The insertion point is looked up in the live text
        returned by ``read`` on every tick, so edits elsewhere in the
        document during the animation are preserved. Ticks where the cursor
        cannot be found produce no frame.
        """
        live = read()
        marker_at = live.find(marker) if at is None else at
        if marker_at < 0 or live[marker_at:marker_at + len(marker)] != marker:
            logger.debug("Marker vanished before streaming started")
            return

        yield live[:marker_at] + ZERO_WIDTH_CURSOR + live[marker_at + len(marker):]

        for start in range(0, len(content), self.chunk_size):
            await self.pause(self.tick_ms)
            live = read()
            cursor_at = live.find(ZERO_WIDTH_CURSOR)
            if cursor_at == -1:
                continue

            chunk = content[start:start + self.chunk_size]
            yield live[:cursor_at] + chunk + live[cursor_at:]

        await self.pause(self.tick_ms)
        live = read()
        if ZERO_WIDTH_CURSOR in live:
            yield live.replace(ZERO_WIDTH_CURSOR, "", 1)

    async def erase_frames(self, read: Callable[[], str], text: str) -> AsyncIterator[str]:
        """Yield frames removing ``text`` from its end, one chunk per tick.

        The last occurrence of ``text`` in the live text is erased and
        anything around it is kept. If the live text does not contain
        ``text``, the buffer is treated as holding ``text`` alone.
        """
        live = read()
        found = live.rfind(text) if text else len(live)
        if found == -1:
            head, tail = "", ""
        else:
            head, tail = live[:found], live[found + len(text):]
        job = AnimationJob(head, text, tail, tick=self.erase_tick_ms, chunk_size=self.chunk_size)

        remaining = len(job.content)
        while remaining > 0:
            await self.pause(job.tick)
            remaining = max(0, remaining - job.chunk_size)
            yield job.frame(remaining)

        if not job.content:
            yield job.before + job.after

    # =========================================================================
    # Buffer operations
    # =========================================================================

    async def _play(
        self,
        document: DocumentBuffer,
        frames: AsyncIterator[str],
        is_current: Callable[[], bool],
    ) -> bool:
        async with aclosing(frames) as stream:
            async for frame in stream:
                if not is_current():
                    logger.debug("Animation superseded, dropping remaining frames")
                    return False
                document.set(frame)
        return is_current()

    async def fill(
        self,
        document: DocumentBuffer,
        before: str,
        content: str,
        after: str,
        is_current: Callable[[], bool] = _always_current,
    ) -> bool:
        """Reveal ``content`` into the document.

        Returns:
            True if the animation ran to completion.
        """
        return await self._play(document, self.fill_frames(before, content, after), is_current)

    async def replace_at_marker(
        self,
        document: DocumentBuffer,
        content: str,
        marker: str,
        is_current: Callable[[], bool] = _always_current,
        at: int | None = None,
    ) -> bool:
        """Stream ``content`` into the document where ``marker`` sits."""
        return await self._play(
            document, self.marker_frames(document.get, content, marker, at), is_current
        )

    async def erase(
        self,
        document: DocumentBuffer,
        text: str,
        is_current: Callable[[], bool] = _always_current,
    ) -> bool:
        """Remove ``text`` from the end of the document one chunk at a time."""
        return await self._play(document, self.erase_frames(document.get, text), is_current)
