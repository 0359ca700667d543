"""Shared document buffer.

The buffer is the single mutable resource a fill run writes to. Renderers
subscribe to it instead of the engine capturing their setter.
"""

from collections.abc import Callable

Subscriber = Callable[[str], None]


class DocumentBuffer:
    """Owned text buffer with change subscriptions.

    Example:
        ```python
        document = DocumentBuffer("Born in / and raised in /.")
        unsubscribe = document.subscribe(print)
        document.set("Born in Paris and raised in /.")
        unsubscribe()
        ```
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._subscribers: list[Subscriber] = []

    def get(self) -> str:
        """Return the current text."""
        return self._text

    def set(self, value: str) -> None:
        """Replace the text and notify subscribers if it changed."""
        if value == self._text:
            return
        self._text = value
        for subscriber in list(self._subscribers):
            subscriber(value)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for every change.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"DocumentBuffer({self._text!r})"
