"""Note persistence interface.

Notes are stored outside the engine; the engine only ever sees the text of
the note being edited.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Note:
    """A saved note.

    Attributes:
        id: Stable note identifier.
        title: Generated or user-supplied title.
        content: The note text, placeholders included.
        updated_at: Last modification time in epoch milliseconds.
    """

    id: str
    title: str
    content: str
    updated_at: int


class BaseNoteStore(ABC):
    """Abstract base class for note storage backends."""

    @abstractmethod
    async def load(self, note_id: str) -> Note | None:
        """Load a note by id, or None if it does not exist."""

    @abstractmethod
    async def save(self, note: Note) -> None:
        """Insert or replace a note."""

    @abstractmethod
    async def delete(self, note_id: str) -> None:
        """Delete a note by id. Missing notes are ignored."""

    @abstractmethod
    async def list(self) -> list[Note]:
        """Return all notes, most recently updated first."""
