"""Unit tests for the note store contract."""

import asyncio
import dataclasses

import pytest

from slashfill.interfaces.note_store import BaseNoteStore, Note


class MemoryNoteStore(BaseNoteStore):
    """Dict-backed store used to exercise the contract."""

    def __init__(self) -> None:
        self.notes: dict[str, Note] = {}

    async def load(self, note_id: str) -> Note | None:
        return self.notes.get(note_id)

    async def save(self, note: Note) -> None:
        self.notes[note.id] = note

    async def delete(self, note_id: str) -> None:
        self.notes.pop(note_id, None)

    async def list(self) -> list[Note]:
        return sorted(self.notes.values(), key=lambda note: note.updated_at, reverse=True)


class TestNoteStore:
    """Test suite for BaseNoteStore."""

    def test_base_is_abstract(self):
        """Test that the interface cannot be instantiated."""
        with pytest.raises(TypeError):
            BaseNoteStore()

    def test_note_is_immutable(self):
        """Test that notes are value objects."""
        note = Note(id="1", title="New Note", content="Born in /.", updated_at=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            note.content = "edited"

    def test_contract(self):
        """Test load, save, list and delete through a concrete store."""
        store = MemoryNoteStore()
        older = Note(id="a", title="Older", content="x", updated_at=1)
        newer = Note(id="b", title="Newer", content="y", updated_at=2)

        async def scenario():
            await store.save(older)
            await store.save(newer)
            listed = await store.list()
            await store.delete("a")
            await store.delete("missing")
            return listed, await store.load("a"), await store.load("b")

        listed, deleted, kept = asyncio.run(scenario())

        assert [note.id for note in listed] == ["b", "a"]
        assert deleted is None
        assert kept == newer
