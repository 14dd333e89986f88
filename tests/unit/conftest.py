"""
Unit Test Fixtures.

Unit tests run against the in-memory store or mocks and never touch a
database.
"""

from unittest.mock import AsyncMock

import pytest

from notekeeper.backend.repositories.memory import InMemoryNoteStore
from notekeeper.backend.schemas.note import Note
from notekeeper.backend.services.note import NoteService

FIXED_NOW = 1_700_000_000_000


@pytest.fixture
def clock() -> list[int]:
    """Mutable clock value in epoch millis; tests may advance clock[0]."""
    return [FIXED_NOW]


@pytest.fixture
def memory_store(sample_notes: list[Note]) -> InMemoryNoteStore:
    return InMemoryNoteStore(sample_notes)


@pytest.fixture
def empty_store() -> InMemoryNoteStore:
    return InMemoryNoteStore()


@pytest.fixture
def note_service(memory_store: InMemoryNoteStore, clock: list[int]) -> NoteService:
    """NoteService over the in-memory store with a controllable clock."""
    return NoteService(memory_store, clock=lambda: clock[0])


@pytest.fixture
def mock_store() -> AsyncMock:
    """
    Mocked NoteStore for asserting exactly which writes happen.

    Usage:
        service = NoteService(mock_store)
        await service.add_or_update_note(note)
        mock_store.upsert.assert_awaited_once()
    """
    store = AsyncMock()
    store.upsert = AsyncMock(side_effect=lambda note: note.model_copy(update={"id": note.id or 99}))
    store.get_by_id = AsyncMock(return_value=None)
    store.delete = AsyncMock(return_value=None)
    return store


@pytest.fixture
def fixed_now() -> int:
    """Initial value of the clock fixture."""
    return FIXED_NOW
