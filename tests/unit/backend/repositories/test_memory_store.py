"""
Unit Tests for the In-Memory Note Store.
"""

import asyncio
from contextlib import aclosing

import pytest

from notekeeper.backend.core.exceptions import NotFoundError
from notekeeper.backend.events.schemas import NoteDeleted, NoteUpserted
from notekeeper.backend.repositories.memory import InMemoryNoteStore
from notekeeper.backend.schemas.note import Note


class TestInMemoryNoteStore:
    """Tests for InMemoryNoteStore CRUD."""

    @pytest.mark.asyncio
    async def test_insert_assigns_increasing_ids(self, empty_store):
        first = await empty_store.upsert(Note(title="a", content="a"))
        second = await empty_store.upsert(Note(title="b", content="b"))

        assert (first.id, second.id) == (1, 2)

    @pytest.mark.asyncio
    async def test_ids_are_not_reused_after_delete(self, empty_store):
        first = await empty_store.upsert(Note(title="a", content="a"))
        await empty_store.delete(first)

        second = await empty_store.upsert(Note(title="b", content="b"))

        assert second.id == 2

    @pytest.mark.asyncio
    async def test_upsert_with_id_replaces(self, memory_store, sample_notes):
        replaced = sample_notes[0].model_copy(update={"title": "Plantain"})

        await memory_store.upsert(replaced)

        assert await memory_store.get_by_id(1) == replaced
        assert len(memory_store.snapshot()) == 3

    @pytest.mark.asyncio
    async def test_upsert_with_unknown_id_inserts_with_that_id(self, empty_store):
        stored = await empty_store.upsert(Note(id=10, title="a", content="a"))

        assert stored.id == 10
        assert (await empty_store.upsert(Note(title="b", content="b"))).id == 11

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, memory_store):
        assert await memory_store.get_by_id(42) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_raises(self, memory_store):
        with pytest.raises(NotFoundError):
            await memory_store.delete(Note(id=42, title="t", content="c"))

    def test_snapshot_is_in_id_order(self, sample_notes):
        store = InMemoryNoteStore(list(reversed(sample_notes)))

        assert [n.id for n in store.snapshot()] == [1, 2, 3]


class TestSubscription:
    """Tests for subscribe_all."""

    @pytest.mark.asyncio
    async def test_emits_snapshot_then_one_list_per_write(self, memory_store, sample_notes):
        async with aclosing(memory_store.subscribe_all()) as stream:
            assert await anext(stream) == sample_notes

            added = await memory_store.upsert(Note(title="d", content="d"))
            await memory_store.delete(sample_notes[0])

            after_add = await asyncio.wait_for(anext(stream), timeout=1)
            after_delete = await asyncio.wait_for(anext(stream), timeout=1)

        assert added in after_add
        assert sample_notes[0] not in after_delete

    @pytest.mark.asyncio
    async def test_publishes_change_events(self, memory_store, sample_notes):
        queue = memory_store.notifier.subscribe()

        await memory_store.upsert(Note(title="d", content="d"))
        await memory_store.delete(sample_notes[1])

        upserted = queue.get_nowait()
        deleted = queue.get_nowait()
        assert isinstance(upserted, NoteUpserted)
        assert upserted.payload == {"note_id": 4, "created": True}
        assert isinstance(deleted, NoteDeleted)
        assert deleted.payload == {"note_id": 2}

    @pytest.mark.asyncio
    async def test_failed_delete_publishes_nothing(self, memory_store):
        queue = memory_store.notifier.subscribe()

        with pytest.raises(NotFoundError):
            await memory_store.delete(Note(id=99, title="t", content="c"))

        assert queue.empty()
