"""
In-Memory Note Store.

Dict-backed NoteStore. Ids are handed out from a counter that never goes
backwards, the way an autoincrement column behaves.
"""

from collections.abc import AsyncGenerator

from notekeeper.backend.core.exceptions import NotFoundError
from notekeeper.backend.events.notifier import ChangeNotifier
from notekeeper.backend.events.schemas import NoteDeleted, NoteUpserted
from notekeeper.backend.schemas.note import Note

SOURCE = "memory-store"


class InMemoryNoteStore:
    """NoteStore kept in a dict, for tests and throwaway shells."""

    def __init__(
        self,
        notes: list[Note] | None = None,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self._notes: dict[int, Note] = {}
        self._next_id = 1
        self._notifier = notifier or ChangeNotifier()
        for note in notes or []:
            self._put(note)

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def _put(self, note: Note) -> Note:
        if note.id is None:
            note = note.model_copy(update={"id": self._next_id})
        self._notes[note.id] = note
        self._next_id = max(self._next_id, note.id + 1)
        return note

    def snapshot(self) -> list[Note]:
        """All notes in storage order (ascending id)."""
        return [self._notes[note_id] for note_id in sorted(self._notes)]

    async def subscribe_all(self) -> AsyncGenerator[list[Note], None]:
        queue = self._notifier.subscribe()
        try:
            yield self.snapshot()
            while True:
                await queue.get()
                yield self.snapshot()
        finally:
            self._notifier.unsubscribe(queue)

    async def get_by_id(self, note_id: int) -> Note | None:
        return self._notes.get(note_id)

    async def upsert(self, note: Note) -> Note:
        stored = self._put(note)
        self._notifier.publish(
            NoteUpserted(source=SOURCE, payload={"note_id": stored.id, "created": note.id is None})
        )
        return stored

    async def delete(self, note: Note) -> None:
        if note.id not in self._notes:
            raise NotFoundError(f"Note {note.id} not found")
        del self._notes[note.id]
        self._notifier.publish(NoteDeleted(source=SOURCE, payload={"note_id": note.id}))
