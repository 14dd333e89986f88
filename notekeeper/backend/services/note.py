"""
Note Service.

Business logic layer for notes. Validates notes before they are written,
stamps write times, sorts the live note list and handles delete/restore.
The undo buffer is not kept here; that belongs to the list session.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import aclosing

from notekeeper.backend.core.exceptions import InvalidOperationError, NotFoundError
from notekeeper.backend.core.utils import now_millis
from notekeeper.backend.repositories.base import NoteStore
from notekeeper.backend.schemas.note import DEFAULT_ORDER, Note, NoteOrder
from notekeeper.backend.services.base import BaseService
from notekeeper.backend.services.ordering import sort_notes
from notekeeper.backend.services.validation import validate_note


class NoteService(BaseService):
    """
    Service for note business logic.

    Usage:
        service = NoteService(InMemoryNoteStore())
        note = await service.add_or_update_note(Note(title="Todo", content="Call Bob"))
        async for notes in service.get_notes(order):
            render(notes)
    """

    def __init__(
        self,
        store: NoteStore,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        super().__init__()
        self.store = store
        self._clock = clock

    async def add_or_update_note(self, note: Note) -> Note:
        """
        Validate, stamp and persist a note.

        The timestamp is always overwritten with the current time, whatever
        the caller put there.

        Args:
            note: New note (id None) or edited note (id set)

        Returns:
            The stored note, carrying its id

        Raises:
            InvalidNoteError: If the note fails validation; nothing is written
            StoreError: If the store fails
        """
        validate_note(note)

        stamped = note.model_copy(update={"timestamp": self._clock()})
        self._log_operation(
            "Saving note",
            note_id=note.id,
            is_new=note.is_new,
        )

        stored = await self.store.upsert(stamped)

        self._log_debug("Note saved", note_id=stored.id, timestamp=stored.timestamp)
        return stored

    async def get_notes(self, order: NoteOrder = DEFAULT_ORDER) -> AsyncGenerator[list[Note], None]:
        """
        Live, sorted view of all notes.

        Yields one sorted list per store emission: the current notes first,
        then again after every write. Never finishes on its own; stop
        iterating (or cancel the consuming task) to unsubscribe.

        Args:
            order: Sort applied to every emission
        """
        self._log_debug("Subscribing to notes", order=str(order))
        async with aclosing(self.store.subscribe_all()) as stream:
            async for notes in stream:
                yield sort_notes(notes, order)

    async def get_note_by_id(self, note_id: int) -> Note | None:
        """
        Get a note by ID.

        Returns:
            The note, or None if no note has that id

        Raises:
            StoreError: If the store fails
        """
        return await self.store.get_by_id(note_id)

    async def delete_note(self, note: Note) -> bool:
        """
        Delete a persisted note.

        A note that is already gone from the store is not an error.

        Returns:
            True if the note was removed, False if it was not stored

        Raises:
            InvalidOperationError: If the note was never saved (id is None)
            StoreError: If the store fails
        """
        if note.id is None:
            raise InvalidOperationError("Cannot delete a note that was never saved")

        self._log_operation("Deleting note", note_id=note.id)
        try:
            await self.store.delete(note)
        except NotFoundError:
            self._log_warning("Note already deleted", note_id=note.id)
            return False
        return True

    async def restore_note(self, note: Note) -> Note:
        """
        Put a deleted note back exactly as it was.

        Keeps the original id and timestamp and skips validation; the note
        was valid when it was first saved.

        Raises:
            StoreError: If the store fails
        """
        self._log_operation("Restoring note", note_id=note.id)
        return await self.store.upsert(note)
