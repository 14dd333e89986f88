"""
Note Store Protocol.

The persistence contract the note service depends on. Any object with these
methods can back the service: the SQL store in production, the in-memory
store in tests and throwaway shells.
"""

from collections.abc import AsyncGenerator
from typing import Protocol

from notekeeper.backend.schemas.note import Note


class NoteStore(Protocol):
    def subscribe_all(self) -> AsyncGenerator[list[Note], None]:
        """Yield the full note list now, then again after every write.

        Lists are in storage order (ascending id). One list is yielded per
        insert, update or delete; the iterator never finishes on its own.
        """
        ...

    async def get_by_id(self, note_id: int) -> Note | None:
        """Get a note by its ID, or None when there is no such note."""
        ...

    async def upsert(self, note: Note) -> Note:
        """Insert a new note (assigning its id) or replace the note with the same id."""
        ...

    async def delete(self, note: Note) -> None:
        """Delete a note.

        Raises:
            NotFoundError: If no note with that id is stored
        """
        ...
