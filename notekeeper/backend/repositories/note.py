"""
SQL Note Store.

Data access layer for notes backed by SQLAlchemy's async ORM. Each call runs
in its own session and transaction; subscribers are told about a write only
after it has been committed.
"""

from collections.abc import AsyncGenerator, Awaitable
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.backend.core.exceptions import NotFoundError, StoreError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.events.notifier import ChangeNotifier
from notekeeper.backend.events.schemas import NoteDeleted, NoteUpserted
from notekeeper.backend.models.note import NoteRecord
from notekeeper.backend.schemas.note import Note

logger = get_logger(__name__)

T = TypeVar("T")

SOURCE = "sql-store"


class SqlNoteStore:
    """
    NoteStore over a relational database.

    Usage:
        store = SqlNoteStore(get_session_factory())
        note = await store.upsert(Note(title="Groceries", content="Milk"))
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._notifier = notifier or ChangeNotifier()

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    async def _execute(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a database coroutine, converting SQLAlchemy failures.

        Raises:
            StoreError: For any SQLAlchemy error
        """
        try:
            return await coro
        except SQLAlchemyError as e:
            logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise StoreError(f"Database operation failed: {operation}") from e

    async def _list_all(self) -> list[Note]:
        async with self._session_factory() as session:
            result = await session.execute(select(NoteRecord).order_by(NoteRecord.id))
            return [Note.model_validate(record) for record in result.scalars().all()]

    async def subscribe_all(self) -> AsyncGenerator[list[Note], None]:
        queue = self._notifier.subscribe()
        try:
            yield await self._execute("list_notes", self._list_all())
            while True:
                await queue.get()
                yield await self._execute("list_notes", self._list_all())
        finally:
            self._notifier.unsubscribe(queue)

    async def _get(self, note_id: int) -> Note | None:
        async with self._session_factory() as session:
            record = await session.get(NoteRecord, note_id)
            return Note.model_validate(record) if record is not None else None

    async def get_by_id(self, note_id: int) -> Note | None:
        return await self._execute("get_note", self._get(note_id))

    async def _upsert(self, note: Note) -> Note:
        async with self._session_factory() as session:
            async with session.begin():
                record = NoteRecord(
                    id=note.id,
                    title=note.title,
                    content=note.content,
                    timestamp=note.timestamp,
                    color=note.color,
                )
                if note.id is None:
                    session.add(record)
                else:
                    record = await session.merge(record)
                await session.flush()
                stored = Note.model_validate(record)
        return stored

    async def upsert(self, note: Note) -> Note:
        stored = await self._execute("upsert_note", self._upsert(note))
        self._notifier.publish(
            NoteUpserted(source=SOURCE, payload={"note_id": stored.id, "created": note.id is None})
        )
        return stored

    async def _delete(self, note: Note) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                record = await session.get(NoteRecord, note.id)
                if record is None:
                    raise NotFoundError(f"Note {note.id} not found")
                await session.delete(record)

    async def delete(self, note: Note) -> None:
        await self._execute("delete_note", self._delete(note))
        self._notifier.publish(NoteDeleted(source=SOURCE, payload={"note_id": note.id}))
