"""
Note List Session.

State holder behind the note list screen. Combines the live, sorted note
list from NoteService with user intents (change order, toggle the order
section, delete, undo delete, reload) into one NotesState snapshot.

The session is a single actor: dispatch() queues an intent and returns at
once, and one worker task applies intents strictly in arrival order, so
store writes never overlap. The live list is collected by a second task
that is replaced whenever the order changes.

Usage:
    async with NoteListSession(service) as session:
        await session.dispatch(DeleteNote(note))
        await session.dispatch(RestoreNote())
        print(session.state.notes)
"""

import asyncio
import time
from collections.abc import Callable
from contextlib import aclosing
from dataclasses import dataclass, replace
from typing import Any

from notekeeper.backend.core.exceptions import InvalidOperationError
from notekeeper.backend.core.logging import get_logger, log_with_source
from notekeeper.backend.schemas.note import DEFAULT_ORDER, Note, NoteOrder
from notekeeper.backend.services.note import NoteService

logger = get_logger(__name__)

LOAD_FAILED_MESSAGE = "Couldn't load notes"


# =============================================================================
# State and intents
# =============================================================================


@dataclass(frozen=True)
class NotesState:
    """
    Everything the note list screen renders.

    error is set when the live note list stops on a store failure. It is
    cleared by the next list that arrives; ReloadNotes or a new order
    resubscribes.
    """

    notes: tuple[Note, ...] = ()
    order: NoteOrder = DEFAULT_ORDER
    is_order_section_visible: bool = False
    recently_deleted: Note | None = None
    error: str | None = None


@dataclass(frozen=True)
class ChangeOrder:
    order: NoteOrder


@dataclass(frozen=True)
class ToggleOrderSection:
    pass


@dataclass(frozen=True)
class DeleteNote:
    note: Note


@dataclass(frozen=True)
class RestoreNote:
    pass


@dataclass(frozen=True)
class ReloadNotes:
    pass


NotesEvent = ChangeOrder | ToggleOrderSection | DeleteNote | RestoreNote | ReloadNotes


# =============================================================================
# Session
# =============================================================================


class NoteListSession:
    """
    Single-actor state holder for the note list.

    The undo buffer holds at most one note. Deleting again replaces it and
    the older note stays deleted for good. With undo_window_seconds set, a
    restore requested after the window only clears the buffer.
    """

    def __init__(
        self,
        service: NoteService,
        order: NoteOrder = DEFAULT_ORDER,
        undo_window_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._service = service
        self._state = NotesState(order=order)
        self._undo_window = undo_window_seconds
        self._clock = clock
        self._deleted_at: float | None = None

        self._intents: asyncio.Queue[tuple[NotesEvent, asyncio.Future[None]]] = asyncio.Queue()
        self._changed = asyncio.Condition()
        self._worker: asyncio.Task[None] | None = None
        self._collector: asyncio.Task[None] | None = None
        self._generation = 0
        self._closed = False

    @property
    def state(self) -> NotesState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._closed

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Start the intent worker and the live note subscription."""
        if self._closed:
            raise RuntimeError("Session is closed")
        if self._worker is not None:
            return
        self._worker = asyncio.create_task(self._run(), name="note-list-intents")
        self._subscribe(self._state.order)
        log_with_source(logger, "session", "debug", "Note list session started", order=str(self._state.order))

    async def close(self) -> None:
        """
        Stop the session.

        Cancels the subscription and the worker and waits for both, so no
        note list is applied after this returns. Queued intents are cancelled.
        """
        if self._closed:
            return
        self._closed = True
        self._generation += 1

        tasks = [task for task in (self._collector, self._worker) if task is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._collector = None
        self._worker = None

        while not self._intents.empty():
            _, future = self._intents.get_nowait()
            if not future.done():
                future.cancel()
        log_with_source(logger, "session", "debug", "Note list session closed")

    async def __aenter__(self) -> "NoteListSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def dispatch(self, event: NotesEvent) -> asyncio.Future[None]:
        """
        Queue an intent.

        Returns:
            Future resolved once the intent has been applied. It carries the
            exception if the intent failed (for example StoreError).

        Raises:
            RuntimeError: If the session is not running
        """
        if not self.is_running:
            raise RuntimeError("Session is not running")
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._intents.put_nowait((event, future))
        return future

    async def wait_for(
        self,
        predicate: Callable[[NotesState], bool],
        timeout: float = 1.0,
    ) -> NotesState:
        """
        Wait until the state satisfies predicate.

        Raises:
            TimeoutError: If it does not happen within timeout seconds
        """
        async with asyncio.timeout(timeout):
            async with self._changed:
                await self._changed.wait_for(lambda: predicate(self._state))
        return self._state

    async def _run(self) -> None:
        while True:
            event, future = await self._intents.get()
            if future.done():
                continue
            try:
                await self._handle(event)
            except asyncio.CancelledError:
                future.cancel()
                raise
            except Exception as exc:
                log_with_source(
                    logger, "session", "error", "Intent failed",
                    intent=type(event).__name__, error=str(exc),
                )
                if not future.done():
                    future.set_exception(exc)
            else:
                if not future.done():
                    future.set_result(None)

    async def _handle(self, event: NotesEvent) -> None:
        if isinstance(event, ChangeOrder):
            await self._change_order(event.order)
        elif isinstance(event, ToggleOrderSection):
            await self._update(is_order_section_visible=not self._state.is_order_section_visible)
        elif isinstance(event, DeleteNote):
            await self._delete(event.note)
        elif isinstance(event, RestoreNote):
            await self._restore()
        elif isinstance(event, ReloadNotes):
            await self._update(error=None)
            self._subscribe(self._state.order)
        else:
            raise TypeError(f"Unknown intent: {event!r}")

    async def _change_order(self, order: NoteOrder) -> None:
        if order == self._state.order:
            return
        await self._update(order=order, error=None)
        self._subscribe(order)

    async def _delete(self, note: Note) -> None:
        try:
            deleted = await self._service.delete_note(note)
        except InvalidOperationError as exc:
            log_with_source(logger, "session", "warning", "Ignoring delete of unsaved note", error=exc.message)
            return
        if not deleted:
            return

        if self._state.recently_deleted is not None:
            log_with_source(
                logger, "session", "debug", "Undo buffer replaced",
                dropped_note_id=self._state.recently_deleted.id,
            )
        self._deleted_at = self._clock()
        await self._update(recently_deleted=note)

    async def _restore(self) -> None:
        note = self._state.recently_deleted
        if note is None:
            return
        if self._undo_expired():
            log_with_source(logger, "session", "debug", "Undo window passed", note_id=note.id)
        else:
            await self._service.restore_note(note)
        self._deleted_at = None
        await self._update(recently_deleted=None)

    def _undo_expired(self) -> bool:
        if self._undo_window is None or self._deleted_at is None:
            return False
        return self._clock() - self._deleted_at > self._undo_window

    # -------------------------------------------------------------------------
    # Live note list
    # -------------------------------------------------------------------------

    def _subscribe(self, order: NoteOrder) -> None:
        if self._collector is not None:
            self._collector.cancel()
        self._generation += 1
        self._collector = asyncio.create_task(
            self._collect(order, self._generation),
            name=f"note-list-{order}",
        )

    async def _collect(self, order: NoteOrder, generation: int) -> None:
        try:
            async with aclosing(self._service.get_notes(order)) as stream:
                async for notes in stream:
                    # a newer subscription (or close) owns the state now
                    if generation != self._generation:
                        return
                    await self._update(notes=tuple(notes), error=None)
        except Exception as exc:
            log_with_source(
                logger, "session", "error", "Note subscription failed",
                order=str(order), error=str(exc),
            )
            if generation == self._generation:
                await self._update(error=LOAD_FAILED_MESSAGE)

    async def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        async with self._changed:
            self._changed.notify_all()
