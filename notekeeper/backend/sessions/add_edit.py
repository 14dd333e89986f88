"""
Note Edit Session.

State holder behind the add/edit screen: the fields being edited, the color
choice, and the save action. Results the screen should react to (saved,
or a message to show) are queued as UI events.
"""

import asyncio
import random
from collections.abc import Callable
from dataclasses import dataclass, replace

from notekeeper.backend.core.exceptions import InvalidNoteError, StoreError
from notekeeper.backend.core.logging import get_logger, log_with_source
from notekeeper.backend.schemas.note import NOTE_COLORS, Note
from notekeeper.backend.services.note import NoteService

logger = get_logger(__name__)


def random_color() -> int:
    return random.choice(NOTE_COLORS)


@dataclass(frozen=True)
class NoteEditState:
    note_id: int | None = None
    title: str = ""
    content: str = ""
    color: int = NOTE_COLORS[0]


@dataclass(frozen=True)
class EnteredTitle:
    text: str


@dataclass(frozen=True)
class EnteredContent:
    text: str


@dataclass(frozen=True)
class ChangeColor:
    color: int


@dataclass(frozen=True)
class SaveNote:
    pass


EditEvent = EnteredTitle | EnteredContent | ChangeColor | SaveNote


@dataclass(frozen=True)
class NoteSaved:
    note: Note


@dataclass(frozen=True)
class ShowMessage:
    message: str


UiEvent = NoteSaved | ShowMessage


class NoteEditSession:
    """
    Editing state for one note, new or existing.

    Usage:
        session = NoteEditSession(service)
        await session.load(note_id)
        await session.on_event(EnteredTitle("Groceries"))
        await session.on_event(SaveNote())
        event = await session.next_event()
    """

    def __init__(
        self,
        service: NoteService,
        color_picker: Callable[[], int] = random_color,
    ) -> None:
        self._service = service
        self._state = NoteEditState(color=color_picker())
        self._ui_events: asyncio.Queue[UiEvent] = asyncio.Queue()

    @property
    def state(self) -> NoteEditState:
        return self._state

    async def load(self, note_id: int) -> bool:
        """
        Start editing an existing note.

        Returns:
            True if the note was found; otherwise the session stays on a new note
        """
        note = await self._service.get_note_by_id(note_id)
        if note is None:
            return False
        self._state = NoteEditState(
            note_id=note.id,
            title=note.title,
            content=note.content,
            color=note.color,
        )
        return True

    async def on_event(self, event: EditEvent) -> None:
        if isinstance(event, EnteredTitle):
            self._state = replace(self._state, title=event.text)
        elif isinstance(event, EnteredContent):
            self._state = replace(self._state, content=event.text)
        elif isinstance(event, ChangeColor):
            self._state = replace(self._state, color=event.color)
        elif isinstance(event, SaveNote):
            await self._save()
        else:
            raise TypeError(f"Unknown edit event: {event!r}")

    async def _save(self) -> None:
        note = Note(
            id=self._state.note_id,
            title=self._state.title,
            content=self._state.content,
            color=self._state.color,
        )
        try:
            saved = await self._service.add_or_update_note(note)
        except InvalidNoteError as exc:
            self._ui_events.put_nowait(ShowMessage(exc.message))
            return
        except StoreError as exc:
            log_with_source(logger, "session", "error", "Saving note failed", error=exc.message)
            self._ui_events.put_nowait(ShowMessage("Couldn't save note"))
            return

        self._state = replace(self._state, note_id=saved.id)
        self._ui_events.put_nowait(NoteSaved(saved))

    async def next_event(self, timeout: float | None = None) -> UiEvent:
        """Wait for the next UI event."""
        async with asyncio.timeout(timeout):
            return await self._ui_events.get()

    def pending_events(self) -> list[UiEvent]:
        """Drain UI events that are already queued."""
        events = []
        while not self._ui_events.empty():
            events.append(self._ui_events.get_nowait())
        return events
