"""
Unit Tests for the Interactive Shell.

Commands are called directly against an in-memory store; output is read
back from the captured console.
"""

from contextlib import aclosing

import pytest

from notekeeper.backend.core.exceptions import StoreError
from notekeeper.backend.repositories.memory import InMemoryNoteStore
from notekeeper.backend.schemas.note import (
    BABY_BLUE,
    NOTE_COLORS,
    VIOLET,
    Note,
    NoteOrder,
    OrderDirection,
    OrderKey,
)
from notekeeper.backend.services.note import NoteService
from notekeeper.backend.sessions.notes_list import NoteListSession
from notekeeper.cli.shell import InteractiveShell, parse_color, render_notes


class TestParseColor:
    def test_accepts_palette_index(self):
        assert parse_color("1") == NOTE_COLORS[0]
        assert parse_color("5") == NOTE_COLORS[4]

    def test_accepts_name_case_insensitively(self):
        assert parse_color("Violet") == VIOLET
        assert parse_color("baby-blue") == BABY_BLUE

    @pytest.mark.parametrize("value", ["0", "6", "purple", ""])
    def test_rejects_unknown(self, value):
        with pytest.raises(ValueError, match="Unknown color"):
            parse_color(value)


class TestRenderNotes:
    def test_one_row_per_note(self, sample_notes):
        table = render_notes(sample_notes, title="Notes (date/descending)")

        assert table.row_count == 3
        assert table.title == "Notes (date/descending)"
        assert [c.header for c in table.columns] == ["ID", "Title", "Content", "Color", "Updated"]

    def test_unknown_color_rendered_as_hex(self):
        table = render_notes([Note(id=1, title="t", content="c", color=0x123)])

        assert list(table.columns[3].cells) == ["0x123"]


class TestShellCommands:
    """Tests for InteractiveShell command handlers."""

    @pytest.fixture
    async def shell(self, note_service):
        session = NoteListSession(
            note_service,
            order=NoteOrder(key=OrderKey.TITLE, direction=OrderDirection.ASCENDING),
        )
        await session.start()
        await session.wait_for(lambda s: len(s.notes) == 3)
        yield InteractiveShell(note_service, session)
        await session.close()

    @pytest.mark.asyncio
    async def test_add_saves_and_lists_note(self, shell, capsys):
        await shell._cmd_add(["Date", "Buy dates", "violet"])

        out = capsys.readouterr().out
        assert "Saved note #4" in out
        assert [n.title for n in shell.session.state.notes] == ["Apple", "Banana", "Cherry", "Date"]

    @pytest.mark.asyncio
    async def test_add_with_blank_title_shows_message(self, shell, capsys):
        await shell._cmd_add(["", "content"])

        assert "title empty" in capsys.readouterr().out
        assert len(shell.session.state.notes) == 3

    @pytest.mark.asyncio
    async def test_edit_replaces_fields(self, shell, note_service):
        await shell._cmd_edit(["2", "Apricot", "Buy apricots"])

        note = await note_service.get_note_by_id(2)
        assert (note.title, note.content) == ("Apricot", "Buy apricots")

    @pytest.mark.asyncio
    async def test_delete_then_undo(self, shell, capsys):
        await shell._cmd_delete(["1"])
        assert [n.id for n in shell.session.state.notes] == [2, 3]

        await shell._cmd_undo([])

        assert "Restored 'Banana'" in capsys.readouterr().out
        assert [n.id for n in shell.session.state.notes] == [2, 1, 3]

    @pytest.mark.asyncio
    async def test_undo_with_nothing_deleted(self, shell, capsys):
        await shell._cmd_undo([])

        assert "Nothing to undo" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_order_changes_session_order(self, shell):
        await shell._cmd_order(["date", "desc"])

        state = await shell.session.wait_for(lambda s: [n.id for n in s.notes] == [1, 3, 2])
        assert state.order == NoteOrder(key=OrderKey.DATE, direction=OrderDirection.DESCENDING)

    @pytest.mark.asyncio
    async def test_order_rejects_unknown_direction(self, shell):
        with pytest.raises(ValueError, match="Unknown direction"):
            await shell._cmd_order(["date", "sideways"])

    @pytest.mark.asyncio
    async def test_quit_stops_loop(self, shell):
        shell.running = True

        await shell._cmd_quit([])

        assert shell.running is False


class OneShotSubscriptionStore(InMemoryNoteStore):
    """The first subscription emits one list and then fails."""

    def __init__(self, notes):
        super().__init__(notes)
        self.failed = False

    async def subscribe_all(self):
        if not self.failed:
            self.failed = True
            yield self.snapshot()
            raise StoreError("Database operation failed: list_notes")
        async with aclosing(super().subscribe_all()) as stream:
            async for notes in stream:
                yield notes


class TestShellLoadFailure:
    @pytest.mark.asyncio
    async def test_list_reports_failure_and_reload_recovers(self, sample_notes, capsys):
        service = NoteService(OneShotSubscriptionStore(sample_notes))
        async with NoteListSession(service) as session:
            shell = InteractiveShell(service, session)
            await session.wait_for(lambda s: s.error is not None)

            await shell._cmd_list([])
            assert "Couldn't load notes. Type reload to try again." in capsys.readouterr().out

            await shell._cmd_reload([])
            state = await session.wait_for(lambda s: len(s.notes) == 3)

        assert state.error is None
        assert "reload to try again" not in capsys.readouterr().out
