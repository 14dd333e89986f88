"""
Interactive Shell Mode.

REPL over a NoteListSession: lists the live, sorted notes and turns typed
commands into session intents. Adding and editing go through a
NoteEditSession per command.
"""

import asyncio
import shlex
from collections.abc import Awaitable, Callable
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from notekeeper.backend.core.exceptions import ApplicationError
from notekeeper.backend.core.logging import bind_source
from notekeeper.backend.schemas.note import NOTE_COLORS, Note, OrderDirection, OrderKey
from notekeeper.backend.services.note import NoteService
from notekeeper.backend.services.ordering import sort_notes
from notekeeper.backend.sessions.add_edit import (
    ChangeColor,
    EnteredContent,
    EnteredTitle,
    NoteEditSession,
    NoteSaved,
    SaveNote,
    ShowMessage,
)
from notekeeper.backend.sessions.notes_list import (
    ChangeOrder,
    DeleteNote,
    NoteListSession,
    NotesState,
    ReloadNotes,
    RestoreNote,
    ToggleOrderSection,
)

console = Console()

COLOR_NAMES = {
    NOTE_COLORS[0]: "red-orange",
    NOTE_COLORS[1]: "light-green",
    NOTE_COLORS[2]: "violet",
    NOTE_COLORS[3]: "baby-blue",
    NOTE_COLORS[4]: "red-pink",
}

DIRECTION_ALIASES = {
    "asc": OrderDirection.ASCENDING,
    "ascending": OrderDirection.ASCENDING,
    "desc": OrderDirection.DESCENDING,
    "descending": OrderDirection.DESCENDING,
}


def parse_color(value: str) -> int:
    """Accept a palette index (1-5) or a color name."""
    if value.isdigit() and 1 <= int(value) <= len(NOTE_COLORS):
        return NOTE_COLORS[int(value) - 1]
    for color, name in COLOR_NAMES.items():
        if name == value.lower():
            return color
    raise ValueError(f"Unknown color: {value}")


def render_notes(notes: tuple[Note, ...] | list[Note], title: str = "Notes") -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Content")
    table.add_column("Color")
    table.add_column("Updated", style="dim")

    for note in notes:
        updated = datetime.fromtimestamp(note.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        table.add_row(
            str(note.id),
            note.title,
            note.content,
            COLOR_NAMES.get(note.color, hex(note.color)),
            updated,
        )
    return table


class InteractiveShell:
    """
    Interactive shell for note commands.

    Usage:
        async with NoteListSession(service) as session:
            await InteractiveShell(service, session).run()
    """

    def __init__(self, service: NoteService, session: NoteListSession) -> None:
        self.service = service
        self.session = session
        self.running = False
        self.commands: dict[str, Callable[[list[str]], Awaitable[None]]] = {
            "help": self._cmd_help,
            "list": self._cmd_list,
            "show": self._cmd_show,
            "add": self._cmd_add,
            "edit": self._cmd_edit,
            "delete": self._cmd_delete,
            "undo": self._cmd_undo,
            "order": self._cmd_order,
            "reload": self._cmd_reload,
            "toggle": self._cmd_toggle,
            "clear": self._cmd_clear,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    async def run(self) -> None:
        """Run the interactive shell."""
        bind_source("shell")
        self.running = True

        console.print(Panel(
            "[bold]Notes Shell[/bold]\n"
            "Type [cyan]help[/cyan] for available commands, [cyan]quit[/cyan] to exit.",
            title="Welcome",
        ))
        console.print()

        while self.running:
            try:
                # read in a thread so the live note list keeps updating
                user_input = (await asyncio.to_thread(console.input, "[bold cyan]>[/bold cyan] ")).strip()

                if not user_input:
                    continue

                parts = shlex.split(user_input)
                command = parts[0].lower()
                args = parts[1:]

                if command in self.commands:
                    await self.commands[command](args)
                else:
                    console.print(f"[red]Unknown command: {command}[/red]")
                    console.print("Type [cyan]help[/cyan] for available commands.")

            except KeyboardInterrupt:
                console.print("\n[dim]Use 'quit' to exit[/dim]")
            except EOFError:
                break
            except (ApplicationError, ValueError) as e:
                console.print(f"[red]Error: {e}[/red]")

        console.print("[dim]Goodbye![/dim]")

    async def _cmd_help(self, args: list[str]) -> None:
        """Display help information."""
        table = Table(title="Available Commands", show_header=True)
        table.add_column("Command", style="cyan")
        table.add_column("Description")

        table.add_row("list", "Show notes in the current order")
        table.add_row("show <id>", "Show a single note")
        table.add_row("add <title> <content> [color]", "Add a note (color: 1-5 or name)")
        table.add_row("edit <id> <title> <content> [color]", "Replace a note's fields")
        table.add_row("delete <id>", "Delete a note (undo restores the last one)")
        table.add_row("undo", "Restore the most recently deleted note")
        table.add_row("order <title|date|color> [asc|desc]", "Change the sort order")
        table.add_row("toggle", "Show or hide the order section")
        table.add_row("reload", "Reload notes after a load failure")
        table.add_row("clear", "Clear the screen")
        table.add_row("quit / exit", "Exit the shell")

        console.print(table)

    async def _cmd_list(self, args: list[str]) -> None:
        state = self.session.state
        console.print(render_notes(state.notes, title=f"Notes ({state.order})"))
        if state.is_order_section_visible:
            keys = " | ".join(
                f"[bold]{key.value}[/bold]" if key is state.order.key else key.value
                for key in OrderKey
            )
            directions = " | ".join(
                f"[bold]{d.value}[/bold]" if d is state.order.direction else d.value
                for d in OrderDirection
            )
            console.print(f"Order by: {keys}    Direction: {directions}")
        if state.recently_deleted is not None:
            console.print(f"[dim]Deleted '{state.recently_deleted.title}'. Type undo to restore.[/dim]")
        if state.error is not None:
            console.print(f"[red]{state.error}. Type reload to try again.[/red]")

    async def _cmd_show(self, args: list[str]) -> None:
        if not args:
            console.print("[yellow]Usage: show <id>[/yellow]")
            return
        note = await self.service.get_note_by_id(int(args[0]))
        if note is None:
            console.print(f"[yellow]No note with id {args[0]}[/yellow]")
            return
        console.print(Panel(note.content, title=f"#{note.id} {note.title}"))

    async def _save(self, editor: NoteEditSession, args: list[str]) -> None:
        await editor.on_event(EnteredTitle(args[0]))
        await editor.on_event(EnteredContent(args[1]))
        if len(args) > 2:
            await editor.on_event(ChangeColor(parse_color(args[2])))
        await editor.on_event(SaveNote())

        event = await editor.next_event(timeout=1.0)
        if isinstance(event, ShowMessage):
            console.print(f"[red]{event.message}[/red]")
        elif isinstance(event, NoteSaved):
            saved = event.note
            await self.session.wait_for(lambda s: saved in s.notes)
            console.print(f"[green]Saved note #{saved.id}[/green]")

    async def _cmd_add(self, args: list[str]) -> None:
        if len(args) < 2:
            console.print("[yellow]Usage: add <title> <content> [color][/yellow]")
            return
        await self._save(NoteEditSession(self.service), args)

    async def _cmd_edit(self, args: list[str]) -> None:
        if len(args) < 3:
            console.print("[yellow]Usage: edit <id> <title> <content> [color][/yellow]")
            return
        editor = NoteEditSession(self.service)
        if not await editor.load(int(args[0])):
            console.print(f"[yellow]No note with id {args[0]}[/yellow]")
            return
        await self._save(editor, args[1:])

    async def _cmd_delete(self, args: list[str]) -> None:
        if not args:
            console.print("[yellow]Usage: delete <id>[/yellow]")
            return
        note = await self.service.get_note_by_id(int(args[0]))
        if note is None:
            console.print(f"[yellow]No note with id {args[0]}[/yellow]")
            return
        await self.session.dispatch(DeleteNote(note))
        await self.session.wait_for(lambda s: all(n.id != note.id for n in s.notes))
        console.print(f"Note deleted. Type [cyan]undo[/cyan] to restore '{note.title}'.")

    async def _cmd_undo(self, args: list[str]) -> None:
        note = self.session.state.recently_deleted
        await self.session.dispatch(RestoreNote())
        if note is None:
            console.print("[dim]Nothing to undo[/dim]")
            return
        try:
            await self.session.wait_for(lambda s: any(n.id == note.id for n in s.notes))
        except TimeoutError:
            console.print("[yellow]Too late to undo[/yellow]")
            return
        console.print(f"[green]Restored '{note.title}'[/green]")

    async def _cmd_order(self, args: list[str]) -> None:
        if not args:
            console.print("[yellow]Usage: order <title|date|color> [asc|desc][/yellow]")
            return
        current = self.session.state.order
        order = current.with_key(OrderKey(args[0].lower()))
        if len(args) > 1:
            if args[1].lower() not in DIRECTION_ALIASES:
                raise ValueError(f"Unknown direction: {args[1]}")
            order = order.with_direction(DIRECTION_ALIASES[args[1].lower()])
        await self.session.dispatch(ChangeOrder(order))
        await self._wait_for_list(lambda s: s.notes == tuple(sort_notes(s.notes, order)))

    async def _cmd_reload(self, args: list[str]) -> None:
        await self.session.dispatch(ReloadNotes())
        await self._wait_for_list(lambda s: s.error is None)

    async def _wait_for_list(self, predicate: Callable[[NotesState], bool]) -> None:
        """Print the list once it satisfies predicate, or as it is after a second."""
        try:
            await self.session.wait_for(lambda s: s.error is not None or predicate(s))
        except TimeoutError:
            pass
        await self._cmd_list([])

    async def _cmd_toggle(self, args: list[str]) -> None:
        await self.session.dispatch(ToggleOrderSection())
        await self._cmd_list([])

    async def _cmd_clear(self, args: list[str]) -> None:
        """Clear the screen."""
        console.clear()

    async def _cmd_quit(self, args: list[str]) -> None:
        """Exit the shell."""
        self.running = False


async def run_shell(service: NoteService, undo_window_seconds: float | None = None) -> None:
    """Run the interactive shell over a fresh list session."""
    from notekeeper.backend.core.config import get_default_order

    session = NoteListSession(
        service,
        order=get_default_order(),
        undo_window_seconds=undo_window_seconds,
    )
    async with session:
        await InteractiveShell(service, session).run()
