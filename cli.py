#!/usr/bin/env python3
"""
Notekeeper CLI.

Primary entry point for all application operations.
Use --service to select what to run.

Usage:
    python cli.py --help
    python cli.py --service shell
    python cli.py --service list --order-key title --direction ascending
    python cli.py --service add --title "Groceries" --content "Milk, eggs" --color 2
    python cli.py --service show --id 3
    python cli.py --service delete --id 3
    python cli.py --service init-db
    python cli.py --service config
"""

import asyncio
import sys
from contextlib import aclosing
from pathlib import Path

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notekeeper.backend.core.config import validate_project_root
from notekeeper.backend.core.logging import bind_source, get_logger, setup_logging


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["shell", "list", "add", "show", "delete", "init-db", "config", "info"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--memory",
    is_flag=True,
    help="Use a throwaway in-memory store instead of the database.",
)
@click.option(
    "--order-key",
    type=click.Choice(["title", "date", "color"]),
    default=None,
    help="Sort key for list (defaults to notes.yaml).",
)
@click.option(
    "--direction",
    type=click.Choice(["ascending", "descending"]),
    default=None,
    help="Sort direction for list (defaults to notes.yaml).",
)
@click.option("--id", "note_id", type=int, default=None, help="Note id (show, delete).")
@click.option("--title", default=None, help="Note title (add).")
@click.option("--content", default=None, help="Note content (add).")
@click.option(
    "--color",
    type=click.IntRange(1, 5),
    default=1,
    help="Palette color 1-5 (add).",
)
def main(
    service: str,
    verbose: bool,
    debug: bool,
    memory: bool,
    order_key: str | None,
    direction: str | None,
    note_id: int | None,
    title: str | None,
    content: str | None,
    color: int,
) -> None:
    """
    Notekeeper CLI.

    Use --service to select what to run.

    \b
    Examples:
        python cli.py --service shell
        python cli.py --service shell --memory
        python cli.py --service list --order-key title --direction ascending
        python cli.py --service add --title "Groceries" --content "Milk"
        python cli.py --service show --id 1
        python cli.py --service delete --id 1
        python cli.py --service init-db
        python cli.py --service config
        python cli.py --service info
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    bind_source("cli")

    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "shell":
        asyncio.run(run_shell(logger, memory))
    elif service == "list":
        asyncio.run(list_notes(logger, memory, order_key, direction))
    elif service == "add":
        asyncio.run(add_note(logger, memory, title, content, color))
    elif service == "show":
        asyncio.run(show_note(logger, memory, _require_id(note_id)))
    elif service == "delete":
        asyncio.run(delete_note(logger, memory, _require_id(note_id)))
    elif service == "init-db":
        asyncio.run(init_db(logger))
    elif service == "config":
        show_config(logger)
    elif service == "info":
        show_info(logger)


def _require_id(note_id: int | None) -> int:
    if note_id is None:
        click.echo(click.style("Error: --id is required for this service.", fg="red"), err=True)
        sys.exit(2)
    return note_id


async def _open_service(memory: bool):
    """Build the note service, creating the schema first for the database store."""
    from notekeeper.backend.core.dependencies import get_note_service

    if not memory:
        from notekeeper.backend.core.database import init_database

        await init_database()
    return get_note_service(in_memory=memory)


async def _close(memory: bool) -> None:
    if not memory:
        from notekeeper.backend.core.database import dispose_database

        await dispose_database()


async def run_shell(logger, memory: bool) -> None:
    """Start the interactive notes shell."""
    from notekeeper.backend.core.config import get_app_config
    from notekeeper.cli.shell import run_shell as _run_shell

    service = await _open_service(memory)
    logger.info("Starting shell", extra={"memory": memory})
    try:
        await _run_shell(service, get_app_config().notes.undo_window_seconds)
    finally:
        await _close(memory)


async def list_notes(logger, memory: bool, order_key: str | None, direction: str | None) -> None:
    """Print the notes once, sorted."""
    from rich.console import Console

    from notekeeper.backend.core.config import get_default_order
    from notekeeper.backend.schemas.note import OrderDirection, OrderKey
    from notekeeper.cli.shell import render_notes

    order = get_default_order()
    if order_key:
        order = order.with_key(OrderKey(order_key))
    if direction:
        order = order.with_direction(OrderDirection(direction))

    service = await _open_service(memory)
    try:
        async with aclosing(service.get_notes(order)) as stream:
            notes = await anext(stream)
    finally:
        await _close(memory)

    logger.debug("Notes listed", extra={"count": len(notes), "order": str(order)})
    Console().print(render_notes(notes, title=f"Notes ({order})"))


async def add_note(logger, memory: bool, title: str | None, content: str | None, color: int) -> None:
    """Add one note from the command line."""
    from notekeeper.backend.core.exceptions import InvalidNoteError
    from notekeeper.backend.schemas.note import NOTE_COLORS, Note

    service = await _open_service(memory)
    try:
        note = await service.add_or_update_note(
            Note(title=title or "", content=content or "", color=NOTE_COLORS[color - 1])
        )
    except InvalidNoteError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)
    finally:
        await _close(memory)

    logger.info("Note added", extra={"note_id": note.id})
    click.echo(f"Added note #{note.id}")


async def show_note(logger, memory: bool, note_id: int) -> None:
    """Print a single note."""
    service = await _open_service(memory)
    try:
        note = await service.get_note_by_id(note_id)
    finally:
        await _close(memory)

    if note is None:
        click.echo(f"No note with id {note_id}")
        sys.exit(1)

    click.echo(f"#{note.id} {note.title}")
    click.echo("-" * 40)
    click.echo(note.content)


async def delete_note(logger, memory: bool, note_id: int) -> None:
    """Delete a note permanently (there is no undo outside the shell)."""
    service = await _open_service(memory)
    try:
        note = await service.get_note_by_id(note_id)
        deleted = note is not None and await service.delete_note(note)
    finally:
        await _close(memory)

    if not deleted:
        click.echo(f"No note with id {note_id}")
        sys.exit(1)

    logger.info("Note deleted", extra={"note_id": note_id})
    click.echo(f"Deleted note #{note_id}")


async def init_db(logger) -> None:
    """Create the database schema."""
    from notekeeper.backend.core.config import get_database_url

    try:
        await _open_service(memory=False)
    finally:
        await _close(memory=False)
    click.echo(f"Database ready: {get_database_url()}")


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:\n")

    try:
        from notekeeper.backend.core.config import get_app_config, get_database_url

        app_config = get_app_config()

        sections = [
            ("Application Settings", app_config.application),
            ("Database Settings", app_config.database),
            ("Logging Settings", app_config.logging),
            ("Note Settings", app_config.notes),
        ]
        for heading, section in sections:
            click.echo(f"{heading} (from YAML):")
            click.echo("-" * 40)
            for key, value in section.model_dump(mode="json").items():
                if isinstance(value, dict):
                    click.echo(f"  {key}:")
                    for k, v in value.items():
                        click.echo(f"    {k}: {v}")
                else:
                    click.echo(f"  {key}: {value}")
            click.echo()

        click.echo(f"Effective database URL: {get_database_url()}")
        logger.info("Configuration displayed successfully")

    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def show_info(logger) -> None:
    """Display application info."""
    from notekeeper.backend.core.config import get_app_config

    app = get_app_config().application
    click.echo(f"{app.name} v{app.version}")
    click.echo(app.description)
    click.echo(f"Environment: {app.environment}")
    click.echo("\nRun 'python cli.py --help' for the list of services.")


if __name__ == "__main__":
    main()
