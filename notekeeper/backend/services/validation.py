"""
Note Validation.

Checks a note is fit to be written. Runs only at the write boundary;
notes read back from a store are never re-validated.
"""

from notekeeper.backend.core.exceptions import InvalidNoteError
from notekeeper.backend.schemas.note import NOTE_COLORS, Note


def is_blank(value: str) -> bool:
    """True for empty or whitespace-only text."""
    return not value.strip()


def validate_note(note: Note) -> None:
    """
    Validate a note before persisting it.

    Fields are checked in the order title, content, color and the first
    failure is raised; later fields are not inspected.

    Args:
        note: Note about to be written

    Raises:
        InvalidNoteError: If the title or content is blank or the color
            is not one of NOTE_COLORS
    """
    if is_blank(note.title):
        raise InvalidNoteError("title empty", field="title")
    if is_blank(note.content):
        raise InvalidNoteError("content empty", field="content")
    if note.color not in NOTE_COLORS:
        raise InvalidNoteError("invalid color", field="color")
