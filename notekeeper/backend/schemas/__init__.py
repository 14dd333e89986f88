# Pydantic schemas package
from notekeeper.backend.schemas.note import (
    DEFAULT_ORDER,
    NOTE_COLORS,
    Note,
    NoteOrder,
    OrderDirection,
    OrderKey,
)

__all__ = [
    "DEFAULT_ORDER",
    "NOTE_COLORS",
    "Note",
    "NoteOrder",
    "OrderDirection",
    "OrderKey",
]
