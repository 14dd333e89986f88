"""
Note Schemas.

Pydantic models for the note entity and the sort order applied to note lists.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ARGB values, in the order the editor offers them
RED_ORANGE = 0xFFFFAB91
LIGHT_GREEN = 0xFFE7ED9B
VIOLET = 0xFFCF94DA
BABY_BLUE = 0xFF81DEEA
RED_PINK = 0xFFF48FB1

NOTE_COLORS: tuple[int, ...] = (RED_ORANGE, LIGHT_GREEN, VIOLET, BABY_BLUE, RED_PINK)


class Note(BaseModel):
    """
    A single user note.

    `id` is None until the store assigns one on first insert.
    `timestamp` is epoch milliseconds and is stamped by the service on every
    add or update, never edited by the user.
    """

    id: int | None = Field(default=None, description="Store-assigned identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    timestamp: int = Field(default=0, description="Last write, epoch millis")
    color: int = Field(default=RED_ORANGE, description="ARGB color from NOTE_COLORS")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @property
    def is_new(self) -> bool:
        """True until the note has been persisted once."""
        return self.id is None


class OrderKey(str, Enum):
    """Field a note list is sorted by."""

    TITLE = "title"
    DATE = "date"
    COLOR = "color"


class OrderDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class NoteOrder(BaseModel):
    """Sort key paired with a direction. Equal when both parts are equal."""

    key: OrderKey
    direction: OrderDirection

    model_config = ConfigDict(frozen=True)

    def with_key(self, key: OrderKey) -> "NoteOrder":
        return self.model_copy(update={"key": key})

    def with_direction(self, direction: OrderDirection) -> "NoteOrder":
        return self.model_copy(update={"direction": direction})

    def __str__(self) -> str:
        return f"{self.key.value}/{self.direction.value}"


DEFAULT_ORDER = NoteOrder(key=OrderKey.DATE, direction=OrderDirection.DESCENDING)
