"""
Event Schemas.

Standardized event envelope and the note change events published by stores.

Naming convention for event_type: domain.entity.action (dot notation)

Usage:
    from notekeeper.backend.events.schemas import NoteUpserted

    event = NoteUpserted(source="sql-store", payload={"note_id": 3})
"""

from uuid import uuid4

from pydantic import BaseModel, Field

from notekeeper.backend.core.utils import utc_now


class EventEnvelope(BaseModel):
    """Base event envelope. All events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Domain event type in dot notation (e.g. notes.note.upserted)
        event_version: Schema version for forward compatibility
        timestamp: ISO 8601 UTC timestamp
        source: Store or module that published the event
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_version: int = 1
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    source: str
    payload: dict


class NoteUpserted(EventEnvelope):
    """Published when a note is inserted or replaced."""

    event_type: str = "notes.note.upserted"


class NoteDeleted(EventEnvelope):
    """Published when a note is removed."""

    event_type: str = "notes.note.deleted"
