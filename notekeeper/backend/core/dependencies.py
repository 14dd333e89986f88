"""
Service Wiring.

Builds the note store and service from configuration. Dependencies are
passed explicitly through constructors; this module is the only place that
decides which store implementation backs the application.
"""

from functools import lru_cache

from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.repositories.base import NoteStore
from notekeeper.backend.services.note import NoteService

logger = get_logger(__name__)


@lru_cache
def get_note_store(in_memory: bool = False) -> NoteStore:
    """
    Get the process-wide note store.

    One instance per kind, so every subscriber sees every write.

    Args:
        in_memory: Use a throwaway in-memory store instead of the database
    """
    if in_memory:
        from notekeeper.backend.repositories.memory import InMemoryNoteStore

        logger.debug("Using in-memory note store")
        return InMemoryNoteStore()

    from notekeeper.backend.core.database import get_session_factory
    from notekeeper.backend.repositories.note import SqlNoteStore

    return SqlNoteStore(get_session_factory())


def get_note_service(in_memory: bool = False) -> NoteService:
    """Build a NoteService over the configured store."""
    return NoteService(get_note_store(in_memory))
