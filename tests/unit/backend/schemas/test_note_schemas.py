"""Unit tests for the Note and NoteOrder models."""

import pytest
from pydantic import ValidationError

from notekeeper.backend.schemas.note import (
    DEFAULT_ORDER,
    NOTE_COLORS,
    RED_ORANGE,
    Note,
    NoteOrder,
    OrderDirection,
    OrderKey,
)


class TestNote:
    def test_new_note_defaults(self):
        note = Note(title="t", content="c")

        assert note.is_new
        assert note.timestamp == 0
        assert note.color == RED_ORANGE

    def test_persisted_note_is_not_new(self):
        assert not Note(id=1, title="t", content="c").is_new

    def test_is_frozen(self):
        note = Note(title="t", content="c")
        with pytest.raises(ValidationError):
            note.title = "changed"

    def test_palette_has_five_distinct_colors(self):
        assert len(set(NOTE_COLORS)) == 5
        assert NOTE_COLORS[0] == 0xFFFFAB91


class TestNoteOrder:
    def test_equality_is_key_and_direction(self):
        a = NoteOrder(key=OrderKey.TITLE, direction=OrderDirection.ASCENDING)
        b = NoteOrder(key="title", direction="ascending")

        assert a == b
        assert a != a.with_direction(OrderDirection.DESCENDING)

    def test_with_helpers_return_copies(self):
        changed = DEFAULT_ORDER.with_key(OrderKey.COLOR)

        assert changed == NoteOrder(key=OrderKey.COLOR, direction=OrderDirection.DESCENDING)
        assert DEFAULT_ORDER.key is OrderKey.DATE

    def test_default_is_date_descending(self):
        assert str(DEFAULT_ORDER) == "date/descending"

    def test_rejects_unknown_key(self):
        with pytest.raises(ValidationError):
            NoteOrder(key="size", direction="ascending")
