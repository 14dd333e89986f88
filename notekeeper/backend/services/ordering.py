"""
Note Ordering.

Comparator over notes for a NoteOrder, and the stable sort built on it.

Descending negates the natural comparison instead of using a separate key,
so notes that tie under one direction tie under the other. There is no
secondary key: tied notes keep the order they arrived in (usually storage
order), which carries no meaning of its own.
"""

from collections.abc import Iterable
from functools import cmp_to_key

from notekeeper.backend.schemas.note import Note, NoteOrder, OrderDirection, OrderKey


def _natural(a: Note, b: Note, key: OrderKey) -> int:
    if key is OrderKey.TITLE:
        left, right = a.title, b.title
    elif key is OrderKey.DATE:
        left, right = a.timestamp, b.timestamp
    else:
        left, right = a.color, b.color
    return (left > right) - (left < right)


def compare_notes(a: Note, b: Note, order: NoteOrder) -> int:
    """
    Compare two notes under an order.

    Returns:
        Negative if a sorts first, zero on a tie, positive if b sorts first
    """
    result = _natural(a, b, order.key)
    if order.direction is OrderDirection.DESCENDING:
        return -result
    return result


def sort_notes(notes: Iterable[Note], order: NoteOrder) -> list[Note]:
    """Return a new list of the notes sorted under order (stable)."""
    return sorted(notes, key=cmp_to_key(lambda a, b: compare_notes(a, b, order)))
