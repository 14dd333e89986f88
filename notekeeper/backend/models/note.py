"""
Note Model.

Database row backing the Note schema.
"""

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.backend.models.base import Base


class NoteRecord(Base):
    """
    Note database model.

    The integer primary key is assigned by the database on insert, which is
    what gives a new note its id. Ids are never handed out twice, even after
    the highest one is deleted, so restoring a deleted note cannot land on a
    newer note. Colors are ARGB values above 2**31, hence BigInteger.
    """

    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    color: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, title={self.title!r})>"
