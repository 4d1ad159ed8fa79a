"""
Notes API: Note SQLAlchemy Model
=================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteStore and NoteQueryService, and by Alembic.

Table Design:
    - Integer autoincrement primary key, assigned on flush, never reused by the app
    - title: VARCHAR(255), stored trimmed
    - content: TEXT, NULL when the note has no body
    - created_at / updated_at: timezone-aware UTC, both set from one clock
      reading at creation; updated_at refreshed by every update

    Index on created_at DESC serves the list query's ORDER BY.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base
from notes_api.schemas.note import TITLE_MAX_LENGTH


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A single note.

    Lifecycle:
        1. Created by NoteStore.create (id, created_at, updated_at assigned)
        2. Mutated only by NoteStore.update (title, content, updated_at)
        3. Removed by NoteStore.delete (hard delete)

    Query Patterns:
        - List: WHERE lower(title) LIKE :q ORDER BY created_at DESC, id DESC
          LIMIT 10 OFFSET :n
        - Single note: WHERE id = :id (primary key)
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    content: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Stored in UTC; conversion to local time happens in the client
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
