"""
Notes API: Note Store (CRUD over the notes table)
==================================================

What:  Create, read, update and delete single Note records.
How:   Each method receives the request's AsyncSession, works on one row and
       flushes; the session dependency commits or rolls back the transaction.
Who:   Called by the notes route handlers and by the seed command.

Input rules (applied by create and update):
    - title is stripped; it must be non-empty and at most 255 characters
    - content is stripped; an empty result is stored as NULL

Error Handling Strategy:
    Business rule violations raise ValidationError (422) before anything is
    added to the session. Missing ids raise NotFoundError (404). Driver
    failures are wrapped in StoreUnavailableError (500) with the original
    error type kept in `context` for the logs.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from notes_api.models.note import Note, utcnow
from notes_api.schemas.note import TITLE_MAX_LENGTH

logger = logging.getLogger(__name__)

# Errors meaning "the database did not answer", as opposed to bugs
STORE_ERRORS = (SQLAlchemyError, OSError)


def normalize_note_input(
    title: Optional[str], content: Optional[str]
) -> Tuple[str, Optional[str]]:
    """
    Strip and validate user input for a note.

    Returns:
        (title, content) ready to store.

    Raises:
        ValidationError: title missing, blank, or longer than 255 characters.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("The title field is required.", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"The title field must not be greater than {TITLE_MAX_LENGTH} characters.",
            field="title",
        )

    if content is not None:
        content = content.strip() or None

    return title, content


class NoteStore:
    """
    Persistence of Note records.

    Responsibilities:
        - create(): validate, insert, assign id and timestamps
        - read():   fetch by id or raise NotFoundError
        - update(): validate, change title/content, refresh updated_at
        - delete(): hard delete by id
    """

    async def create(
        self,
        db: AsyncSession,
        title: Optional[str],
        content: Optional[str] = None,
    ) -> Note:
        """
        Insert a new note.

        created_at and updated_at come from the same clock reading, so a
        freshly created note always has created_at == updated_at.

        Raises:
            ValidationError: invalid title (nothing is added to the session)
            StoreUnavailableError: insert failed
        """
        title, content = normalize_note_input(title, content)
        now = utcnow()
        note = Note(title=title, content=content, created_at=now, updated_at=now)

        try:
            db.add(note)
            await db.flush()  # Assigns the autoincrement id
        except STORE_ERRORS as e:
            logger.error("Database error creating note: %s", str(e))
            raise StoreUnavailableError(context={"error_type": type(e).__name__}) from e

        logger.info("Note created: id=%s", note.id)
        return note

    async def read(self, db: AsyncSession, note_id: int) -> Note:
        """
        Fetch a note by id.

        Raises:
            NotFoundError: no note with that id (→ 404)
            StoreUnavailableError: query failed (→ 500)
        """
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one_or_none()
        except STORE_ERRORS as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise StoreUnavailableError(
                context={"note_id": note_id, "error_type": type(e).__name__}
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def update(
        self,
        db: AsyncSession,
        note_id: int,
        title: Optional[str],
        content: Optional[str] = None,
    ) -> Note:
        """
        Replace title and content of an existing note.

        id and created_at are never touched; updated_at becomes "now", and
        never earlier than created_at even if the clock went backwards.

        Raises:
            NotFoundError, ValidationError, StoreUnavailableError
        """
        note = await self.read(db, note_id)
        title, content = normalize_note_input(title, content)

        note.title = title
        note.content = content
        note.updated_at = max(utcnow(), _as_utc(note.created_at))

        try:
            await db.flush()
        except STORE_ERRORS as e:
            logger.error("Database error updating note %s: %s", note_id, str(e))
            raise StoreUnavailableError(
                context={"note_id": note_id, "error_type": type(e).__name__}
            ) from e

        logger.info("Note updated: id=%s", note.id)
        return note

    async def delete(self, db: AsyncSession, note_id: int) -> None:
        """
        Permanently remove a note.

        Raises:
            NotFoundError, StoreUnavailableError
        """
        note = await self.read(db, note_id)
        try:
            await db.delete(note)
            await db.flush()
        except STORE_ERRORS as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise StoreUnavailableError(
                context={"note_id": note_id, "error_type": type(e).__name__}
            ) from e

        logger.info("Note deleted: id=%s", note_id)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes for values written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ── Singleton Instance ────────────────────────────────────────────────────
# NoteStore is stateless; every call receives its own session
note_store = NoteStore()
