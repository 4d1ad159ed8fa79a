"""
Notes API: Note Store Unit Tests
=================================

What:  Tests for NoteStore CRUD and input normalisation.
How:   Uses the mock DB session from conftest (no real database).

What we test:
    ✅ Title/content normalisation and the two title messages
    ✅ create() assigns equal timestamps and adds nothing on invalid input
    ✅ read()/update()/delete() raise NotFoundError for unknown ids
    ✅ update() keeps id and created_at, never moves updated_at backwards
    ✅ Driver errors become StoreUnavailableError
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from notes_api.exceptions import (
    ErrorKind,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from notes_api.models.note import Note
from notes_api.services.note_store import NoteStore, normalize_note_input


def _result_with(note):
    result = MagicMock()
    result.scalar_one_or_none.return_value = note
    return result


class TestNormalizeNoteInput:

    def test_strips_title_and_content(self):
        assert normalize_note_input("  Groceries  ", "  milk \n") == ("Groceries", "milk")

    def test_blank_content_becomes_none(self):
        assert normalize_note_input("A", "   ") == ("A", None)
        assert normalize_note_input("A", None) == ("A", None)

    @pytest.mark.parametrize("title", [None, "", "   ", "\t\n"])
    def test_missing_title(self, title):
        with pytest.raises(ValidationError) as exc_info:
            normalize_note_input(title, "body")
        assert exc_info.value.errors == {"title": ["The title field is required."]}
        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_title_at_limit_is_accepted(self):
        title, _ = normalize_note_input("x" * 255, None)
        assert len(title) == 255

    def test_title_over_limit(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_note_input("x" * 256, None)
        assert exc_info.value.field_message == (
            "The title field must not be greater than 255 characters."
        )

    def test_limit_applies_after_stripping(self):
        title, _ = normalize_note_input("  " + "x" * 255 + "  ", None)
        assert title == "x" * 255


class TestNoteStoreCreate:

    def setup_method(self):
        self.store = NoteStore()

    @pytest.mark.asyncio
    async def test_create_sets_equal_timestamps(self, mock_db_session):
        note = await self.store.create(mock_db_session, " Mi primera nota ", "Hola")

        assert note.title == "Mi primera nota"
        assert note.content == "Hola"
        assert note.created_at == note.updated_at
        assert note.created_at.tzinfo is not None
        mock_db_session.add.assert_called_once_with(note)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_title_adds_nothing(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.store.create(mock_db_session, "", "content")

        mock_db_session.add.assert_not_called()
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_flush_failure_is_store_unavailable(self, mock_db_session):
        mock_db_session.flush = AsyncMock(side_effect=SQLAlchemyError("connection lost"))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await self.store.create(mock_db_session, "Title", None)

        assert exc_info.value.context["error_type"] == "SQLAlchemyError"
        # The driver text never reaches the client-facing message
        assert "connection lost" not in exc_info.value.message


class TestNoteStoreRead:

    def setup_method(self):
        self.store = NoteStore()

    @pytest.mark.asyncio
    async def test_read_existing(self, mock_db_session, sample_note_data):
        stored = Note(**sample_note_data)
        mock_db_session.execute.return_value = _result_with(stored)

        assert await self.store.read(mock_db_session, 7) is stored

    @pytest.mark.asyncio
    async def test_read_missing(self, mock_db_session):
        mock_db_session.execute.return_value = _result_with(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.store.read(mock_db_session, 999)

        assert exc_info.value.resource_id == 999
        assert exc_info.value.errors == {"resource": ["Resource not found"]}

    @pytest.mark.asyncio
    async def test_read_driver_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("refused"))
        )

        with pytest.raises(StoreUnavailableError) as exc_info:
            await self.store.read(mock_db_session, 1)
        assert exc_info.value.context["note_id"] == 1


class TestNoteStoreUpdate:

    def setup_method(self):
        self.store = NoteStore()

    @pytest.mark.asyncio
    async def test_update_keeps_identity(self, mock_db_session, sample_note_data):
        stored = Note(**sample_note_data)
        mock_db_session.execute.return_value = _result_with(stored)

        note = await self.store.update(mock_db_session, 7, "Editada", "  ")

        assert note.id == 7
        assert note.title == "Editada"
        assert note.content is None
        assert note.created_at == sample_note_data["created_at"]
        assert note.updated_at > note.created_at
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_updated_at_never_before_created_at(self, mock_db_session, sample_note_data):
        future = datetime.now(timezone.utc) + timedelta(days=1)
        stored = Note(**{**sample_note_data, "created_at": future, "updated_at": future})
        mock_db_session.execute.return_value = _result_with(stored)

        note = await self.store.update(mock_db_session, 7, "Title", None)

        assert note.updated_at >= note.created_at

    @pytest.mark.asyncio
    async def test_naive_created_at_is_treated_as_utc(self, mock_db_session, sample_note_data):
        naive = sample_note_data["created_at"].replace(tzinfo=None)
        stored = Note(**{**sample_note_data, "created_at": naive, "updated_at": naive})
        mock_db_session.execute.return_value = _result_with(stored)

        note = await self.store.update(mock_db_session, 7, "Title", None)

        assert note.updated_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_update_missing(self, mock_db_session):
        mock_db_session.execute.return_value = _result_with(None)

        with pytest.raises(NotFoundError):
            await self.store.update(mock_db_session, 42, "Title", None)
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_update_leaves_note_untouched(self, mock_db_session, sample_note_data):
        stored = Note(**sample_note_data)
        mock_db_session.execute.return_value = _result_with(stored)

        with pytest.raises(ValidationError):
            await self.store.update(mock_db_session, 7, "   ", "new content")

        assert stored.title == "Mi primera nota"
        assert stored.content == "Esta es una nota de prueba."
        mock_db_session.flush.assert_not_awaited()


class TestNoteStoreDelete:

    def setup_method(self):
        self.store = NoteStore()

    @pytest.mark.asyncio
    async def test_delete_existing(self, mock_db_session, sample_note_data):
        stored = Note(**sample_note_data)
        mock_db_session.execute.return_value = _result_with(stored)

        await self.store.delete(mock_db_session, 7)

        mock_db_session.delete.assert_awaited_once_with(stored)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_db_session):
        mock_db_session.execute.return_value = _result_with(None)

        with pytest.raises(NotFoundError):
            await self.store.delete(mock_db_session, 999)
        mock_db_session.delete.assert_not_awaited()
