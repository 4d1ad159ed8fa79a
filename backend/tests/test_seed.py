"""Tests for the sample data seeder."""

import pytest

from notes_api.seed import FIXED_NOTES, run, seed_notes
from notes_api.services.note_query import NoteQueryService


class TestSeed:

    @pytest.mark.asyncio
    async def test_seed_notes(self, db_session):
        notes = await seed_notes(db_session, count=4)

        assert len(notes) == 4 + len(FIXED_NOTES)
        assert [n.title for n in notes[-3:]] == [t for t, _ in FIXED_NOTES]
        assert notes[-1].content is None
        assert all(n.created_at == n.updated_at for n in notes)

    @pytest.mark.asyncio
    async def test_run_commits(self, db_tables):
        assert await run(2) == 2 + len(FIXED_NOTES)

        from notes_api.database import async_session_factory

        async with async_session_factory() as session:
            page = await NoteQueryService().list(session)
        assert page.total == 5
        assert page.items[0].title == "Recordatorio importante"
