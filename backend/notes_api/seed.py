"""
Notes API: Sample Data Seeder
==============================

What:  Fills the notes table with sample notes for local development.
How:   Creates the table if needed, then inserts `count` generated notes and
       three fixed ones through NoteStore (same validation as the API).

Usage:
    notes-seed --count 15
    python -m notes_api.seed
"""

import argparse
import asyncio
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import async_session_factory, create_tables, dispose_engine
from notes_api.models.note import Note
from notes_api.services.note_store import note_store

logger = logging.getLogger(__name__)

FIXED_NOTES = [
    (
        "Mi primera nota",
        "Esta es una nota de prueba para verificar que el sistema funciona correctamente.",
    ),
    (
        "Lista de tareas",
        "- Completar la prueba técnica\n- Revisar el código\n- Hacer los tests\n- Crear el README",
    ),
    ("Recordatorio importante", None),
]


async def seed_notes(db: AsyncSession, count: int = 15) -> List[Note]:
    """Insert `count` generated notes followed by the fixed samples."""
    created = []
    for i in range(1, count + 1):
        created.append(
            await note_store.create(
                db,
                title=f"Sample note {i}",
                content=f"Generated content for sample note {i}.",
            )
        )
    for title, content in FIXED_NOTES:
        created.append(await note_store.create(db, title=title, content=content))
    return created


async def run(count: int) -> int:
    await create_tables()
    try:
        async with async_session_factory() as session:
            notes = await seed_notes(session, count=count)
            await session.commit()
    finally:
        await dispose_engine()
    logger.info("Seeded %d notes", len(notes))
    return len(notes)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Insert sample notes.")
    parser.add_argument("--count", type=int, default=15, help="generated notes (default: 15)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    asyncio.run(run(args.count))


if __name__ == "__main__":
    main()
