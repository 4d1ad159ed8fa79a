"""
Notes API: Notes Route Handlers
================================

What:  REST endpoints for the notes resource.
How:   Extracts query/body/path values, delegates to NoteQueryService or
       NoteStore, wraps the result in the response envelope.
Who:   Called by the client list view and note form.

Endpoints (relative to API_PREFIX):
    GET    /notes?q=&page=   → 200 list envelope with meta
    POST   /notes            → 201 created note
    GET    /notes/{id}       → 200 note | 404
    PUT    /notes/{id}       → 200 note | 404 | 422
    DELETE /notes/{id}       → 200 data=null | 404

Errors are raised as NotesError subclasses and rendered by the global
handlers registered in main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import get_db_session
from notes_api.schemas.note import (
    EmptyEnvelope,
    ErrorEnvelope,
    NoteEnvelope,
    NoteIn,
    NoteListEnvelope,
    NoteOut,
    PageMeta,
)
from notes_api.services.note_query import note_query_service
from notes_api.services.note_store import note_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

NOT_FOUND_RESPONSE = {404: {"description": "Note not found", "model": ErrorEnvelope}}
VALIDATION_RESPONSE = {422: {"description": "Invalid note data", "model": ErrorEnvelope}}


@router.get(
    "/notes",
    response_model=NoteListEnvelope,
    responses={500: {"description": "Store unavailable", "model": ErrorEnvelope}},
    summary="List notes",
    description=(
        "Returns one page (10 notes) ordered newest first. `q` filters by a "
        "case-insensitive substring of the title."
    ),
)
async def list_notes(
    q: Optional[str] = Query(default=None, description="Title substring filter"),
    page: int = Query(default=1, description="Page number (values below 1 mean 1)"),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListEnvelope:
    result = await note_query_service.list(db=db, search=q, page=page)
    return NoteListEnvelope(
        data=[NoteOut.model_validate(note) for note in result.items],
        meta=PageMeta(
            current_page=result.current_page,
            last_page=result.last_page,
            per_page=result.per_page,
            total=result.total,
        ),
    )


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteEnvelope,
    responses=VALIDATION_RESPONSE,
    summary="Create a note",
)
async def create_note(
    payload: NoteIn,
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_store.create(db, title=payload.title, content=payload.content)
    return NoteEnvelope(
        data=NoteOut.model_validate(note),
        message="Note created successfully.",
    )


@router.get(
    "/notes/{note_id}",
    response_model=NoteEnvelope,
    responses=NOT_FOUND_RESPONSE,
    summary="Get a single note by ID",
)
async def show_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_store.read(db, note_id)
    return NoteEnvelope(data=NoteOut.model_validate(note))


@router.put(
    "/notes/{note_id}",
    response_model=NoteEnvelope,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE},
    summary="Update a note",
)
async def update_note(
    note_id: int,
    payload: NoteIn,
    db: AsyncSession = Depends(get_db_session),
) -> NoteEnvelope:
    note = await note_store.update(
        db, note_id, title=payload.title, content=payload.content
    )
    return NoteEnvelope(
        data=NoteOut.model_validate(note),
        message="Note updated successfully.",
    )


@router.delete(
    "/notes/{note_id}",
    response_model=EmptyEnvelope,
    responses=NOT_FOUND_RESPONSE,
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> EmptyEnvelope:
    await note_store.delete(db, note_id)
    return EmptyEnvelope(message="Note deleted successfully.")
