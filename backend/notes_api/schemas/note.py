"""
Notes API: Pydantic Request/Response Schemas
=============================================

What:  Pydantic models defining the API contract between client and backend.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate the OpenAPI document.

Every response uses the same envelope:
    {"data": ..., "message": str | null, "errors": {field: [str]} | null}
List responses add "meta" with the pagination state.

Title rules (required, trimmed, max 255) are enforced by NoteStore, not here,
so the HTTP and programmatic paths share one set of messages.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

# Shared by the notes table, NoteStore and the client form; importing it pulls
# in no database code
TITLE_MAX_LENGTH = 255


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteIn(BaseModel):
    """Body of POST /notes and PUT /notes/{id}."""

    title: Optional[str] = Field(
        default=None,
        description="Note title (required, max 255 characters after trimming)",
        examples=["Mi primera nota"],
    )
    content: Optional[str] = Field(
        default=None,
        description="Free-form note body",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteOut(BaseModel):
    """Serialized Note."""

    id: int = Field(description="Note identifier")
    title: str
    content: Optional[str] = None
    created_at: datetime = Field(description="Creation timestamp (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last update timestamp (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; they were written as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class PageMeta(BaseModel):
    current_page: int
    last_page: int
    per_page: int
    total: int


class NoteEnvelope(BaseModel):
    data: NoteOut
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


class NoteListEnvelope(BaseModel):
    data: List[NoteOut]
    meta: PageMeta
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


class EmptyEnvelope(BaseModel):
    """Envelope for DELETE: data is always null."""

    data: None = None
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


class ErrorEnvelope(BaseModel):
    """
    What:  Error response shape for every failing request.

    Example:
        {
            "data": null,
            "message": "The given data was invalid.",
            "errors": {"title": ["The title field is required."]}
        }
    """

    data: None = None
    message: str = Field(description="Human-readable error description")
    errors: Dict[str, List[str]] = Field(description="Field name → messages")


class HealthData(BaseModel):
    db: str = Field(description="Database connectivity: ok or error")


class HealthEnvelope(BaseModel):
    data: HealthData
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None
