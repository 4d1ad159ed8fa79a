"""
Notes API: List Query Service
==============================

What:  Returns one page of notes, optionally filtered by a title substring,
       together with the pagination metadata.
Who:   Called by GET /notes.

Contract:
    list(db, search, page) -> NotePage

    - search: stripped; None/"" means no filter, otherwise a case-insensitive
      substring match on title (LIKE wildcards in the input match literally)
    - order:  created_at DESC, then id DESC, so equal timestamps still have
      one deterministic order
    - page:   clamped to >= 1; a page past the end yields no items, echoes the
      requested page as current_page and reports the true last_page
    - total:  number of eligible notes; last_page = max(1, ceil(total / 10))

Query plan:
    SELECT count(*) FROM notes WHERE lower(title) LIKE lower(:q)
    SELECT * FROM notes WHERE lower(title) LIKE lower(:q)
        ORDER BY created_at DESC, id DESC LIMIT 10 OFFSET (page - 1) * 10
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import StoreUnavailableError
from notes_api.models.note import Note
from notes_api.services.note_store import STORE_ERRORS
from notes_api.services.pagination import last_page_for

logger = logging.getLogger(__name__)

PER_PAGE = 10


@dataclass
class NotePage:
    """One page of eligible notes plus pagination state (not persisted)."""

    items: List[Note]
    current_page: int
    last_page: int
    per_page: int
    total: int


def normalize_search(search: Optional[str]) -> Optional[str]:
    if search is None:
        return None
    return search.strip() or None


class NoteQueryService:
    """Read-only listing of notes."""

    def __init__(self, per_page: int = PER_PAGE):
        self.per_page = per_page

    async def list(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        page: int = 1,
    ) -> NotePage:
        """
        List eligible notes for one page.

        Args:
            db:     Async database session
            search: Optional title substring
            page:   Requested page (values below 1 are treated as 1)

        Returns:
            NotePage with items newest first.

        Raises:
            StoreUnavailableError: either query failed; no partial page is returned
        """
        current_page = max(1, page)
        search = normalize_search(search)

        count_query = select(func.count()).select_from(Note)
        page_query = select(Note)
        if search is not None:
            condition = Note.title.icontains(search, autoescape=True)
            count_query = count_query.where(condition)
            page_query = page_query.where(condition)

        try:
            total = (await db.execute(count_query)).scalar() or 0
            last_page = last_page_for(total, self.per_page)

            items: List[Note] = []
            if current_page <= last_page and total:
                result = await db.execute(
                    page_query.order_by(Note.created_at.desc(), Note.id.desc())
                    .limit(self.per_page)
                    .offset((current_page - 1) * self.per_page)
                )
                items = list(result.scalars().all())
        except STORE_ERRORS as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise StoreUnavailableError(
                context={"search": search, "page": page, "error_type": type(e).__name__}
            ) from e

        logger.debug(
            "Listed notes: search=%r page=%d total=%d items=%d",
            search, current_page, total, len(items),
        )
        return NotePage(
            items=items,
            current_page=current_page,
            last_page=last_page,
            per_page=self.per_page,
            total=total,
        )


note_query_service = NoteQueryService()
