"""
Notes API: List View State
===========================

What:  The state and behaviour of the notes list page: search box, current
       page, loaded items, pagination control and delete action.
How:   One read-through query keyed by (query, page). Every issued query gets
       a sequence token; a response is applied only if its token is newer
       than the last applied one, so a slow stale response never overwrites
       newer results.

Search input is debounced: each keystroke cancels the pending search task
and schedules a new one `debounce_seconds` later. A new search always
starts again at page 1.

After a delete the current page is reloaded; if it came back empty and lies
past the new last page, the view moves to that last page.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from notes_api.client.api_client import ApiClientError, NotesClient
from notes_api.services.pagination import PaginationWindow, build_window

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Could not load notes."
DELETE_ERROR_MESSAGE = "Could not delete the note."


class NotesListView:
    """
    Args:
        client:           NotesClient (or anything with the same coroutines)
        debounce_seconds: Quiet period after the last keystroke
        max_window:       Numbered buttons in the pagination window
        fixed_start:      Pin the pagination window to 1..max_window
    """

    def __init__(
        self,
        client: NotesClient,
        debounce_seconds: float = 0.3,
        max_window: int = 5,
        fixed_start: bool = False,
    ):
        self.client = client
        self.debounce_seconds = debounce_seconds
        self.max_window = max_window
        self.fixed_start = fixed_start

        self.search_input = ""
        self.query = ""
        self.page = 1
        self.items: List[Dict[str, Any]] = []
        self.meta: Optional[Dict[str, int]] = None
        self.loading = False
        self.error_message = ""

        self._issued = 0
        self._applied = 0
        self._search_task: Optional[asyncio.Task] = None

    # ── Derived state ─────────────────────────────────────────────────────

    @property
    def pagination(self) -> PaginationWindow:
        if not self.meta:
            return build_window(self.page, 0, self.max_window, self.fixed_start)
        return build_window(
            self.meta["current_page"],
            self.meta["last_page"],
            self.max_window,
            self.fixed_start,
        )

    @property
    def is_empty(self) -> bool:
        return not self.loading and not self.error_message and not self.items

    # ── Loading ───────────────────────────────────────────────────────────

    async def load(self) -> bool:
        """
        Fetch (query, page) and apply the result if it is still the newest.

        Returns:
            True if this call's response was applied.
        """
        self._issued += 1
        token = self._issued
        query, page = self.query, self.page
        self.loading = True
        self.error_message = ""

        try:
            envelope = await self.client.list_notes(q=query, page=page)
        except ApiClientError as e:
            logger.warning("Loading notes failed (q=%r, page=%d): %s", query, page, e.message)
            if token <= self._applied:
                return False
            self._applied = token
            self.error_message = LOAD_ERROR_MESSAGE
            self._finish(token)
            return False

        if token <= self._applied:
            logger.debug("Discarding stale response #%d (newest applied #%d)", token, self._applied)
            return False

        self._applied = token
        self.items = envelope["data"]
        self.meta = envelope["meta"]
        self._finish(token)
        return True

    def _finish(self, token: int) -> None:
        if token == self._issued:
            self.loading = False

    # ── Search ────────────────────────────────────────────────────────────

    def set_search_input(self, text: str) -> asyncio.Task:
        """Record a keystroke and (re)schedule the debounced search."""
        self.search_input = text
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = asyncio.ensure_future(self._debounced_search(text))
        return self._search_task

    async def _debounced_search(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self.query = text.strip()
        self.page = 1
        await self.load()

    async def flush_search(self) -> None:
        """Wait for the pending debounced search, if any."""
        task = self._search_task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    # ── Navigation ────────────────────────────────────────────────────────

    async def go_to_page(self, page: int) -> bool:
        target = self.pagination.target(page) if self.meta else max(1, page)
        self.page = target
        return await self.load()

    async def next_page(self) -> bool:
        window = self.pagination
        if window.next_disabled:
            return False
        return await self.go_to_page(window.next_target)

    async def previous_page(self) -> bool:
        window = self.pagination
        if window.previous_disabled:
            return False
        return await self.go_to_page(window.previous_target)

    # ── Actions ───────────────────────────────────────────────────────────

    async def delete(self, note_id: int) -> bool:
        """
        Delete a note, then reload the current page.

        If the page is now empty and beyond the last page (the deleted note
        was the only one on it), step back to the new last page.
        """
        try:
            await self.client.delete_note(note_id)
        except ApiClientError as e:
            logger.warning("Deleting note %s failed: %s", note_id, e.message)
            self.error_message = DELETE_ERROR_MESSAGE
            return False

        await self.load()
        if self.meta and not self.items and self.page > self.meta["last_page"]:
            self.page = self.meta["last_page"]
            await self.load()
        return True
