"""
Notes API: Note Form State
===========================

What:  Create/edit form for a single note.
How:   Holds the field values and per-field errors, validates locally before
       submitting, and maps server validation errors back onto fields.
       A failed submit never clears what the user typed.
"""

import logging
from typing import Any, Dict, Optional

from notes_api.client.api_client import ApiClientError, NotesClient
from notes_api.schemas.note import TITLE_MAX_LENGTH

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Could not load the note."
SAVE_ERROR_MESSAGE = "Could not save the note."


class NoteForm:
    def __init__(self, client: NotesClient, note_id: Optional[int] = None):
        self.client = client
        self.note_id = note_id
        self.title = ""
        self.content = ""
        self.errors: Dict[str, str] = {}
        self.error_message = ""
        self.saving = False

    @property
    def is_edit(self) -> bool:
        return self.note_id is not None

    async def load(self) -> bool:
        """Fill the fields from the stored note (edit mode only)."""
        if not self.is_edit:
            return True
        try:
            envelope = await self.client.get_note(self.note_id)
        except ApiClientError as e:
            logger.warning("Loading note %s failed: %s", self.note_id, e.message)
            self.error_message = LOAD_ERROR_MESSAGE
            return False
        note = envelope["data"]
        self.title = note.get("title") or ""
        self.content = note.get("content") or ""
        return True

    def set_field(self, name: str, value: str) -> None:
        if name not in ("title", "content"):
            raise ValueError(f"Unknown field: {name}")
        setattr(self, name, value)
        self.errors.pop(name, None)

    def validate(self) -> bool:
        errors = {}
        if not self.title.strip():
            errors["title"] = "The title is required."
        elif len(self.title.strip()) > TITLE_MAX_LENGTH:
            errors["title"] = f"The title must not exceed {TITLE_MAX_LENGTH} characters."
        self.errors = errors
        return not errors

    async def submit(self) -> Optional[Dict[str, Any]]:
        """
        Validate and save.

        Returns:
            The saved note, or None if validation or the request failed.
        """
        if not self.validate():
            return None

        title = self.title.strip()
        content = self.content.strip() or None
        self.saving = True
        self.error_message = ""
        try:
            if self.is_edit:
                envelope = await self.client.update_note(self.note_id, title, content)
            else:
                envelope = await self.client.create_note(title, content)
        except ApiClientError as e:
            logger.warning("Saving note failed: %s", e.message)
            for field, messages in e.errors.items():
                if field in ("title", "content") and messages:
                    self.errors[field] = messages[0]
            self.error_message = SAVE_ERROR_MESSAGE
            return None
        finally:
            self.saving = False

        note = envelope["data"]
        self.note_id = note["id"]
        return note
