"""
Notes API: Client Package
==========================

What:  The consumer side of the API.

Module Inventory:
    - api_client.py: NotesClient, async httpx wrapper for every endpoint
    - list_view.py:  NotesListView, list page state (search, paging, delete)
    - note_form.py:  NoteForm, create/edit form state
"""
