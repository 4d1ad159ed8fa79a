"""
Notes API: Services Layer
==========================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - note_store.py:  NoteStore, create/read/update/delete of single notes
    - note_query.py:  NoteQueryService, search + pagination of the list
    - pagination.py:  pure page-window and last-page arithmetic
"""
