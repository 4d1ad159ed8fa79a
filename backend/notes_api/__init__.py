"""
Notes API: Application Package
===============================

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Store, Query, Paging)   │  ← Business rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    client/ is the other side of the wire: an HTTP wrapper and the view
    state of the list page and the note form.
"""

__version__ = "1.0.0"
