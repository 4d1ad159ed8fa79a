"""
Notes API: Routes Package
==========================

What:  HTTP route handlers that accept requests and return envelopes.

Route Inventory (mounted under API_PREFIX):
    - notes.py:   GET/POST /notes, GET/PUT/DELETE /notes/{id}
    - health.py:  GET /health

Routes stay thin: they pull values out of the request, call a service, and
wrap the result. Business rules live in services/.
"""
