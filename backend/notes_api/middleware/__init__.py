"""
Notes API: Middleware Package
==============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so the access log and error handlers can read it
    - Logging measures everything below it, including error handling
"""
