# Middleware package init
"""
MovieLibrary Backend: Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Correlation ID] → [Access Logging] → [GZip] → [CORS] → Route Handler

    The correlation ID is resolved first so the access log line and any
    error body of the same request carry it.
"""
