"""
Invoice Manager Backend — Middleware Package
==============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID
    3. GZip / CORS: Applied by FastAPI's bundled middleware

    Responses travel back through the chain in reverse, so the request ID
    header is attached and the logged duration covers the whole handler.
"""
