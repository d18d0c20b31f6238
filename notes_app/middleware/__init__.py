"""
Notes — Middleware Package
============================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logging and error bodies
    2. Logging: one access line with status and duration
    3. GZip / CORS: Starlette built-ins configured in main.py

    Responses travel back through the chain in reverse, which is where the
    request ID header is attached and the access line is written.
"""
