# Middleware package init
"""
Journey Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs, response header and error bodies
    2. Logging: method, path, status and duration, tagged with the request ID

    Background tasks spawned by a handler inherit the request ID through the
    copied contextvars, so the owner-email logs stay correlated.
"""
