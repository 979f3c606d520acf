"""
Mounjaro Tracker Backend — Middleware Package
===============================================

What:  Cross-cutting concerns applied to every request.
Why:   Keeps routing triage, tracing and abuse protection out of handlers.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Login Rate Limit] → [Edge Gate]
            → [GZip] → [CORS] → Route Handler

    Why this order:
    1. Request ID FIRST: every response, a 429 included, carries X-Request-ID
    2. Logging: sees the final status, including 429s and edge gate redirects
    3. Login rate limit: rejects credential stuffing before any handler work
    4. Edge gate: optimistic page triage, never touches the database
"""
