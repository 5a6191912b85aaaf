# Middleware package init
"""
Ouderschaps API: Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order of execution):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    Rate limiting runs first so abusive clients are rejected before anything
    else happens. The request id is set before the access log line is
    written, so both share the same id.
"""
