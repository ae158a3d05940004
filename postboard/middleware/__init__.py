# Middleware package init
"""
Postboard — Middleware Package
================================

What:  Cross-cutting concerns applied to requests.

Application Middleware (Starlette, every request):
    Request → [Request ID] → [Logging] → [Timeout] → [GZip] → [CORS] → Router

    - Request ID: correlation id stored in a ContextVar, echoed in X-Request-ID
    - Logging: method, path, status, duration per request
    - Timeout: requests running longer than REQUEST_TIMEOUT get a 504

Route Guards (FastAPI dependencies, per route, in this order):
    [validate_object_id] → [verify_token] → [require_admin / require_self...]
    → handler

    Each guard raises on failure, so the chain stops at the first guard
    that rejects the request and later guards never run.
"""
