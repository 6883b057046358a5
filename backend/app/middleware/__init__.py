"""
VideoTube Backend - Middleware Package
========================================

Cross-cutting concerns applied to every request.

Middleware chain (outermost first):
    Request → [Request ID] → [Rate Limit] → [Logging] → [CORS] → [GZip] → Route

    The request ID wraps everything, so a 429 from the limiter carries the
    ID in its body and X-Request-ID header like any other error. Rate
    limiting runs before logging and routing.
"""
