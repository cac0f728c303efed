"""
Middleware Module
Request tracing for the matching API

CorrelationIdMiddleware (asgi-correlation-id) reads or generates an
X-Request-ID per request; get_correlation_id() exposes it to log processors.
"""

from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id

__all__ = ["CorrelationIdMiddleware", "get_correlation_id"]


def get_correlation_id() -> str:
    """Current request's correlation id, or 'none' outside a request."""
    return correlation_id.get() or 'none'
