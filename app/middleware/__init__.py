"""HTTP middleware."""

from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["RateLimitMiddleware", "RequestLoggingMiddleware"]
