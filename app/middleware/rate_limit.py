"""Per-client rate limiting.

Fixed-window counters keyed by client address and rule, held in process
memory. The tightest rule guards the Unsplash proxy, whose upstream quota is
shared by every user of the deployment. Session routes under ``/auth/``,
``/health`` and ``/static`` are never limited.
"""

import re
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.observability import get_logger

log = get_logger(__name__)

EXEMPT_PREFIXES = ("/static", "/health", "/auth/")


@dataclass
class RateLimitRule:
    """Allow ``requests`` per ``window_seconds`` on paths matching ``path_pattern``.

    A rule without a pattern is the catch-all default.
    """

    requests: int
    window_seconds: int
    path_pattern: Optional[str] = None
    _regex: Optional[re.Pattern] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.path_pattern:
            self._regex = re.compile(self.path_pattern)

    @property
    def key(self) -> str:
        return self.path_pattern or "default"

    def matches(self, path: str) -> bool:
        if self._regex is None:
            return True
        return self._regex.match(path) is not None


@dataclass
class Window:
    count: int = 0
    started_at: float = 0.0


class RateLimitStore:
    """In-memory window counters for a single process."""

    def __init__(self, sweep_interval: int = 60):
        self._windows: dict[tuple[str, str], Window] = defaultdict(Window)
        self._sweep_interval = sweep_interval
        self._last_sweep = time.time()

    def _sweep(self, now: float, max_age: int) -> None:
        if now - self._last_sweep < self._sweep_interval:
            return
        stale = [k for k, w in self._windows.items() if now - w.started_at > max_age]
        for k in stale:
            del self._windows[k]
        self._last_sweep = now

    def hit(self, client_id: str, rule_key: str, limit: int, window: int) -> tuple[bool, int, int]:
        """Count one request.

        Returns:
            (allowed, remaining, reset_at) where reset_at is a unix timestamp.
        """
        now = time.time()
        self._sweep(now, window * 2)

        entry = self._windows[(client_id, rule_key)]
        if now - entry.started_at >= window:
            entry.count = 0
            entry.started_at = now

        reset_at = int(entry.started_at + window)
        if entry.count >= limit:
            return False, 0, reset_at

        entry.count += 1
        return True, max(0, limit - entry.count), reset_at


DEFAULT_RULES = [
    RateLimitRule(requests=30, window_seconds=60, path_pattern=r"^/api/unsplash"),
    RateLimitRule(requests=120, window_seconds=60, path_pattern=r"^/api/"),
    RateLimitRule(requests=240, window_seconds=60),
]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed their rule with 429 and X-RateLimit-* headers."""

    def __init__(
        self,
        app,
        rules: Optional[list[RateLimitRule]] = None,
        store: Optional[RateLimitStore] = None,
        enabled: bool = True,
    ):
        super().__init__(app)
        self.rules = rules if rules is not None else DEFAULT_RULES
        self.store = store if store is not None else RateLimitStore()
        self.enabled = enabled

    def _client_id(self, request: Request) -> str:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        if request.client:
            return request.client.host
        return "unknown"

    def _rule_for(self, path: str) -> RateLimitRule:
        """First rule whose pattern matches, else the catch-all."""
        fallback = None
        for rule in self.rules:
            if rule.path_pattern is None:
                fallback = rule
            elif rule.matches(path):
                return rule
        return fallback or RateLimitRule(requests=240, window_seconds=60)

    @staticmethod
    def _with_headers(response: Response, limit: int, remaining: int, reset_at: int) -> Response:
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        response.headers["X-RateLimit-Reset"] = str(reset_at)
        return response

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if not self.enabled or path.startswith(EXEMPT_PREFIXES):
            return await call_next(request)

        client_id = self._client_id(request)
        rule = self._rule_for(path)
        allowed, remaining, reset_at = self.store.hit(
            client_id, rule.key, rule.requests, rule.window_seconds
        )

        if not allowed:
            retry_after = max(0, reset_at - int(time.time()))
            log.warning("Rate limit hit by {} on {}", client_id, path)
            response = JSONResponse(
                status_code=429,
                content={"error": "Too many requests", "retry_after": retry_after},
            )
            response.headers["Retry-After"] = str(retry_after)
            return self._with_headers(response, rule.requests, remaining, reset_at)

        response = await call_next(request)
        return self._with_headers(response, rule.requests, remaining, reset_at)
