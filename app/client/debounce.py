"""Debounced search input.

``Debouncer`` is the live form: each push cancels the pending call and
schedules a new one after the quiet period. ``debounce`` is the same rule
applied to a recorded stream of timestamped inputs.
"""

import asyncio
import enum
from typing import Awaitable, Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")

SEARCH_QUIET_PERIOD = 0.35
MIN_SEARCH_LENGTH = 2


class Debouncer(Generic[T]):
    def __init__(self, quiet_period: float, callback: Callable[[T], Awaitable[None]]):
        self.quiet_period = quiet_period
        self.callback = callback
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def push(self, value: T) -> None:
        """Replace any scheduled call with one for ``value``."""
        self.cancel()
        self._pending = asyncio.create_task(self._fire_later(value))

    def cancel(self) -> None:
        if self.pending:
            self._pending.cancel()
        self._pending = None

    async def wait(self) -> None:
        """Block until the scheduled call, if any, has run."""
        while self._pending is not None:
            task = self._pending
            await asyncio.wait({task})
            if self._pending is task:
                if not task.cancelled():
                    task.result()
                return

    async def _fire_later(self, value: T) -> None:
        await asyncio.sleep(self.quiet_period)
        await self.callback(value)


def debounce(events: Iterable[tuple[float, T]], quiet_period: float) -> list[tuple[float, T]]:
    """Return the (fire_time, value) calls a debouncer makes for ``events``.

    An input fires ``quiet_period`` after it arrives unless another input
    arrives before then.
    """
    ordered = sorted(events, key=lambda e: e[0])
    fired = []
    for i, (at, value) in enumerate(ordered):
        deadline = at + quiet_period
        if i + 1 < len(ordered) and ordered[i + 1][0] < deadline:
            continue
        fired.append((deadline, value))
    return fired


class QueryAction(enum.Enum):
    BROWSE = "browse"
    IGNORE = "ignore"
    SEARCH = "search"


def classify_query(text: str) -> tuple[QueryAction, str]:
    """Decide what a settled search box value should do.

    Empty goes back to letter browsing, a single character is ignored,
    anything longer is a name search.
    """
    q = text.strip()
    if not q:
        return QueryAction.BROWSE, q
    if len(q) < MIN_SEARCH_LENGTH:
        return QueryAction.IGNORE, q
    return QueryAction.SEARCH, q
