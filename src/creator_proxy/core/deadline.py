"""core.deadline

Overall time budget for a multi-stage chain. The remaining budget is handed
to each provider call as its timeout, so one hung stage cannot stall the
whole pipeline past the deadline.
"""

from __future__ import annotations

import time
from collections.abc import Callable


class Deadline:
    """A point in monotonic time after which no new work should start."""

    def __init__(self, seconds: float | None, *, clock: Callable[[], float] | None = None) -> None:
        if seconds is not None and seconds <= 0:
            raise ValueError('deadline must be positive')
        self._clock = clock or time.monotonic
        self._expires_at: float | None = None if seconds is None else self._clock() + seconds

    @classmethod
    def unbounded(cls) -> Deadline:
        return cls(None)

    @property
    def bounded(self) -> bool:
        return self._expires_at is not None

    def remaining(self) -> float | None:
        """Seconds left (never negative), or None when there is no deadline."""
        if self._expires_at is None:
            return None
        return max(self._expires_at - self._clock(), 0.0)

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<Deadline remaining={self.remaining()!r}>'
