import time
from typing import Callable, Optional


class Deadline:
    """Round deadline measured on a monotonic clock.

    The engine blocks on its inbox for at most ``remaining()`` seconds, so
    resetting the deadline never leaves a pending timer behind.
    """

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at: Optional[float] = None
        self.budget = 0.0
        self.reset(seconds)

    def reset(self, seconds: float) -> None:
        self.budget = seconds
        self._expires_at = self._clock() + seconds

    def stop(self) -> None:
        self._expires_at = None

    @property
    def stopped(self) -> bool:
        return self._expires_at is None

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0
