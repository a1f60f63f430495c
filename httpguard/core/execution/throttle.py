"""Notification throttling for httpguard.

Keeps a time-bounded record of recently reported failure keys so the same
failure is not presented repeatedly.
"""

import time
from typing import Callable, Dict, Hashable

DEFAULT_THROTTLE_MS = 1000
# Entries are kept this many throttle intervals before being pruned
EXPIRY_MULTIPLIER = 5


class NotificationThrottle:
    """Fixed-window deduplication of failure notifications.

    A key is suppressed for ``throttle_ms`` after its first report. Suppressed
    duplicates are dropped and do not refresh the window. Entries older than
    ``EXPIRY_MULTIPLIER * throttle_ms`` are pruned on access.
    """

    def __init__(
        self,
        throttle_ms: float = DEFAULT_THROTTLE_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the throttle.

        Args:
            throttle_ms: Suppression window per key
            clock: Monotonic clock returning seconds
        """
        self.throttle_ms = throttle_ms
        self._clock = clock
        self._reported: Dict[Hashable, float] = {}

    def should_notify(self, key: Hashable) -> bool:
        """Record ``key`` and return True unless it was reported within the window."""
        now = self._clock()
        self._prune(now)

        reported_at = self._reported.get(key)
        if reported_at is not None and (now - reported_at) * 1000 < self.throttle_ms:
            return False

        self._reported[key] = now
        return True

    def _prune(self, now: float) -> None:
        expiry_s = self.throttle_ms * EXPIRY_MULTIPLIER / 1000
        expired = [k for k, at in self._reported.items() if now - at >= expiry_s]
        for key in expired:
            del self._reported[key]

    def clear(self) -> None:
        """Forget every recorded key."""
        self._reported.clear()

    def __len__(self) -> int:
        return len(self._reported)
