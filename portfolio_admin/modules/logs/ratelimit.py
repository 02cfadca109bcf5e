import math
import threading
import time


class RateLimiter:
    """Fixed-window request counter per key (client IP)"""

    def __init__(self, limit, window_seconds=60):
        self.limit = limit
        self.window = window_seconds
        self._hits = {}
        self._lock = threading.Lock()

    def hit(self, key, now=None):
        """Count a request; returns (allowed, seconds until the window resets)"""
        now = time.monotonic() if now is None else now
        with self._lock:
            start, count = self._hits.get(key, (now, 0))
            if now - start >= self.window:
                start, count = now, 0
            count += 1
            self._hits[key] = (start, count)

            if len(self._hits) > 10000:
                self._prune(now)

            retry_after = max(1, math.ceil(self.window - (now - start)))
            return count <= self.limit, retry_after

    def _prune(self, now):
        expired = [k for k, (start, _) in self._hits.items() if now - start >= self.window]
        for key in expired:
            del self._hits[key]

    def reset(self):
        with self._lock:
            self._hits.clear()
