import threading
import time


class InMemoryRateLimiter:
    """Fixed-window request counter keyed by ``client_ip:path``.

    State lives in the process, so each worker counts on its own.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: dict[str, tuple[int, float]] = {}

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """Count one hit for ``key``. Returns (allowed, seconds until the window resets)."""
        now = time.monotonic()
        with self._lock:
            count, started = self._state.get(key, (0, now))
            if now - started >= window_seconds:
                count, started = 0, now
            if count >= limit:
                return False, max(1, int(window_seconds - (now - started)))
            self._state[key] = (count + 1, started)
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._state.clear()


rate_limiter = InMemoryRateLimiter()
