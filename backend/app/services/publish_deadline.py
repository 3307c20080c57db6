from __future__ import annotations

import threading
import time

from .instagram_errors import PublishDeadlineExceeded


class PublishDeadline:
    """Wall-clock budget and cancellation flag shared by one publish call.

    ``seconds=None`` means no time limit; ``cancel()`` still aborts the
    operation at the next HTTP call or poll sleep.
    """

    def __init__(self, seconds: float | None = None) -> None:
        self._expires_at = time.monotonic() + seconds if seconds else None
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(self._expires_at - time.monotonic(), 0.0)

    def check(self) -> None:
        if self._cancelled.is_set():
            raise PublishDeadlineExceeded("Publishing was cancelled by the caller.")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise PublishDeadlineExceeded("Publishing exceeded the caller deadline.")

    def timeout(self, default: float) -> float:
        """Clamp an HTTP timeout to what is left of the budget."""
        self.check()
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)

    def sleep(self, seconds: float) -> None:
        """Sleep that wakes early on cancellation or when the budget runs out."""
        self.check()
        remaining = self.remaining()
        wait_for = seconds if remaining is None else min(seconds, remaining)
        self._cancelled.wait(wait_for)
        self.check()
