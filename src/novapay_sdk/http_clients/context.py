"""
Call cancellation and deadlines

A ``CallContext`` is the caller's handle on one logical call. The transport
checks it before dispatching each attempt and sleeps on it between retries, so
``cancel()`` from another thread aborts a backoff wait immediately. An attempt
already on the wire is bounded by its request timeout, which never exceeds the
time left before the deadline.
"""

import threading
import time
from typing import Optional

from ..exceptions import CancelledError, DeadlineExceededError, NovaPaySDKError


class CallContext:
    """Cancellation signal with an optional deadline"""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds until the call deadline (None for no deadline)
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    @classmethod
    def background(cls) -> 'CallContext':
        """Context that is never cancelled and has no deadline."""
        return cls()

    def cancel(self) -> None:
        """Signal cancellation to every checkpoint of the call."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> Optional[NovaPaySDKError]:
        """The error a cancelled or expired context resolves to, else None."""
        if self._event.is_set():
            return CancelledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError()
        return None

    def check(self) -> None:
        """
        Raises:
            CancelledError: If ``cancel()`` was called
            DeadlineExceededError: If the deadline has passed
        """
        err = self.error()
        if err is not None:
            raise err

    def wait(self, seconds: float) -> None:
        """
        Sleep for ``seconds`` unless the context ends first.

        Raises:
            CancelledError: If cancelled during the wait
            DeadlineExceededError: If the deadline passes during the wait
        """
        self.check()
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._event.wait(remaining)
            self.check()
            # the wait may return a hair early on coarse clocks
            raise DeadlineExceededError()
        if self._event.wait(seconds):
            raise CancelledError()
