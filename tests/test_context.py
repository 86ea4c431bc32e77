"""
Unit tests for call cancellation and deadlines
"""

import threading
import time

import pytest

from novapay_sdk.exceptions import CancelledError, DeadlineExceededError
from novapay_sdk.http_clients import CallContext


class TestCallContext:
    """Test CallContext checkpoints"""

    def test_background_never_ends(self):
        context = CallContext.background()
        context.check()
        assert context.remaining() is None
        assert context.error() is None

    def test_cancel(self):
        context = CallContext()
        context.cancel()
        assert context.cancelled
        with pytest.raises(CancelledError):
            context.check()

    def test_expired_deadline(self):
        context = CallContext(timeout=0)
        with pytest.raises(DeadlineExceededError):
            context.check()
        assert context.remaining() == 0.0

    def test_wait_aborted_by_cancel_from_another_thread(self):
        context = CallContext()
        timer = threading.Timer(0.05, context.cancel)
        timer.start()
        started = time.monotonic()
        try:
            with pytest.raises(CancelledError):
                context.wait(10)
        finally:
            timer.cancel()
        assert time.monotonic() - started < 5

    def test_wait_cut_short_by_deadline(self):
        context = CallContext(timeout=0.05)
        with pytest.raises(DeadlineExceededError):
            context.wait(10)

    def test_wait_completes(self):
        context = CallContext(timeout=5)
        context.wait(0.01)
        context.check()
