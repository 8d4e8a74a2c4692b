import threading

import pytest

from mediahub.utilities.cli import CancellationToken


def test_cancel():
    token = CancellationToken()
    assert not token.is_cancelled
    token.cancel()
    assert token.is_cancelled


def test_callbacks_invoked_once():
    token = CancellationToken()
    calls = []
    token.subscribe_cancellation(lambda: calls.append(1))
    token.cancel()
    token.cancel()
    assert calls == [1]


def test_subscribe_after_cancellation():
    token = CancellationToken()
    token.cancel()
    calls = []
    token.subscribe_cancellation(lambda: calls.append(1))
    assert calls == [1]


@pytest.mark.timeout(5)
def test_wait_cancellation():
    token = CancellationToken()
    timer = threading.Timer(0.1, token.cancel)
    timer.start()
    token.wait_cancellation(interval=0.01)
    assert token.is_cancelled
