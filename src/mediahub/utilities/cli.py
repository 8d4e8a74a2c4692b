import threading
from signal import signal, SIGINT
from contextlib import contextmanager
from typing import Callable


@contextmanager
def suppress_keyboard_interrupt_as_cancellation():
    """
    Context manager that suppresses KeyboardInterrupt and instead yields a cancellation token that can be polled to
    check if a keyboard interrupt has occurred during the lifetime of the context.
    """
    token = CancellationToken()

    prev_handler = signal(SIGINT, lambda _, __: token.cancel())
    try:
        yield token
    finally:
        signal(SIGINT, prev_handler)


class CancellationToken:
    def __init__(self):
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    def subscribe_cancellation(self, callback: Callable[[], None]):
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return
        callback()

    @property
    def is_cancelled(self):
        """
        Has this token been cancelled?
        """
        return self._cancelled.is_set()

    def cancel(self):
        """
        Cancel this token, invoking the subscribed callbacks once.
        """
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def wait_cancellation(self, interval=0.1):
        """
        Sleep until this token is cancelled.

        :param interval: the interval in seconds between waking up to check cancellation.
        """
        while not self._cancelled.wait(interval):
            pass
