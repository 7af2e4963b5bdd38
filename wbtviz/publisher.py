"""Non-blocking publisher for flushed primitive batches.

Mirrors the realtime-publisher pattern: the producer tries to take the lock,
writes the outgoing message and publishes; if the lock is held (a previous
batch is still being delivered) the attempt is skipped instead of waiting.
"""

import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class RealtimePublisher(Generic[T]):
    """Try-lock publisher delivering messages to ``sink``.

    Args:
        sink: Callable receiving each published message
    """

    def __init__(self, sink: Callable[[T], None]):
        self._sink = sink
        self._lock = threading.Lock()
        self.msg: Optional[T] = None
        self.published = 0

    def trylock(self) -> bool:
        """Acquire the publisher without blocking; False if it is busy."""
        return self._lock.acquire(blocking=False)

    def unlock_and_publish(self) -> None:
        """Deliver ``msg`` to the sink and release the lock taken by :meth:`trylock`."""
        try:
            self._sink(self.msg)
            self.published += 1
        finally:
            self._lock.release()

    def try_publish(self, msg: T) -> bool:
        """Publish ``msg`` if the publisher is free.

        Returns:
            True if the message was delivered, False if it was dropped
        """
        if not self.trylock():
            return False
        self.msg = msg
        self.unlock_and_publish()
        return True
