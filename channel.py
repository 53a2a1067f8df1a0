"""
Integer Channel - message queue between Intcode programs
One producer, one consumer. Closing wakes a blocked reader instead of
leaving it waiting forever.
"""

import queue
import threading
from typing import List, Optional

from errors import IntcodeError


class ChannelClosed(IntcodeError):
    """Channel was closed with nothing left to read"""
    pass


class ChannelTimeout(ChannelClosed):
    """Timed read expired on a channel that is still open"""
    pass


# Marker placed on the queue by close()
_CLOSED = object()


class Channel:
    """Blocking single-producer/single-consumer integer queue"""

    def __init__(self, name: str = ""):
        self.name = name
        self._queue = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, value: int):
        """Enqueue one integer"""
        with self._lock:
            if self._closed:
                raise ChannelClosed(f"send on closed channel {self.name!r}")
            self._queue.put(value)

    def recv(self, timeout: Optional[float] = None) -> int:
        """Block until a value is available"""
        try:
            value = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise ChannelTimeout(f"timed out waiting on channel {self.name!r}")
        if value is _CLOSED:
            # Leave the marker for any later reader
            self._queue.put(_CLOSED)
            raise ChannelClosed(f"recv on closed channel {self.name!r}")
        return value

    def close(self):
        """Close the channel; queued values can still be read"""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def drain(self) -> List[int]:
        """Return everything currently queued without blocking"""
        values = []
        while True:
            try:
                value = self._queue.get_nowait()
            except queue.Empty:
                break
            if value is _CLOSED:
                self._queue.put(_CLOSED)
                break
            values.append(value)
        return values

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Channel({self.name!r}, {state})"
