"""Queues connecting the audio callback, the game thread and the renderers."""

import queue
import threading
from typing import Generic, List, Optional, TypeVar

from ..errors import ChannelError
from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Marks the end of a closed channel's stream
_CLOSED = object()


class Channel(Generic[T]):
    """Unbounded FIFO with a single consumer.

    Items sent before ``close()`` are still delivered; after them ``recv()``
    raises ``ChannelError``. ``None`` cannot be sent because ``try_recv()``
    and ``drain()`` use it to mean that nothing is pending.
    """

    def __init__(self, name: str = "channel"):
        self.name = name
        self._queue: "queue.Queue" = queue.Queue()
        self._closed = False
        self._lock = threading.Lock()

    def send(self, item: T) -> None:
        if item is None:
            raise ValueError(f"Cannot send None on channel '{self.name}'")
        with self._lock:
            if self._closed:
                raise ChannelError(f"Cannot send on closed channel '{self.name}'")
            self._queue.put(item)

    def recv(self, timeout: Optional[float] = None) -> T:
        """Block until an item is available.

        Raises:
            ChannelError: If the channel is closed and drained
            queue.Empty: If ``timeout`` expires first
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # Leave the marker for any other waiter
            self._queue.put(_CLOSED)
            raise ChannelError(f"Channel '{self.name}' is closed")
        return item

    def try_recv(self) -> Optional[T]:
        """Return the next item, or None if nothing is pending.

        None is never a sent item, so it only ever means empty or closed.
        """
        try:
            item = self._queue.get_nowait()
        except queue.Empty:
            return None
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item

    def drain(self) -> List[T]:
        """Return every pending item in arrival order."""
        items = []
        while True:
            item = self.try_recv()
            if item is None:
                return items
            items.append(item)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)
        logger.debug(f"Closed channel '{self.name}'")

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return self._queue.qsize()


class Broadcaster(Generic[T]):
    """Fan-out of values to every subscribed channel, in subscription order."""

    def __init__(self, name: str = "broadcast"):
        self.name = name
        self._channels: List[Channel[T]] = []
        self._lock = threading.Lock()

    def subscribe(self, name: Optional[str] = None) -> Channel[T]:
        """Create a new observer channel and register it."""
        channel: Channel[T] = Channel(name or f"{self.name}-{len(self._channels)}")
        self.add(channel)
        return channel

    def add(self, channel: Channel[T]) -> None:
        with self._lock:
            self._channels.append(channel)
        logger.debug(f"Registered observer '{channel.name}' on '{self.name}'")

    def send(self, item: T) -> None:
        """Send ``item`` to every observer.

        Raises:
            ChannelError: If an observer channel has been closed
        """
        with self._lock:
            channels = list(self._channels)
        for channel in channels:
            channel.send(item)

    def close(self) -> None:
        with self._lock:
            channels = list(self._channels)
        for channel in channels:
            channel.close()

    def __len__(self) -> int:
        return len(self._channels)
