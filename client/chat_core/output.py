"""
OutputQueue — bounded FIFO between the poll thread and whoever reads chat.

The poll thread is the only producer and blocks when the queue is full.
Consumers call drain(), which never waits.
"""

import queue
import threading

from .constants import OUTPUT_QUEUE_SIZE
from .exceptions import QueueClosed


class OutputQueue:

    def __init__(self, capacity=OUTPUT_QUEUE_SIZE):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._queue = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def capacity(self):
        return self._queue.maxsize

    @property
    def closed(self):
        return self._closed.is_set()

    def qsize(self):
        return self._queue.qsize()

    def push(self, msg, timeout=None):
        """
        Append *msg*, blocking while full. Raises queue.Full if *timeout*
        elapses, QueueClosed once close() has been called.
        """
        if self._closed.is_set():
            raise QueueClosed("output queue is closed")
        self._queue.put(msg, timeout=timeout)

    def drain(self):
        """Everything currently queued, in arrival order. Never blocks."""
        result = []
        while True:
            try:
                result.append(self._queue.get_nowait())
            except queue.Empty:
                return result

    def close(self):
        """Refuse further pushes. Already queued items stay drainable."""
        self._closed.set()
