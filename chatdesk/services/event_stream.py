"""In-memory fan-out of event frames to connected clients."""

import asyncio
import threading
from typing import Any, Dict, List, Tuple

from ..utils.logger import get_app_logger


class EventStream:
    """
    Per-account broadcast of event frames.

    Subscribers are asyncio queues bound to the loop that created them;
    publishing is safe from any thread. A full queue drops the frame for that
    subscriber only.
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscribers: Dict[int, List[Tuple[asyncio.AbstractEventLoop, asyncio.Queue]]] = {}
        self._lock = threading.Lock()
        self.logger = get_app_logger()

    def subscribe(self, account_id: int) -> asyncio.Queue:
        """Open a queue receiving the frames of an account. Call from a running loop."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        loop = asyncio.get_running_loop()
        with self._lock:
            self._subscribers.setdefault(account_id, []).append((loop, queue))
        return queue

    def unsubscribe(self, account_id: int, queue: asyncio.Queue):
        with self._lock:
            remaining = [(loop, q) for loop, q in self._subscribers.get(account_id, []) if q is not queue]
            if remaining:
                self._subscribers[account_id] = remaining
            else:
                self._subscribers.pop(account_id, None)

    def subscriber_count(self, account_id: int) -> int:
        with self._lock:
            return len(self._subscribers.get(account_id, []))

    def publish(self, account_id: int, event: str, data: Any) -> int:
        """
        Send a frame to every subscriber of the account.

        Returns:
            Number of subscribers the frame was handed to
        """
        frame = {"event": event, "data": data}
        with self._lock:
            targets = list(self._subscribers.get(account_id, []))

        for loop, queue in targets:
            if loop.is_closed():
                continue
            loop.call_soon_threadsafe(self._offer, queue, frame)
        return len(targets)

    def _offer(self, queue: asyncio.Queue, frame: Dict[str, Any]):
        try:
            queue.put_nowait(frame)
        except asyncio.QueueFull:
            self.logger.warning(f"Event stream queue full, dropped {frame['event']}")
