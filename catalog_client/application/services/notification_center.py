"""Notification center — in-process broadcaster for user-visible messages."""

import asyncio
import logging
from collections import deque
from collections.abc import AsyncGenerator

from catalog_client.domain.entities import Notification, NotificationLevel

logger = logging.getLogger(__name__)


class NotificationCenter:
    """Fans notifications out to every subscriber and keeps a short history.

    Each subscriber gets its own asyncio.Queue. Publishing pushes the
    notification to all queues. Subscribers consume via an async generator.
    """

    def __init__(self, history_size: int = 50, queue_size: int = 100) -> None:
        self._queues: list[asyncio.Queue[Notification | None]] = []
        self._history: deque[Notification] = deque(maxlen=history_size)
        self._queue_size = queue_size

    async def subscribe(self) -> AsyncGenerator[Notification, None]:
        """Subscribe to notifications.

        The generator unsubscribes itself when the consumer stops iterating.
        """
        queue: asyncio.Queue[Notification | None] = asyncio.Queue(maxsize=self._queue_size)
        self._queues.append(queue)
        try:
            while True:
                notification = await queue.get()
                if notification is None:
                    break
                yield notification
        finally:
            if queue in self._queues:
                self._queues.remove(queue)

    def publish(self, notification: Notification) -> None:
        """Record a notification and push it to all subscribers."""
        self._history.append(notification)
        log = logger.warning if notification.level == NotificationLevel.ERROR else logger.info
        log("[%s] %s", notification.level.value, notification.message)

        dead_queues: list[asyncio.Queue[Notification | None]] = []
        for queue in self._queues:
            try:
                queue.put_nowait(notification)
            except asyncio.QueueFull:
                dead_queues.append(queue)
                logger.warning("Notification subscriber queue full — disconnecting")

        for q in dead_queues:
            self._queues.remove(q)
            # make room for the sentinel so the subscriber's loop ends
            q.get_nowait()
            q.put_nowait(None)

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self.publish(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    def warning(self, message: str) -> Notification:
        return self.notify(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, message)

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()

    async def shutdown(self) -> None:
        """Disconnect all subscribers."""
        for queue in self._queues:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(None)
        self._queues.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)
