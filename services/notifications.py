"""In-process fan-out of generated texts to connected subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Protocol

from models.schemas import SummaryNotification

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify(
        self, issue_id: int, content: str, provider: str, language: str, event: str = "summary"
    ) -> None: ...


class NotificationHub:
    """Best-effort delivery: slow subscribers lose messages rather than block."""

    def __init__(self, queue_size: int = 32) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[int, set[asyncio.Queue[SummaryNotification]]] = defaultdict(set)

    def subscribe(self, issue_id: int) -> asyncio.Queue[SummaryNotification]:
        queue: asyncio.Queue[SummaryNotification] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers[issue_id].add(queue)
        return queue

    def unsubscribe(self, issue_id: int, queue: asyncio.Queue[SummaryNotification]) -> None:
        queues = self._subscribers.get(issue_id)
        if not queues:
            return
        queues.discard(queue)
        if not queues:
            del self._subscribers[issue_id]

    def subscriber_count(self, issue_id: int) -> int:
        return len(self._subscribers.get(issue_id, ()))

    async def notify(
        self, issue_id: int, content: str, provider: str, language: str, event: str = "summary"
    ) -> None:
        if not content or not content.strip():
            logger.warning("Cannot notify - empty %s for issue %s", event, issue_id)
            return

        message = SummaryNotification(
            issue_id=issue_id, content=content, provider=provider, language=language, event=event
        )
        delivered = 0
        for queue in list(self._subscribers.get(issue_id, ())):
            try:
                queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Subscriber queue full for issue %s; dropping %s", issue_id, event)
        logger.info(
            "Notified %s for issue %s (%s, provider=%s) to %d subscriber(s)",
            event, issue_id, language, provider, delivered,
        )
