"""Process-local notification store."""

from __future__ import annotations

import logging
import threading
from collections import deque

from app.domain.entities import RatingNotification

from .store import NotificationStore

logger = logging.getLogger(__name__)


class _SubjectQueue:
    __slots__ = ("entries", "lock", "retired")

    def __init__(self) -> None:
        self.entries: deque[RatingNotification] = deque()
        self.lock = threading.Lock()
        self.retired = False


class InMemoryNotificationStore(NotificationStore):
    """Thread-safe in-memory store with once-only consumption.

    Each service provider owns a queue with its own lock, so appends and takes
    for different providers never wait on each other. The registry lock is
    only held to look up, create or drop a queue. A drained queue is marked
    retired before it leaves the registry; an append that grabbed it just
    before retirement retries on a fresh queue.
    """

    def __init__(self) -> None:
        self._queues: dict[int, _SubjectQueue] = {}
        self._registry_lock = threading.Lock()

    @property
    def subject_count(self) -> int:
        """Number of providers that currently have a live queue."""

        with self._registry_lock:
            return len(self._queues)

    def append(self, notification: RatingNotification) -> None:
        service_provider_id = notification.service_provider_id
        while True:
            with self._registry_lock:
                queue = self._queues.get(service_provider_id)
                if queue is None:
                    queue = _SubjectQueue()
                    self._queues[service_provider_id] = queue
            with queue.lock:
                if queue.retired:
                    continue
                queue.entries.append(notification)
                break

        logger.info(
            "Added notification %s for service provider %s",
            notification.id,
            service_provider_id,
        )

    def take_up_to(
        self, service_provider_id: int, limit: int
    ) -> list[RatingNotification]:
        with self._registry_lock:
            queue = self._queues.get(service_provider_id)
        if queue is None:
            return []

        taken: list[RatingNotification] = []
        with queue.lock:
            while queue.entries and len(taken) < limit:
                taken.append(queue.entries.popleft())
            if not queue.entries and not queue.retired:
                queue.retired = True
                with self._registry_lock:
                    if self._queues.get(service_provider_id) is queue:
                        del self._queues[service_provider_id]
                logger.debug(
                    "Removed empty queue for service provider %s", service_provider_id
                )

        logger.info(
            "Retrieved and consumed %s notifications for service provider %s",
            len(taken),
            service_provider_id,
        )
        return taken

    def count(self, service_provider_id: int) -> int:
        with self._registry_lock:
            queue = self._queues.get(service_provider_id)
        if queue is None:
            return 0
        with queue.lock:
            return len(queue.entries)


__all__ = ["InMemoryNotificationStore"]
