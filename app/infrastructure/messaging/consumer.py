"""Background consumer moving broker deliveries into the notification store."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any

from pika.adapters.blocking_connection import BlockingChannel

from app.infrastructure.notifications.codec import (
    NotificationDecodeError,
    decode_notification,
)
from app.infrastructure.notifications.store import NotificationStore

from .connection import BrokerConnection, declare_notification_queue

logger = logging.getLogger(__name__)

PREFETCH_COUNT = 1


class DeliveryOutcome(str, enum.Enum):
    """How a single delivery was resolved with the broker."""

    ACKNOWLEDGED = "acknowledged"
    REQUEUED = "requeued"
    DISCARDED = "discarded"


class NotificationConsumer:
    """Pull notifications from ``queue_name`` and append them to ``store``.

    Acknowledgment is manual and the channel prefetches a single message, so
    every delivery is acked or nacked before the next one is pulled:

    * payload cannot be decoded: nack without requeue (poison message);
    * store append fails: nack with requeue (transient failure);
    * otherwise: ack.

    Requeued deliveries are retried without limit.
    """

    def __init__(
        self,
        connection: BrokerConnection,
        store: NotificationStore,
        queue_name: str,
        *,
        inactivity_timeout: float = 1.0,
        reconnect_delay: float = 5.0,
    ) -> None:
        self._connection = connection
        self._store = store
        self._queue_name = queue_name
        self._inactivity_timeout = inactivity_timeout
        self._reconnect_delay = reconnect_delay
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Run the consumer loop on a background thread."""

        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run, name="notification-consumer", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = 10.0) -> None:
        """Stop pulling deliveries and release the broker connection.

        The delivery being processed, if any, is acked or nacked before the
        loop exits.
        """

        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Notification consumer did not stop within %ss", timeout)
                return
        self._thread = None
        self._connection.close()
        logger.info("Notification consumer stopped")

    def run(self) -> None:
        """Consume until :meth:`stop` is called, reconnecting after broker errors."""

        while not self._stop_event.is_set():
            try:
                self._consume()
            except Exception:
                logger.exception(
                    "Notification consumer failed; reconnecting to RabbitMQ in %ss",
                    self._reconnect_delay,
                )
                self._connection.reset()
                self._stop_event.wait(self._reconnect_delay)

    def _consume(self) -> None:
        channel = self._connection.channel()
        declare_notification_queue(channel, self._queue_name)
        channel.basic_qos(prefetch_count=PREFETCH_COUNT)
        logger.info("RabbitMQ consumer started for queue %s", self._queue_name)

        try:
            for method, properties, body in channel.consume(
                self._queue_name,
                auto_ack=False,
                inactivity_timeout=self._inactivity_timeout,
            ):
                if method is not None:
                    self.handle_delivery(channel, method, properties, body)
                if self._stop_event.is_set():
                    break
        finally:
            if channel.is_open:
                requeued = channel.cancel()
                if requeued:
                    logger.info("Returned %s prefetched messages to the queue", requeued)

    def handle_delivery(
        self,
        channel: BlockingChannel,
        method: Any,
        properties: Any,
        body: bytes,
    ) -> DeliveryOutcome:
        """Store one delivery and resolve it with the broker."""

        delivery_tag = method.delivery_tag
        try:
            notification = decode_notification(body)
        except NotificationDecodeError:
            logger.warning(
                "Discarding undecodable message %s from %s: %r",
                delivery_tag,
                self._queue_name,
                body,
            )
            channel.basic_nack(delivery_tag=delivery_tag, multiple=False, requeue=False)
            return DeliveryOutcome.DISCARDED

        try:
            self._store.append(notification)
        except Exception:
            logger.exception(
                "Error storing notification %s; requeueing delivery %s",
                notification.id,
                delivery_tag,
            )
            channel.basic_nack(delivery_tag=delivery_tag, multiple=False, requeue=True)
            return DeliveryOutcome.REQUEUED

        channel.basic_ack(delivery_tag=delivery_tag, multiple=False)
        logger.info(
            "Stored notification %s for service provider %s",
            notification.id,
            notification.service_provider_id,
        )
        return DeliveryOutcome.ACKNOWLEDGED


__all__ = ["DeliveryOutcome", "NotificationConsumer", "PREFETCH_COUNT"]
