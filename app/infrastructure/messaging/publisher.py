"""Publish rating notifications to the durable RabbitMQ queue."""

from __future__ import annotations

import logging
import threading

import pika

from app.domain.entities import RatingNotification
from app.infrastructure.notifications.codec import encode_notification
from app.infrastructure.notifications.publisher import (
    NotificationPublisher,
    PublishResult,
)

from .connection import BrokerConnection, declare_notification_queue

logger = logging.getLogger(__name__)


class RabbitMQNotificationPublisher(NotificationPublisher):
    """Send persistent messages to ``queue_name`` through the default exchange.

    The broker writes persistent messages to disk before confirming them; the
    publisher does not wait for any consumer.
    """

    def __init__(self, connection: BrokerConnection, queue_name: str) -> None:
        self._connection = connection
        self._queue_name = queue_name
        self._lock = threading.Lock()
        self._declared_channel = None

    def publish(self, notification: RatingNotification) -> PublishResult:
        try:
            body = encode_notification(notification)
            properties = pika.BasicProperties(
                content_type="application/json",
                delivery_mode=pika.DeliveryMode.Persistent,
            )
            with self._lock:
                channel = self._connection.channel()
                if channel is not self._declared_channel:
                    declare_notification_queue(channel, self._queue_name)
                    self._declared_channel = channel
                channel.basic_publish(
                    exchange="",
                    routing_key=self._queue_name,
                    body=body,
                    properties=properties,
                )
        except Exception as exc:
            logger.exception(
                "Failed to publish notification %s to RabbitMQ for service provider %s",
                notification.id,
                notification.service_provider_id,
            )
            with self._lock:
                self._declared_channel = None
                self._connection.reset()
            return PublishResult.failed(str(exc) or exc.__class__.__name__)

        logger.info(
            "Published notification %s to RabbitMQ for service provider %s",
            notification.id,
            notification.service_provider_id,
        )
        return PublishResult.ok()

    def close(self) -> None:
        with self._lock:
            self._declared_channel = None
            self._connection.close()


__all__ = ["RabbitMQNotificationPublisher"]
