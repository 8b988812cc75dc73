"""Construct notification components from application settings."""

from __future__ import annotations

import logging
from datetime import timedelta

from app.config import Settings
from app.infrastructure.messaging import (
    BrokerConnection,
    NotificationConsumer,
    RabbitMQNotificationPublisher,
)
from app.infrastructure.notifications import (
    HttpNotificationPublisher,
    InMemoryNotificationStore,
    NotificationPublisher,
    NotificationStore,
    RedisNotificationStore,
)

logger = logging.getLogger(__name__)


def build_notification_store(settings: Settings) -> NotificationStore:
    """Return the store backend selected by ``NOTIFICATION_STORE_BACKEND``."""

    if settings.notification_store_backend == "memory":
        logger.info("Using in-memory notification store")
        return InMemoryNotificationStore()

    logger.info("Using Redis notification store at %s", settings.redis_url)
    return RedisNotificationStore.from_url(
        settings.redis_url,
        key_prefix=settings.redis_key_prefix,
        retention=timedelta(days=settings.notification_retention_days),
    )


def build_notification_publisher(settings: Settings) -> NotificationPublisher:
    """Return the publisher selected by ``NOTIFICATION_TRANSPORT``."""

    if settings.notification_transport == "http":
        logger.info(
            "Publishing notifications over HTTP to %s",
            settings.notification_service_base_url,
        )
        return HttpNotificationPublisher.from_base_url(
            settings.notification_service_base_url,
            timeout=settings.notification_http_timeout,
        )

    logger.info(
        "Publishing notifications to RabbitMQ queue %s", settings.rabbitmq_queue_name
    )
    return RabbitMQNotificationPublisher(
        BrokerConnection.from_settings(settings), settings.rabbitmq_queue_name
    )


def build_notification_consumer(
    settings: Settings, store: NotificationStore
) -> NotificationConsumer:
    """Return a consumer bound to the configured queue with its own connection."""

    return NotificationConsumer(
        BrokerConnection.from_settings(settings),
        store,
        settings.rabbitmq_queue_name,
        inactivity_timeout=settings.consumer_inactivity_timeout,
        reconnect_delay=settings.consumer_reconnect_delay,
    )


__all__ = [
    "build_notification_consumer",
    "build_notification_publisher",
    "build_notification_store",
]
