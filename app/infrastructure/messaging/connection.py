"""Ownership of a single RabbitMQ connection and channel."""

from __future__ import annotations

import logging

import pika
from pika.adapters.blocking_connection import BlockingChannel

from app.config import Settings

logger = logging.getLogger(__name__)


class BrokerConnection:
    """Lazily opened blocking connection with one channel.

    ``pika`` blocking connections are not thread-safe, so each owner (the
    publisher, the consumer thread) gets its own instance. ``reset`` drops a
    broken connection so the next ``channel()`` call reconnects.
    """

    def __init__(self, parameters: pika.ConnectionParameters) -> None:
        self._parameters = parameters
        self._connection: pika.BlockingConnection | None = None
        self._channel: BlockingChannel | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrokerConnection":
        credentials = pika.PlainCredentials(
            settings.rabbitmq_username, settings.rabbitmq_password
        )
        parameters = pika.ConnectionParameters(
            host=settings.rabbitmq_host,
            port=settings.rabbitmq_port,
            virtual_host=settings.rabbitmq_virtual_host,
            credentials=credentials,
            heartbeat=settings.rabbitmq_heartbeat,
        )
        return cls(parameters)

    @property
    def is_open(self) -> bool:
        return self._channel is not None and self._channel.is_open

    def channel(self) -> BlockingChannel:
        """Return the open channel, connecting first if needed."""

        if self.is_open:
            return self._channel
        self.reset()
        self._connection = pika.BlockingConnection(self._parameters)
        self._channel = self._connection.channel()
        logger.info(
            "Connected to RabbitMQ at %s:%s",
            self._parameters.host,
            self._parameters.port,
        )
        return self._channel

    def reset(self) -> None:
        """Drop the current connection, ignoring errors from a dead socket."""

        connection, self._connection, self._channel = self._connection, None, None
        if connection is None or not connection.is_open:
            return
        try:
            connection.close()
        except Exception:  # pragma: no cover - socket already gone
            logger.debug("Ignoring error while closing a broken RabbitMQ connection")

    def close(self) -> None:
        """Close the channel and connection."""

        channel, connection = self._channel, self._connection
        self._channel = None
        self._connection = None
        if channel is not None and channel.is_open:
            channel.close()
        if connection is not None and connection.is_open:
            connection.close()
            logger.info("RabbitMQ connection closed")

    def __enter__(self) -> "BrokerConnection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def declare_notification_queue(channel: BlockingChannel, queue_name: str) -> None:
    """Declare the durable notifications queue. Safe to repeat."""

    channel.queue_declare(
        queue=queue_name, durable=True, exclusive=False, auto_delete=False
    )


__all__ = ["BrokerConnection", "declare_notification_queue"]
