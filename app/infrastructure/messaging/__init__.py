"""RabbitMQ transport for rating notifications."""

from .connection import BrokerConnection
from .consumer import DeliveryOutcome, NotificationConsumer
from .publisher import RabbitMQNotificationPublisher

__all__ = [
    "BrokerConnection",
    "DeliveryOutcome",
    "NotificationConsumer",
    "RabbitMQNotificationPublisher",
]
