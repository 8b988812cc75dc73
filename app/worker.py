"""Run the notification consumer as a standalone process.

Usage::

    python -m app.worker --queue rating-notifications
"""

from __future__ import annotations

import argparse
import logging
import signal
import threading

from app.config import Settings, get_settings
from app.infrastructure.bootstrap import (
    build_notification_consumer,
    build_notification_store,
)
from app.infrastructure.logging_config import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the consumer worker."""

    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Move rating notifications from RabbitMQ into the notification store.",
    )
    parser.add_argument(
        "--queue",
        default=settings.rabbitmq_queue_name,
        help=f"Queue to consume (default: {settings.rabbitmq_queue_name})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    return parser.parse_args(argv)


def build_worker_settings(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return ``settings`` adjusted for a standalone consumer process.

    The worker always writes to Redis: an in-memory store would live in this
    process only and could never be polled by the API.
    """

    if settings.notification_store_backend != "redis":
        logger.warning(
            "Ignoring %s notification store; the worker always uses Redis",
            settings.notification_store_backend,
        )
    return settings.model_copy(
        update={
            "rabbitmq_queue_name": args.queue,
            "notification_store_backend": "redis",
        }
    )


def main(argv: list[str] | None = None) -> None:
    """Consume until SIGINT or SIGTERM is received."""

    args = parse_args(argv)
    configure_logging(args.log_level)

    settings = build_worker_settings(get_settings(), args)
    store = build_notification_store(settings)
    consumer = build_notification_consumer(settings, store)

    shutdown = threading.Event()

    def _request_shutdown(signum, _frame) -> None:
        logger.info("Received signal %s, shutting down", signum)
        shutdown.set()

    signal.signal(signal.SIGINT, _request_shutdown)
    signal.signal(signal.SIGTERM, _request_shutdown)

    consumer.start()
    try:
        shutdown.wait()
    finally:
        consumer.stop()
        store.close()


if __name__ == "__main__":
    main()
