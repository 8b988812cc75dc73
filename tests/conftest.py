"""Shared fixtures and stand-ins for broker, Redis and publisher collaborators."""

from __future__ import annotations

import os
import sys
import tempfile
import threading
import time
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
from pika.exceptions import AMQPConnectionError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"rating-notifications-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["NOTIFICATION_STORE_BACKEND"] = "memory"
os.environ["NOTIFICATION_TRANSPORT"] = "rabbitmq"
os.environ["NOTIFICATION_CONSUMER_ENABLED"] = "false"

from app.domain.entities import RatingNotification
from app.infrastructure.notifications import PublishResult

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_notification(
    notification_id: str = "n-1",
    *,
    service_provider_id: int = 123,
    customer_id: int = 456,
    score: int = 5,
    comment: str | None = "Great!",
    created_at: datetime | None = None,
) -> RatingNotification:
    return RatingNotification(
        id=notification_id,
        service_provider_id=service_provider_id,
        customer_id=customer_id,
        score=score,
        comment=comment,
        created_at=created_at or BASE_TIME,
    )


class StubChannel:
    """Records the AMQP calls made on a ``pika`` blocking channel."""

    def __init__(self, deliveries=()):
        self.is_open = True
        self.acks: list[int] = []
        self.nacks: list[tuple[int, bool]] = []
        self.published: list[dict] = []
        self.declared: list[dict] = []
        self.qos: dict | None = None
        self.consume_kwargs: dict | None = None
        self.cancelled = False
        self._deliveries = list(deliveries)
        self._idle = threading.Event()

    def queue_declare(self, **kwargs):
        self.declared.append(kwargs)

    def basic_qos(self, **kwargs):
        self.qos = kwargs

    def basic_ack(self, delivery_tag, multiple=False):
        self.acks.append(delivery_tag)

    def basic_nack(self, delivery_tag, multiple=False, requeue=True):
        self.nacks.append((delivery_tag, requeue))

    def basic_publish(self, **kwargs):
        self.published.append(kwargs)

    def consume(self, queue, auto_ack=False, inactivity_timeout=None):
        self.consume_kwargs = {
            "queue": queue,
            "auto_ack": auto_ack,
            "inactivity_timeout": inactivity_timeout,
        }
        while self._deliveries:
            yield self._deliveries.pop(0)
        self._idle.set()
        while True:
            time.sleep(0.01)
            yield None, None, None

    def cancel(self):
        self.cancelled = True
        return 0

    def wait_until_idle(self, timeout: float = 2.0) -> bool:
        return self._idle.wait(timeout)


def make_delivery(delivery_tag: int, body: bytes):
    return SimpleNamespace(delivery_tag=delivery_tag), SimpleNamespace(), body


class StubBrokerConnection:
    """Stand-in for :class:`BrokerConnection` handing out stub channels."""

    def __init__(self, *channels, failures: int = 0):
        self._channels = list(channels)
        self._failures = failures
        self.current: StubChannel | None = None
        self.opened = 0
        self.resets = 0
        self.closed = False

    def channel(self):
        if self.current is not None and self.current.is_open:
            return self.current
        if self._failures:
            self._failures -= 1
            raise AMQPConnectionError("broker unreachable")
        self.current = self._channels.pop(0) if self._channels else StubChannel()
        self.opened += 1
        return self.current

    def reset(self):
        self.resets += 1
        if self.current is not None:
            self.current.is_open = False
        self.current = None

    def close(self):
        self.closed = True
        if self.current is not None:
            self.current.is_open = False


class StubRedis:
    """In-process subset of the Redis list commands used by the store."""

    def __init__(self):
        self.lists: dict[str, list[bytes]] = defaultdict(list)
        self.expirations: dict[str, timedelta] = {}
        self.expire_calls: list[str] = []
        self.fail_with: Exception | None = None
        self.closed = False
        self._lock = threading.Lock()

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def lpush(self, name, *values):
        self._check()
        with self._lock:
            for value in values:
                if isinstance(value, str):
                    value = value.encode("utf-8")
                self.lists[name].insert(0, value)
            return len(self.lists[name])

    def rpop(self, name, count=None):
        self._check()
        with self._lock:
            entries = self.lists.get(name)
            if not entries:
                return None
            if count is None:
                popped = entries.pop()
            else:
                popped = [entries.pop() for _ in range(min(count, len(entries)))]
            if not entries:
                del self.lists[name]
                self.expirations.pop(name, None)
            return popped

    def llen(self, name):
        self._check()
        return len(self.lists.get(name, []))

    def expire(self, name, ttl):
        self._check()
        self.expire_calls.append(name)
        self.expirations[name] = ttl
        return True

    def pipeline(self, transaction=True):
        return _StubPipeline(self)

    def close(self):
        self.closed = True


class _StubPipeline:
    def __init__(self, client: StubRedis):
        self._client = client
        self._commands = []

    def lpush(self, name, *values):
        self._commands.append(("lpush", name, values))
        return self

    def expire(self, name, ttl):
        self._commands.append(("expire", name, (ttl,)))
        return self

    def execute(self):
        self._client._check()
        results = []
        for command, name, args in self._commands:
            results.append(getattr(self._client, command)(name, *args))
        self._commands.clear()
        return results


class RecordingPublisher:
    def __init__(self):
        self.published: list[RatingNotification] = []

    def publish(self, notification):
        self.published.append(notification)
        return PublishResult.ok()

    def close(self):
        pass


class FailingPublisher(RecordingPublisher):
    def publish(self, notification):
        self.published.append(notification)
        return PublishResult.failed("broker unreachable")


class RaisingPublisher(RecordingPublisher):
    def publish(self, notification):
        self.published.append(notification)
        raise RuntimeError("publisher contract broken")


@pytest.fixture
def stub_redis() -> StubRedis:
    return StubRedis()


@pytest.fixture
def db_session():
    """Yield a session bound to a freshly created schema."""

    from app.infrastructure import database

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.initialize_database()
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


def pytest_sessionfinish(session, exitstatus):
    from app.infrastructure import database

    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
