"""Tests for the broker consumer acknowledgment protocol."""

from __future__ import annotations

import threading
import time

import pytest

from app.infrastructure.messaging import DeliveryOutcome, NotificationConsumer
from app.infrastructure.notifications import (
    InMemoryNotificationStore,
    NotificationStoreError,
    encode_notification,
)
from conftest import StubBrokerConnection, StubChannel, make_delivery, make_notification

QUEUE = "rating-notifications"


class _FlakyStore(InMemoryNotificationStore):
    """Fails the first ``failures`` appends, then behaves normally."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    def append(self, notification) -> None:
        if self.failures:
            self.failures -= 1
            raise NotificationStoreError("store unreachable")
        super().append(notification)


def _wait_for(predicate, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture()
def store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


def _consumer(connection, store) -> NotificationConsumer:
    return NotificationConsumer(
        connection, store, QUEUE, inactivity_timeout=0.01, reconnect_delay=0.01
    )


def test_valid_delivery_is_stored_then_acknowledged(store):
    channel = StubChannel()
    consumer = _consumer(StubBrokerConnection(channel), store)
    notification = make_notification("a")

    outcome = consumer.handle_delivery(
        channel, *make_delivery(1, encode_notification(notification))
    )

    assert outcome is DeliveryOutcome.ACKNOWLEDGED
    assert channel.acks == [1]
    assert channel.nacks == []
    assert store.take_up_to(123, 10) == [notification]


def test_poison_delivery_is_discarded_without_store_mutation(store):
    channel = StubChannel()
    consumer = _consumer(StubBrokerConnection(channel), store)

    outcome = consumer.handle_delivery(channel, *make_delivery(7, b"{garbage"))

    assert outcome is DeliveryOutcome.DISCARDED
    assert channel.nacks == [(7, False)]
    assert channel.acks == []
    assert store.subject_count == 0


def test_timestamp_outside_utc_range_is_discarded(store):
    channel = StubChannel()
    consumer = _consumer(StubBrokerConnection(channel), store)
    body = (
        b'{"Id": "old", "ServiceProviderId": 123, "CustomerId": 456, "Score": 5,'
        b' "CreatedAt": "0001-01-01T00:00:00+01:00"}'
    )

    outcome = consumer.handle_delivery(channel, *make_delivery(9, body))

    assert outcome is DeliveryOutcome.DISCARDED
    assert channel.nacks == [(9, False)]
    assert channel.acks == []
    assert store.count(123) == 0


@pytest.mark.parametrize("score", [0, 6, 99])
def test_out_of_range_score_is_discarded(store, score):
    channel = StubChannel()
    consumer = _consumer(StubBrokerConnection(channel), store)
    body = (
        b'{"ServiceProviderId": 123, "CustomerId": 456, "Score": '
        + str(score).encode()
        + b', "CreatedAt": "2025-01-01T12:00:00Z"}'
    )

    outcome = consumer.handle_delivery(channel, *make_delivery(4, body))

    assert outcome is DeliveryOutcome.DISCARDED
    assert channel.nacks == [(4, False)]
    assert store.count(123) == 0


def test_store_failure_requeues_and_redelivery_succeeds():
    store = _FlakyStore(failures=1)
    channel = StubChannel()
    consumer = _consumer(StubBrokerConnection(channel), store)
    body = encode_notification(make_notification("a"))

    first = consumer.handle_delivery(channel, *make_delivery(1, body))

    assert first is DeliveryOutcome.REQUEUED
    assert channel.nacks == [(1, True)]
    assert store.count(123) == 0

    second = consumer.handle_delivery(channel, *make_delivery(2, body))

    assert second is DeliveryOutcome.ACKNOWLEDGED
    assert channel.acks == [2]
    assert [n.id for n in store.take_up_to(123, 10)] == ["a"]


def test_redelivered_duplicate_is_stored_again(store):
    channel = StubChannel()
    consumer = _consumer(StubBrokerConnection(channel), store)
    body = encode_notification(make_notification("a"))

    consumer.handle_delivery(channel, *make_delivery(1, body))
    consumer.handle_delivery(channel, *make_delivery(2, body))

    assert store.count(123) == 2


def test_consumer_loop_resolves_every_delivery_and_stops_cleanly(store):
    deliveries = [
        make_delivery(1, encode_notification(make_notification("a"))),
        make_delivery(2, b"not json"),
        make_delivery(3, encode_notification(make_notification("b"))),
    ]
    channel = StubChannel(deliveries)
    connection = StubBrokerConnection(channel)
    consumer = _consumer(connection, store)

    consumer.start()
    assert channel.wait_until_idle()
    assert _wait_for(lambda: len(channel.acks) + len(channel.nacks) == 3)
    consumer.stop(timeout=2)

    assert not consumer.is_running
    assert channel.acks == [1, 3]
    assert channel.nacks == [(2, False)]
    assert channel.declared == [
        {"queue": QUEUE, "durable": True, "exclusive": False, "auto_delete": False}
    ]
    assert channel.qos == {"prefetch_count": 1}
    assert channel.consume_kwargs["auto_ack"] is False
    assert channel.cancelled is True
    assert connection.closed is True
    assert [n.id for n in store.take_up_to(123, 10)] == ["a", "b"]


def test_consumer_reconnects_after_broker_failure(store):
    channel = StubChannel([make_delivery(1, encode_notification(make_notification("a")))])
    connection = StubBrokerConnection(channel, failures=2)
    consumer = _consumer(connection, store)

    consumer.start()
    assert _wait_for(lambda: channel.acks == [1])
    consumer.stop(timeout=2)

    assert connection.resets >= 2
    assert store.count(123) == 1


class _BlockingStore(InMemoryNotificationStore):
    """Holds every append until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def append(self, notification) -> None:
        self.entered.set()
        assert self.release.wait(5)
        super().append(notification)


class _LoggingChannel(StubChannel):
    def __init__(self, deliveries, events: list[str]):
        super().__init__(deliveries)
        self._events = events

    def basic_ack(self, delivery_tag, multiple=False):
        self._events.append(f"ack:{delivery_tag}")
        super().basic_ack(delivery_tag, multiple)


class _LoggingConnection(StubBrokerConnection):
    def __init__(self, channel, events: list[str]):
        super().__init__(channel)
        self._events = events

    def close(self):
        self._events.append("close")
        super().close()


def test_stop_waits_for_in_flight_delivery_to_be_acknowledged():
    events: list[str] = []
    store = _BlockingStore()
    channel = _LoggingChannel(
        [make_delivery(1, encode_notification(make_notification("a")))], events
    )
    connection = _LoggingConnection(channel, events)
    consumer = _consumer(connection, store)

    consumer.start()
    assert store.entered.wait(2)

    stopper = threading.Thread(target=consumer.stop, kwargs={"timeout": 5})
    stopper.start()
    time.sleep(0.05)

    assert stopper.is_alive()
    assert connection.closed is False
    assert channel.acks == []

    store.release.set()
    stopper.join(5)

    assert not stopper.is_alive()
    assert not consumer.is_running
    assert channel.acks == [1]
    assert channel.nacks == []
    assert events == ["ack:1", "close"]
    assert connection.closed is True
    assert store.count(123) == 1
