# pylint: disable=missing-module-docstring,missing-function-docstring

from modeswitch.core.events import EventNotifier
from modeswitch.core.models import Notification, OutputMode


def test_subscribers_receive_payload():
    notifier = EventNotifier()
    received = []
    notifier.subscribe(Notification.MODE_CHANGED, received.append)

    notifier.publish(Notification.MODE_CHANGED, OutputMode.C)

    assert received == [OutputMode.C]


def test_subscribers_only_receive_their_notification():
    notifier = EventNotifier()
    received = []
    notifier.subscribe(Notification.RECONNECTED, lambda: received.append("reconnected"))

    notifier.publish(Notification.RECONNECTING)
    notifier.publish(Notification.RECONNECTED)

    assert received == ["reconnected"]


def test_unsubscribe():
    notifier = EventNotifier()
    received = []
    notifier.subscribe(Notification.CONNECTION_CHANGED, received.append)

    assert notifier.unsubscribe(Notification.CONNECTION_CHANGED, received.append) is True
    assert notifier.unsubscribe(Notification.CONNECTION_CHANGED, received.append) is False

    notifier.publish(Notification.CONNECTION_CHANGED, True)
    assert received == []


def test_duplicate_subscription_is_ignored():
    notifier = EventNotifier()
    received = []

    notifier.subscribe(Notification.CONNECTION_CHANGED, received.append)
    notifier.subscribe(Notification.CONNECTION_CHANGED, received.append)
    notifier.publish(Notification.CONNECTION_CHANGED, False)

    assert received == [False]
    assert notifier.subscriber_count(Notification.CONNECTION_CHANGED) == 1


def test_wildcard_subscriber_sees_everything():
    notifier = EventNotifier()
    received = []

    def record(kind, args):
        received.append((kind, args))

    notifier.subscribe_all(record)
    notifier.publish(Notification.CONNECTION_CHANGED, True)
    notifier.publish(Notification.RECONNECTED)

    assert received == [
        (Notification.CONNECTION_CHANGED, (True,)),
        (Notification.RECONNECTED, ()),
    ]

    assert notifier.unsubscribe_all(record) is True
    notifier.publish(Notification.RECONNECTING)
    assert len(received) == 2


def test_failing_subscriber_does_not_stop_others():
    notifier = EventNotifier()
    received = []

    def broken(_mode):
        raise RuntimeError("subscriber bug")

    notifier.subscribe(Notification.MODE_CHANGED, broken)
    notifier.subscribe(Notification.MODE_CHANGED, received.append)

    notifier.publish(Notification.MODE_CHANGED, OutputMode.A)

    assert received == [OutputMode.A]


def test_subscriber_may_unsubscribe_itself():
    notifier = EventNotifier()
    calls = []

    def once():
        calls.append(1)
        notifier.unsubscribe(Notification.RECONNECTED, once)

    notifier.subscribe(Notification.RECONNECTED, once)
    notifier.publish(Notification.RECONNECTED)
    notifier.publish(Notification.RECONNECTED)

    assert calls == [1]
