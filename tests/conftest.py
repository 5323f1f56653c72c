# pylint: disable=missing-module-docstring,missing-function-docstring

from typing import Any, List, Tuple

import pytest

from modeswitch.core.controller import ModeController
from modeswitch.core.events import EventNotifier
from modeswitch.core.models import Notification, ReconnectPolicy
from modeswitch.core.supervisor import ConnectionSupervisor
from modeswitch.transport.fake import InMemoryRemoteLibrary
from modeswitch.transport.routing import RoutingTransport


class EventRecorder:
    """Collects every notification published on a notifier"""

    def __init__(self, notifier: EventNotifier):
        self.events: List[Tuple[Notification, Tuple[Any, ...]]] = []
        notifier.subscribe_all(self._record)

    def _record(self, kind: Notification, args: tuple) -> None:
        self.events.append((kind, args))

    def of(self, kind: Notification) -> List[Tuple[Any, ...]]:
        return [args for recorded, args in self.events if recorded is kind]

    def kinds(self) -> List[Notification]:
        return [kind for kind, _ in self.events]


@pytest.fixture
def library() -> InMemoryRemoteLibrary:
    return InMemoryRemoteLibrary()


@pytest.fixture
def transport(library: InMemoryRemoteLibrary) -> RoutingTransport:
    return RoutingTransport(library)


@pytest.fixture
def notifier() -> EventNotifier:
    return EventNotifier()


@pytest.fixture
def recorder(notifier: EventNotifier) -> EventRecorder:
    return EventRecorder(notifier)


@pytest.fixture
def controller(transport: RoutingTransport, notifier: EventNotifier) -> ModeController:
    return ModeController(transport, notifier, strip_index=3)


@pytest.fixture
def make_supervisor(transport: RoutingTransport, controller: ModeController, notifier: EventNotifier):
    def factory(**policy: Any) -> ConnectionSupervisor:
        defaults = {"probe_interval": 5.0, "retry_interval": 3.0, "max_attempts": 0}
        defaults.update(policy)
        return ConnectionSupervisor(
            transport,
            controller,
            notifier,
            policy=ReconnectPolicy(**defaults),
            clock=lambda: 0.0,
        )

    return factory
