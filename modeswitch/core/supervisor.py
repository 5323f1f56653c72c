import time
from typing import Callable, Optional
from .controller import ModeController
from .events import EventNotifier
from .models import ConnectionState, Notification, ReconnectPolicy
from modeswitch.transport.routing import RoutingTransport
from modeswitch.utils.logger import get_logger

logger = get_logger("supervisor")

class ConnectionSupervisor:
    """Connection state machine with periodic probing and bounded reconnection.

    States are DISCONNECTED (initial), CONNECTED and RECONNECTING. The host
    calls ``tick(now)`` at a roughly fixed cadence with a monotonic timestamp
    in seconds; probe and retry timing is derived only from the timestamps
    passed in, so the tick rate just has to be faster than the shortest
    interval in the policy.

    Reconnection only starts after an established session is lost. A failed
    ``connect()`` stays DISCONNECTED and schedules nothing. With a bounded
    policy the retries stop after ``max_attempts`` failures and the state
    stays RECONNECTING until ``force_reconnect()``.
    """

    def __init__(self, transport: RoutingTransport, controller: ModeController,
                 notifier: EventNotifier, policy: Optional[ReconnectPolicy] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.transport = transport
        self.controller = controller
        self.notifier = notifier
        self.policy = policy or ReconnectPolicy()
        self.clock = clock

        self._state = ConnectionState.DISCONNECTED
        self._attempts = 0
        self._exhausted = False
        self._shut_down = False
        self._last_probe_at = 0.0
        self._last_retry_at = 0.0

        controller.bind_connection_check(self.is_connected)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def reconnect_attempts(self) -> int:
        return self._attempts

    @property
    def retries_exhausted(self) -> bool:
        return self._exhausted

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def _enter_connected(self, now: float):
        self._state = ConnectionState.CONNECTED
        self._attempts = 0
        self._exhausted = False
        self._last_probe_at = now

    # Manual transitions

    def connect(self, now: Optional[float] = None) -> bool:
        """Open the session and apply the last (or default) mode"""
        if self._state is ConnectionState.CONNECTED:
            logger.warning("Already connected.")
            return True

        now = self._now(now)
        self._shut_down = False

        if not self.transport.open():
            logger.error("Connection to engine failed")
            return False

        self._enter_connected(now)
        logger.info(f"Connected to {self.transport.engine_variant_name()}")
        self.notifier.publish(Notification.CONNECTION_CHANGED, True)

        if not self.controller.restore_mode():
            logger.warning("Could not apply output mode after connecting")
        return True

    def disconnect(self):
        """Close the session from any state and cancel pending retries"""
        was_connected = self._state is ConnectionState.CONNECTED
        self.transport.close()
        self._state = ConnectionState.DISCONNECTED
        self._attempts = 0
        self._exhausted = False

        # A lost connection already published CONNECTION_CHANGED(False)
        if was_connected:
            logger.info("Disconnected from engine")
            self.notifier.publish(Notification.CONNECTION_CHANGED, False)

    def shutdown(self):
        """Disconnect and stop automatic reconnection until the next manual connect"""
        self._shut_down = True
        self.disconnect()
        logger.info("Supervisor shut down")

    def force_reconnect(self, now: Optional[float] = None) -> bool:
        """Drop the session and immediately run one reconnect attempt"""
        now = self._now(now)
        was_connected = self._state is ConnectionState.CONNECTED

        self._shut_down = False
        self.transport.close()
        self._state = ConnectionState.RECONNECTING
        self._attempts = 0
        self._exhausted = False

        logger.info("Forced reconnection requested")
        if was_connected:
            self.notifier.publish(Notification.CONNECTION_CHANGED, False)
        self.notifier.publish(Notification.RECONNECTING)

        self._last_retry_at = now
        return self._attempt_reconnect(now)

    # Scheduled transitions

    def tick(self, now: Optional[float] = None):
        """Run whatever probe or retry is due at ``now``"""
        if self._shut_down or not self.policy.auto_reconnect:
            return

        now = self._now(now)

        if self._state is ConnectionState.CONNECTED:
            if now - self._last_probe_at >= self.policy.probe_interval:
                self._last_probe_at = now
                self._check_connection(now)

        elif self._state is ConnectionState.RECONNECTING and not self._exhausted:
            if now - self._last_retry_at >= self.policy.retry_interval:
                self._last_retry_at = now
                self._attempt_reconnect(now)

    def _check_connection(self, now: float):
        if self.transport.probe():
            return

        logger.warning("Connection lost to engine.")
        self._state = ConnectionState.RECONNECTING
        self._attempts = 0
        self._exhausted = False
        self._last_retry_at = now

        self.notifier.publish(Notification.CONNECTION_CHANGED, False)
        logger.info("Starting reconnection...")
        self.notifier.publish(Notification.RECONNECTING)

    def _attempt_reconnect(self, now: float) -> bool:
        self._attempts += 1
        logger.info(f"Reconnect attempt {self._attempts}...")

        if self.transport.open():
            self._enter_connected(now)
            logger.info("Reconnected successfully!")
            self.notifier.publish(Notification.CONNECTION_CHANGED, True)
            self.notifier.publish(Notification.RECONNECTED)

            if not self.controller.restore_mode():
                logger.warning("Could not restore output mode after reconnecting")
            return True

        if not self.transport.library_available:
            self._exhausted = True
            logger.error("Remote library unavailable; automatic reconnection stopped")
        elif self.policy.bounded and self._attempts >= self.policy.max_attempts:
            self._exhausted = True
            logger.error(f"Max reconnect attempts ({self.policy.max_attempts}) reached.")
        return False
