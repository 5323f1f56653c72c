from typing import Callable, Optional
from .codec import ModeCodec
from .events import EventNotifier
from .models import Notification, OutputMode, RoutingFlags, StripParameter
from modeswitch.transport.routing import RoutingTransport
from modeswitch.utils.logger import get_logger

logger = get_logger("controller")

DEFAULT_STRIP_INDEX = 3  # VoiceMeeter Input (VAIO) on Banana

class ModeController:
    """Applies output modes to one strip and remembers the last applied mode.

    ``connection_check`` decides whether mode writes are allowed. The
    supervisor binds it to its own state; until then the transport's open
    flag is used.
    """

    def __init__(self, transport: RoutingTransport, notifier: EventNotifier,
                 strip_index: int = DEFAULT_STRIP_INDEX,
                 default_mode: OutputMode = OutputMode.A,
                 codec: Optional[ModeCodec] = None):
        self.transport = transport
        self.notifier = notifier
        self.strip_index = strip_index
        self.default_mode = default_mode
        self.codec = codec or ModeCodec()

        self.current_mode: Optional[OutputMode] = None
        self.last_applied_mode: Optional[OutputMode] = None
        self._connection_check: Callable[[], bool] = lambda: self.transport.is_open

    def bind_connection_check(self, check: Callable[[], bool]):
        self._connection_check = check

    @property
    def is_connected(self) -> bool:
        return self._connection_check()

    def set_mode(self, mode: OutputMode) -> bool:
        """Write the routing flags for a mode.

        Both flags are written even when the first write fails, so a partial
        failure can leave the strip with mixed flags. The result is False in
        that case and the last applied mode is kept.
        """
        if not self.is_connected:
            logger.error(f"Cannot set mode {mode.value}: not connected")
            return False

        flags = self.codec.to_flags(mode)
        primary_ok = self.transport.set_strip_flag(self.strip_index, StripParameter.A1, flags.primary)
        secondary_ok = self.transport.set_strip_flag(self.strip_index, StripParameter.A2, flags.secondary)

        if not (primary_ok and secondary_ok):
            if primary_ok or secondary_ok:
                logger.warning(
                    f"Partial write applying mode {mode.value} on strip {self.strip_index} "
                    f"(A1 ok={primary_ok}, A2 ok={secondary_ok}); routing may be inconsistent"
                )
            else:
                logger.error(f"Failed to apply mode {mode.value} on strip {self.strip_index}")
            return False

        previous = self.last_applied_mode
        self.current_mode = mode
        if previous != mode:
            self.last_applied_mode = mode
            logger.info(f"Mode changed: {previous.value if previous else 'None'} -> {mode.value}")
            self.notifier.publish(Notification.MODE_CHANGED, mode)
        return True

    def toggle_mode(self) -> bool:
        """Alternate between A and B; from C (or no mode yet) go to A"""
        target = OutputMode.B if self.current_mode is OutputMode.A else OutputMode.A
        return self.set_mode(target)

    def restore_mode(self) -> bool:
        """Reapply the last applied mode, or the default mode if none was applied"""
        mode = self.last_applied_mode or self.default_mode
        logger.info(f"Restoring mode {mode.value} on strip {self.strip_index}")
        return self.set_mode(mode)

    def sync_from_engine(self) -> Optional[OutputMode]:
        """Read the strip flags back and update the current mode.

        Unreadable or unmapped flags (both outputs off) keep the previous mode.
        """
        if not self.is_connected:
            return self.current_mode

        primary = self.transport.get_strip_flag(self.strip_index, StripParameter.A1)
        secondary = self.transport.get_strip_flag(self.strip_index, StripParameter.A2)
        if primary is None or secondary is None:
            logger.warning(f"Could not read routing flags of strip {self.strip_index}")
            return self.current_mode

        mode = self.codec.from_flags(RoutingFlags(primary=primary, secondary=secondary))
        if mode is not None:
            self.current_mode = mode

        logger.debug(
            f"Synced from engine: A1={primary}, A2={secondary}, "
            f"Mode={self.current_mode.value if self.current_mode else 'None'}"
        )
        return self.current_mode

    def poll_engine_changes(self) -> bool:
        """Sync when the engine reports that parameters changed externally"""
        if self.is_connected and self.transport.parameters_dirty():
            self.sync_from_engine()
            return True
        return False

    def set_mute(self, muted: bool) -> bool:
        if not self.is_connected:
            logger.error("Cannot change mute: not connected")
            return False
        return self.transport.set_strip_mute(self.strip_index, muted)

    def set_gain(self, gain_db: float) -> bool:
        if not self.is_connected:
            logger.error("Cannot change gain: not connected")
            return False
        return self.transport.set_strip_gain(self.strip_index, gain_db)
