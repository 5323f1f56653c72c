from modeswitch.core.codec import ModeCodec
from modeswitch.core.controller import DEFAULT_STRIP_INDEX, ModeController
from modeswitch.core.events import EventNotifier
from modeswitch.core.models import OutputMode, ReconnectPolicy
from modeswitch.core.supervisor import ConnectionSupervisor
from modeswitch.transport.routing import RoutingTransport
from modeswitch.transport.library import RemoteLibrary
from modeswitch.transport.fake import InMemoryRemoteLibrary
from modeswitch.utils.config import ConfigManager
from modeswitch.utils.logger import get_logger
from typing import Callable, Dict, Any, Optional
import time

logger = get_logger("service")

class OutputModeService:
    """Owns one transport, controller and supervisor and drives them"""

    def __init__(self, transport: RoutingTransport, policy: Optional[ReconnectPolicy] = None,
                 strip_index: int = DEFAULT_STRIP_INDEX, default_mode: OutputMode = OutputMode.A,
                 auto_connect: bool = True, tick_interval: float = 0.5,
                 clock: Callable[[], float] = time.monotonic):
        self.transport = transport
        self.notifier = EventNotifier()
        self.controller = ModeController(
            transport, self.notifier,
            strip_index=strip_index,
            default_mode=default_mode,
            codec=ModeCodec()
        )
        self.supervisor = ConnectionSupervisor(
            transport, self.controller, self.notifier,
            policy=policy, clock=clock
        )
        self.auto_connect = auto_connect
        self.tick_interval = tick_interval
        self.clock = clock
        self.is_running = False

    @classmethod
    def from_config(cls, config_manager: ConfigManager, simulate: bool = False) -> "OutputModeService":
        """Build a service from loaded configuration"""
        config = config_manager.config
        if simulate:
            library = InMemoryRemoteLibrary()
            logger.info("Using simulated VoiceMeeter engine")
        else:
            library = RemoteLibrary(config['engine']['library_path'])

        return cls(
            RoutingTransport(library),
            policy=config_manager.reconnect_policy(),
            strip_index=config_manager.strip_index(),
            default_mode=config_manager.default_mode(),
            auto_connect=bool(config['output']['auto_connect']),
            tick_interval=config_manager.tick_interval(),
        )

    def start(self):
        """Start the service, connecting first if auto-connect is enabled"""
        if self.is_running:
            return

        self.is_running = True
        logger.info("Output mode service started")
        if self.auto_connect:
            self.supervisor.connect()

    def stop(self):
        """Stop the service and close the session"""
        if not self.is_running:
            return

        self.is_running = False
        self.supervisor.shutdown()
        logger.info("Output mode service stopped")

    def tick(self, now: Optional[float] = None):
        """One scheduler step: probe/retry, then pick up external changes"""
        if not self.is_running:
            return

        self.supervisor.tick(self.clock() if now is None else now)
        self.controller.poll_engine_changes()

    def run_forever(self, should_stop: Optional[Callable[[], bool]] = None):
        """Headless host loop ticking at the configured interval until stopped"""
        self.start()
        try:
            while self.is_running and not (should_stop and should_stop()):
                self.tick()
                time.sleep(self.tick_interval)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.stop()

    def get_status(self) -> Dict[str, Any]:
        """Status snapshot"""
        controller = self.controller
        supervisor = self.supervisor
        return {
            'connected': supervisor.is_connected(),
            'state': supervisor.state.value,
            'reconnect_attempts': supervisor.reconnect_attempts,
            'retries_exhausted': supervisor.retries_exhausted,
            'current_mode': controller.current_mode.value if controller.current_mode else None,
            'last_applied_mode': controller.last_applied_mode.value if controller.last_applied_mode else None,
            'strip_index': controller.strip_index,
            'engine': self.transport.engine_variant_name() if supervisor.is_connected() else None,
            'library_available': self.transport.library_available,
            'running': self.is_running
        }
