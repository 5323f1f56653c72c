from modeswitch.utils.config import ConfigManager
from modeswitch.utils.logger import configure_logging, log_history
from modeswitch.core.models import Notification, OutputMode
from modeswitch.core.service import OutputModeService
from typing import Optional

MODE_KEYS = {
    "1": OutputMode.A, "a": OutputMode.A,
    "2": OutputMode.B, "b": OutputMode.B,
    "3": OutputMode.C, "c": OutputMode.C,
}

HELP_TEXT = """Available commands:
  1 | a        - Mode A (headphones only)
  2 | b        - Mode B (headphones + speakers)
  3 | c        - Mode C (speakers only)
  t | toggle   - Toggle between A and B
  s | sync     - Read the current mode back from VoiceMeeter
  status       - Show connection and mode status
  connect      - Connect to VoiceMeeter
  disconnect   - Disconnect (stops automatic reconnection)
  r | reconnect- Force a reconnect
  mute/unmute  - Mute or unmute the strip
  gain <dB>    - Set strip gain (-60 to 12)
  logs [n]     - Show recent log entries
  quit         - Exit"""

class ModeSwitchCLI:
    """Command-line interface for the output mode service"""

    def __init__(self, service: Optional[OutputModeService] = None, simulate: bool = False):
        self.service = service
        self.simulate = simulate
        self.config_manager = ConfigManager()

    def initialize_service(self) -> bool:
        """Build and start the output mode service"""
        try:
            if self.service is None:
                config = self.config_manager.load_config()
                configure_logging(config['logging']['level'], config['logging']['history_size'])
                self.service = OutputModeService.from_config(self.config_manager, simulate=self.simulate)
            self._subscribe_events()
            self.service.start()
        except ValueError as e:
            print(f"✗ Invalid configuration: {e}")
            return False

        if self.service.supervisor.is_connected():
            print(f"✓ Connected to {self.service.transport.engine_variant_name()}")
        else:
            print("✗ Not connected to VoiceMeeter (use 'connect' to retry)")
        return True

    def _subscribe_events(self):
        notifier = self.service.notifier
        notifier.subscribe(Notification.MODE_CHANGED, lambda mode: print(f"→ Mode {mode.value}: {mode.label}"))
        notifier.subscribe(Notification.RECONNECTING, lambda: print("… Connection lost, reconnecting"))
        notifier.subscribe(Notification.RECONNECTED, lambda: print("✓ Reconnected"))

    def show_status(self):
        status = self.service.get_status()
        print("\nStatus:")
        print("-" * 40)
        print(f"{'State':<20} {status['state']}")
        print(f"{'Engine':<20} {status['engine'] or '-'}")
        print(f"{'Strip':<20} {status['strip_index']}")
        print(f"{'Current mode':<20} {status['current_mode'] or '-'}")
        print(f"{'Last applied mode':<20} {status['last_applied_mode'] or '-'}")
        print(f"{'Reconnect attempts':<20} {status['reconnect_attempts']}")
        if status['retries_exhausted']:
            print("Automatic reconnection gave up (use 'reconnect')")

    def show_logs(self, limit: int = 20):
        entries = log_history.entries(limit)
        if not entries:
            print("No log entries")
            return
        for entry in entries:
            print(entry)

    def set_mode(self, mode: OutputMode):
        if self.service.controller.set_mode(mode):
            print(f"✓ Mode {mode.value} ({mode.label})")
        else:
            print(f"✗ Failed to apply mode {mode.value}")

    def handle_command(self, line: str) -> bool:
        """Run one command; returns False when the CLI should exit"""
        parts = line.strip().split()
        if not parts:
            return True
        command, args = parts[0].lower(), parts[1:]
        service = self.service

        # Keep the supervisor current before acting on the command
        service.tick()

        if command in ["quit", "exit", "q"]:
            return False
        elif command in MODE_KEYS:
            self.set_mode(MODE_KEYS[command])
        elif command in ["t", "toggle"]:
            if service.controller.toggle_mode():
                print(f"✓ Mode {service.controller.current_mode.value}")
            else:
                print("✗ Toggle failed")
        elif command in ["s", "sync"]:
            mode = service.controller.sync_from_engine()
            print(f"Current mode: {mode.value if mode else 'unknown'}")
        elif command == "status":
            self.show_status()
        elif command == "connect":
            print("✓ Connected" if service.supervisor.connect() else "✗ Connection failed")
        elif command == "disconnect":
            service.supervisor.shutdown()
            print("Disconnected")
        elif command in ["r", "reconnect"]:
            print("✓ Reconnected" if service.supervisor.force_reconnect() else "✗ Reconnect attempt failed")
        elif command in ["mute", "unmute"]:
            ok = service.controller.set_mute(command == "mute")
            print(f"✓ {command.capitalize()}d" if ok else f"✗ {command.capitalize()} failed")
        elif command == "gain":
            try:
                gain_db = float(args[0])
            except (IndexError, ValueError):
                print("Usage: gain <dB>")
                return True
            print(f"✓ Gain {gain_db:+.1f} dB" if service.controller.set_gain(gain_db) else "✗ Gain change failed")
        elif command == "logs":
            try:
                self.show_logs(int(args[0]) if args else 20)
            except ValueError:
                print("Usage: logs [count]")
        elif command == "help":
            print(HELP_TEXT)
        else:
            print(f"Unknown command: {command}")
        return True

    def run_interactive_mode(self):
        """Run interactive CLI mode"""
        if not self.initialize_service():
            return

        print("\nModeSwitch Interactive Mode")
        print("Commands: 1/2/3, toggle, sync, status, reconnect, help, quit")

        while True:
            try:
                if not self.handle_command(input("\n> ")):
                    break
            except KeyboardInterrupt:
                break
            except EOFError:
                break

        print("\nShutting down...")
        if self.service:
            self.service.stop()
