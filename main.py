#!/usr/bin/env python3
"""
ModeSwitch - VoiceMeeter output mode control
Main entry point for the application
"""

import sys
from modeswitch.api.server import run_api_server
from modeswitch.cli.interface import ModeSwitchCLI
from modeswitch.core.service import OutputModeService
from modeswitch.utils.config import ConfigManager
from modeswitch.utils.logger import configure_logging


def main():
    """Main entry point"""
    args = [arg for arg in sys.argv[1:] if arg != "--simulate"]
    simulate = "--simulate" in sys.argv[1:]

    if args:
        command = args[0].lower()

        if command == "server":
            print("Starting ModeSwitch API server...")
            run_api_server(simulate=simulate)

        elif command == "cli":
            print("Starting ModeSwitch CLI...")
            cli = ModeSwitchCLI(simulate=simulate)
            cli.run_interactive_mode()

        elif command == "run":
            config_manager = ConfigManager()
            config = config_manager.load_config()
            configure_logging(config['logging']['level'], config['logging']['history_size'])
            service = OutputModeService.from_config(config_manager, simulate=simulate)
            print("Running headless, press Ctrl+C to stop...")
            service.run_forever()

        else:
            print(f"Unknown command: {command}")
            print("Available commands: server, cli, run")
    else:
        print("ModeSwitch - VoiceMeeter Output Mode Control")
        print("Version 0.1.0")
        print()
        print("Usage:")
        print("  python main.py server  - Start API server")
        print("  python main.py cli     - Interactive CLI mode")
        print("  python main.py run     - Headless mode with automatic reconnection")
        print()
        print("Add --simulate to use an in-memory VoiceMeeter instead of the DLL.")
        print()
        print("Modes:")
        print("  A - Headphones only       (A1 on,  A2 off)")
        print("  B - Headphones + Speakers (A1 on,  A2 on)")
        print("  C - Speakers only         (A1 off, A2 on)")


if __name__ == "__main__":
    main()
