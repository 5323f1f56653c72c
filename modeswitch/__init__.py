"""ModeSwitch - VoiceMeeter output mode control with automatic reconnection"""

__version__ = "0.1.0"

from modeswitch.core.models import OutputMode, ConnectionState, ReconnectPolicy
from modeswitch.core.service import OutputModeService
from modeswitch.utils.config import ConfigManager

__all__ = [
    "OutputMode",
    "ConnectionState",
    "ReconnectPolicy",
    "OutputModeService",
    "ConfigManager",
]
