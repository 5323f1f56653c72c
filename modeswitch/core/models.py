from enum import Enum
from dataclasses import dataclass

class OutputMode(Enum):
    A = "A"  # Headphones only (A1 on, A2 off)
    B = "B"  # Headphones and speakers (A1 on, A2 on)
    C = "C"  # Speakers only (A1 off, A2 on)

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "OutputMode":
        """Parse a mode name such as "a", "B" or "c" """
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown output mode: {value!r} (expected A, B or C)")

_MODE_LABELS = {
    OutputMode.A: "Headphones only",
    OutputMode.B: "Headphones + Speakers",
    OutputMode.C: "Speakers only",
}

class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"

class Notification(Enum):
    MODE_CHANGED = "mode_changed"
    CONNECTION_CHANGED = "connection_changed"
    RECONNECTING = "reconnecting"
    RECONNECTED = "reconnected"

class StripParameter(Enum):
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    MUTE = "Mute"
    GAIN = "Gain"

class EngineVariant(Enum):
    UNKNOWN = 0
    VOICEMEETER = 1
    BANANA = 2
    POTATO = 3

    @classmethod
    def from_id(cls, variant_id: int) -> "EngineVariant":
        try:
            return cls(variant_id)
        except ValueError:
            return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return {
            EngineVariant.VOICEMEETER: "VoiceMeeter",
            EngineVariant.BANANA: "VoiceMeeter Banana",
            EngineVariant.POTATO: "VoiceMeeter Potato",
        }.get(self, "Unknown")

def strip_parameter(strip_index: int, parameter: StripParameter) -> str:
    """Format the remote parameter name for a strip, e.g. Strip[3].A1"""
    return f"Strip[{strip_index}].{parameter.value}"

@dataclass(frozen=True)
class RoutingFlags:
    primary: bool    # A1
    secondary: bool  # A2

@dataclass(frozen=True)
class ReconnectPolicy:
    probe_interval: float = 5.0
    retry_interval: float = 3.0
    max_attempts: int = 0  # 0 = retry forever
    auto_reconnect: bool = True

    def __post_init__(self):
        if self.probe_interval <= 0:
            raise ValueError(f"probe_interval must be positive, got {self.probe_interval}")
        if self.retry_interval <= 0:
            raise ValueError(f"retry_interval must be positive, got {self.retry_interval}")
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must be >= 0, got {self.max_attempts}")

    @property
    def bounded(self) -> bool:
        return self.max_attempts > 0
