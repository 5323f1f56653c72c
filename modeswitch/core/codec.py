from typing import Dict, Optional
from .models import OutputMode, RoutingFlags

class ModeCodec:
    """Maps output modes to the A1/A2 routing flags of a strip and back"""

    _FLAGS: Dict[OutputMode, RoutingFlags] = {
        OutputMode.A: RoutingFlags(primary=True, secondary=False),
        OutputMode.B: RoutingFlags(primary=True, secondary=True),
        OutputMode.C: RoutingFlags(primary=False, secondary=True),
    }
    _MODES: Dict[RoutingFlags, OutputMode] = {flags: mode for mode, flags in _FLAGS.items()}

    def to_flags(self, mode: OutputMode) -> RoutingFlags:
        return self._FLAGS[mode]

    def from_flags(self, flags: RoutingFlags) -> Optional[OutputMode]:
        """Return the mode for a flag pair, or None when both outputs are off"""
        return self._MODES.get(flags)
