from typing import Optional
from .library import LibraryUnavailableError, RemoteLibrary
from modeswitch.core.models import EngineVariant, StripParameter, strip_parameter
from modeswitch.utils.logger import get_logger

logger = get_logger("transport")

LOGIN_OK = 0
LOGIN_OK_LAUNCHING = 1  # VoiceMeeter is not running yet and will be started
MIN_GAIN_DB = -60.0
MAX_GAIN_DB = 12.0

class RoutingTransport:
    """Session with the remote routing engine.

    Every remote call is made here and every failure, including exceptions
    raised by the library, is turned into a False/None result. Only two flags
    are tracked: whether a session is open, and whether the library could be
    loaded at all. Once the library is known to be missing, open() fails fast
    for the rest of the process.
    """

    def __init__(self, library=None):
        self.library = library if library is not None else RemoteLibrary()
        self._is_open = False
        self._library_available = True

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def library_available(self) -> bool:
        return self._library_available

    def open(self) -> bool:
        """Log in to the engine"""
        if self._is_open:
            return True

        if not self._library_available:
            return False

        try:
            result = self.library.login()
        except LibraryUnavailableError as e:
            self._library_available = False
            logger.error(f"Remote library unavailable, giving up: {e}")
            return False
        except Exception as e:
            logger.error(f"Login exception: {e}")
            return False

        if result in (LOGIN_OK, LOGIN_OK_LAUNCHING):
            self._is_open = True
            logger.info(f"Login successful. Result: {result}")
            return True

        logger.error(f"Login failed. Error code: {result}")
        return False

    def close(self):
        """Log out of the engine"""
        if not self._is_open:
            return

        # Marked closed first so a failing logout cannot leave the session open
        self._is_open = False

        try:
            self.library.logout()
            logger.info("Logout successful.")
        except Exception as e:
            logger.error(f"Logout exception: {e}")

    def probe(self) -> bool:
        """Check that the open session is still alive"""
        if not self._is_open or not self._library_available:
            return False

        try:
            code, variant = self.library.get_voicemeeter_type()
        except Exception as e:
            logger.warning(f"Probe exception: {e}")
            self._is_open = False
            return False

        if code != 0 or variant <= 0:
            logger.warning(f"Probe failed. Result: {code}, variant: {variant}")
            self._is_open = False
            return False

        return True

    def write_parameter(self, name: str, value: float) -> bool:
        if not self._is_open:
            logger.error(f"Cannot set {name}: not connected")
            return False

        try:
            result = self.library.set_parameter_float(name, value)
        except Exception as e:
            logger.error(f"SetParameter exception for {name}: {e}")
            return False

        if result != 0:
            logger.error(f"SetParameter failed for {name}. Error: {result}")
            return False

        logger.debug(f"SetParameter: {name} = {value}")
        return True

    def read_parameter(self, name: str) -> Optional[float]:
        if not self._is_open:
            return None

        try:
            code, value = self.library.get_parameter_float(name)
        except Exception as e:
            logger.error(f"GetParameter exception for {name}: {e}")
            return None

        if code != 0:
            logger.debug(f"GetParameter failed for {name}. Error: {code}")
            return None
        return value

    def parameters_dirty(self) -> bool:
        """True when the engine reports parameter changes since the last check"""
        if not self._is_open:
            return False
        try:
            return self.library.is_parameters_dirty() == 1
        except Exception as e:
            logger.debug(f"IsParametersDirty exception: {e}")
            return False

    def engine_variant(self) -> int:
        """Engine variant id: 1=VoiceMeeter, 2=Banana, 3=Potato, 0=unknown"""
        if not self._is_open:
            return 0
        try:
            code, variant = self.library.get_voicemeeter_type()
        except Exception:
            return 0
        return variant if code == 0 and variant > 0 else 0

    def engine_variant_name(self) -> str:
        return EngineVariant.from_id(self.engine_variant()).display_name

    # Strip helpers

    def set_strip_flag(self, strip_index: int, parameter: StripParameter, enabled: bool) -> bool:
        return self.write_parameter(strip_parameter(strip_index, parameter), 1.0 if enabled else 0.0)

    def get_strip_flag(self, strip_index: int, parameter: StripParameter) -> Optional[bool]:
        value = self.read_parameter(strip_parameter(strip_index, parameter))
        if value is None:
            return None
        return value > 0.5

    def set_strip_mute(self, strip_index: int, muted: bool) -> bool:
        return self.set_strip_flag(strip_index, StripParameter.MUTE, muted)

    def set_strip_gain(self, strip_index: int, gain_db: float) -> bool:
        gain_db = max(MIN_GAIN_DB, min(MAX_GAIN_DB, gain_db))
        return self.write_parameter(strip_parameter(strip_index, StripParameter.GAIN), gain_db)
