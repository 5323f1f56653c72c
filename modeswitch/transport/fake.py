from collections import deque
from typing import Deque, Dict, List, Set, Tuple
from .library import LibraryUnavailableError

class InMemoryRemoteLibrary:
    """In-process stand-in for the remote DLL.

    Stores parameters faithfully and exposes knobs to simulate an engine that
    refuses logins, drops the session, or rejects single parameters. Used by
    the test suite and by the ``--simulate`` run mode.
    """

    def __init__(self, variant: int = 2):
        self.variant = variant
        self.available = True
        self.running = True
        self.login_code = 0
        self.login_codes: Deque[int] = deque()  # Consumed before login_code
        self.failing_calls: Set[str] = set()     # Method names that raise
        self.rejected_parameters: Set[str] = set()
        self.parameters: Dict[str, float] = {}
        self.dirty = False

        self.login_calls = 0
        self.logout_calls = 0
        self.writes: List[Tuple[str, float]] = []

    def _check(self, call: str):
        if not self.available:
            raise LibraryUnavailableError("VoicemeeterRemote64.dll not found (simulated)")
        if call in self.failing_calls:
            raise RuntimeError(f"{call} failed (simulated)")

    # Simulation helpers

    def drop_session(self):
        """Simulate VoiceMeeter being closed underneath a live session"""
        self.running = False

    def restore_session(self):
        self.running = True

    def external_change(self, name: str, value: float):
        """Simulate a user editing a parameter in the VoiceMeeter window"""
        self.parameters[name] = value
        self.dirty = True

    # Remote API

    def login(self) -> int:
        self._check("login")
        self.login_calls += 1
        code = self.login_codes.popleft() if self.login_codes else self.login_code
        if code in (0, 1):
            self.running = True
        return code

    def logout(self) -> int:
        self._check("logout")
        self.logout_calls += 1
        return 0

    def set_parameter_float(self, name: str, value: float) -> int:
        self._check("set_parameter_float")
        if name in self.rejected_parameters:
            return -3
        self.writes.append((name, value))
        self.parameters[name] = value
        return 0

    def get_parameter_float(self, name: str) -> Tuple[int, float]:
        self._check("get_parameter_float")
        if name in self.rejected_parameters:
            return -3, 0.0
        return 0, self.parameters.get(name, 0.0)

    def get_voicemeeter_type(self) -> Tuple[int, int]:
        self._check("get_voicemeeter_type")
        if not self.running:
            return -2, 0
        return 0, self.variant

    def is_parameters_dirty(self) -> int:
        self._check("is_parameters_dirty")
        dirty, self.dirty = self.dirty, False
        return 1 if dirty else 0
