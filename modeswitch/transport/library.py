"""
ctypes binding for the VoicemeeterRemote API.

The DLL is only loaded on first use. Every method returns the raw status code
of the remote call (plus the out-value where the call has one); nothing here
interprets results or catches errors. That is the job of RoutingTransport.
"""

import ctypes
import os
from typing import List, Optional, Tuple

DLL_NAME = "VoicemeeterRemote64.dll"
DLL_ENV_VAR = "VOICEMEETER_REMOTE_DLL"
DEFAULT_DLL_DIRS = [
    r"C:\Program Files (x86)\VB\Voicemeeter",
    r"C:\Program Files\VB\Voicemeeter",
]

class LibraryUnavailableError(Exception):
    """The remote DLL cannot be located or loaded on this machine"""

class RemoteLibrary:
    """Thin wrapper over the VBVMR_* entry points of VoicemeeterRemote64.dll"""

    def __init__(self, library_path: Optional[str] = None):
        self.library_path = library_path
        self.loaded_path: Optional[str] = None
        self._dll = None

    def candidate_paths(self) -> List[str]:
        paths = []
        if self.library_path:
            paths.append(self.library_path)
        env_path = os.environ.get(DLL_ENV_VAR)
        if env_path:
            paths.append(env_path)
        paths.extend(os.path.join(directory, DLL_NAME) for directory in DEFAULT_DLL_DIRS)
        paths.append(DLL_NAME)  # Let the loader search PATH
        return paths

    def _load(self):
        if self._dll is not None:
            return self._dll

        loader = getattr(ctypes, "WinDLL", None)
        if loader is None:
            raise LibraryUnavailableError(f"{DLL_NAME} is only available on Windows")

        errors = []
        for path in self.candidate_paths():
            try:
                dll = loader(path)
            except OSError as e:
                errors.append(f"{path}: {e}")
                continue
            self._bind(dll)
            self._dll = dll
            self.loaded_path = path
            return dll

        raise LibraryUnavailableError(f"{DLL_NAME} not found ({'; '.join(errors)})")

    @staticmethod
    def _bind(dll):
        dll.VBVMR_Login.restype = ctypes.c_long
        dll.VBVMR_Logout.restype = ctypes.c_long
        dll.VBVMR_SetParameterFloat.restype = ctypes.c_long
        dll.VBVMR_SetParameterFloat.argtypes = [ctypes.c_char_p, ctypes.c_float]
        dll.VBVMR_GetParameterFloat.restype = ctypes.c_long
        dll.VBVMR_GetParameterFloat.argtypes = [ctypes.c_char_p, ctypes.POINTER(ctypes.c_float)]
        dll.VBVMR_GetVoicemeeterType.restype = ctypes.c_long
        dll.VBVMR_GetVoicemeeterType.argtypes = [ctypes.POINTER(ctypes.c_long)]
        dll.VBVMR_IsParametersDirty.restype = ctypes.c_long

    def login(self) -> int:
        return int(self._load().VBVMR_Login())

    def logout(self) -> int:
        return int(self._load().VBVMR_Logout())

    def set_parameter_float(self, name: str, value: float) -> int:
        return int(self._load().VBVMR_SetParameterFloat(name.encode("ascii"), ctypes.c_float(value)))

    def get_parameter_float(self, name: str) -> Tuple[int, float]:
        value = ctypes.c_float()
        code = self._load().VBVMR_GetParameterFloat(name.encode("ascii"), ctypes.byref(value))
        return int(code), float(value.value)

    def get_voicemeeter_type(self) -> Tuple[int, int]:
        variant = ctypes.c_long()
        code = self._load().VBVMR_GetVoicemeeterType(ctypes.byref(variant))
        return int(code), int(variant.value)

    def is_parameters_dirty(self) -> int:
        return int(self._load().VBVMR_IsParametersDirty())
