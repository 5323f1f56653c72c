from typing import Optional
from pydantic import BaseModel
from modeswitch.core.models import OutputMode

class SetModeRequest(BaseModel):
    mode: OutputMode

class SetMuteRequest(BaseModel):
    muted: bool

class SetGainRequest(BaseModel):
    gain_db: float

class ModeResult(BaseModel):
    success: bool
    mode: Optional[OutputMode] = None

class StatusResponse(BaseModel):
    connected: bool
    state: str
    reconnect_attempts: int
    retries_exhausted: bool
    current_mode: Optional[OutputMode] = None
    last_applied_mode: Optional[OutputMode] = None
    strip_index: int
    engine: Optional[str] = None
    library_available: bool
    running: bool

class LogEntryModel(BaseModel):
    timestamp: str
    level: str
    context: str
    message: str
