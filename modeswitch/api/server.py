from modeswitch.core.models import Notification
from modeswitch.core.service import OutputModeService
from modeswitch.utils.logger import get_logger, log_history, configure_logging
from modeswitch.utils.config import ConfigManager
from modeswitch.api.models import (
    SetModeRequest, SetMuteRequest, SetGainRequest, ModeResult, StatusResponse, LogEntryModel
)
from typing import List, Optional
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import asyncio
import uvicorn

logger = get_logger("api")

# Global service instance
output_service: Optional[OutputModeService] = None
config_manager = ConfigManager()
simulate_engine = False

async def _tick_loop(service: OutputModeService):
    """Host scheduler: ticks the supervisor on the server's event loop"""
    while service.is_running:
        service.tick()
        await asyncio.sleep(service.tick_interval)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan handler"""
    global output_service

    # Startup
    if output_service is None:
        config_manager.load_config()
        output_service = OutputModeService.from_config(config_manager, simulate=simulate_engine)

    output_service.start()
    tick_task = asyncio.create_task(_tick_loop(output_service))

    try:
        yield
    finally:
        # Shutdown
        tick_task.cancel()
        try:
            await tick_task
        except asyncio.CancelledError:
            pass
        output_service.stop()

# Create FastAPI app
app = FastAPI(
    title="ModeSwitch API",
    description="Output mode control for VoiceMeeter strips",
    version="0.1.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _require_service() -> OutputModeService:
    if not output_service:
        raise HTTPException(status_code=503, detail="Output mode service not initialized")
    return output_service

def _require_connection() -> OutputModeService:
    service = _require_service()
    if not service.supervisor.is_connected():
        raise HTTPException(status_code=409, detail="Not connected to VoiceMeeter")
    return service

# ==============================================================================
# API Endpoints
# ==============================================================================

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "ModeSwitch API",
        "version": "0.1.0",
        "status": "running" if output_service and output_service.is_running else "stopped"
    }

@app.get("/status", response_model=StatusResponse)
async def get_status():
    """Connection and mode status"""
    return StatusResponse(**_require_service().get_status())

@app.post("/connect")
async def connect():
    """Connect to the engine and apply the last or default mode"""
    service = _require_service()
    return {"success": service.supervisor.connect(), "state": service.supervisor.state.value}

@app.post("/disconnect")
async def disconnect():
    """Close the session; automatic reconnection stays off until /connect"""
    service = _require_service()
    service.supervisor.shutdown()
    return {"state": service.supervisor.state.value}

@app.post("/reconnect")
async def force_reconnect():
    """Drop the session and retry immediately"""
    service = _require_service()
    success = service.supervisor.force_reconnect()
    return {"success": success, "state": service.supervisor.state.value}

@app.post("/mode", response_model=ModeResult)
async def set_mode(request: SetModeRequest):
    """Apply an output mode"""
    service = _require_connection()
    success = service.controller.set_mode(request.mode)
    return ModeResult(success=success, mode=service.controller.current_mode)

@app.post("/mode/toggle", response_model=ModeResult)
async def toggle_mode():
    """Switch between mode A and mode B"""
    service = _require_connection()
    success = service.controller.toggle_mode()
    return ModeResult(success=success, mode=service.controller.current_mode)

@app.post("/mode/sync", response_model=ModeResult)
async def sync_mode():
    """Read the routing flags back from the engine"""
    service = _require_connection()
    mode = service.controller.sync_from_engine()
    return ModeResult(success=mode is not None, mode=mode)

@app.put("/strip/mute")
async def set_mute(request: SetMuteRequest):
    """Mute or unmute the controlled strip"""
    service = _require_connection()
    return {"success": service.controller.set_mute(request.muted)}

@app.put("/strip/gain")
async def set_gain(request: SetGainRequest):
    """Set the gain of the controlled strip in dB (clamped to -60..12)"""
    service = _require_connection()
    return {"success": service.controller.set_gain(request.gain_db)}

@app.get("/logs", response_model=List[LogEntryModel])
async def get_logs(limit: int = 100):
    """Most recent log entries"""
    if limit < 0:
        raise HTTPException(status_code=400, detail="limit must be >= 0")
    return [
        LogEntryModel(
            timestamp=entry.timestamp.isoformat(),
            level=entry.level,
            context=entry.context,
            message=entry.message
        )
        for entry in log_history.entries(limit)
    ]

def _event_message(kind: Notification, args: tuple) -> dict:
    if kind is Notification.MODE_CHANGED:
        data = {"mode": args[0].value}
    elif kind is Notification.CONNECTION_CHANGED:
        data = {"connected": args[0]}
    else:
        data = {}
    return {"type": kind.value, "data": data}

@app.websocket("/ws/events")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint pushing mode and connection notifications"""
    service = output_service
    await websocket.accept()
    if service is None:
        await websocket.close(code=1011)
        return

    queue: asyncio.Queue = asyncio.Queue(maxsize=100)

    def forward(kind: Notification, args: tuple):
        if queue.full():
            logger.warning("WebSocket client is not keeping up, dropping event")
            return
        queue.put_nowait(_event_message(kind, args))

    service.notifier.subscribe_all(forward)
    try:
        while True:
            message = await queue.get()
            await websocket.send_json(message)
    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        service.notifier.unsubscribe_all(forward)

def run_api_server(simulate: bool = False):
    """Run the FastAPI server"""
    global simulate_engine

    config = config_manager.load_config()
    configure_logging(config['logging']['level'], config['logging']['history_size'])
    simulate_engine = simulate
    api_config = config['api']

    print(f"Starting ModeSwitch API server on {api_config['host']}:{api_config['port']}")
    uvicorn.run(
        app,
        host=api_config['host'],
        port=api_config['port'],
        log_level="info"
    )
