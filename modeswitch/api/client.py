# ModeSwitch API Client
# Client for controlling output modes through the ModeSwitch server

import requests
import json
import websockets
import asyncio
from typing import Dict, List, Optional, Callable
from modeswitch.utils.logger import get_logger

logger = get_logger("client")

class ModeSwitchClient:
    """Client for communicating with the ModeSwitch API"""

    def __init__(self, base_url: str = "http://localhost:8080", session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.websocket = None
        self.event_callbacks: Dict[str, Callable] = {}

    def _get(self, path: str, **kwargs):
        response = self.session.get(f"{self.base_url}{path}", **kwargs)
        response.raise_for_status()
        return response.json()

    def _post(self, path: str, data: Optional[Dict] = None):
        response = self.session.post(f"{self.base_url}{path}", json=data)
        response.raise_for_status()
        return response.json()

    def _put(self, path: str, data: Dict):
        response = self.session.put(f"{self.base_url}{path}", json=data)
        response.raise_for_status()
        return response.json()

    # Connection API
    def get_status(self) -> Dict:
        """Get connection and mode status"""
        return self._get("/status")

    def connect(self) -> Dict:
        return self._post("/connect")

    def disconnect(self) -> Dict:
        return self._post("/disconnect")

    def force_reconnect(self) -> Dict:
        return self._post("/reconnect")

    # Mode API
    def set_mode(self, mode: str) -> Dict:
        """Apply output mode A, B or C"""
        return self._post("/mode", {"mode": mode.upper()})

    def toggle_mode(self) -> Dict:
        return self._post("/mode/toggle")

    def sync_mode(self) -> Dict:
        return self._post("/mode/sync")

    # Strip API
    def set_mute(self, muted: bool) -> Dict:
        return self._put("/strip/mute", {"muted": muted})

    def set_gain(self, gain_db: float) -> Dict:
        return self._put("/strip/gain", {"gain_db": gain_db})

    def get_logs(self, limit: int = 100) -> List[Dict]:
        return self._get("/logs", params={"limit": limit})

    # WebSocket Event Handling
    async def connect_websocket(self):
        """Connect to WebSocket for mode and connection events"""
        ws_url = self.base_url.replace("http", "ws", 1) + "/ws/events"
        try:
            self.websocket = await websockets.connect(ws_url)
            # Start message handling in background
            asyncio.create_task(self._handle_websocket_messages())
        except Exception as e:
            logger.error(f"Failed to connect WebSocket: {e}")

    def register_event_callback(self, event_type: str, callback: Callable):
        """Register callback for an event type (mode_changed, connection_changed, ...)"""
        self.event_callbacks[event_type] = callback

    async def dispatch_message(self, message: str):
        """Route one WebSocket message to its registered callback"""
        try:
            data = json.loads(message)
        except ValueError as e:
            logger.warning(f"WebSocket message error: {e}")
            return

        callback = self.event_callbacks.get(data.get("type"))
        if callback is None:
            return
        if asyncio.iscoroutinefunction(callback):
            await callback(data.get("data"))
        else:
            callback(data.get("data"))

    async def _handle_websocket_messages(self):
        """Handle incoming WebSocket messages"""
        try:
            async for message in self.websocket:
                try:
                    await self.dispatch_message(message)
                except Exception as e:
                    logger.error(f"Event callback error: {e}")
        except websockets.exceptions.ConnectionClosed:
            logger.info("WebSocket connection closed")
        except Exception as e:
            logger.error(f"WebSocket error: {e}")

# Usage Example
if __name__ == "__main__":

    async def main():
        client = ModeSwitchClient()

        status = client.get_status()
        print(f"Status: {status}")

        client.set_mode("B")
        print("Switched to headphones + speakers")

        def on_mode_changed(data):
            print(f"Mode changed to {data['mode']}")

        def on_connection_changed(data):
            print(f"Connected: {data['connected']}")

        client.register_event_callback("mode_changed", on_mode_changed)
        client.register_event_callback("connection_changed", on_connection_changed)

        await client.connect_websocket()

        try:
            while True:
                await asyncio.sleep(1)
        except KeyboardInterrupt:
            print("Shutting down...")
            if client.websocket:
                await client.websocket.close()

    asyncio.run(main())
