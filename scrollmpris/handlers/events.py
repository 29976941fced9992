"""
Event Listener - WebSocket connection to go-librespot.
"""
import json
import time
import logging
import threading
from typing import Callable, Optional

import websocket

from ..config import SOURCE_RESTART_DELAY

logger = logging.getLogger(__name__)


class EventListener:
    """Listens to go-librespot WebSocket events."""

    def __init__(
        self,
        url: str,
        on_update: Callable[[], None],
        on_seek: Optional[Callable[[float], None]] = None,
        on_connect: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize event listener.

        Args:
            url: WebSocket URL (e.g., ws://localhost:3678/events)
            on_update: Callback when playback state changes
            on_seek: Callback with the new position (seconds) on a seek event
            on_connect: Callback when WebSocket (re)connects
        """
        self.url = url
        self.on_update = on_update
        self.on_seek = on_seek
        self.on_connect = on_connect
        self.ws: Optional[websocket.WebSocketApp] = None
        self.thread: Optional[threading.Thread] = None
        self.running = False

    def start(self):
        """Start listening for events in background thread."""
        self.running = True
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.start()
        logger.info(f'Started WebSocket listener: {self.url}')

    def stop(self):
        """Stop listening for events."""
        self.running = False
        if self.ws:
            self.ws.close()
        logger.info('Stopped WebSocket listener')

    def _run(self):
        """Main loop - connects and reconnects as needed."""
        while self.running:
            try:
                self.ws = websocket.WebSocketApp(
                    self.url,
                    on_open=self._on_open,
                    on_message=self._on_message,
                    on_error=self._on_error,
                    on_close=self._on_close,
                )
                self.ws.run_forever()
            except Exception as e:
                logger.warning(f'WebSocket error: {e}')

            if self.running:
                time.sleep(SOURCE_RESTART_DELAY)

    def _on_open(self, ws):
        """Handle WebSocket open - resync state on every (re)connect."""
        logger.debug('WebSocket connected')
        if self.on_connect:
            self.on_connect()

    def _on_message(self, ws, message: str):
        """Route a seek to on_seek, anything else to on_update."""
        try:
            data = json.loads(message)
        except json.JSONDecodeError as e:
            logger.warning(f'Error parsing event: {e}')
            return
        if not isinstance(data, dict):
            logger.warning(f'Unexpected event payload: {message[:80]}')
            return

        event_type = data.get('type')
        payload = data.get('data') or {}
        position = payload.get('position') if isinstance(payload, dict) else None

        if event_type == 'seek' and self.on_seek and isinstance(position, (int, float)):
            logger.debug(f'Seek event: {position}ms')
            self.on_seek(position / 1000)
            return

        logger.debug(f'{event_type} event')
        self.on_update()

    def _on_error(self, ws, error):
        """Handle WebSocket error."""
        # We'll reconnect anyway
        if error:
            logger.debug(f'WebSocket error: {error}')

    def _on_close(self, ws, close_status, close_msg):
        """Handle WebSocket close."""
        logger.debug('WebSocket disconnected')
