"""
ScrollMPRIS Application - Wires sources, shared state and output together.
"""
import sys
import time
import queue
import signal
import logging
import threading
from typing import Callable, Optional

from .config import Settings, LIBRESPOT_URL, LIBRESPOT_WS
from .models import TrackMetadata
from .api import LibrespotAPI
from .handlers import PlayerctlListener, LibrespotSource
from .ui import StatusContext, StatusRenderer

logger = logging.getLogger(__name__)


def print_line(line: str):
    """Write one JSON line for the status bar."""
    sys.stdout.write(line + '\n')
    sys.stdout.flush()


class App:
    """
    Main ScrollMPRIS application.

    Two paths render the same StatusContext under its lock: the printer
    thread (after source updates) and the timer loop (every tick while
    playing). Both share one ScrollState, so scrolling stays in sync.
    """

    def __init__(self, settings: Settings, writer: Callable[[str], None] = print_line):
        self.settings = settings
        self.context = StatusContext()
        self.renderer = StatusRenderer(settings.render)
        self.writer = writer
        self.running = False
        self.source = None
        self.printer: Optional[threading.Thread] = None

        # At most one pending render; bursts of updates collapse into it
        self._pending: queue.Queue = queue.Queue(maxsize=1)

    # --- Source entry points ---

    def on_metadata(self, meta: TrackMetadata, position: float, status: str, service: str):
        """New track, status or player."""
        with self.context.lock:
            playback = self.context.playback
            if playback.has_changed(meta):
                logger.info(f'Track: {meta.title!r} by {meta.artist!r} ({status})')
            playback.update_from_metadata(meta)
            playback.set_service(service)
            playback.update_playback(status, position)
        self.notify()

    def on_seek(self, position: float):
        """Position jumped; metadata unchanged."""
        with self.context.lock:
            self.context.playback.reset_position_cache(position)
        self.notify()

    def on_player_lost(self):
        with self.context.lock:
            self.context.playback.clear()
        self.notify()

    # --- Rendering ---

    def notify(self):
        """Request a render from the printer thread."""
        try:
            self._pending.put_nowait(None)
        except queue.Full:
            pass  # one is already pending and will see the latest state

    def render(self) -> Optional[str]:
        """Render now and write the line if it changed."""
        with self.context.lock:
            line = self.renderer.render(self.context)
            if line is not None:
                self.writer(line)
        return line

    def tick(self) -> Optional[str]:
        """Timer path: only moves while something is playing."""
        with self.context.lock:
            if not self.context.playback.playing:
                return None
            line = self.renderer.render(self.context)
            if line is not None:
                self.writer(line)
        return line

    def _print_updates(self):
        """Printer thread: render once per (coalesced) notification."""
        while self.running:
            try:
                self._pending.get(timeout=0.5)
            except queue.Empty:
                continue
            self.render()

    # --- Lifecycle ---

    def create_source(self):
        """Build the configured playback source."""
        if self.settings.source == 'librespot':
            return LibrespotSource(
                LibrespotAPI(LIBRESPOT_URL),
                LIBRESPOT_WS,
                on_metadata=self.on_metadata,
                on_seek=self.on_seek,
                on_player_lost=self.on_player_lost,
            )
        return PlayerctlListener(
            on_metadata=self.on_metadata,
            on_seek=self.on_seek,
            on_player_lost=self.on_player_lost,
            blocked=self.settings.blocked,
        )

    def _handle_signal(self, signum, frame):
        """Handle SIGTERM/SIGINT for graceful shutdown."""
        sig_name = 'SIGTERM' if signum == signal.SIGTERM else 'SIGINT'
        logger.info(f'Received {sig_name}, shutting down...')
        self.running = False

    def start(self):
        """Run until SIGTERM/SIGINT."""
        logger.info('Starting ScrollMPRIS...')
        signal.signal(signal.SIGTERM, self._handle_signal)
        signal.signal(signal.SIGINT, self._handle_signal)

        self.running = True
        self.printer = threading.Thread(target=self._print_updates, daemon=True)
        self.printer.start()

        self.source = self.create_source()
        self.source.start()

        # Show the "none" state until a source reports in
        self.render()

        delay = self.settings.delay
        logger.info(f'Tick delay: {delay * 1000:.0f}ms')
        try:
            while self.running:
                time.sleep(delay)
                self.tick()
        finally:
            self.stop()

    def stop(self):
        self.running = False
        if self.source:
            self.source.stop()
            self.source = None
        logger.info('ScrollMPRIS stopped')
