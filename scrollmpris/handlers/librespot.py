"""
Librespot Source - Playback state from go-librespot (REST status + WebSocket events).

WebSocket callbacks only queue work. A single worker thread runs the
blocking /status requests and applies seeks, in the order the events arrived.
"""
import queue
import logging
from typing import Callable, Optional

from ..api.librespot import LibrespotAPI, SERVICE_NAME, parse_status
from ..models import TrackMetadata
from ..utils import run_async
from .events import EventListener

logger = logging.getLogger(__name__)

# Worker job markers; a float job is a seek position in seconds
_REFRESH = 'refresh'
_STOP = 'stop'


class LibrespotSource:
    """Feeds go-librespot playback changes to the app callbacks."""

    def __init__(
        self,
        api: LibrespotAPI,
        ws_url: str,
        on_metadata: Callable[[TrackMetadata, float, str, str], None],
        on_seek: Callable[[float], None],
        on_player_lost: Callable[[], None],
        listener: Optional[EventListener] = None,
    ):
        self.api = api
        self.on_metadata = on_metadata
        self.on_seek = on_seek
        self.on_player_lost = on_player_lost
        self.events = listener or EventListener(
            ws_url,
            on_update=self.request_refresh,
            on_seek=self.queue_seek,
            on_connect=self._on_connect,
        )
        self._jobs: queue.Queue = queue.Queue()
        self._had_track = False

    def start(self):
        run_async(self._work)
        self.events.start()
        self.request_refresh()

    def stop(self):
        self.events.stop()
        self._jobs.put(_STOP)

    def request_refresh(self):
        """Schedule a /status fetch on the worker thread."""
        self._jobs.put(_REFRESH)

    def queue_seek(self, position: float):
        self._jobs.put(position)

    def refresh(self):
        """Fetch /status and report it."""
        parsed = parse_status(self.api.status())
        if parsed is None:
            if self._had_track:
                logger.info('Librespot has no track')
            self._had_track = False
            self.on_player_lost()
            return

        meta, position, status = parsed
        self._had_track = True
        self.on_metadata(meta, position, status, SERVICE_NAME)

    def _work(self):
        """Run queued refreshes and seeks until stopped."""
        if not self.api.is_reachable():
            logger.warning(f'go-librespot is not reachable at {self.api.base_url}, waiting for it')

        while True:
            job = self._jobs.get()
            if job == _STOP:
                return
            try:
                if job == _REFRESH:
                    self.refresh()
                else:
                    self.on_seek(job)
            except Exception as e:
                logger.warning(f'Librespot update failed: {e}', exc_info=True)

    def _on_connect(self):
        logger.info('Librespot connected - refreshing state')
        self.request_refresh()
