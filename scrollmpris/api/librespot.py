"""
Librespot API Client - REST status queries for go-librespot.
"""
import logging
from typing import Optional, Tuple

import requests

from ..models import TrackMetadata

logger = logging.getLogger(__name__)

SERVICE_NAME = 'librespot'


class LibrespotAPI:
    """Read-only REST client for go-librespot."""

    def __init__(self, base_url: str):
        self.base_url = base_url
        self.session = requests.Session()
        self.session.headers['Content-Type'] = 'application/json'

    def status(self) -> Optional[dict]:
        """Get current playback status (None if nothing is loaded or unreachable)."""
        try:
            resp = self.session.get(f'{self.base_url}/status', timeout=2)
            if resp.status_code == 204:
                return None
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            logger.debug(f'Status request failed: {e}')
            return None
        except ValueError as e:
            logger.warning(f'Invalid status response: {e}')
            return None

    def is_reachable(self) -> bool:
        """True when go-librespot answers at all, with or without a track."""
        try:
            self.session.get(f'{self.base_url}/status', timeout=1)
        except requests.RequestException:
            return False
        return True


def parse_status(status: Optional[dict]) -> Optional[Tuple[TrackMetadata, float, str]]:
    """
    Map a /status response to (metadata, position seconds, MPRIS-style status).

    Returns None when there is no track.
    """
    if not isinstance(status, dict):
        return None
    track = status.get('track')
    if not isinstance(track, dict) or not track.get('name'):
        return None

    if status.get('stopped', True):
        playback_status = 'Stopped'
    elif status.get('paused', False):
        playback_status = 'Paused'
    else:
        playback_status = 'Playing'

    artists = track.get('artist_names') or []
    duration = track.get('duration') or 0
    meta = TrackMetadata(
        title=track.get('name') or '',
        artist=', '.join(artists),
        album=track.get('album_name') or '',
        length=duration / 1000 if duration > 0 else None,
    )
    position = (track.get('position') or 0) / 1000
    return meta, position, playback_status
