"""
Playerctl Listener - Follows the active MPRIS player through ``playerctl --follow``.
"""
import time
import logging
import threading
import subprocess
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..config import SOURCE_RESTART_DELAY
from ..models import TrackMetadata

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = '\t'

# One line per change: status, player, position (us), length (us), title, artist, album
PLAYERCTL_FORMAT = FIELD_SEPARATOR.join([
    '{{status}}',
    '{{playerName}}',
    '{{position}}',
    '{{mpris:length}}',
    '{{title}}',
    '{{artist}}',
    '{{album}}',
])

PLAYERCTL_COMMAND = ['playerctl', '--follow', 'metadata', '--format', PLAYERCTL_FORMAT]

FIELD_COUNT = 7


@dataclass(frozen=True)
class PlayerctlUpdate:
    """One parsed playerctl line."""
    service: str
    status: str
    position: float  # seconds
    meta: TrackMetadata


def _microseconds(value: str) -> Optional[float]:
    value = value.strip()
    if not value:
        return None
    return int(value) / 1_000_000


def parse_playerctl_line(line: str) -> Optional[PlayerctlUpdate]:
    """
    Parse a line produced with PLAYERCTL_FORMAT.

    Returns None for the empty line playerctl prints when no player is
    left. Raises ValueError for anything it can't make sense of.
    """
    line = line.rstrip('\r\n')
    if not line.strip():
        return None

    fields = line.split(FIELD_SEPARATOR)
    if len(fields) < FIELD_COUNT:
        raise ValueError(f'expected {FIELD_COUNT} fields, got {len(fields)}: {line!r}')
    # Anything past the sixth separator belongs to the album
    status, service, position, length, title, artist = fields[:6]
    album = FIELD_SEPARATOR.join(fields[6:])

    return PlayerctlUpdate(
        service=service.strip(),
        status=status.strip(),
        position=_microseconds(position) or 0.0,
        meta=TrackMetadata(
            title=title.strip(),
            artist=artist.strip(),
            album=album.strip(),
            length=_microseconds(length),
        ),
    )


def is_blocked(service: str, blocked: Sequence[str]) -> bool:
    """Block list entries match as case-insensitive substrings."""
    service = service.lower()
    return any(name in service for name in blocked)


class PlayerctlListener:
    """Runs playerctl in a background thread and reports player changes."""

    def __init__(
        self,
        on_metadata: Callable[[TrackMetadata, float, str, str], None],
        on_seek: Callable[[float], None],
        on_player_lost: Callable[[], None],
        blocked: Sequence[str] = (),
        command: Optional[List[str]] = None,
    ):
        """
        Args:
            on_metadata: Called with (meta, position, status, service) on a
                track, status or player change
            on_seek: Called with the new position when only the position moved
            on_player_lost: Called when no (unblocked) player is left
            blocked: Player names to ignore (lower-case substrings)
            command: Override the playerctl command line
        """
        self.on_metadata = on_metadata
        self.on_seek = on_seek
        self.on_player_lost = on_player_lost
        self.blocked = list(blocked)
        self.command = command or PLAYERCTL_COMMAND
        self.process: Optional[subprocess.Popen] = None
        self.thread: Optional[threading.Thread] = None
        self.running = False
        self._last: Optional[PlayerctlUpdate] = None

    def start(self):
        """Start following playerctl in a background thread."""
        self.running = True
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.start()
        logger.info(f'Started playerctl listener: {" ".join(self.command[:3])}')

    def stop(self):
        """Stop following and terminate playerctl."""
        self.running = False
        if self.process and self.process.poll() is None:
            self.process.terminate()
        logger.info('Stopped playerctl listener')

    def _run(self):
        """Main loop - restarts playerctl whenever it exits."""
        while self.running:
            try:
                self.process = subprocess.Popen(
                    self.command,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.DEVNULL,
                    text=True,
                    bufsize=1,
                )
                for line in self.process.stdout:
                    if not self.running:
                        break
                    self.handle_line(line)
                code = self.process.wait()
                logger.debug(f'playerctl exited with code {code}')
            except FileNotFoundError:
                logger.error('playerctl not found - install it or use --source librespot')
                self.running = False
                self.on_player_lost()
                return
            except OSError as e:
                logger.warning(f'playerctl error: {e}')

            if self.running:
                time.sleep(SOURCE_RESTART_DELAY)

    def handle_line(self, line: str):
        """Turn one playerctl line into a metadata, seek or lost callback."""
        try:
            update = parse_playerctl_line(line)
        except ValueError as e:
            logger.warning(f'Ignoring playerctl output: {e}')
            return

        if update is not None and is_blocked(update.service, self.blocked):
            logger.debug(f'Ignoring blocked player: {update.service}')
            update = None

        last, self._last = self._last, update

        if update is None:
            if last is not None:
                logger.info('No active player')
                self.on_player_lost()
            return

        if (last is not None
                and last.service == update.service
                and last.status == update.status
                and last.meta == update.meta):
            self.on_seek(update.position)
            return

        if last is None or last.service != update.service:
            logger.info(f'Active player: {update.service}')
        self.on_metadata(update.meta, update.position, update.status, update.service)
