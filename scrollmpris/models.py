"""
ScrollMPRIS Data Models - Core data structures.
"""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ScrollMode(str, Enum):
    """How text wider than the display moves between ticks."""
    WRAPPING = 'wrapping'
    RESET = 'reset'

    def __str__(self):
        return self.value


class PositionMode(str, Enum):
    """Which time value is shown after the track text."""
    INCREASING = 'increasing'
    REMAINING = 'remaining'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class TrackMetadata:
    """Track fields as reported by a player."""
    title: str = ''
    artist: str = ''
    album: str = ''
    length: Optional[float] = None  # seconds


@dataclass
class PlaybackState:
    """
    Current player state, mutated in place on every authoritative update.

    Doubles as the position estimator: between updates the position is
    extrapolated from the monotonic clock while playing.
    """
    title: str = ''
    artist: str = ''
    album: str = ''
    playing: bool = False
    status: str = ''
    length: Optional[float] = None
    last_known_position: float = 0.0
    last_update: Optional[float] = None  # time.monotonic() of last sample
    service: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """True when there is no track text to show (blank fields count as empty)."""
        return not any(field.strip() for field in (self.title, self.artist, self.album))

    def update_from_metadata(self, meta: TrackMetadata):
        """Take over a new track; position restarts at zero."""
        self.title = meta.title
        self.artist = meta.artist
        self.album = meta.album
        self.length = meta.length
        self.reset_position_cache(0.0)

    def update_playback(self, status: str, position: float):
        """Record the raw playback status and an authoritative position."""
        self.playing = status == 'Playing'
        self.status = status
        self.reset_position_cache(position)

    def set_service(self, service: str):
        self.service = service

    def has_changed(self, meta: TrackMetadata) -> bool:
        return (self.title != meta.title
                or self.artist != meta.artist
                or self.album != meta.album)

    def clear(self):
        """Forget everything (player went away)."""
        self.title = ''
        self.artist = ''
        self.album = ''
        self.playing = False
        self.status = ''
        self.length = None
        self.last_known_position = 0.0
        self.last_update = None
        self.service = None

    def reset_position_cache(self, position: float):
        """Re-anchor the estimate on an authoritative position."""
        self.last_known_position = position
        self.last_update = time.monotonic()

    def estimate_position(self) -> float:
        """Best guess of the current position in seconds."""
        if not self.playing or self.last_update is None:
            return self.last_known_position
        return self.last_known_position + (time.monotonic() - self.last_update)

    def remaining(self) -> float:
        """Seconds left in the track, or elapsed time if the length is unknown."""
        if self.length is None:
            return self.estimate_position()
        return max(self.length - self.estimate_position(), 0.0)


@dataclass
class ScrollState:
    """Scroll position for one independently scrolling output."""
    offset: int = 0
    hold: int = 0
    direction: int = 1  # reset mode only: +1 toward the end, -1 back
    last_text: str = ''

    def reset(self):
        self.offset = 0
        self.hold = 0
        self.direction = 1


@dataclass(frozen=True)
class RenderConfig:
    """Everything that shapes the rendered line. Fixed for a run."""
    width: int = 40
    scroll_mode: ScrollMode = ScrollMode.WRAPPING
    position_enabled: bool = False
    position_mode: PositionMode = PositionMode.INCREASING
    freeze_on_pause: bool = False
    no_icon: bool = False
    no_player_icon: bool = False
    format: str = '{title} - {artist}'
    tooltip: bool = True

    def __post_init__(self):
        if self.width <= 0:
            raise ValueError(f'width must be positive, got {self.width}')
