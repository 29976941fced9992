"""
Status Context - Bundles all mutable state needed for rendering.
"""
import threading
from dataclasses import dataclass, field

from ..models import PlaybackState, ScrollState


@dataclass
class StatusContext:
    """
    State shared by every path that renders one output stream.

    Hold ``lock`` while reading or mutating any of the other fields.
    """
    playback: PlaybackState = field(default_factory=PlaybackState)
    scroll: ScrollState = field(default_factory=ScrollState)
    last_output: str = ''
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)
