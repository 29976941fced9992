"""
Pytest configuration and shared fixtures for ScrollMPRIS tests.
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from scrollmpris.models import PlaybackState, RenderConfig, ScrollState
from scrollmpris.ui.context import StatusContext


class FakeClock:
    """Stand-in for time.monotonic that only moves when told to."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after each test."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    """Freeze the monotonic clock used by the position estimator."""
    fake = FakeClock()
    with patch('scrollmpris.models.time.monotonic', fake):
        yield fake


@pytest.fixture
def playing_state(clock):
    """A playing Spotify track, 65s in, 200s long."""
    state = PlaybackState(
        title='Song',
        artist='Artist',
        album='Album',
        length=200.0,
        service='org.mpris.MediaPlayer2.spotify',
    )
    state.update_playback('Playing', 65.0)
    return state


@pytest.fixture
def paused_state(clock):
    """Same track, paused."""
    state = PlaybackState(
        title='Song',
        artist='Artist',
        album='Album',
        length=200.0,
        service='org.mpris.MediaPlayer2.spotify',
    )
    state.update_playback('Paused', 65.0)
    return state


@pytest.fixture
def plain_config():
    """Render config without icons or tooltip, for comparing bare text."""
    return RenderConfig(width=40, no_icon=True, tooltip=False)


@pytest.fixture
def scroll_state():
    return ScrollState()


@pytest.fixture
def context():
    return StatusContext()
