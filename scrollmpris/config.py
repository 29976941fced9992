"""
ScrollMPRIS Configuration - All constants and settings.
"""
import os
import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .models import PositionMode, RenderConfig, ScrollMode

# ============================================
# DEFAULTS
# ============================================

DEFAULT_WIDTH = 40
DEFAULT_SPEED = 0
DEFAULT_FORMAT = '{title} - {artist}'
DEFAULT_SOURCE = 'playerctl'
SOURCES = ('playerctl', 'librespot')

# ============================================
# TIMING
# ============================================

MAX_DELAY_MS = 1000    # speed 0
MIN_DELAY_MS = 100     # floor, bounds CPU use
DELAY_STEP_MS = 9      # per speed unit
SOURCE_RESTART_DELAY = 2.0  # seconds before restarting a dead source

# ============================================
# PATHS
# ============================================

CACHE_DIR = Path(os.environ.get('XDG_CACHE_HOME', Path.home() / '.cache')) / 'scrollmpris'
LOG_DIR = CACHE_DIR / 'logs'
LOG_FILE = LOG_DIR / 'scrollmpris.log'
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB per file
LOG_BACKUP_COUNT = 3

PID_DIR = Path('/tmp/scrollmpris')

# ============================================
# NETWORK ENDPOINTS
# ============================================

LIBRESPOT_URL = os.environ.get('LIBRESPOT_URL', 'http://localhost:3678')
LIBRESPOT_WS = os.environ.get('LIBRESPOT_WS', 'ws://localhost:3678/events')


@dataclass
class Settings:
    """Parsed command line: render options plus run-level options."""
    render: RenderConfig = field(default_factory=RenderConfig)
    delay: float = MAX_DELAY_MS / 1000  # seconds between ticks
    blocked: List[str] = field(default_factory=list)
    source: str = DEFAULT_SOURCE


def speed_to_delay(speed: int) -> int:
    """Map the 0-100 speed scale to a tick delay in milliseconds."""
    return max(MIN_DELAY_MS, MAX_DELAY_MS - speed * DELAY_STEP_MS)


def parse_blocked(value: str) -> List[str]:
    """Normalize a comma-separated block list."""
    names = (name.strip().lower() for name in value.split(','))
    return [name for name in names if name]


def _speed(value: str) -> int:
    speed = int(value)
    if not 0 <= speed <= 100:
        raise argparse.ArgumentTypeError(f'speed must be between 0 and 100, got {speed}')
    return speed


def _width(value: str) -> int:
    width = int(value)
    if width <= 0:
        raise argparse.ArgumentTypeError(f'width must be positive, got {width}')
    return width


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='scrollmpris',
        description='Scrolling now-playing text for waybar and other JSON status bars.',
    )
    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-s', '--speed', type=_speed, default=DEFAULT_SPEED,
                        help='Scroll speed (0: slow=1000ms, 100: fast=100ms)')
    parser.add_argument('-w', '--width', type=_width, default=DEFAULT_WIDTH,
                        help='Maximum width for the scrolling text')
    parser.add_argument('-b', '--blocked', type=parse_blocked, default=[],
                        help='Block certain players (comma-separated list)')
    parser.add_argument('--scroll', dest='scroll_mode', type=ScrollMode,
                        choices=list(ScrollMode), default=ScrollMode.WRAPPING,
                        help='"wrapping" for a continuous loop, "reset" to bounce between the ends')
    parser.add_argument('--format', default=DEFAULT_FORMAT,
                        help='Metadata format (supports {title}, {artist}, {album})')
    parser.add_argument('-p', '--position', dest='position_enabled', action='store_true',
                        help='Show track position')
    parser.add_argument('--position-mode', type=PositionMode,
                        choices=list(PositionMode), default=PositionMode.INCREASING,
                        help='"increasing" (elapsed) or "remaining"')
    parser.add_argument('--freeze-on-pause', action='store_true',
                        help='Stop scrolling while paused')
    parser.add_argument('--no-icon', action='store_true',
                        help='Hide all icons')
    parser.add_argument('--no-player-icon', action='store_true',
                        help='Hide the player icon, keep the play/pause icon')
    parser.add_argument('--no-tooltip', action='store_true',
                        help='Leave the tooltip out of the output')
    parser.add_argument('--source', choices=SOURCES, default=DEFAULT_SOURCE,
                        help='Where playback state comes from')
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Settings:
    """Parse command-line arguments into Settings."""
    args = build_parser().parse_args(argv)
    render = RenderConfig(
        width=args.width,
        scroll_mode=args.scroll_mode,
        position_enabled=args.position_enabled,
        position_mode=args.position_mode,
        freeze_on_pause=args.freeze_on_pause,
        no_icon=args.no_icon,
        no_player_icon=args.no_player_icon,
        format=args.format,
        tooltip=not args.no_tooltip,
    )
    return Settings(
        render=render,
        delay=speed_to_delay(args.speed) / 1000,
        blocked=args.blocked,
        source=args.source,
    )
