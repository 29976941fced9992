"""
Icons - Player and playback-status glyphs (Nerd Font).
"""
from typing import Optional, Sequence, Tuple

PLAY_ICON = ''   # nf-fa-play
PAUSE_ICON = ''  # nf-fa-pause

# Fallback for players with no entry in ICON_TABLE
DEFAULT_ICON = ''  # nf-fa-music

# Checked in order; first substring match wins
ICON_TABLE: Tuple[Tuple[str, str], ...] = (
    ('spotify', ''),
    ('librespot', ''),
    ('vlc', '\U000f057c'),
    ('edge', '\U000f01e9'),
    ('firefox', '\U000f0239'),
    ('mpv', ''),
    ('chrome', ''),
    ('telegramdesktop', ''),
    ('tauon', ''),
)


def icon_for(service: Optional[str], table: Sequence[Tuple[str, str]] = ICON_TABLE) -> str:
    """Pick the icon for a player service name."""
    if not service:
        return ''
    service = service.lower()
    for pattern, icon in table:
        if pattern in service:
            return icon
    return DEFAULT_ICON


def status_icon(playing: bool) -> str:
    return PLAY_ICON if playing else PAUSE_ICON
