"""
Status Renderer - Builds the status-bar record for the current player.

Produces one JSON line per visible change: icon, scrolled track text and
an optional position suffix.
"""
import re
import json
from typing import Optional, Sequence, Tuple

from ..models import PlaybackState, PositionMode, RenderConfig, ScrollState
from ..managers.scroll import advance
from .context import StatusContext
from .icons import ICON_TABLE, icon_for, status_icon

PLACEHOLDER_RE = re.compile(r'\{(title|artist|album)\}')


def format_position(seconds: float) -> str:
    """Format seconds as MM:SS, or HH:MM:SS from one hour up."""
    total = max(int(seconds), 0)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f'{hours:02}:{minutes:02}:{secs:02}'
    return f'{minutes:02}:{secs:02}'


def format_metadata(template: str, title: str = '', artist: str = '', album: str = '') -> str:
    """
    Fill the {title}/{artist}/{album} placeholders of a template.

    Text between two placeholders is only kept when both sides have a
    value, so a missing artist doesn't leave a dangling " - ". Text before
    the first and after the last placeholder is always kept.
    """
    values = {'title': title.strip(), 'artist': artist.strip(), 'album': album.strip()}
    # [prefix, name, sep, name, sep, ..., name, suffix]
    parts = PLACEHOLDER_RE.split(template)
    if len(parts) == 1:
        return template

    filled = []
    for i in range(1, len(parts) - 1, 2):
        value = values[parts[i]]
        if not value:
            continue
        if filled:
            filled.append(parts[i - 1])
        filled.append(value)

    return parts[0] + ''.join(filled) + parts[-1]


class StatusRenderer:
    """Turns playback + scroll state into deduplicated output lines."""

    def __init__(self, config: RenderConfig, icons: Sequence[Tuple[str, str]] = ICON_TABLE):
        self.config = config
        self.icons = icons

    def render(self, context: StatusContext) -> Optional[str]:
        """
        Render the current state. Returns the JSON line to emit, or None
        when it is identical to the previous one.

        The caller must hold ``context.lock``.
        """
        record = self.build_record(context.playback, context.scroll)
        line = json.dumps(record, ensure_ascii=False)
        if line == context.last_output:
            return None
        context.last_output = line
        return line

    def build_record(self, state: PlaybackState, scroll: ScrollState) -> dict:
        """Build the output record without the change check."""
        cfg = self.config

        if state.is_empty or state.status == 'Stopped':
            return self._stopped_record(state)

        text = format_metadata(cfg.format, state.title, state.artist, state.album)

        if cfg.freeze_on_pause and not state.playing:
            scroll.reset()
            scrolled = text[:cfg.width]
        else:
            scrolled = advance(text, scroll, cfg.width, cfg.scroll_mode)

        position = ''
        if cfg.position_enabled and scrolled:
            position = ' ' + format_position(self._position_seconds(state))

        icon = self._icon(state)
        if not icon:
            output = scrolled + position
        elif scrolled:
            output = f'{icon} {scrolled}{position}'
        else:
            output = icon

        record = {
            'text': output,
            'class': 'playing' if state.playing else 'paused',
        }
        if cfg.tooltip:
            record['tooltip'] = '\n'.join(
                field.strip() for field in (state.title, state.artist, state.album) if field.strip()
            )
        return record

    def _stopped_record(self, state: PlaybackState) -> dict:
        return {'text': '', 'class': 'stopped' if state.service else 'none'}

    def _position_seconds(self, state: PlaybackState) -> float:
        if self.config.position_mode == PositionMode.REMAINING:
            return state.remaining()
        return state.estimate_position()

    def _icon(self, state: PlaybackState) -> str:
        """Player icon + play/pause icon, subject to the suppression flags."""
        if self.config.no_icon:
            return ''
        play_icon = status_icon(state.playing)
        if self.config.no_player_icon:
            return play_icon
        player_icon = icon_for(state.service, self.icons)
        if player_icon:
            return f'{player_icon} {play_icon}'
        return play_icon
