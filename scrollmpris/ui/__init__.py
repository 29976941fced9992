"""
ScrollMPRIS UI - Rendering of the status-bar record.
"""
from .icons import icon_for, status_icon, ICON_TABLE, DEFAULT_ICON
from .context import StatusContext
from .renderer import StatusRenderer, format_metadata, format_position

__all__ = [
    'icon_for',
    'status_icon',
    'ICON_TABLE',
    'DEFAULT_ICON',
    'StatusContext',
    'StatusRenderer',
    'format_metadata',
    'format_position',
]
