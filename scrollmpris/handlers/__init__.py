"""
ScrollMPRIS Handlers - Player state sources.
"""
from .playerctl import PlayerctlListener, parse_playerctl_line
from .events import EventListener
from .librespot import LibrespotSource

__all__ = ['PlayerctlListener', 'parse_playerctl_line', 'EventListener', 'LibrespotSource']
