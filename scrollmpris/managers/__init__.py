"""
ScrollMPRIS Managers - Per-tick state machines.
"""
from .scroll import advance, SCROLL_SPACER, HOLD_CYCLES

__all__ = ['advance', 'SCROLL_SPACER', 'HOLD_CYCLES']
