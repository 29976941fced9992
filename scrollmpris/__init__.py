"""
ScrollMPRIS - Scrolling now-playing text for JSON status bars.
"""
__version__ = '0.3.0'
