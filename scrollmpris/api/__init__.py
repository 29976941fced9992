"""
ScrollMPRIS API modules - External service integrations.
"""
from .librespot import LibrespotAPI, parse_status

__all__ = ['LibrespotAPI', 'parse_status']
