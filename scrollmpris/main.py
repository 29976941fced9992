#!/usr/bin/env python3
"""
ScrollMPRIS - Scrolling now-playing text for waybar

Usage:
    scrollmpris                          # Follow the active MPRIS player
    scrollmpris -w 30 -s 50 --position   # Narrower, faster, with elapsed time
    scrollmpris --source librespot       # Read go-librespot instead

Output is one JSON object per line on stdout; logs go to stderr and
$XDG_CACHE_HOME/scrollmpris/logs.
"""
import os
import sys
import logging
import platform
from logging.handlers import RotatingFileHandler
from typing import Optional, Sequence

from . import __version__
from .config import (
    parse_args, Settings,
    LOG_DIR, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
    PID_DIR,
)
from .app import App
from .utils import write_pid_file, remove_pid_file


def setup_logging():
    """Configure logging with console (stderr) and rotating file handler."""
    # stdout belongs to the status bar, so the console handler uses stderr
    level_name = os.environ.get('SCROLLMPRIS_LOG_LEVEL', 'WARNING').upper()
    level = getattr(logging, level_name, logging.WARNING)

    console_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(console_formatter)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(console)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        root.addHandler(file_handler)
        root.info(f'Logging to: {LOG_FILE}')
    except OSError as e:
        root.warning(f'Could not create log file: {e}')

    # Quiet down noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('websocket').setLevel(logging.WARNING)


def log_startup(logger: logging.Logger, settings: Settings):
    """Log version, platform and effective settings at startup."""
    render = settings.render
    logger.info('=' * 50)
    logger.info(f'SCROLLMPRIS {__version__} STARTUP')
    logger.info('=' * 50)
    logger.info(f'Python: {sys.version.split()[0]}')
    logger.info(f'Platform: {platform.system()} {platform.release()}')
    logger.info(f'Source: {settings.source}')
    logger.info(f'Width: {render.width} | Scroll: {render.scroll_mode} | Format: {render.format!r}')
    if render.position_enabled:
        logger.info(f'Position: {render.position_mode}')
    if settings.blocked:
        logger.info(f'Blocked players: {", ".join(settings.blocked)}')
    logger.info('=' * 50)


def main(argv: Optional[Sequence[str]] = None):
    """Entry point for ScrollMPRIS."""
    settings = parse_args(argv)
    setup_logging()

    logger = logging.getLogger(__name__)
    log_startup(logger, settings)

    pid_file = write_pid_file(PID_DIR)
    try:
        App(settings).start()
    finally:
        remove_pid_file(pid_file)


if __name__ == '__main__':
    main()
