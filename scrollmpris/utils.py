"""
ScrollMPRIS Utilities - Shared helper functions.
"""
import os
import time
import logging
import threading
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def run_async(fn, *args):
    """Fire-and-forget async execution in daemon thread.

    Wraps function to catch and log exceptions.
    """
    def wrapper():
        try:
            fn(*args)
        except Exception as e:
            logger.warning(f'Async task {fn.__name__} failed: {e}', exc_info=True)

    threading.Thread(target=wrapper, daemon=True).start()


def write_pid_file(directory: Path) -> Optional[Path]:
    """Write our PID to <directory>/<unix timestamp>.pid. Returns the path."""
    path = directory / f'{int(time.time())}.pid'
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(str(os.getpid()))
    except OSError as e:
        logger.warning(f'Could not write PID file {path}: {e}')
        return None
    logger.debug(f'PID file: {path}')
    return path


def remove_pid_file(path: Optional[Path]):
    if path is None:
        return
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f'Could not remove PID file {path}: {e}')
