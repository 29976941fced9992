"""
Scroll Engine - Fixed-width text windowing for the status bar.

Each call to ``advance`` produces one frame and moves the window one step.
The caller owns the tick rate.
"""
from ..models import ScrollMode, ScrollState

# Gap between the end of the text and its next repetition (wrapping mode)
SCROLL_SPACER = '   '

# Frames to dwell at either end before turning around (reset mode)
HOLD_CYCLES = 2


def advance(text: str, state: ScrollState, width: int, mode: ScrollMode) -> str:
    """Return the next visible frame of ``text`` and update ``state``."""
    if text != state.last_text:
        state.reset()
        state.last_text = text

    if len(text) <= width:
        return text

    if mode == ScrollMode.RESET:
        return _advance_reset(text, state, width)
    return _advance_wrapping(text, state, width)


def _advance_wrapping(text: str, state: ScrollState, width: int) -> str:
    """Cyclic window over text + spacer."""
    padded = text + SCROLL_SPACER
    length = len(padded)
    start = state.offset % length

    frame = ''.join(padded[(start + i) % length] for i in range(width))
    state.offset = (start + 1) % length
    return frame


def _advance_reset(text: str, state: ScrollState, width: int) -> str:
    """Back-and-forth window that dwells at both ends."""
    max_offset = len(text) - width
    offset = min(state.offset, max_offset)
    frame = text[offset:offset + width]

    if offset == 0 or offset == max_offset:
        state.hold += 1
        if state.hold >= HOLD_CYCLES:
            state.hold = 0
            state.direction = 1 if offset == 0 else -1
            offset += state.direction
    else:
        offset += state.direction

    state.offset = offset
    return frame
