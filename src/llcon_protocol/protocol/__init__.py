"""Protocol layer: message framing and parsing."""

from .framing import (
    DecodeFailure,
    FrameError,
    Message,
    build_message,
    next_counter,
    parse_message,
    try_parse_message,
)
