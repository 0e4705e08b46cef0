"""SSE event decoder.

Classifies framed lines of a chat-completion event stream:

    :keep-alive                   -> IGNORABLE (comment)
    <empty>                       -> IGNORABLE (keep-alive)
    event: ping                   -> IGNORABLE (not a data line)
    data: [DONE]                  -> TERMINATOR
    data: {"choices": [...]}      -> DATA(payload)
    data: {not json               -> IGNORABLE (malformed, logged)
"""

from __future__ import annotations

import json
import logging

from botstream.schemas.streaming import IGNORABLE, TERMINATOR, DecodedEvent, EventKind

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def decode_line(line: str) -> DecodedEvent:
    """Classify a single framed line. Never raises."""
    if line.startswith(":") or not line.strip():
        return IGNORABLE
    if not line.startswith(DATA_PREFIX):
        return IGNORABLE

    body = line[len(DATA_PREFIX):].strip()
    if body == DONE_SENTINEL:
        return TERMINATOR

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, RecursionError):
        logger.debug("Skipping malformed SSE event: %.80s", body)
        return IGNORABLE

    return DecodedEvent(kind=EventKind.DATA, payload=payload)
