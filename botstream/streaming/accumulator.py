"""Delta accumulator for chat-completion chunks.

Pulls ``choices[0].delta.content`` out of each decoded payload and
appends it to the running assistant text.
"""

from __future__ import annotations

from typing import Any

from botstream.schemas.streaming import DecodedEvent, EventKind, StreamChunk


def extract_delta(payload: Any) -> str | None:
    """Return the non-empty text fragment of a chunk payload, or None.

    Missing keys, empty ``choices`` and unexpected types all mean "no
    fragment".
    """
    try:
        content = payload["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(content, str) and content:
        return content
    return None


class DeltaAccumulator:
    """Running assistant text for one streaming session.

    ``text`` only ever grows: fragments are appended, never replaced.
    """

    def __init__(self) -> None:
        self.text = ""
        self.fragment_count = 0

    def feed(self, event: DecodedEvent) -> StreamChunk | None:
        """Apply a decoded event. Returns a chunk when it carried a fragment."""
        if event.kind is not EventKind.DATA:
            return None
        delta = extract_delta(event.payload)
        if delta is None:
            return None

        self.text += delta
        self.fragment_count += 1
        return StreamChunk(
            delta=delta,
            accumulated=self.text,
            fragment_count=self.fragment_count,
        )

    def finish(self) -> StreamChunk:
        """Final marker chunk carrying the full text."""
        return StreamChunk(
            delta="",
            accumulated=self.text,
            fragment_count=self.fragment_count,
            is_complete=True,
        )
