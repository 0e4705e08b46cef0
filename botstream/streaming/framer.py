"""Line framer for the SSE byte stream.

Decodes chunks with a resumable UTF-8 decoder and splits the text into
complete lines, carrying any trailing partial line over to the next
chunk.
"""

from __future__ import annotations

import codecs
import logging

logger = logging.getLogger(__name__)


class LineFramer:
    """Turns arbitrarily split byte chunks into complete text lines.

    A multi-byte character split across two chunks is reassembled by the
    incremental decoder. Undecodable bytes become U+FFFD instead of
    failing the stream. The pending buffer never holds a newline: every
    complete line is removed as soon as its terminator arrives.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received after the last newline."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Decode a chunk and return the lines it completed.

        A single trailing ``\\r`` is stripped from each line so CRLF
        streams frame identically to LF streams.
        """
        self._buffer += self._decoder.decode(chunk)

        lines: list[str] = []
        while (newline := self._buffer.find("\n")) != -1:
            line = self._buffer[:newline]
            self._buffer = self._buffer[newline + 1:]
            if line.endswith("\r"):
                line = line[:-1]
            lines.append(line)
        return lines

    def close(self) -> str:
        """Flush the decoder and discard any unterminated trailing text.

        Returns:
            The discarded text (empty when the stream ended on a newline).
        """
        residual = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        if residual:
            logger.debug("Discarding %d chars of unterminated trailing line", len(residual))
        return residual
