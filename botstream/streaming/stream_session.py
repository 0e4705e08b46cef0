"""Per-request streaming session.

Reads the transport chunk by chunk, frames and decodes each line, and
applies every text fragment to the conversation's open placeholder.
"""

from __future__ import annotations

import logging

from botstream.conversation import Conversation, ConversationState
from botstream.schemas.streaming import EventKind, StreamChunk
from botstream.streaming.accumulator import DeltaAccumulator
from botstream.streaming.decoder import decode_line
from botstream.streaming.framer import LineFramer
from botstream.streaming.transport import TransportReader

logger = logging.getLogger(__name__)


class StreamSession:
    """State owned by one outstanding request.

    Holds the transport, the framer's partial-line buffer, the running
    assistant text and the ``done`` flag. Nothing here is shared with
    other sessions.
    """

    def __init__(self, reader: TransportReader) -> None:
        self.reader = reader
        self.framer = LineFramer()
        self.accumulator = DeltaAccumulator()
        self.done = False

    @property
    def assistant_text(self) -> str:
        return self.accumulator.text

    async def run(self, conversation: Conversation) -> StreamChunk:
        """Consume the stream into ``conversation``.

        Stops at the ``[DONE]`` terminator or at end of stream. Lines that
        follow a terminator are not decoded.

        Returns:
            The final chunk, carrying the full assistant text.

        Raises:
            TransportError: If the response failed or the connection dropped.
        """
        while not self.done:
            result = await self.reader.read()

            if conversation.state is ConversationState.SENDING:
                await conversation.start_streaming()

            if result.chunk:
                await self._consume(result.chunk, conversation)
            if result.done:
                self.done = True

        self.framer.close()
        logger.debug(
            "Stream finished: %d fragments, %d chars",
            self.accumulator.fragment_count, len(self.assistant_text),
        )
        return self.accumulator.finish()

    async def _consume(self, chunk: bytes, conversation: Conversation) -> None:
        for line in self.framer.feed(chunk):
            event = decode_line(line)
            if event.kind is EventKind.TERMINATOR:
                self.done = True
                return
            stream_chunk = self.accumulator.feed(event)
            if stream_chunk is not None:
                await conversation.apply_chunk(stream_chunk)
