"""Conversation state machine.

Owns the ordered message log, whether input is enabled, and the open
assistant placeholder that a streaming reply writes into.

    IDLE --submit--> SENDING --first read--> STREAMING --done/error--> IDLE

Mutations are announced through a ConversationEventEmitter so a front-end
can re-render after each one.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from botstream.events import ConversationEventEmitter, EventType
from botstream.schemas.messages import ChatMessage, Role
from botstream.schemas.streaming import StreamChunk

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "Sorry, I encountered an error. Please try again."


class ConversationState(StrEnum):
    """Lifecycle of the current exchange."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"


class Conversation:
    """Message log plus the state of the in-flight reply, if any.

    At most one assistant message is open at a time; it is addressed by
    ``open_message_index`` rather than by position so that edits to the
    rest of the log cannot redirect streamed text.
    """

    def __init__(
        self,
        messages: list[ChatMessage] | None = None,
        emitter: ConversationEventEmitter | None = None,
    ) -> None:
        self._messages: list[ChatMessage] = list(messages or [])
        self._emitter = emitter or ConversationEventEmitter()
        self._state = ConversationState.IDLE
        self._open_index: int | None = None

    # ── Read-only views ───────────────────────────────────────

    @property
    def messages(self) -> list[ChatMessage]:
        """Snapshot of the message log."""
        return list(self._messages)

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def input_enabled(self) -> bool:
        return self._state is ConversationState.IDLE

    @property
    def open_message_index(self) -> int | None:
        return self._open_index

    @property
    def emitter(self) -> ConversationEventEmitter:
        return self._emitter

    # ── Transitions ───────────────────────────────────────────

    async def submit(self, text: str) -> bool:
        """Append a user message and move to SENDING.

        Blank input, or a submit while a reply is in flight, is ignored.

        Returns:
            True if the message was accepted.
        """
        if not text.strip() or self._state is not ConversationState.IDLE:
            return False

        await self._append(ChatMessage(role=Role.USER, content=text))
        await self._set_state(ConversationState.SENDING)
        return True

    async def start_streaming(self) -> int:
        """Append the empty assistant placeholder and move to STREAMING.

        Returns:
            Index of the open placeholder.
        """
        if self._state is not ConversationState.SENDING:
            raise RuntimeError(f"Cannot start streaming from state {self._state}")

        self._open_index = await self._append(ChatMessage(role=Role.ASSISTANT, content=""))
        await self._set_state(ConversationState.STREAMING)
        return self._open_index

    async def apply_chunk(self, chunk: StreamChunk) -> None:
        """Replace the open placeholder's content with the accumulated text."""
        if self._open_index is None:
            raise RuntimeError("No open assistant message to update")

        self._messages[self._open_index] = ChatMessage(
            role=Role.ASSISTANT, content=chunk.accumulated
        )
        await self._emitter.emit(
            EventType.MESSAGE_UPDATED,
            index=self._open_index,
            delta=chunk.delta,
            content=chunk.accumulated,
        )

    async def complete(self) -> None:
        """Close the session normally; the placeholder becomes history."""
        self._open_index = None
        await self._set_state(ConversationState.IDLE)

    async def fail(self, error: Exception | None = None) -> None:
        """Close the session after a transport failure.

        The open placeholder, if any, is overwritten with the apology
        text; otherwise the apology is appended as a new message.
        """
        apology = ChatMessage(role=Role.ASSISTANT, content=APOLOGY_MESSAGE)
        if self._open_index is not None:
            self._messages[self._open_index] = apology
            await self._emitter.emit(
                EventType.MESSAGE_UPDATED,
                index=self._open_index,
                delta="",
                content=APOLOGY_MESSAGE,
            )
        else:
            await self._append(apology)

        await self._emitter.emit(EventType.ERROR, error=str(error) if error else "")
        await self.complete()

    def release(self) -> None:
        """Force the conversation back to IDLE without notifying listeners.

        Used on abandonment (task cancellation) so input is never left
        disabled.
        """
        if self._state is not ConversationState.IDLE:
            logger.info("Releasing abandoned %s session", self._state)
        self._open_index = None
        self._state = ConversationState.IDLE

    async def reset(self, messages: list[ChatMessage] | None = None) -> None:
        """Replace the log (e.g. back to the greeting). Only valid when IDLE."""
        if self._state is not ConversationState.IDLE:
            raise RuntimeError("Cannot reset a conversation while a reply is streaming")
        self._messages = list(messages or [])
        await self._emitter.emit(EventType.STATE_CHANGED, state=str(self._state), reset=True)

    # ── Internals ─────────────────────────────────────────────

    async def _append(self, message: ChatMessage) -> int:
        self._messages.append(message)
        index = len(self._messages) - 1
        await self._emitter.emit(
            EventType.MESSAGE_APPENDED,
            index=index,
            role=message.role,
            content=message.content,
        )
        return index

    async def _set_state(self, state: ConversationState) -> None:
        self._state = state
        await self._emitter.emit(EventType.STATE_CHANGED, state=str(state))
