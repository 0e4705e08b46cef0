"""Conversation events for the presentation layer.

Every mutation of a conversation's message log, and every state
transition, is published as a ConversationEvent. Front-ends subscribe to
re-render; how often they actually redraw is their own concern.
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from botstream.schemas.messages import Role

logger = logging.getLogger(__name__)


class EventType(StrEnum):
    """Kinds of change a conversation reports."""

    MESSAGE_APPENDED = "message_appended"
    MESSAGE_UPDATED = "message_updated"
    STATE_CHANGED = "state_changed"
    ERROR = "error"


class ConversationEvent(BaseModel):
    """One change to a conversation.

    Message events carry ``index``, ``role`` and ``content`` of the
    affected log entry (``delta`` is the newly appended text on updates).
    State events carry the new ``state``; ``reset`` marks a log
    replacement.
    """

    type: EventType
    seq: int = Field(ge=0, description="Position in the emitter's event stream")
    timestamp: float = Field(default_factory=time.time)
    index: int | None = Field(default=None, description="Log position of the affected message")
    role: Role | None = None
    content: str | None = None
    delta: str = ""
    state: str | None = None
    reset: bool = False
    error: str = ""


EventListener = Callable[[ConversationEvent], Any]


class ConversationEventEmitter:
    """Fans conversation events out to listeners in subscription order.

    Listeners may be plain functions or coroutine functions. A listener
    that raises is logged and skipped; the remaining listeners and the
    stream consumer carry on.
    """

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []
        self._seq = 0

    def add_listener(self, listener: EventListener) -> Callable[[], None]:
        """Subscribe ``listener`` and return a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.remove_listener(listener)

    def remove_listener(self, listener: EventListener) -> None:
        """Unsubscribe ``listener``; unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    async def emit(self, event_type: EventType, **fields: Any) -> ConversationEvent:
        """Build the next event and deliver it to every current listener."""
        event = ConversationEvent(type=event_type, seq=self._seq, **fields)
        self._seq += 1

        # Iterate a snapshot so a listener may unsubscribe itself mid-dispatch.
        for listener in list(self._listeners):
            try:
                outcome = listener(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception("Listener failed on %s event #%d", event_type, event.seq)
        return event
